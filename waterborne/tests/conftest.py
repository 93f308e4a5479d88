import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Keep tests deterministic regardless of the developer's .env
os.environ.setdefault("CHAT_ENGINE", "local")
os.environ.setdefault("ANALYSIS_DELAY_MS", "0")
os.environ.setdefault("DEFAULT_LOCALE", "en")

# Ensure the project root is on sys.path so `import waterborne` works when running
# pytest from the repository root without an editable install.
ROOT_DIR = Path(__file__).resolve().parents[2]  # repository root
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from waterborne.app import app
from waterborne.middleware.rate_limit import reset_limiter
from waterborne.services.knowledge_base import build_knowledge_base, get_knowledge_base
from waterborne.services.localization import get_localizer


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    # ensure limiter state fresh each test
    reset_limiter()
    yield
    reset_limiter()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def kb():
    return get_knowledge_base()


@pytest.fixture
def localizer():
    return get_localizer()


def make_kb_dict(diseases, extra_symptoms=()):
    """Minimal knowledge base document; symptoms are derived from the diseases."""
    ids = []
    for d in diseases:
        for kw in d.get("scoring_keywords", []):
            if kw not in ids:
                ids.append(kw)
    for s in extra_symptoms:
        if s not in ids:
            ids.append(s)
    return {
        "base_locale": "en",
        "locales": ["en"],
        "symptoms": [{"id": s, "labels": {"en": s.replace("_", " ").title()}} for s in ids],
        "diseases": [
            {
                "name": d["id"].title(),
                "info": {
                    "symptoms": f"{d['id']} symptoms",
                    "causes": f"{d['id']} causes",
                    "treatment": f"{d['id']} treatment",
                    "prevention": f"{d['id']} prevention",
                },
                **d,
            }
            for d in diseases
        ],
        "lexicon": {
            "greetings": {"en": ["hello"]},
            "fields": {
                "symptoms": ["symptom"],
                "causes": ["cause"],
                "treatment": ["treat"],
                "prevention": ["prevent"],
            },
        },
    }


@pytest.fixture
def make_kb():
    def _make(diseases, extra_symptoms=()):
        return build_knowledge_base(make_kb_dict(diseases, extra_symptoms))
    return _make


@pytest.fixture
def kb_doc():
    return make_kb_dict
