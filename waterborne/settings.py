"""Environment-driven settings for the waterborne assistant."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Resolve paths early so env vars are available before the app modules read them
BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(ENV_PATH, override=False)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (ValueError, TypeError):
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (ValueError, TypeError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw not in {"0", "false", "off", "no"}


def _env_list(name: str, default: str) -> list:
    raw = os.getenv(name, default) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


# --- knowledge base & localization ---
RESOURCES_DIR = BASE_DIR / "resources"
KNOWLEDGE_BASE_PATH = Path(os.getenv("KNOWLEDGE_BASE_PATH") or RESOURCES_DIR / "knowledge_base.yaml")
LOCALES_DIR = Path(os.getenv("LOCALES_DIR") or RESOURCES_DIR / "locales")
DEFAULT_LOCALE = (os.getenv("DEFAULT_LOCALE", "en") or "en").strip().lower()

# --- analysis ---
# The dashboard waited 2.5s before showing a prediction; 0 disables it.
ANALYSIS_DELAY_MS = max(0, _env_int("ANALYSIS_DELAY_MS", 0))

# --- rate limits (slowapi syntax), read per request ---
ANALYSIS_RATE_LIMIT = (os.getenv("ANALYSIS_RATE_LIMIT") or "30/minute").strip()
CHAT_RATE_LIMIT = (os.getenv("CHAT_RATE_LIMIT") or "60/minute").strip()

# --- chat engine ---
# "local" answers from the knowledge base only; "remote" asks the hosted
# model first and falls back to the local resolver on any failure.
CHAT_ENGINE = (os.getenv("CHAT_ENGINE") or "local").strip().lower()
OPENROUTER_API_KEY = (os.getenv("OPENROUTER_API_KEY", "") or "").strip()
CHAT_REMOTE_URL = (os.getenv("CHAT_REMOTE_URL") or "https://openrouter.ai/api/v1/chat/completions").strip()
CHAT_REMOTE_MODEL = (os.getenv("CHAT_REMOTE_MODEL") or "mistralai/mistral-7b-instruct:free").strip()
CHAT_REMOTE_TIMEOUT = _env_float("CHAT_REMOTE_TIMEOUT", 20.0)
SITE_URL = (os.getenv("SITE_URL") or "http://localhost:3000").strip()

# --- http ---
CORS_ORIGINS = _env_list("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
JSON_LOGS = _env_bool("JSON_LOGS", True)
