"""Load-once canonical knowledge base.

The YAML document is parsed, schema-checked with pydantic and then validated
for the invariants the scorer and the intent resolver rely on. Any problem is
raised as ``ConfigurationError`` at load time so a broken knowledge base stops
the service from starting instead of surfacing as odd scores later.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from waterborne import settings
from waterborne.schemas.knowledge import (
    INFO_FIELDS,
    Disease,
    KnowledgeBaseData,
    Symptom,
)
from waterborne.utils.text import canonical_key, normalize_text

logger = logging.getLogger("waterborne")


class ConfigurationError(RuntimeError):
    """The knowledge base or a locale catalog is unusable."""


class KnowledgeBase:
    """Read-only view over validated knowledge base data."""

    def __init__(self, data: KnowledgeBaseData):
        self.data = data
        self._diseases: Mapping[str, Disease] = MappingProxyType({d.id: d for d in data.diseases})
        self._symptoms: Mapping[str, Symptom] = MappingProxyType({s.id: s for s in data.symptoms})

    @property
    def base_locale(self) -> str:
        return self.data.base_locale

    @property
    def locales(self) -> Tuple[str, ...]:
        return self.data.locales

    @property
    def diseases(self) -> Tuple[Disease, ...]:
        return self.data.diseases

    @property
    def symptoms(self) -> Tuple[Symptom, ...]:
        return self.data.symptoms

    @property
    def symptom_ids(self) -> FrozenSet[str]:
        return frozenset(self._symptoms)

    @property
    def min_confidence(self) -> int:
        return self.data.scoring.min_confidence

    @property
    def max_results(self) -> int:
        return self.data.scoring.max_results

    def disease(self, disease_id: str) -> Optional[Disease]:
        return self._diseases.get(disease_id)

    def symptom(self, symptom_id: str) -> Optional[Symptom]:
        return self._symptoms.get(symptom_id)

    def greetings_for(self, locale: Optional[str]) -> Tuple[str, ...]:
        """Base-locale greetings followed by those of the active locale."""
        greetings = self.data.lexicon.greetings
        terms: List[str] = list(greetings.get(self.base_locale, ()))
        if locale and locale != self.base_locale:
            terms.extend(greetings.get(locale, ()))
        return tuple(terms)

    def field_keywords(self, field: str) -> Tuple[str, ...]:
        return self.data.lexicon.fields.get(field, ())

    def summary(self) -> Dict[str, Any]:
        return {
            "version": self.data.version,
            "diseases": len(self.diseases),
            "symptoms": len(self.symptoms),
            "locales": list(self.locales),
        }


def _normalize_terms(terms) -> Tuple[str, ...]:
    out: List[str] = []
    for t in terms or ():
        n = normalize_text(t)
        if n and n not in out:
            out.append(n)
    return tuple(out)


def _prepare(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize ids and lexical terms before schema validation."""
    doc = dict(raw)
    doc["locales"] = [str(loc).strip().lower() for loc in doc.get("locales") or []]
    if "base_locale" in doc:
        doc["base_locale"] = str(doc["base_locale"]).strip().lower()

    symptoms = []
    for item in doc.get("symptoms") or []:
        item = dict(item or {})
        item["id"] = canonical_key(item.get("id"))
        item["labels"] = {str(k).strip().lower(): v for k, v in (item.get("labels") or {}).items()}
        symptoms.append(item)
    doc["symptoms"] = symptoms

    diseases = []
    for item in doc.get("diseases") or []:
        item = dict(item or {})
        item["id"] = str(item.get("id") or "").strip()
        item["scoring_keywords"] = [canonical_key(k) for k in item.get("scoring_keywords") or []]
        item["recognition_keywords"] = list(_normalize_terms(item.get("recognition_keywords")))
        diseases.append(item)
    doc["diseases"] = diseases

    lexicon = dict(doc.get("lexicon") or {})
    lexicon["greetings"] = {
        str(k).strip().lower(): list(_normalize_terms(v)) for k, v in (lexicon.get("greetings") or {}).items()
    }
    lexicon["fields"] = {
        str(k).strip().lower(): list(_normalize_terms(v)) for k, v in (lexicon.get("fields") or {}).items()
    }
    doc["lexicon"] = lexicon
    return doc


def validate_knowledge_base(data: KnowledgeBaseData) -> None:
    """Raise ConfigurationError when an invariant does not hold."""
    problems: List[str] = []
    base = data.base_locale

    if base not in data.locales:
        problems.append(f"base locale '{base}' is not listed in locales")
    if not data.symptoms:
        problems.append("symptom vocabulary is empty")
    if not data.diseases:
        problems.append("no diseases defined")
    if not (0 <= data.scoring.min_confidence < 100):
        problems.append("scoring.min_confidence must be between 0 and 99")
    if data.scoring.max_results < 1:
        problems.append("scoring.max_results must be at least 1")

    seen_symptoms = set()
    labels_by_locale: Dict[str, Dict[str, str]] = {}
    for s in data.symptoms:
        if s.id in seen_symptoms:
            problems.append(f"duplicate symptom id '{s.id}'")
        seen_symptoms.add(s.id)
        if not (s.labels.get(base) or "").strip():
            problems.append(f"symptom '{s.id}' has no '{base}' label")
        for loc, label in s.labels.items():
            if loc not in data.locales:
                problems.append(f"symptom '{s.id}' has a label for unknown locale '{loc}'")
                continue
            key = normalize_text(label)
            owner = labels_by_locale.setdefault(loc, {}).get(key)
            if owner and owner != s.id:
                problems.append(f"label '{label}' ({loc}) is used by both '{owner}' and '{s.id}'")
            labels_by_locale[loc][key] = s.id

    seen_diseases = set()
    for d in data.diseases:
        if d.id in seen_diseases:
            problems.append(f"duplicate disease id '{d.id}'")
        seen_diseases.add(d.id)
        if not d.scoring_keywords:
            problems.append(f"disease '{d.id}' has no scoring keywords")
        if len(set(d.scoring_keywords)) != len(d.scoring_keywords):
            problems.append(f"disease '{d.id}' repeats a scoring keyword")
        for kw in d.scoring_keywords:
            if kw not in seen_symptoms:
                problems.append(f"disease '{d.id}' references unknown symptom '{kw}'")

    missing_fields = [f for f in INFO_FIELDS if not data.lexicon.fields.get(f)]
    if missing_fields:
        problems.append(f"lexicon.fields is missing families: {', '.join(missing_fields)}")
    if not data.lexicon.greetings.get(base):
        problems.append(f"lexicon.greetings has no '{base}' entries")

    if problems:
        raise ConfigurationError("invalid knowledge base: " + "; ".join(problems))


def build_knowledge_base(raw: Dict[str, Any]) -> KnowledgeBase:
    if not isinstance(raw, dict):
        raise ConfigurationError("knowledge base document must be a mapping")
    try:
        data = KnowledgeBaseData.model_validate(_prepare(raw))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid knowledge base: {exc}") from exc
    validate_knowledge_base(data)
    return KnowledgeBase(data)


def load_knowledge_base(path: Union[str, Path]) -> KnowledgeBase:
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read knowledge base {path}: {exc}") from exc
    kb = build_knowledge_base(raw)
    logger.info({"function": "load_knowledge_base", "path": str(path), **kb.summary()})
    return kb


@lru_cache(maxsize=1)
def get_knowledge_base() -> KnowledgeBase:
    return load_knowledge_base(settings.KNOWLEDGE_BASE_PATH)


__all__ = [
    "ConfigurationError",
    "KnowledgeBase",
    "build_knowledge_base",
    "get_knowledge_base",
    "load_knowledge_base",
    "validate_knowledge_base",
]
