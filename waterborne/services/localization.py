"""Locale catalogs and the label <-> canonical id adapter.

Catalog lookups are dot-path keyed (``ai.initialGreeting``,
``diseases.cholera.remedies``) and return a tagged result: ``Found`` when the
active locale has the key, ``MissingFallbackToBase`` when the base-language
value had to be used instead.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from waterborne import settings
from waterborne.schemas.knowledge import INFO_FIELDS
from waterborne.services.knowledge_base import ConfigurationError, KnowledgeBase, get_knowledge_base
from waterborne.utils.text import canonical_key, normalize_text

logger = logging.getLogger("waterborne")

DISEASE_TEXT_FIELDS: Tuple[str, ...] = ("name", "description", "remedies") + INFO_FIELDS

# Keys every base-language bundle must provide.
REQUIRED_KEYS: Tuple[str, ...] = (
    "languageName",
    "ai.initialGreeting",
    "ai.fallback",
    "ai.genericSymptoms",
    "chat.fieldAnswer",
    "chat.summaryHeading",
    "chat.summaryLine",
    "analysis.noDiseaseDetectedTitle",
    "analysis.noDiseaseDetectedDescription",
) + tuple(f"chat.fields.{f}" for f in INFO_FIELDS)

_MISSING = object()


@dataclass(frozen=True)
class Found:
    value: Any
    locale: str


@dataclass(frozen=True)
class MissingFallbackToBase:
    value: Any
    locale: str
    requested_locale: str


Lookup = Union[Found, MissingFallbackToBase]


def dig(bundle: Mapping[str, Any], path: str) -> Any:
    """Walk a nested mapping along a dot path; returns _MISSING if absent."""
    node: Any = bundle
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


class Catalog:
    """Per-locale translation bundles with base-language fallback."""

    def __init__(self, bundles: Dict[str, Dict[str, Any]], base_locale: str):
        if base_locale not in bundles:
            raise ConfigurationError(f"missing base locale bundle '{base_locale}'")
        self.bundles = bundles
        self.base_locale = base_locale
        missing = [k for k in REQUIRED_KEYS if dig(bundles[base_locale], k) is _MISSING]
        if missing:
            raise ConfigurationError(f"base locale bundle is missing keys: {', '.join(missing)}")

    def has(self, locale: str, key: str) -> bool:
        return dig(self.bundles.get(locale) or {}, key) is not _MISSING

    def lookup(self, key: str, locale: str) -> Lookup:
        value = dig(self.bundles.get(locale) or {}, key)
        if value is not _MISSING:
            return Found(value, locale)
        value = dig(self.bundles[self.base_locale], key)
        if value is _MISSING:
            raise KeyError(key)
        return MissingFallbackToBase(value, self.base_locale, locale)


def load_catalog(kb: KnowledgeBase, locales_dir: Union[str, Path]) -> Catalog:
    locales_dir = Path(locales_dir)
    bundles: Dict[str, Dict[str, Any]] = {}
    for code in kb.locales:
        path = locales_dir / f"{code}.json"
        if not path.exists():
            if code == kb.base_locale:
                raise ConfigurationError(f"missing base locale bundle {path}")
            logger.warning("locale bundle %s not found; '%s' will use base-language text", path, code)
            bundles[code] = {}
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"cannot read locale bundle {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"locale bundle {path} must be a JSON object")
        bundles[code] = data
    return Catalog(bundles, kb.base_locale)


class Localizer:
    """Maps display labels to canonical ids and localizes knowledge base text."""

    def __init__(self, kb: KnowledgeBase, catalog: Catalog, default_locale: Optional[str] = None):
        self.kb = kb
        self.catalog = catalog
        self.default_locale = (default_locale or kb.base_locale).strip().lower()
        if self.default_locale not in kb.locales:
            raise ConfigurationError(f"default locale '{self.default_locale}' is not a supported locale")
        # locale -> normalized label -> symptom id
        self._label_index: Dict[str, Dict[str, str]] = {}
        for s in kb.symptoms:
            for loc, label in s.labels.items():
                self._label_index.setdefault(loc, {})[normalize_text(label)] = s.id

    @property
    def base_locale(self) -> str:
        return self.kb.base_locale

    def resolve_locale(self, tag: Optional[str]) -> str:
        """Map "hi", "hi-IN" or "HI" to a supported locale; unknown tags use the default locale."""
        raw = (tag or "").strip().lower().replace("_", "-")
        if raw in self.kb.locales:
            return raw
        primary = raw.split("-", 1)[0]
        if primary in self.kb.locales:
            return primary
        return self.default_locale

    # ---- catalog text ----
    def lookup(self, key: str, locale: str) -> Lookup:
        return self.catalog.lookup(key, locale)

    def text(self, key: str, locale: str, **fmt: Any) -> str:
        value = self.catalog.lookup(key, locale).value
        if fmt and isinstance(value, str):
            return value.format(**fmt)
        return value

    # ---- symptoms ----
    def symptom_label(self, symptom_id: str, locale: str) -> Lookup:
        symptom = self.kb.symptom(symptom_id)
        if symptom is None:
            raise KeyError(symptom_id)
        label = symptom.labels.get(locale)
        if label:
            return Found(label, locale)
        return MissingFallbackToBase(symptom.labels[self.base_locale], self.base_locale, locale)

    def symptom_options(self, locale: str) -> List[Dict[str, str]]:
        return [{"id": s.id, "label": self.symptom_label(s.id, locale).value} for s in self.kb.symptoms]

    def to_canonical(self, label: str, locale: str) -> Optional[str]:
        """Resolve a display label (or an id) to its canonical symptom id."""
        key = normalize_text(label)
        if not key:
            return None
        hit = self._label_index.get(locale, {}).get(key)
        if hit:
            return hit
        as_id = canonical_key(label)
        if as_id in self.kb.symptom_ids:
            return as_id
        return self._label_index.get(self.base_locale, {}).get(key)

    def canonicalize(self, labels: Iterable[str], locale: str) -> Tuple[List[str], List[str]]:
        """Return (canonical ids de-duplicated in first-seen order, unrecognized labels)."""
        ids: List[str] = []
        unrecognized: List[str] = []
        for label in labels or []:
            sid = self.to_canonical(label, locale)
            if sid is None:
                unrecognized.append(label)
            elif sid not in ids:
                ids.append(sid)
        return ids, unrecognized

    # ---- diseases ----
    def get_disease_field(self, disease_id: str, field: str, locale: str) -> Lookup:
        """Localized disease text; the knowledge base holds the base-language value."""
        if field not in DISEASE_TEXT_FIELDS:
            raise KeyError(field)
        disease = self.kb.disease(disease_id)
        if disease is None:
            raise KeyError(disease_id)
        if locale != self.base_locale:
            value = dig(self.catalog.bundles.get(locale) or {}, f"diseases.{disease_id}.{field}")
            if value is not _MISSING:
                return Found(value, locale)
        if field in INFO_FIELDS:
            base_value: Any = getattr(disease.info, field)
        elif field == "remedies":
            base_value = list(disease.remedies)
        else:
            base_value = getattr(disease, field)
        if locale == self.base_locale:
            return Found(base_value, locale)
        return MissingFallbackToBase(base_value, self.base_locale, locale)

    def supported_locales(self) -> List[Dict[str, str]]:
        return [
            {"code": code, "name": self.text("languageName", code)}
            for code in self.kb.locales
        ]


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    return load_catalog(get_knowledge_base(), settings.LOCALES_DIR)


@lru_cache(maxsize=1)
def get_localizer() -> Localizer:
    return Localizer(get_knowledge_base(), get_catalog(), settings.DEFAULT_LOCALE)


__all__ = [
    "Catalog",
    "Found",
    "Localizer",
    "Lookup",
    "MissingFallbackToBase",
    "get_catalog",
    "get_localizer",
    "load_catalog",
]
