import re
import unicodedata
from typing import Iterable, Optional

_WS_RE = re.compile(r"\s+")
_KEY_SEP_RE = re.compile(r"[\s\-]+")


def normalize_text(text: Optional[str]) -> str:
    """Lower-case, NFKC-normalized text with collapsed whitespace.

    NFKC keeps composed and decomposed Indic/Latin forms comparable.
    """
    if not text:
        return ""
    s = unicodedata.normalize("NFKC", str(text)).lower()
    return _WS_RE.sub(" ", s).strip()


def canonical_key(value: Optional[str]) -> str:
    """Canonical id form: "Abdominal Pain" / "abdominal-pain" -> "abdominal_pain"."""
    s = normalize_text(value)
    return _KEY_SEP_RE.sub("_", s)


def contains_term(text: str, term: str) -> bool:
    """Substring match; both sides are expected to be normalized already."""
    return bool(term) and term in text


def first_match(text: str, terms: Iterable[str]) -> Optional[str]:
    """Return the first term (in the given order) found in text."""
    for term in terms:
        if contains_term(text, term):
            return term
    return None
