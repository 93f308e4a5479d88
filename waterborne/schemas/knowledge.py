# waterborne/schemas/knowledge.py
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Field families in the order the chat resolver tests them.
INFO_FIELDS: Tuple[str, ...] = ("symptoms", "causes", "treatment", "prevention")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Symptom(_Frozen):
    """A canonical symptom and its display labels keyed by locale."""

    id: str = Field(..., min_length=1, description="Canonical, language-independent id.")
    labels: Dict[str, str] = Field(default_factory=dict, description="Display label per locale code.")


class DiseaseInfo(_Frozen):
    symptoms: str
    causes: str
    treatment: str
    prevention: str


class Disease(_Frozen):
    """A disease entry.

    ``scoring_keywords`` (canonical symptom ids, used by the scorer) and
    ``recognition_keywords`` (lexical chat triggers, used by the intent
    resolver) are maintained separately and are not expected to agree.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    remedies: Tuple[str, ...] = ()
    scoring_keywords: Tuple[str, ...] = ()
    recognition_keywords: Tuple[str, ...] = ()
    info: DiseaseInfo


class ScoringConfig(_Frozen):
    min_confidence: int = 20
    max_results: int = 3


class Lexicon(_Frozen):
    greetings: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)
    fields: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)


class KnowledgeBaseData(_Frozen):
    """Raw, schema-checked knowledge base document."""

    version: int = 1
    base_locale: str = "en"
    locales: Tuple[str, ...] = ("en",)
    scoring: ScoringConfig = ScoringConfig()
    symptoms: Tuple[Symptom, ...]
    diseases: Tuple[Disease, ...]
    lexicon: Lexicon
