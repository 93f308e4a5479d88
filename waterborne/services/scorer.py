"""Symptom-to-disease scoring.

confidence = round(matched / total_keywords * 100), half-up, kept only when
strictly above the configured minimum. Results are ordered by confidence;
equal confidences keep the knowledge base's declaration order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from waterborne.services.knowledge_base import KnowledgeBase, get_knowledge_base
from waterborne.utils.text import canonical_key

logger = logging.getLogger("waterborne")


@dataclass(frozen=True)
class DiseaseMatch:
    disease_id: str
    confidence: int
    matched: Tuple[str, ...]


def percent(matched: int, total: int) -> int:
    """Integer percentage rounded half-up, e.g. 1/8 -> 13, 4/6 -> 67."""
    return (200 * matched + total) // (2 * total)


def score(symptoms: Iterable[str], kb: Optional[KnowledgeBase] = None) -> List[DiseaseMatch]:
    kb = kb or get_knowledge_base()
    wanted = {canonical_key(s) for s in symptoms or ()}
    wanted.discard("")
    if not wanted:
        return []

    matches: List[DiseaseMatch] = []
    for disease in kb.diseases:
        hit = tuple(k for k in disease.scoring_keywords if k in wanted)
        if not hit:
            continue
        confidence = percent(len(hit), len(disease.scoring_keywords))
        if confidence > kb.min_confidence:
            matches.append(DiseaseMatch(disease.id, confidence, hit))

    # sorted() is stable, so ties stay in declaration order
    ranked = sorted(matches, key=lambda m: -m.confidence)[: kb.max_results]
    logger.debug({
        "function": "score",
        "symptoms": sorted(wanted),
        "results": [(m.disease_id, m.confidence) for m in ranked],
    })
    return ranked


__all__ = ["DiseaseMatch", "percent", "score"]
