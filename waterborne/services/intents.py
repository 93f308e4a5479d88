"""Keyword-cascade intent resolution for chat messages.

Precedence is declared as data in ``RULES``: greeting, then a recognised
disease (field question or summary), then a generic symptom question, then
the fallback. The first rule whose predicate holds decides the intent.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from waterborne.schemas.knowledge import INFO_FIELDS, Disease
from waterborne.services.knowledge_base import KnowledgeBase, get_knowledge_base
from waterborne.utils.text import contains_term, first_match, normalize_text

logger = logging.getLogger("waterborne")


class IntentKind(str, Enum):
    GREETING = "greeting"
    DISEASE_FIELD = "disease_field"
    DISEASE_SUMMARY = "disease_summary"
    GENERIC_SYMPTOMS = "generic_symptoms"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    rule: str
    disease_id: Optional[str] = None
    field: Optional[str] = None


@dataclass(frozen=True)
class Message:
    raw: str
    text: str  # normalized
    locale: str


Predicate = Callable[[Message, KnowledgeBase], bool]
Action = Callable[[Message, KnowledgeBase], Intent]


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Predicate
    action: Action


def find_disease(message: Message, kb: KnowledgeBase) -> Optional[Disease]:
    """First disease (declaration order) named or triggered in the message."""
    for disease in kb.diseases:
        if contains_term(message.text, normalize_text(disease.name)):
            return disease
        if first_match(message.text, disease.recognition_keywords):
            return disease
    return None


def find_field(message: Message, kb: KnowledgeBase) -> Optional[str]:
    for field in INFO_FIELDS:
        if first_match(message.text, kb.field_keywords(field)):
            return field
    return None


def is_greeting(message: Message, kb: KnowledgeBase) -> bool:
    return first_match(message.text, kb.greetings_for(message.locale)) is not None


def mentions_disease(message: Message, kb: KnowledgeBase) -> bool:
    return find_disease(message, kb) is not None


def asks_about_symptoms(message: Message, kb: KnowledgeBase) -> bool:
    return first_match(message.text, kb.field_keywords("symptoms")) is not None


def _greeting(message: Message, kb: KnowledgeBase) -> Intent:
    return Intent(IntentKind.GREETING, rule="greeting")


def _disease(message: Message, kb: KnowledgeBase) -> Intent:
    disease = find_disease(message, kb)
    field = find_field(message, kb)
    if field is None:
        return Intent(IntentKind.DISEASE_SUMMARY, rule="disease", disease_id=disease.id)
    return Intent(IntentKind.DISEASE_FIELD, rule="disease", disease_id=disease.id, field=field)


def _generic_symptoms(message: Message, kb: KnowledgeBase) -> Intent:
    return Intent(IntentKind.GENERIC_SYMPTOMS, rule="generic_symptoms")


def _fallback(message: Message, kb: KnowledgeBase) -> Intent:
    return Intent(IntentKind.FALLBACK, rule="fallback")


RULES: Tuple[Rule, ...] = (
    Rule("greeting", is_greeting, _greeting),
    Rule("disease", mentions_disease, _disease),
    Rule("generic_symptoms", asks_about_symptoms, _generic_symptoms),
    Rule("fallback", lambda message, kb: True, _fallback),
)


def classify(
    text: Optional[str],
    locale: Optional[str] = None,
    kb: Optional[KnowledgeBase] = None,
    rules: Tuple[Rule, ...] = RULES,
) -> Intent:
    """Resolve a chat message to exactly one intent; never raises for any text."""
    kb = kb or get_knowledge_base()
    message = Message(raw=text or "", text=normalize_text(text), locale=(locale or kb.base_locale))
    for rule in rules:
        if rule.predicate(message, kb):
            intent = rule.action(message, kb)
            logger.info({
                "function": "classify",
                "rule": rule.name,
                "intent": intent.kind.value,
                "disease": intent.disease_id,
                "field": intent.field,
                "locale": message.locale,
            })
            return intent
    return Intent(IntentKind.FALLBACK, rule="fallback")


__all__ = [
    "Intent",
    "IntentKind",
    "Message",
    "RULES",
    "Rule",
    "asks_about_symptoms",
    "classify",
    "find_disease",
    "find_field",
    "is_greeting",
    "mentions_disease",
]
