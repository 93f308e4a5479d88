"""Render scorer and resolver output as localized text."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from waterborne.schemas.knowledge import INFO_FIELDS
from waterborne.services.intents import Intent, IntentKind, classify
from waterborne.services.localization import Localizer, get_localizer
from waterborne.services.scorer import DiseaseMatch


def compose_analysis(matches: List[DiseaseMatch], locale: str, localizer: Optional[Localizer] = None) -> List[Dict[str, Any]]:
    loc = localizer or get_localizer()
    results: List[Dict[str, Any]] = []
    for m in matches:
        results.append({
            "id": m.disease_id,
            "name": loc.get_disease_field(m.disease_id, "name", locale).value,
            "description": loc.get_disease_field(m.disease_id, "description", locale).value,
            "remedies": list(loc.get_disease_field(m.disease_id, "remedies", locale).value),
            "probability": m.confidence,
        })
    return results


def compose_disease(disease_id: str, locale: str, localizer: Optional[Localizer] = None) -> Dict[str, Any]:
    """Full localized record for one disease, including the info fields."""
    loc = localizer or get_localizer()
    out: Dict[str, Any] = {"id": disease_id}
    fallback_fields: List[str] = []
    for field in ("name", "description", "remedies") + INFO_FIELDS:
        res = loc.get_disease_field(disease_id, field, locale)
        out[field] = list(res.value) if field == "remedies" else res.value
        if res.locale != locale:
            fallback_fields.append(field)
    out["fallback_fields"] = fallback_fields
    return out


def _field_answer(intent: Intent, locale: str, loc: Localizer) -> str:
    return loc.text(
        "chat.fieldAnswer",
        locale,
        field=loc.text(f"chat.fields.{intent.field}", locale),
        disease=loc.get_disease_field(intent.disease_id, "name", locale).value,
        text=loc.get_disease_field(intent.disease_id, intent.field, locale).value,
    )


def _summary(intent: Intent, locale: str, loc: Localizer) -> str:
    name = loc.get_disease_field(intent.disease_id, "name", locale).value
    lines = [loc.text("chat.summaryHeading", locale, disease=name)]
    for field in INFO_FIELDS:
        lines.append(loc.text(
            "chat.summaryLine",
            locale,
            field=loc.text(f"chat.fields.{field}", locale),
            text=loc.get_disease_field(intent.disease_id, field, locale).value,
        ))
    return "\n".join(lines)


def compose_reply(intent: Intent, locale: str, localizer: Optional[Localizer] = None) -> str:
    loc = localizer or get_localizer()
    if intent.kind == IntentKind.GREETING:
        return loc.text("ai.initialGreeting", locale)
    if intent.kind == IntentKind.DISEASE_FIELD:
        return _field_answer(intent, locale, loc)
    if intent.kind == IntentKind.DISEASE_SUMMARY:
        return _summary(intent, locale, loc)
    if intent.kind == IntentKind.GENERIC_SYMPTOMS:
        return loc.text("ai.genericSymptoms", locale)
    return loc.text("ai.fallback", locale)


def respond(text: Optional[str], locale: Optional[str] = None, localizer: Optional[Localizer] = None) -> str:
    """Answer one chat turn from the local knowledge base."""
    loc = localizer or get_localizer()
    active = loc.resolve_locale(locale)
    intent = classify(text, active, kb=loc.kb)
    return compose_reply(intent, active, loc)


__all__ = ["compose_analysis", "compose_disease", "compose_reply", "respond"]
