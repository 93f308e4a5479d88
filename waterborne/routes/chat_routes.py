"""Chat endpoints.

Each turn is answered independently; nothing about the conversation is kept.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from waterborne.middleware.rate_limit import chat_limit, limiter
from waterborne.schemas.chat import ChatIn, ChatOut, GreetingOut
from waterborne.services import remote_chat
from waterborne.services.composer import compose_reply
from waterborne.services.intents import classify
from waterborne.services.localization import Localizer, get_localizer


router = APIRouter(prefix="/api/chat", tags=["chat"])
logger = logging.getLogger("waterborne")


@router.get("/greeting", response_model=GreetingOut)
def greeting(
    locale: Optional[str] = Query(None, max_length=16),
    loc: Localizer = Depends(get_localizer),
):
    """Initial assistant message shown when the chat opens or the language changes."""
    active = loc.resolve_locale(locale)
    return {"locale": active, "reply": loc.text("ai.initialGreeting", active)}


@router.post("", response_model=ChatOut)
@limiter.limit(chat_limit)
async def chat(
    request: Request,
    payload: ChatIn,
    loc: Localizer = Depends(get_localizer),
):
    active = loc.resolve_locale(payload.locale)
    text = (payload.message or "").strip()

    if text and remote_chat.is_enabled():
        reply = await remote_chat.generate_reply(text, loc.text("languageName", active))
        if reply:
            return {"reply": reply, "locale": active, "engine": "remote"}
        logger.warning({"function": "chat", "stage": "remote_fallback", "locale": active})

    intent = classify(text, active, kb=loc.kb)
    return {
        "reply": compose_reply(intent, active, loc),
        "locale": active,
        "engine": "local",
        "intent": intent.kind.value,
        "disease_id": intent.disease_id,
        "field": intent.field,
    }
