"""Hosted chat backend (OpenAI-compatible chat completions, e.g. OpenRouter).

Only used when CHAT_ENGINE=remote. Every failure returns None so the caller
can answer from the local knowledge base instead.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from waterborne import settings

logger = logging.getLogger("waterborne")

SYSTEM_PROMPT = (
    "You are 'Jal-Rakshak AI', a compassionate, reliable and knowledgeable public "
    "health assistant focused on waterborne diseases such as cholera, typhoid, "
    "hepatitis A, giardiasis, gastroenteritis and cryptosporidiosis. Explain "
    "symptoms, causes, treatment and prevention in plain language, never give a "
    "diagnosis, and advise seeing a doctor when symptoms are severe. "
    "Always reply in {language}."
)


def is_enabled() -> bool:
    return settings.CHAT_ENGINE == "remote" and bool(settings.OPENROUTER_API_KEY)


def build_payload(message: str, language: str) -> Dict[str, Any]:
    return {
        "model": settings.CHAT_REMOTE_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT.format(language=language)},
            {"role": "user", "content": message},
        ],
    }


def _extract_reply(data: Dict[str, Any]) -> str:
    try:
        return (data["choices"][0]["message"]["content"] or "").strip()
    except (KeyError, IndexError, TypeError):
        return ""


async def generate_reply(message: str, language: str = "English") -> Optional[str]:
    """Ask the hosted model; returns None when disabled, failing or empty."""
    if not is_enabled():
        return None
    headers = {
        "Authorization": f"Bearer {settings.OPENROUTER_API_KEY}",
        "HTTP-Referer": settings.SITE_URL,
        "X-Title": "Jal-Rakshak",
    }
    try:
        async with httpx.AsyncClient(timeout=settings.CHAT_REMOTE_TIMEOUT) as client:
            resp = await client.post(
                settings.CHAT_REMOTE_URL,
                headers=headers,
                json=build_payload(message, language),
            )
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning({"function": "generate_reply", "error": f"{exc.__class__.__name__}: {exc}"})
        return None

    reply = _extract_reply(data)
    if not reply:
        logger.warning({"function": "generate_reply", "error": "empty reply"})
        return None
    return reply


__all__ = ["SYSTEM_PROMPT", "build_payload", "generate_reply", "is_enabled"]
