# Rate limiting (slowapi). Limits are read from settings on every request so
# they can be tuned through the environment and patched in tests.
from slowapi import Limiter
from slowapi.util import get_remote_address

from waterborne import settings

limiter = Limiter(key_func=get_remote_address, default_limits=[])


def analysis_limit() -> str:
    return settings.ANALYSIS_RATE_LIMIT


def chat_limit() -> str:
    return settings.CHAT_RATE_LIMIT


def reset_limiter() -> None:
    limiter.reset()
