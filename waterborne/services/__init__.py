# Mark services as a package and expose key service modules for tests to monkeypatch.

from . import knowledge_base as knowledge_base  # noqa: F401
from . import remote_chat as remote_chat  # noqa: F401

__all__ = [
    "knowledge_base",
    "remote_chat",
]
