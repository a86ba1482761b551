"""Conversation sessions, caching and the service tying them together."""

from .session_store import SessionStore, InMemorySessionStore
from .cache import ResultCache, build_cache_key
from .conversation import ConversationService, summarize_exchange

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "ResultCache",
    "build_cache_key",
    "ConversationService",
    "summarize_exchange",
]
