"""Tools for agent operations."""

from .llm_client import chat, check_llm_connection
from .retry import retry_with_backoff

__all__ = ["chat", "check_llm_connection", "retry_with_backoff"]
