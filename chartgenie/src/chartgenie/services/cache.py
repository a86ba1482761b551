"""TTL cache of generation results."""

import re
import threading
from typing import Optional

from cachetools import TTLCache

from chartgenie.ir.conversation import DiagramResult


def build_cache_key(session_id: str, output_format: str, message: str, history_length: int) -> str:
    """Key results by session, format, normalized message and conversation position."""
    normalized = re.sub(r"\s+", "_", message.lower())
    return f"conv_{output_format}_{session_id}_{normalized}_{history_length}"


class ResultCache:
    """Thread-safe wrapper around cachetools.TTLCache."""

    def __init__(self, ttl: float = 3600, maxsize: int = 256):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[DiagramResult]:
        with self._lock:
            return self._cache.get(key)

    def set(self, key: str, result: DiagramResult) -> None:
        with self._lock:
            self._cache[key] = result

    def clear(self) -> int:
        """Drop every entry. Returns how many keys were cleared."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
