"""Keyed storage for conversation sessions."""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from chartgenie.ir.conversation import ConversationSession
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)


class SessionStore(ABC):
    """Narrow interface the conversation service depends on."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[ConversationSession]:
        ...

    @abstractmethod
    def put(self, session: ConversationSession) -> None:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns True if it existed."""

    @abstractmethod
    def sweep(self, max_age_seconds: float, now: Optional[datetime] = None) -> int:
        """Evict sessions idle longer than max_age_seconds. Returns the count evicted."""

    @abstractmethod
    def list_sessions(self) -> List[ConversationSession]:
        ...

    @abstractmethod
    def lock_for(self, session_id: str) -> threading.Lock:
        """Lock serializing updates to one session."""


class InMemorySessionStore(SessionStore):
    """Process-local session store."""

    def __init__(self):
        self._sessions: Dict[str, ConversationSession] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, session_id: str) -> Optional[ConversationSession]:
        with self._guard:
            return self._sessions.get(session_id)

    def put(self, session: ConversationSession) -> None:
        with self._guard:
            self._sessions[session.id] = session

    def delete(self, session_id: str) -> bool:
        # The lock stays: a waiter may still hold it
        with self._guard:
            return self._sessions.pop(session_id, None) is not None

    def sweep(self, max_age_seconds: float, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        cutoff = now - timedelta(seconds=max_age_seconds)
        with self._guard:
            expired = [sid for sid, s in self._sessions.items() if s.last_activity < cutoff]
            for sid in expired:
                del self._sessions[sid]
                self._locks.pop(sid, None)

        if expired:
            logger.info(f"Cleaned up {len(expired)} old session(s)")
        return len(expired)

    def list_sessions(self) -> List[ConversationSession]:
        with self._guard:
            return list(self._sessions.values())

    def lock_for(self, session_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(session_id, threading.Lock())

    def __len__(self) -> int:
        with self._guard:
            return len(self._sessions)
