"""Conversation service: sessions, history bookkeeping and result caching."""

import time
import uuid
from typing import Any, Dict, List, Optional

from chartgenie.agents.orchestrator import Orchestrator
from chartgenie.config.settings import Settings, get_settings
from chartgenie.diagram.parser import extract_entity_names
from chartgenie.ir.conversation import (
    ConversationSession,
    DiagramRequest,
    DiagramResult,
    Exchange,
)
from chartgenie.ir.validators import validate_input
from chartgenie.services.cache import ResultCache, build_cache_key
from chartgenie.services.session_store import InMemorySessionStore, SessionStore
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)


def summarize_exchange(user_message: str, diagram_code: str) -> str:
    """Short textual summary of the entities a diagram contains."""
    entities = extract_entity_names(diagram_code)
    return f"Created diagram with entities: {', '.join(entities)}"


class ConversationService:
    """Owns conversation sessions and runs each message through the orchestrator."""

    def __init__(
        self,
        orchestrator: Optional[Orchestrator] = None,
        store: Optional[SessionStore] = None,
        cache: Optional[ResultCache] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.orchestrator = orchestrator or Orchestrator(settings=self.settings)
        self.store = store or InMemorySessionStore()
        self.cache = cache or ResultCache(
            ttl=self.settings.cache_ttl, maxsize=self.settings.cache_max_size
        )
        self._last_sweep = time.monotonic()

    def handle_message(
        self,
        message: str,
        output_format: str = "mermaid",
        session_id: Optional[str] = None,
        current_diagram: Optional[str] = None,
    ) -> DiagramResult:
        """
        Generate or modify a diagram within a conversation.

        Args:
            message: The user's message
            output_format: Requested output format
            session_id: Existing session id, or None to start a new session
            current_diagram: Diagram the client is showing; replaces the
                session's stored diagram when given

        Returns:
            DiagramResult carrying the session id

        Raises:
            InputValidationError: If the message or format is rejected
        """
        validate_input(message, output_format, self.settings.max_input_length)
        self.maybe_sweep()

        session_id = session_id or str(uuid.uuid4())
        with self.store.lock_for(session_id):
            # Looked up under the lock so a concurrent clear is not undone by put
            session = self.store.get(session_id)
            if session is None:
                session = ConversationSession(id=session_id)
                logger.info(f"Started session {session_id}")

            if current_diagram:
                session.current_diagram = current_diagram

            cache_key = build_cache_key(session.id, output_format, message, len(session.history))
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.info("Returning cached conversational result")
                self.store.put(session)
                return cached.model_copy(update={"source": "cache", "session_id": session.id})

            result = self.orchestrator.generate(
                DiagramRequest(
                    user_text=message,
                    output_format=output_format,
                    history=list(session.history),
                    current_diagram=session.current_diagram,
                )
            )
            result.session_id = session.id

            session.current_diagram = result.diagram_code
            session.history.append(
                Exchange(
                    user_message=message,
                    assistant_summary=summarize_exchange(message, result.diagram_code),
                )
            )
            limit = self.settings.max_conversation_history
            if len(session.history) > limit:
                session.history = session.history[-limit:]

            self.store.put(session)
            self.cache.set(cache_key, result)

        logger.info(f"Session {session.id}: {result.source} ({len(session.history)} exchanges)")
        return result

    def get_conversation(self, session_id: str) -> Optional[ConversationSession]:
        return self.store.get(session_id)

    def clear_conversation(self, session_id: str) -> bool:
        """
        Delete a session once any in-flight request on it has finished.

        Returns False if it did not exist.
        """
        with self.store.lock_for(session_id):
            existed = self.store.delete(session_id)
        if existed:
            logger.info(f"Cleared session {session_id}")
        return existed

    def list_sessions(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": s.id,
                "created_at": s.created_at,
                "message_count": len(s.history),
                "last_activity": s.last_activity,
            }
            for s in self.store.list_sessions()
        ]

    def clear_cache(self) -> int:
        cleared = self.cache.clear()
        logger.info(f"Cache cleared ({cleared} keys)")
        return cleared

    def maybe_sweep(self, force: bool = False) -> int:
        """Evict idle sessions if the sweep interval has elapsed (or force)."""
        now = time.monotonic()
        if not force and now - self._last_sweep < self.settings.session_sweep_interval:
            return 0
        self._last_sweep = now
        return self.store.sweep(self.settings.session_max_age)
