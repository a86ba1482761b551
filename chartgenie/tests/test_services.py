"""Tests for session storage, result caching and the conversation service."""

import threading
from datetime import datetime, timedelta

import pytest

from chartgenie.agents.orchestrator import Orchestrator
from chartgenie.config.settings import Settings
from chartgenie.diagram.parser import extract_entity_names
from chartgenie.errors import InputValidationError, LLMCallError
from chartgenie.ir.conversation import ConversationSession, DiagramResult
from chartgenie.services.cache import ResultCache, build_cache_key
from chartgenie.services.conversation import ConversationService, summarize_exchange
from chartgenie.services.session_store import InMemorySessionStore


def _service(chat, **overrides):
    settings = Settings(**overrides)
    return ConversationService(
        orchestrator=Orchestrator(chat_fn=chat, settings=settings),
        settings=settings,
    )


def test_session_store_crud():
    """Test basic get/put/delete/list on the in-memory store."""
    store = InMemorySessionStore()
    session = ConversationSession(id="s1")
    store.put(session)

    assert store.get("s1") is session
    assert store.get("missing") is None
    assert [s.id for s in store.list_sessions()] == ["s1"]
    assert len(store) == 1

    assert store.delete("s1") is True
    assert store.delete("s1") is False
    assert len(store) == 0


def test_session_store_sweep():
    """Test that sessions idle past the age limit are evicted."""
    store = InMemorySessionStore()
    store.put(ConversationSession(id="old"))

    assert store.sweep(86400) == 0
    assert store.sweep(86400, now=datetime.now() + timedelta(days=2)) == 1
    assert store.get("old") is None


def test_lock_for_is_stable_per_session():
    """Test that the same session always gets the same lock."""
    store = InMemorySessionStore()
    assert store.lock_for("a") is store.lock_for("a")
    assert store.lock_for("a") is not store.lock_for("b")


def test_build_cache_key():
    """Test that the key normalizes case and whitespace."""
    assert build_cache_key("abc", "mermaid", "Add  A Table", 2) == "conv_mermaid_abc_add_a_table_2"


def test_result_cache_set_get_clear():
    """Test cache round trip and clear count."""
    cache = ResultCache(ttl=60, maxsize=10)
    result = DiagramResult(diagram_code="erDiagram")
    cache.set("k1", result)
    cache.set("k2", result)

    assert cache.get("k1") is result
    assert cache.get("nope") is None
    assert cache.clear() == 2
    assert len(cache) == 0


def test_summarize_exchange(shop_diagram):
    """Test the history summary lists the diagram's entities."""
    assert summarize_exchange("hi", shop_diagram) == "Created diagram with entities: USER, PRODUCT"


def test_conversation_builds_up_diagram(failing_chat):
    """Test that a follow-up message extends the session's diagram."""
    service = _service(failing_chat)

    first = service.handle_message("Create a hospital database")
    assert first.session_id
    session = service.get_conversation(first.session_id)
    assert len(session.history) == 1
    assert session.history[0].assistant_summary == (
        "Created diagram with entities: PATIENT, DOCTOR, APPOINTMENT"
    )

    second = service.handle_message("add a prescription table", session_id=first.session_id)
    assert second.session_id == first.session_id
    assert second.is_modification is True
    assert extract_entity_names(second.diagram_code) == [
        "PATIENT", "DOCTOR", "APPOINTMENT", "PRESCRIPTION",
    ]
    assert "PATIENT ||--o{ PRESCRIPTION : receives" in second.diagram_code
    assert service.get_conversation(first.session_id).current_diagram == second.diagram_code


def test_cached_result_is_served(failing_chat):
    """Test that an identical message at the same conversation position hits the cache."""
    service = _service(failing_chat)

    first = service.handle_message("Create a hospital database", session_id="fixed")
    assert service.clear_conversation("fixed") is True

    again = service.handle_message("create  a hospital DATABASE", session_id="fixed")
    assert again.source == "cache"
    assert again.diagram_code == first.diagram_code
    assert again.session_id == "fixed"
    assert len(failing_chat.calls) == 1
    assert first.source == "fallback_llm_failed"


def test_clear_cache_forces_regeneration(failing_chat):
    """Test that clearing the cache makes the next request run the pipeline."""
    service = _service(failing_chat)
    service.handle_message("Create a hospital database", session_id="s")
    service.clear_conversation("s")

    assert service.clear_cache() == 1
    result = service.handle_message("Create a hospital database", session_id="s")
    assert result.source == "fallback_llm_failed"
    assert len(failing_chat.calls) == 2


def test_history_is_truncated(failing_chat):
    """Test that only the most recent exchanges are kept."""
    service = _service(failing_chat, max_conversation_history=2)
    sid = service.handle_message("Create a hospital database").session_id
    service.handle_message("add a prescription table", session_id=sid)
    service.handle_message("add a pharmacy table", session_id=sid)

    history = service.get_conversation(sid).history
    assert [e.user_message for e in history] == ["add a prescription table", "add a pharmacy table"]


def test_invalid_input_creates_no_session(failing_chat):
    """Test that rejected input leaves no trace."""
    service = _service(failing_chat)
    with pytest.raises(InputValidationError):
        service.handle_message("")
    with pytest.raises(InputValidationError):
        service.handle_message("a shop", output_format="svg")
    assert service.list_sessions() == []
    assert failing_chat.calls == []


def test_client_diagram_overrides_session(failing_chat, shop_diagram):
    """Test that a diagram sent by the client replaces the stored one."""
    service = _service(failing_chat)
    sid = service.handle_message("Create a hospital database").session_id

    result = service.handle_message("add a review table", session_id=sid, current_diagram=shop_diagram)
    assert extract_entity_names(result.diagram_code) == ["USER", "PRODUCT", "REVIEW"]


def test_list_sessions(failing_chat):
    """Test the session listing shape."""
    service = _service(failing_chat)
    sid = service.handle_message("Create a hospital database").session_id

    sessions = service.list_sessions()
    assert len(sessions) == 1
    assert sessions[0]["id"] == sid
    assert sessions[0]["message_count"] == 1
    assert sessions[0]["last_activity"] >= sessions[0]["created_at"]


def test_maybe_sweep(failing_chat):
    """Test that the sweep honours its interval unless forced."""
    service = _service(failing_chat, session_max_age=-1)
    sid = service.handle_message("Create a hospital database").session_id

    assert service.maybe_sweep() == 0
    assert service.maybe_sweep(force=True) == 1
    assert service.get_conversation(sid) is None


def test_clear_during_request_is_not_undone():
    """Test that clearing a session mid-request leaves it cleared afterwards."""
    started = threading.Event()
    release = threading.Event()

    def slow_chat(messages):
        started.set()
        release.wait(5)
        raise LLMCallError("provider down")

    service = _service(slow_chat)
    service.store.put(ConversationSession(id="busy"))

    worker = threading.Thread(
        target=service.handle_message,
        args=("Create a hospital database",),
        kwargs={"session_id": "busy"},
    )
    worker.start()
    assert started.wait(5)

    clearer = threading.Thread(target=service.clear_conversation, args=("busy",))
    clearer.start()
    clearer.join(0.2)
    assert clearer.is_alive()

    release.set()
    worker.join(5)
    clearer.join(5)
    assert not clearer.is_alive()
    assert service.get_conversation("busy") is None


def test_delete_keeps_session_lock():
    """Test that a deleted session's lock is reused by later requests."""
    store = InMemorySessionStore()
    lock = store.lock_for("s")
    store.put(ConversationSession(id="s"))
    store.delete("s")
    assert store.lock_for("s") is lock
