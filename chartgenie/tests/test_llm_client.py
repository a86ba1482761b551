"""Tests for provider selection and retry handling in the LLM client."""

from types import SimpleNamespace

import pytest

from chartgenie.agents.tools import llm_client
from chartgenie.agents.tools.retry import is_transient_error, retry_with_backoff
from chartgenie.config.settings import Settings
from chartgenie.errors import LLMCallError

NO_PROVIDERS = dict(
    groq_api_key=None,
    openai_api_key=None,
    model_name=None,
    gemini_api_key=None,
    gemini_model=None,
    llm_url=None,
    model=None,
)


def _use_settings(monkeypatch, **overrides):
    settings = Settings(**{**NO_PROVIDERS, **overrides})
    monkeypatch.setattr(llm_client, "get_settings", lambda: settings)
    llm_client.reset_clients()
    return settings


def test_chat_without_configuration_raises(monkeypatch):
    _use_settings(monkeypatch)
    assert llm_client.configured_providers() == []
    with pytest.raises(LLMCallError, match="No LLM API configured"):
        llm_client.chat([{"role": "user", "content": "hi"}])


def test_provider_priority(monkeypatch):
    _use_settings(
        monkeypatch,
        groq_api_key="g",
        openai_api_key="o",
        model_name="gpt",
        llm_url="http://localhost:1234",
        model="local-model",
    )
    assert llm_client.configured_providers() == ["groq", "openai", "local"]


def test_failing_provider_falls_through(monkeypatch):
    _use_settings(monkeypatch, groq_api_key="g", llm_url="http://localhost:1234", model="m")
    calls = []

    def broken(messages):
        calls.append("groq")
        raise RuntimeError("503 service unavailable")

    def local(messages):
        calls.append("local")
        return "erDiagram"

    monkeypatch.setitem(llm_client._PROVIDERS, "groq", broken)
    monkeypatch.setitem(llm_client._PROVIDERS, "local", local)

    assert llm_client.chat([{"role": "user", "content": "hi"}]) == "erDiagram"
    assert calls == ["groq", "local"]


def test_all_providers_failing(monkeypatch):
    _use_settings(monkeypatch, groq_api_key="g")

    def broken(messages):
        raise RuntimeError("boom")

    monkeypatch.setitem(llm_client._PROVIDERS, "groq", broken)
    with pytest.raises(LLMCallError, match="groq: boom"):
        llm_client.chat([{"role": "user", "content": "hi"}])


def test_check_llm_connection(monkeypatch):
    _use_settings(monkeypatch)
    result = llm_client.check_llm_connection()
    assert result["status"] == "error"
    assert result["providers"] == []

    _use_settings(monkeypatch, groq_api_key="g")
    monkeypatch.setitem(llm_client._PROVIDERS, "groq", lambda messages: " OK \n")
    result = llm_client.check_llm_connection()
    assert result == {"status": "success", "providers": ["groq"], "response": "OK"}


def test_completion_content():
    ok = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="erDiagram"))])
    assert llm_client._completion_content(ok, "Groq") == "erDiagram"

    with pytest.raises(LLMCallError, match="No choices"):
        llm_client._completion_content(SimpleNamespace(choices=[]), "Groq")
    empty = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))])
    with pytest.raises(LLMCallError, match="No content"):
        llm_client._completion_content(empty, "Groq")


def test_retry_recovers_from_timeouts():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise TimeoutError("timed out")
        return "done"

    result = retry_with_backoff(flaky, max_retries=3, base_delay=0, timeout_errors=(TimeoutError,))
    assert result == "done"
    assert len(attempts) == 3


def test_retry_does_not_repeat_permanent_errors():
    attempts = []

    def broken():
        attempts.append(1)
        raise ValueError("invalid api key")

    with pytest.raises(ValueError):
        retry_with_backoff(broken, max_retries=3, base_delay=0)
    assert len(attempts) == 1


def test_single_attempt_by_default(settings):
    attempts = []

    def slow():
        attempts.append(1)
        raise TimeoutError("timed out")

    with pytest.raises(TimeoutError):
        retry_with_backoff(slow, max_retries=settings.llm_max_retries, base_delay=0,
                           timeout_errors=(TimeoutError,))
    assert len(attempts) == 1


def test_is_transient_error():
    assert is_transient_error(RuntimeError("Rate limit reached"))
    error = RuntimeError("server busy")
    error.status_code = 503
    assert is_transient_error(error)
    assert not is_transient_error(ValueError("bad request"))
