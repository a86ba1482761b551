"""Tests for settings and logging configuration."""

import logging

import pytest

from chartgenie.config.logging import get_logger, setup_logging
from chartgenie.config.settings import Settings


@pytest.fixture
def restore_logging():
    app_logger = logging.getLogger("chartgenie")
    handlers, level = list(app_logger.handlers), app_logger.level
    yield app_logger
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers[:] = handlers
    app_logger.setLevel(level)


def test_quiet_console_keeps_file_verbose(restore_logging, tmp_path):
    """Test that quiet mode limits only the console handler."""
    log_file = tmp_path / "chartgenie.log"
    setup_logging(level="DEBUG", log_file=log_file, quiet=True)

    console, file_handler = restore_logging.handlers
    assert console.level == logging.WARNING
    assert file_handler.level == logging.DEBUG
    assert restore_logging.level == logging.DEBUG
    assert restore_logging.propagate is False
    assert logging.getLogger("httpx").level == logging.WARNING

    get_logger("chartgenie.test").debug("only in the file")
    file_handler.flush()
    assert "only in the file" in log_file.read_text(encoding="utf-8")


def test_console_follows_level_when_not_quiet(restore_logging):
    """Test that without quiet the console uses the configured level."""
    setup_logging(level="INFO", log_file=None)
    handler = restore_logging.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert handler.level == logging.INFO


def test_get_logger_namespaces_names():
    """Test that loggers live under the chartgenie hierarchy."""
    assert get_logger("chartgenie.agents").name == "chartgenie.agents"
    assert get_logger("tools").name == "chartgenie.tools"


def test_settings_defaults():
    """Test the generation and conversation limits."""
    settings = Settings()
    assert settings.max_input_length == 1000
    assert settings.max_conversation_history == 10
    assert settings.context_history_size == 3
    assert settings.cache_ttl == 3600
    assert settings.session_max_age == 24 * 60 * 60
