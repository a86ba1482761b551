"""Logging configuration for ChartGenie."""

import logging
import sys
from pathlib import Path
from typing import Optional
from .settings import get_settings

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)

# Console level used by the CLI, whose stdout carries the diagram
QUIET_CONSOLE_LEVEL = "WARNING"

# The openai SDK logs every HTTP request at INFO through these
HTTP_LOGGERS = ("httpx", "httpcore", "openai")


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    quiet: bool = False,
) -> None:
    """
    Configure the chartgenie logger.

    Console output goes to stderr. With quiet=True the console only shows
    warnings and errors, while the log file (if any) still records
    everything at the configured level.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            defaults to settings.log_level
        log_file: Optional file path for file logging
        format_string: Optional custom format string
        quiet: Restrict the console to QUIET_CONSOLE_LEVEL
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper())
    log_file_path = log_file or settings.log_file
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    app_logger = logging.getLogger("chartgenie")
    app_logger.setLevel(log_level)
    app_logger.handlers.clear()

    console_level = max(log_level, getattr(logging, QUIET_CONSOLE_LEVEL)) if quiet else log_level
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    app_logger.propagate = False

    if quiet or log_level > logging.DEBUG:
        for name in HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger namespaced under chartgenie, configuring logging on first use."""
    if not logging.getLogger("chartgenie").handlers:
        setup_logging()

    if name.startswith("chartgenie"):
        return logging.getLogger(name)
    return logging.getLogger(f"chartgenie.{name}")
