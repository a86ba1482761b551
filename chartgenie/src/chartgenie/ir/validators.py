"""Validation of incoming requests."""

from typing import Optional

from chartgenie.constants import SUPPORTED_FORMATS
from chartgenie.config.settings import get_settings
from chartgenie.errors import InputValidationError


def validate_input(message: object, output_format: str = "mermaid", max_length: Optional[int] = None) -> None:
    """
    Reject requests that must not reach generation.

    Args:
        message: User message
        output_format: Requested output format
        max_length: Maximum message length (defaults to settings.max_input_length)

    Raises:
        InputValidationError: If the message is empty, not text or too long,
            or the format is unsupported
    """
    if not message or not isinstance(message, str) or not message.strip():
        raise InputValidationError("Invalid input")

    limit = max_length if max_length is not None else get_settings().max_input_length
    if len(message) > limit:
        raise InputValidationError("Input too long")

    if output_format not in SUPPORTED_FORMATS:
        raise InputValidationError("Unsupported output format")
