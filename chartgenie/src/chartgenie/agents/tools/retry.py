"""Retry utilities for LLM API calls."""

import time
from typing import Callable, TypeVar
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


def is_transient_error(error: Exception) -> bool:
    """
    Check if an error is transient and should be retried.

    Args:
        error: Exception to check

    Returns:
        True if error is transient
    """
    error_str = str(error).lower()
    return (
        "timeout" in error_str or
        "timed out" in error_str or
        "rate limit" in error_str or
        getattr(error, "status_code", None) in (408, 429, 503, 504)
    )


def retry_with_backoff(
    func: Callable[[], T],
    max_retries: int,
    base_delay: float,
    timeout_errors: tuple = (),
    operation_name: str = "operation",
) -> T:
    """
    Retry a function with exponential backoff.

    Args:
        func: Function to retry (no arguments)
        max_retries: Maximum number of attempts (1 means no retry)
        base_delay: Base delay in seconds for exponential backoff
        timeout_errors: Tuple of timeout exception types
        operation_name: Name of operation for logging

    Returns:
        Result of function call

    Raises:
        Last exception if all attempts fail
    """
    attempts = max(1, max_retries)
    for attempt in range(attempts):
        try:
            return func()
        except timeout_errors as e:
            if attempt < attempts - 1:
                retry_delay = base_delay * (2 ** attempt)
                logger.warning(
                    f"{operation_name} timed out on attempt {attempt + 1}/{attempts}. "
                    f"Retrying in {retry_delay:.1f} seconds..."
                )
                time.sleep(retry_delay)
                continue
            logger.error(f"{operation_name} failed after {attempts} attempt(s): {e}")
            raise
        except Exception as e:
            if is_transient_error(e) and attempt < attempts - 1:
                retry_delay = base_delay * (2 ** attempt)
                logger.warning(
                    f"Transient error on attempt {attempt + 1}/{attempts}: {e}. "
                    f"Retrying in {retry_delay:.1f} seconds..."
                )
                time.sleep(retry_delay)
                continue
            logger.error(f"{operation_name} failed: {e}")
            raise

    # Should not reach here, but for type checking
    raise RuntimeError(f"{operation_name} failed after {attempts} attempts")
