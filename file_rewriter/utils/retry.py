"""Retry utilities for rewrites that failed for transient reasons.

Sessions never retry on their own. Callers that want retries build them from
this module, which uses the tenacity library. Every attempt must open a fresh
session, so each one gets a new temporary file name.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from file_rewriter.domain.exceptions import (
    AlreadyClosed,
    CommitFailed,
    OpenFailed,
    TempCreateFailed,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PermanentError(Exception):
    """Exception indicating a permanent error that should not be retried."""

    pass


# Failures where a second attempt with a new temp file may succeed
TRANSIENT_EXCEPTIONS = (TempCreateFailed, CommitFailed)

# Failures a second attempt cannot fix
PERMANENT_EXCEPTIONS = (OpenFailed, AlreadyClosed, ValueError, TypeError)


def create_retry_decorator(
    max_attempts: int = 3,
    min_wait: float = 0.1,
    max_wait: float = 2.0,
    transient_exceptions: tuple[type[Exception], ...] = TRANSIENT_EXCEPTIONS,
):
    """Create a tenacity retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait time in seconds
        max_wait: Maximum wait time in seconds
        transient_exceptions: Tuple of exception types to retry

    Returns:
        Tenacity retry decorator
    """
    return retry(
        retry=retry_if_exception_type(transient_exceptions),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        reraise=True,
    )


def retry_with_exponential_backoff(
    func: Callable[..., T],
    *args: Any,
    max_attempts: int = 3,
    min_wait: float = 0.1,
    max_wait: float = 2.0,
    transient_exceptions: tuple[type[Exception], ...] = TRANSIENT_EXCEPTIONS,
    permanent_exceptions: tuple[type[Exception], ...] = PERMANENT_EXCEPTIONS,
    **kwargs: Any,
) -> T:
    """Call ``func`` again after transient failures, backing off exponentially.

    Args:
        func: Function to execute
        *args: Positional arguments to pass to func
        max_attempts: Maximum number of attempts (default: 3)
        min_wait: Minimum wait between attempts in seconds
        max_wait: Maximum wait between attempts in seconds
        transient_exceptions: Tuple of exception types to retry
        permanent_exceptions: Tuple of exception types that are wrapped and not retried
        **kwargs: Keyword arguments to pass to func

    Returns:
        Result of the function call

    Raises:
        PermanentError: If a permanent error occurs (original chained as cause)
        Exception: The last transient error once attempts are exhausted

    Example:
        >>> retry_with_exponential_backoff(service.rewrite_file, path, transform)
    """
    retry_decorator = create_retry_decorator(
        max_attempts=max_attempts,
        min_wait=min_wait,
        max_wait=max_wait,
        transient_exceptions=transient_exceptions,
    )
    name = getattr(func, "__name__", repr(func))

    @retry_decorator
    def _wrapped_call():
        try:
            return func(*args, **kwargs)
        except permanent_exceptions as e:
            logger.error(f"Permanent error in {name}: {e}")
            raise PermanentError(f"Permanent error: {e}") from e
        except transient_exceptions as e:
            logger.warning(f"Transient error in {name}, may retry: {e}")
            raise

    try:
        return _wrapped_call()
    except Exception as e:
        logger.error(f"Failed to execute {name} (max {max_attempts} attempts): {e}")
        raise
