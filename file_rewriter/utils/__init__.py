"""Utility functions for the file rewriter."""

from file_rewriter.utils.retry import (
    PermanentError,
    create_retry_decorator,
    retry_with_exponential_backoff,
)

__all__ = [
    "PermanentError",
    "create_retry_decorator",
    "retry_with_exponential_backoff",
]
