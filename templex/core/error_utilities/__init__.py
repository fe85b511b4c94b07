"""
Error utilities for templex.
"""
from .retry import (
    linear_backoff,
    retry_async,
    retry_if_text_contains,
)

__all__ = [
    "linear_backoff",
    "retry_async",
    "retry_if_text_contains",
]
