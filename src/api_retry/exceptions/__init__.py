"""
API Retry - Exception Hierarchy.

Custom exceptions for retrying HTTP clients with retry-awareness.
"""

from .base import (
    RetryClientError,
    BodyNotReplayableError,
    InvariantViolationError,
    NegativeWaitError,
    RequestCloneError,
)

__all__ = [
    "RetryClientError",
    "BodyNotReplayableError",
    "InvariantViolationError",
    "NegativeWaitError",
    "RequestCloneError",
]
