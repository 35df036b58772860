"""
API Retry - Retry Logic.

Per-request retry policy that waits out rate-limit windows reported by the server.
"""

from .config import RetryConfig, RetryMode
from .outcome import AttemptOutcome
from .ratelimit import RateLimitSnapshot
from .policy import RetryAfter, RetryPolicy

__all__ = [
    "RetryConfig",
    "RetryMode",
    "AttemptOutcome",
    "RateLimitSnapshot",
    "RetryAfter",
    "RetryPolicy",
]
