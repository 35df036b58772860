"""
API Retry - Rate-limit aware retries for HTTP clients.

Decides whether a failed request should be re-sent and how long to wait,
using the x-ratelimit-* headers the server reports.
"""

from .clients import RetryTransport, retrying_client
from .exceptions import (
    RetryClientError,
    BodyNotReplayableError,
    InvariantViolationError,
    NegativeWaitError,
    RequestCloneError,
)
from .retry import (
    RetryConfig,
    RetryMode,
    AttemptOutcome,
    RateLimitSnapshot,
    RetryAfter,
    RetryPolicy,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Clients
    "RetryTransport",
    "retrying_client",
    # Exceptions
    "RetryClientError",
    "BodyNotReplayableError",
    "InvariantViolationError",
    "NegativeWaitError",
    "RequestCloneError",
    # Retry
    "RetryConfig",
    "RetryMode",
    "AttemptOutcome",
    "RateLimitSnapshot",
    "RetryAfter",
    "RetryPolicy",
]
