"""
Classification of a single request attempt.
"""

from enum import Enum

import httpx


class AttemptOutcome(str, Enum):
    """What happened on one attempt."""

    TRANSPORT_ERROR = "transport_error"  # no response received
    SERVER_ERROR = "server_error"  # 5xx
    THROTTLED = "throttled"  # 429 or 403
    OTHER = "other"

    @classmethod
    def classify(cls, result: httpx.Response | BaseException) -> "AttemptOutcome":
        """Map an attempt result (response or raised error) to an outcome."""
        if isinstance(result, BaseException):
            return cls.TRANSPORT_ERROR
        if result.is_server_error:
            return cls.SERVER_ERROR
        if result.status_code in THROTTLING_STATUS_CODES:
            return cls.THROTTLED
        return cls.OTHER


THROTTLING_STATUS_CODES = frozenset(
    {httpx.codes.TOO_MANY_REQUESTS, httpx.codes.FORBIDDEN}
)

# Outcomes retried without waiting
IMMEDIATE_RETRY_OUTCOMES = frozenset(
    {AttemptOutcome.TRANSPORT_ERROR, AttemptOutcome.SERVER_ERROR}
)
