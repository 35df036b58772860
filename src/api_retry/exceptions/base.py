"""
Base exception classes for retrying HTTP client operations.

None of these are retry outcomes: retryable failures surface as the
transport's own httpx errors or as the final response.
"""


class RetryClientError(Exception):
    """Base exception for all retry client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BodyNotReplayableError(RetryClientError):
    """
    Raised when a request that may be retried carries a streaming body.

    Streams are single-consumption, so the request must be built with
    buffered content (bytes, str, json, form data) to be re-sent.
    """

    def __init__(self, message: str = "Request body cannot be replayed"):
        super().__init__(message)


class InvariantViolationError(RetryClientError):
    """Raised when an internal invariant is broken; indicates a bug."""

    def __init__(self, message: str = "Internal invariant violated"):
        super().__init__(message)


class NegativeWaitError(InvariantViolationError):
    """Raised when a retry wait computes to a negative duration."""

    def __init__(
        self,
        message: str = "Negative duration is invalid",
        delay: float | None = None,
    ):
        super().__init__(message)
        self.delay = delay


class RequestCloneError(InvariantViolationError):
    """Raised when a resend-ready copy cannot be built from a valid request."""

    def __init__(self, message: str = "Failed to clone request"):
        super().__init__(message)
