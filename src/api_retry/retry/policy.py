"""
Per-request retry decisions driven by status codes and rate-limit headers.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Generator

import httpx

from .config import RetryConfig, RetryMode
from .outcome import AttemptOutcome, IMMEDIATE_RETRY_OUTCOMES
from .ratelimit import RateLimitSnapshot, as_utc
from ..exceptions import NegativeWaitError, RequestCloneError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryAfter:
    """
    A pending wait before the next attempt.

    Awaiting the instance suspends the calling task for `delay` seconds.
    Nothing is scheduled until it is awaited, so dropping or cancelling it
    has no side effects.
    """

    delay: float

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise NegativeWaitError(delay=self.delay)

    def __await__(self) -> Generator[None, None, None]:
        return asyncio.sleep(self.delay).__await__()

    @property
    def is_immediate(self) -> bool:
        return self.delay == 0


class RetryPolicy:
    """
    Retry state for one logical request.

    A bounded policy spends one attempt on every evaluated result, whatever
    the decision; once no attempts remain it never retries again. A disabled
    policy never retries and never clones requests.

    Instances must not be shared between requests.
    """

    def __init__(self, mode: RetryMode = RetryMode.BOUNDED, max_retries: int = 0):
        """
        Initialize the policy.

        Args:
            mode: Disabled or bounded
            max_retries: Number of retries allowed in bounded mode
        """
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self._mode = mode
        self._remaining = max_retries if mode == RetryMode.BOUNDED else 0

    @classmethod
    def disabled(cls) -> "RetryPolicy":
        return cls(RetryMode.DISABLED)

    @classmethod
    def bounded(cls, max_retries: int) -> "RetryPolicy":
        return cls(RetryMode.BOUNDED, max_retries)

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        """Create a fresh policy for one request from shared configuration."""
        return cls(config.mode, config.max_retries if config.retries_enabled else 0)

    @property
    def mode(self) -> RetryMode:
        return self._mode

    @property
    def remaining(self) -> int | None:
        """Attempts left, or None when retries are disabled."""
        if self._mode == RetryMode.DISABLED:
            return None
        return self._remaining

    @property
    def is_exhausted(self) -> bool:
        return self._mode == RetryMode.DISABLED or self._remaining == 0

    def decide(
        self,
        result: httpx.Response | BaseException,
        *,
        now: datetime | None = None,
    ) -> RetryAfter | None:
        """
        Decide whether to retry after an attempt.

        Never raises for any attempt result: missing or unparseable
        rate-limit evidence means no retry.

        Args:
            result: The response received, or the error raised instead
            now: Current time, naive values taken as UTC
                (default: the system clock)

        Returns:
            The wait to await before resending, or None to stop
        """
        if self.is_exhausted:
            return None
        self._remaining -= 1
        return self._retry_after(result, as_utc(now))

    def would_retry(
        self,
        result: httpx.Response | BaseException,
        *,
        now: datetime | None = None,
    ) -> bool:
        """
        Check whether a result is retryable in itself.

        Ignores the attempts left and does not spend one.
        """
        return self._retry_after(result, as_utc(now)) is not None

    def _retry_after(
        self, result: httpx.Response | BaseException, now: datetime
    ) -> RetryAfter | None:
        outcome = AttemptOutcome.classify(result)
        if outcome in IMMEDIATE_RETRY_OUTCOMES:
            logger.debug(f"Retrying immediately after {outcome.value}")
            return RetryAfter(0.0)
        if outcome == AttemptOutcome.THROTTLED:
            return self._retry_after_throttled(result, now)
        return None

    def _retry_after_throttled(
        self, response: httpx.Response, now: datetime
    ) -> RetryAfter | None:
        snapshot = RateLimitSnapshot.from_response(response)
        if snapshot is None:
            logger.debug(
                f"Status {response.status_code} without rate-limit headers, not retrying"
            )
            return None
        if not snapshot.is_rate_limited(now):
            logger.debug(
                f"Status {response.status_code} but quota not exhausted "
                f"({snapshot.remaining}/{snapshot.limit} left), not retrying"
            )
            return None

        delay = snapshot.time_until_reset(now).total_seconds()
        logger.debug(f"Rate limited until {snapshot.reset_time.isoformat()}, waiting {delay:.1f}s")
        return RetryAfter(delay)

    def clone_request(self, original: httpx.Request) -> httpx.Request | None:
        """
        Build a resend-ready copy of a request.

        The copy has the same method, URL, headers (including duplicates),
        extensions and buffered body. httpx negotiates the protocol version
        per connection, so there is no version to copy.

        Args:
            original: A request whose body has been read

        Returns:
            The copy, or None when retries are disabled

        Raises:
            RequestCloneError: If the copy cannot be assembled
        """
        if self._mode == RetryMode.DISABLED:
            return None
        try:
            return httpx.Request(
                original.method,
                original.url,
                headers=original.headers.raw,
                content=original.content,
                extensions=dict(original.extensions),
            )
        except Exception as e:
            raise RequestCloneError(
                f"Failed to clone {original.method} {original.url}"
            ) from e

    def __repr__(self) -> str:
        if self._mode == RetryMode.DISABLED:
            return "RetryPolicy(disabled)"
        return f"RetryPolicy(remaining={self._remaining})"
