"""
Rate-limit metadata parsed from API response headers.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx

LIMIT_HEADER = "x-ratelimit-limit"
REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"
USED_HEADER = "x-ratelimit-used"

_U32_MAX = 2**32 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(now: datetime | None) -> datetime:
    """Resolve an optional clock reading; naive values are taken as UTC."""
    if now is None:
        return _utcnow()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _parse_unsigned(value: str | None) -> int | None:
    """Parse a 32-bit unsigned decimal, or return None."""
    if value is None:
        return None
    digits = value[1:] if value.startswith("+") else value
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    number = int(digits)
    return number if number <= _U32_MAX else None


def _parse_timestamp(value: str | None) -> int | None:
    """Parse a 64-bit signed Unix timestamp in seconds, or return None."""
    if value is None:
        return None
    digits = value[1:] if value.startswith(("+", "-")) else value
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    number = int(value)
    return number if _I64_MIN <= number <= _I64_MAX else None


def _timestamp_to_datetime(timestamp: int) -> datetime:
    # Out-of-range timestamps clamp to now
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return _utcnow()


@dataclass(frozen=True)
class RateLimitSnapshot:
    """
    Rate-limit state reported by a single response.

    Attributes:
        limit: Maximum number of requests allowed in the window
        remaining: Number of requests left in the current window
        reset_time: UTC time when the current window resets
        used: Number of requests used in the current window (default: 0)
    """

    limit: int
    remaining: int
    reset_time: datetime
    used: int = 0

    @classmethod
    def parse(cls, headers: Mapping[str, str]) -> "RateLimitSnapshot | None":
        """
        Build a snapshot from response headers.

        Header names are matched case-insensitively. The limit, remaining
        and reset headers are required; used defaults to 0.

        Args:
            headers: Response headers (httpx.Headers or any str mapping)

        Returns:
            The snapshot, or None if a required header is missing or invalid
        """
        if not isinstance(headers, httpx.Headers):
            headers = httpx.Headers(headers)

        limit = _parse_unsigned(headers.get(LIMIT_HEADER))
        if limit is None:
            return None

        remaining = _parse_unsigned(headers.get(REMAINING_HEADER))
        if remaining is None:
            return None

        reset = _parse_timestamp(headers.get(RESET_HEADER))
        if reset is None:
            return None

        used = _parse_unsigned(headers.get(USED_HEADER))

        return cls(
            limit=limit,
            remaining=remaining,
            reset_time=_timestamp_to_datetime(reset),
            used=used if used is not None else 0,
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RateLimitSnapshot | None":
        """Build a snapshot from a response's headers."""
        return cls.parse(response.headers)

    def time_until_reset(self, now: datetime | None = None) -> timedelta:
        """Time left until the window resets, never negative."""
        now = as_utc(now)
        if self.reset_time > now:
            return self.reset_time - now
        return timedelta(0)

    def is_rate_limited(self, now: datetime | None = None) -> bool:
        """Check if the quota is spent and the window has not reset yet."""
        return self.remaining == 0 and self.time_until_reset(now) > timedelta(0)

    def is_near_limit(self, threshold: float) -> bool:
        """
        Check if the remaining quota is below a fraction of the limit.

        Args:
            threshold: Fraction of the limit, between 0 and 1

        Returns:
            True if remaining / limit < threshold; False when limit is 0
        """
        if self.limit == 0:
            return False
        return (self.remaining / self.limit) < threshold
