"""
Retry configuration and mode definitions.
"""

from dataclasses import dataclass
from enum import Enum


class RetryMode(str, Enum):
    """Available retry modes."""

    DISABLED = "disabled"  # never retry
    BOUNDED = "bounded"  # retry up to max_retries times


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        mode: Whether retries are disabled or bounded (default: bounded)
        max_retries: Maximum number of retry attempts (default: 3)
        near_limit_threshold: Warn when the remaining rate-limit quota drops
            below this fraction of the limit; None disables the warning
            (default: 0.1)
    """

    mode: RetryMode = RetryMode.BOUNDED
    max_retries: int = 3
    near_limit_threshold: float | None = 0.1

    @property
    def retries_enabled(self) -> bool:
        """True unless the mode is disabled."""
        return self.mode != RetryMode.DISABLED

    @classmethod
    def bounded(cls, max_retries: int) -> "RetryConfig":
        """Preset for a fixed number of retry attempts."""
        return cls(mode=RetryMode.BOUNDED, max_retries=max_retries)

    @classmethod
    def no_retry(cls) -> "RetryConfig":
        """Preset for no retry (single attempt only, no request cloning)."""
        return cls(mode=RetryMode.DISABLED, max_retries=0)
