"""Failed-login rate limiter interfaces.

The authentication service should depend on this abstraction (not the
concrete implementation) so the in-memory store can be swapped for a shared
one (e.g., Redis) without touching the login flow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitConfig:
    """Failed-attempt policy.

    Attributes:
        max_attempts: Failures within the window that trigger a block.
        window_seconds: Idle time after the last failure before the counter resets.
        block_duration_seconds: How long an origin is refused once blocked.
    """

    max_attempts: int = 5
    window_seconds: float = 15 * 60
    block_duration_seconds: float = 30 * 60

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if self.block_duration_seconds <= 0:
            raise ValueError("block_duration_seconds must be > 0")


DEFAULT_RATE_LIMIT_CONFIG = RateLimitConfig()


@dataclass
class RateLimitEntry:
    """Failure state tracked for a single origin.

    Attributes:
        attempts: Failures counted in the current window (never 0 while stored).
        last_attempt_at: UNIX time of the last recorded failure.
        blocked_until: UNIX time the current block ends, if one was set.
    """

    attempts: int
    last_attempt_at: float
    blocked_until: float | None = None


class AbstractFailureRateLimiter(ABC):
    """Interface for failure-counting rate limiters keyed by origin.

    Every operation accepts an optional ``config`` overriding the limiter's
    default policy for that call.
    """

    @abstractmethod
    def is_blocked(self, identifier: str, config: RateLimitConfig | None = None) -> bool:
        """Return whether the origin is currently refused. Never mutates state."""
        raise NotImplementedError

    @abstractmethod
    def record_failure(self, identifier: str, config: RateLimitConfig | None = None) -> RateLimitEntry:
        """Count a failed attempt, blocking the origin once the limit is reached.

        Returns:
            Snapshot of the entry after the update.
        """
        raise NotImplementedError

    @abstractmethod
    def record_success(self, identifier: str) -> None:
        """Forget every recorded failure for the origin."""
        raise NotImplementedError

    @abstractmethod
    def time_until_unblocked(self, identifier: str) -> float:
        """Seconds until the active block ends, or 0 when not blocked."""
        raise NotImplementedError

    @abstractmethod
    def cleanup(self, config: RateLimitConfig | None = None) -> int:
        """Evict idle entries whose block (if any) has expired.

        Returns:
            Number of evicted entries.
        """
        raise NotImplementedError

    @abstractmethod
    def get_entry(self, identifier: str) -> RateLimitEntry | None:
        """Return a copy of the stored entry for monitoring, or None."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop all entries."""
        raise NotImplementedError
