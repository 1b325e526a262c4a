"""In-memory sliding-window failure limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Staleness uses a strict comparison: a window is over once more than
  ``window_seconds`` have passed since the last failure. A block is active
  while ``now < blocked_until``.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import Callable

from authgate.adapters.rate_limit.base import (
    DEFAULT_RATE_LIMIT_CONFIG,
    AbstractFailureRateLimiter,
    RateLimitConfig,
    RateLimitEntry,
)

logger = logging.getLogger(__name__)


class InMemorySlidingWindowRateLimiter(AbstractFailureRateLimiter):
    """Count failed attempts per origin and block origins that exceed the budget.

    The window slides with the last failure: a failure arriving after more
    than ``window_seconds`` of quiet starts a fresh count instead of adding
    to the old one.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory limiter.

        Args:
            config: Default policy applied when a call passes no override.
            clock: Time source function returning UNIX time in seconds.
        """
        self._config = config or DEFAULT_RATE_LIMIT_CONFIG
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, RateLimitEntry] = {}

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _resolve(self, config: RateLimitConfig | None) -> RateLimitConfig:
        return config or self._config

    @staticmethod
    def _validate_identifier(identifier: str) -> None:
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

    @staticmethod
    def _is_stale(entry: RateLimitEntry, now: float, config: RateLimitConfig) -> bool:
        return now - entry.last_attempt_at > config.window_seconds

    @staticmethod
    def _block_active(entry: RateLimitEntry, now: float) -> bool:
        return entry.blocked_until is not None and now < entry.blocked_until

    def is_blocked(self, identifier: str, config: RateLimitConfig | None = None) -> bool:
        """Return whether the origin is currently refused.

        Stale entries are reported as not blocked but left in place; the next
        failure or cleanup pass deals with them.
        """
        self._validate_identifier(identifier)
        cfg = self._resolve(config)
        now = self._clock()

        with self._lock:
            entry = self._entries.get(identifier)
            if entry is None:
                return False
            if self._block_active(entry, now):
                return True
            if self._is_stale(entry, now, cfg):
                return False
            if entry.blocked_until is not None:
                # Block served but not yet cleared by a write; counting
                # resumes from where it stopped.
                return False
            return entry.attempts >= cfg.max_attempts

    def record_failure(self, identifier: str, config: RateLimitConfig | None = None) -> RateLimitEntry:
        """Record one failed attempt for the origin.

        Args:
            identifier: Origin key (e.g., client IP address).
            config: Optional policy override.

        Returns:
            Snapshot of the entry after the update.

        Raises:
            ValueError: If identifier is empty.
        """
        self._validate_identifier(identifier)
        cfg = self._resolve(config)
        now = self._clock()

        with self._lock:
            entry = self._entries.get(identifier)
            if entry is None:
                entry = RateLimitEntry(attempts=0, last_attempt_at=now)
            elif self._is_stale(entry, now, cfg):
                entry.attempts = 0
                entry.blocked_until = None
            elif not self._block_active(entry, now):
                # Served block; the count carries over and re-blocks below.
                entry.blocked_until = None

            entry.attempts += 1
            entry.last_attempt_at = now

            if entry.attempts >= cfg.max_attempts:
                entry.blocked_until = now + cfg.block_duration_seconds

            self._entries[identifier] = entry
            snapshot = replace(entry)

        if snapshot.attempts >= cfg.max_attempts:
            logger.warning(
                "rate_limit.blocked",
                extra={
                    "attempts": snapshot.attempts,
                    "max_attempts": cfg.max_attempts,
                    "block_s": cfg.block_duration_seconds,
                },
            )
        else:
            logger.debug(
                "rate_limit.failure_recorded",
                extra={"attempts": snapshot.attempts, "max_attempts": cfg.max_attempts},
            )
        return snapshot

    def record_success(self, identifier: str) -> None:
        self._validate_identifier(identifier)
        with self._lock:
            self._entries.pop(identifier, None)

    def time_until_unblocked(self, identifier: str) -> float:
        self._validate_identifier(identifier)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(identifier)
            if entry is None or entry.blocked_until is None:
                return 0.0
            return max(0.0, entry.blocked_until - now)

    def cleanup(self, config: RateLimitConfig | None = None) -> int:
        """Evict entries that are idle past the window and not blocked.

        One pass over the store under the lock; concurrent writers wait at
        most for that pass.
        """
        cfg = self._resolve(config)
        now = self._clock()

        with self._lock:
            expired = [
                key
                for key, entry in self._entries.items()
                if not self._block_active(entry, now) and self._is_stale(entry, now, cfg)
            ]
            for key in expired:
                del self._entries[key]
            remaining = len(self._entries)

        if expired:
            logger.info(
                "rate_limit.cleanup",
                extra={"evicted": len(expired), "remaining": remaining},
            )
        return len(expired)

    def get_entry(self, identifier: str) -> RateLimitEntry | None:
        with self._lock:
            entry = self._entries.get(identifier)
            return replace(entry) if entry is not None else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
