"""Periodic eviction of idle rate limit entries.

Nothing runs at import time: the application lifespan starts the task on
startup and stops it on shutdown.
"""

from __future__ import annotations

import asyncio
import logging

from authgate.adapters.rate_limit.base import AbstractFailureRateLimiter, RateLimitConfig

logger = logging.getLogger(__name__)


class RateLimitCleanupTask:
    """Background asyncio task calling ``limiter.cleanup(config)`` on an interval."""

    def __init__(
        self,
        limiter: AbstractFailureRateLimiter,
        interval_seconds: float = 600.0,
        config: RateLimitConfig | None = None,
    ) -> None:
        """Create the task.

        Args:
            limiter: Limiter whose idle entries are evicted.
            interval_seconds: Delay between cleanup passes.
            config: Policy used to judge staleness; must match the one the
                login path passes to the limiter, or live entries get evicted.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._limiter = limiter
        self._interval = interval_seconds
        self._config = config
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background cleanup loop."""
        if self._task is not None:
            logger.debug("rate_limit.cleanup_task.already_running")
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())
        logger.info("rate_limit.cleanup_task.started", extra={"interval_s": self._interval})

    async def stop(self) -> None:
        """Stop the background cleanup loop."""
        if self._task is None:
            return

        self._stop_event.set()

        try:
            await asyncio.wait_for(self._task, timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning("rate_limit.cleanup_task.cancelled")
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        finally:
            self._task = None
            logger.info("rate_limit.cleanup_task.stopped")

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                # Interval elapsed
                pass
            else:
                break

            try:
                self._limiter.cleanup(self._config)
            except Exception as exc:
                logger.error(
                    "rate_limit.cleanup_task.pass_failed",
                    extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
                )
