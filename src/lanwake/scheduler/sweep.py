"""APScheduler-based periodic sweep timer for lanwake."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0


class SweepTimer:
    """
    Owns one periodic coroutine job on the running asyncio loop.

    Usage::

        timer = SweepTimer(adapter.sweep, interval=30)
        timer.start()      # inside a running event loop
        ...
        timer.stop()       # safe to call any number of times

    A fresh scheduler is created on every ``start`` and dropped on ``stop``,
    so a stopped timer never shuts the same scheduler down twice. Ticks are
    wall-clock driven; a slow tick may still be running when the next one
    starts.
    """

    def __init__(
        self,
        func: Callable[[], Awaitable[None]],
        interval: float = DEFAULT_INTERVAL,
        name: str = "sweep",
    ) -> None:
        """
        Args:
            func: Coroutine function run on every tick.
            interval: Seconds between ticks.
            name: Job id used in scheduler log lines.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._func = func
        self.interval = interval
        self.name = name
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._ticks: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    @property
    def pending_ticks(self) -> int:
        return len(self._ticks)

    async def _fire(self) -> None:
        """Launch one tick as its own task so scheduler shutdown cannot cancel it."""
        task = asyncio.ensure_future(self._func())
        self._ticks.add(task)
        task.add_done_callback(self._tick_done)

    def _tick_done(self, task: asyncio.Task) -> None:
        self._ticks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Sweep '%s' tick raised: %s", self.name, exc)

    def start(self) -> bool:
        """
        Start ticking; a no-op if already running.

        Must be called from inside a running event loop.

        Returns:
            True if the timer was started by this call
        """
        if self._scheduler is not None:
            return False
        scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop(), timezone="UTC")
        scheduler.add_job(
            func=self._fire,
            trigger=IntervalTrigger(seconds=self.interval),
            id=self.name,
            name=self.name,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Sweep '%s' started, every %g s", self.name, self.interval)
        return True

    def stop(self) -> bool:
        """
        Stop ticking; a no-op if not running. A tick already in progress is
        left to finish.

        Returns:
            True if the timer was stopped by this call
        """
        if self._scheduler is None:
            return False
        scheduler, self._scheduler = self._scheduler, None
        scheduler.shutdown(wait=False)
        logger.info("Sweep '%s' stopped", self.name)
        return True
