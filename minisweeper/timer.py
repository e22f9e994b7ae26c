"""Game clock."""
import asyncio
import logging
import math
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SessionTimer:
    """Whole-second stopwatch bound to one session lifetime.

    Elapsed time is read from ``clock`` so that it stays exact regardless of
    how ticks are scheduled. When ``on_tick`` is given and an asyncio loop is
    running, a periodic task reports the elapsed seconds every ``interval``
    until the timer is stopped.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None,
                 on_tick: Optional[Callable[[int], None]] = None,
                 interval: float = 1.0):
        self._clock = clock or time.monotonic
        self._on_tick = on_tick
        self._interval = interval
        self._started_at: Optional[float] = None
        self._frozen: Optional[int] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._started_at is not None and self._frozen is None

    @property
    def stopped(self) -> bool:
        return self._frozen is not None

    @property
    def elapsed(self) -> int:
        if self._frozen is not None:
            return self._frozen
        if self._started_at is None:
            return 0
        return max(0, math.floor(self._clock() - self._started_at))

    def start(self) -> None:
        if self._started_at is not None:
            return
        self._started_at = self._clock()
        if self._on_tick is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, timer ticks disabled")
            return
        self._task = loop.create_task(self._tick_loop())

    def stop(self) -> bool:
        """Freeze the clock. Returns True only for the call that actually stopped it."""
        if self._started_at is None or self._frozen is not None:
            return False
        self._frozen = self.elapsed
        if self._task is not None:
            self._task.cancel()
            self._task = None
        return True

    async def _tick_loop(self) -> None:
        while self.running:
            await asyncio.sleep(self._interval)
            if not self.running:
                break
            self._on_tick(self.elapsed)
