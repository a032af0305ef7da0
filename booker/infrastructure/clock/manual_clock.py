from __future__ import annotations

import asyncio
import heapq
import itertools
from datetime import datetime, timedelta
from typing import Callable

from booker.application.ports.clock import ClockPort, TimerHandle

# Loop iterations granted to woken tasks after each timer fires
_SETTLE_ROUNDS = 50


class _ManualTimer(TimerHandle):
    def __init__(
        self,
        clock: ManualClock,
        due: datetime,
        callback: Callable[[], None],
        interval: float | None = None,
    ) -> None:
        self._clock = clock
        self.due = due
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock(ClockPort):
    """
    Virtual clock for simulations and tests. Time only moves when advance() or
    suspend() is called; due callbacks run in deadline order.
    """

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            raise ValueError("ManualClock needs a timezone-aware start time")
        self._now = start
        self._queue: list[tuple[datetime, int, _ManualTimer]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _ManualTimer(self, self._now + timedelta(seconds=max(delay, 0.0)), callback)
        self._push(timer)
        return timer

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = _ManualTimer(self, self._now + timedelta(seconds=interval), callback, interval)
        self._push(timer)
        return timer

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()

        def wake() -> None:
            if not future.done():
                future.set_result(None)

        timer = self.call_later(seconds, wake)
        try:
            await future
        finally:
            timer.cancel()

    async def advance(self, seconds: float) -> None:
        await self.advance_to(self._now + timedelta(seconds=seconds))

    async def advance_to(self, target: datetime) -> None:
        await _settle()
        while True:
            timer = self._pop_due(target)
            if timer is None:
                break
            if timer.due > self._now:
                self._now = timer.due
            if timer.interval is not None:
                timer.due = timer.due + timedelta(seconds=timer.interval)
                self._push(timer)
            timer.callback()
            await _settle()
        if target > self._now:
            self._now = target

    def suspend(self, seconds: float) -> None:
        """
        Simulate the host sleeping: wall time jumps ahead and every pending
        timer slips by the same amount, as loop timers do on a monotonic clock.
        """
        shift = timedelta(seconds=seconds)
        self._now += shift
        timers = [timer for _, _, timer in self._queue if not timer.cancelled]
        self._queue = []
        for timer in timers:
            timer.due = timer.due + shift
            self._push(timer)

    def _push(self, timer: _ManualTimer) -> None:
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))

    def _pop_due(self, target: datetime) -> _ManualTimer | None:
        while self._queue:
            due, _, timer = self._queue[0]
            if timer.cancelled:
                heapq.heappop(self._queue)
                continue
            if due > target:
                return None
            heapq.heappop(self._queue)
            return timer
        return None


async def _settle() -> None:
    for _ in range(_SETTLE_ROUNDS):
        # Only the caller is left; nothing else can make progress.
        if len(asyncio.all_tasks()) <= 1:
            return
        await asyncio.sleep(0)
