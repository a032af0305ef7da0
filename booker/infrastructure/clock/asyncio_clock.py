from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from booker.application.ports.clock import ClockPort, TimerHandle


class _LoopTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class _PeriodicLoopTimer(TimerHandle):
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval, self._run)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()


class AsyncioClock(ClockPort):
    """
    Wall clock backed by the running event loop.

    Loop timers run on the monotonic clock, which stops while the host is
    suspended; callers must not assume a call_later fires at the wall-clock
    instant it was computed for.
    """

    def __init__(self, timezone: ZoneInfo) -> None:
        self._timezone = timezone

    def now(self) -> datetime:
        return datetime.now(self._timezone)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return _LoopTimer(loop.call_later(max(delay, 0.0), callback))

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        return _PeriodicLoopTimer(asyncio.get_running_loop(), interval, callback)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
