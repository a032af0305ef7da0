from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Cancel the pending callback. Safe to call more than once."""
        raise NotImplementedError


class ClockPort(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current wall-clock time, timezone-aware."""
        raise NotImplementedError

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds."""
        raise NotImplementedError

    @abstractmethod
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every interval seconds until cancelled."""
        raise NotImplementedError

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        raise NotImplementedError
