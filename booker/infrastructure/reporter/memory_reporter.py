from __future__ import annotations

import logging
import time

from booker.application.ports.status_reporter import StatusReporterPort
from booker.domain.entities.booking_state import BookingPhase
from booker.domain.entities.effect import ManualTriggerOffer
from booker.domain.entities.status_report import StatusReport


class MemoryStatusReporter(StatusReporterPort):
    def __init__(self, history_limit: int = 50) -> None:
        self._history: list[StatusReport] = []
        self._history_limit = history_limit
        self._logger = logging.getLogger(__name__)

    def report(self, phase: BookingPhase, message: str, offer: ManualTriggerOffer) -> None:
        entry = StatusReport(phase=phase, message=message, offer=offer, reported_at=time.time())
        previous = self._history[-1] if self._history else None
        self._history.append(entry)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        # Countdown ticks repeat every second; only log when the phase moves.
        if previous is None or previous.phase != phase:
            self._logger.info(message, extra={"phase": phase.value})

    @property
    def latest(self) -> StatusReport | None:
        return self._history[-1] if self._history else None

    def history(self, limit: int | None = None) -> list[StatusReport]:
        if limit is None:
            return list(self._history)
        return self._history[-limit:] if limit > 0 else []

    def messages(self) -> list[str]:
        return [entry.message for entry in self._history]


class FanOutStatusReporter(StatusReporterPort):
    def __init__(self, reporters: list[StatusReporterPort]) -> None:
        self._reporters = list(reporters)
        self._logger = logging.getLogger(__name__)

    def report(self, phase: BookingPhase, message: str, offer: ManualTriggerOffer) -> None:
        for reporter in self._reporters:
            try:
                reporter.report(phase, message, offer)
            except Exception:
                self._logger.exception("Status reporter failed", extra={"phase": phase.value})
