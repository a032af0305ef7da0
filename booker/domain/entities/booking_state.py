from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from booker.domain.entities.schedule import Schedule
from booker.domain.entities.selection import Selection


class BookingPhase(str, Enum):
    idle = "idle"
    awaiting_window = "awaiting_window"
    immediately_actionable = "immediately_actionable"
    preparing = "preparing"
    preparation_ready = "preparation_ready"
    committing = "committing"
    succeeded = "succeeded"
    failed = "failed"


IN_FLIGHT_PHASES = frozenset({BookingPhase.preparing, BookingPhase.committing})


@dataclass(frozen=True)
class BookingState:
    phase: BookingPhase = BookingPhase.idle
    selection: Selection | None = None
    schedule: Schedule | None = None
    manual: bool = False  # current cycle was started by the manual trigger
    error: str | None = None

    @property
    def in_flight(self) -> bool:
        return self.phase in IN_FLIGHT_PHASES
