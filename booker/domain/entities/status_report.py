from __future__ import annotations

from dataclasses import dataclass

from booker.domain.entities.booking_state import BookingPhase
from booker.domain.entities.effect import ManualTriggerOffer


@dataclass(frozen=True)
class StatusReport:
    phase: BookingPhase
    message: str
    offer: ManualTriggerOffer = ManualTriggerOffer.none
    reported_at: float | None = None
