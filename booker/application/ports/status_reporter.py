from abc import ABC, abstractmethod

from booker.domain.entities.booking_state import BookingPhase
from booker.domain.entities.effect import ManualTriggerOffer


class StatusReporterPort(ABC):
    @abstractmethod
    def report(self, phase: BookingPhase, message: str, offer: ManualTriggerOffer) -> None:
        """Publish a status line. Must return promptly."""
        raise NotImplementedError
