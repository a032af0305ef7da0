from __future__ import annotations

from abc import ABC, abstractmethod

from booker.domain.entities.item import AvailableItem, SubOption


class ActionExecutorPort(ABC):
    @abstractmethod
    async def open(self, item: AvailableItem) -> None:
        """Open the booking dialog for item. Raises TargetNotOpenable."""
        raise NotImplementedError

    @abstractmethod
    async def select_option(self, sub_option: SubOption) -> bool:
        """Pick sub_option in the dialog dropdown. Returns False if no option matched in time."""
        raise NotImplementedError

    @abstractmethod
    async def confirm(self) -> None:
        """Press the dialog's book button. Raises ConfirmNotAvailable."""
        raise NotImplementedError
