from abc import ABC, abstractmethod

from booker.domain.entities.item import AvailableItem


class ItemSourcePort(ABC):
    @abstractmethod
    def list_available_items(self) -> list[AvailableItem]:
        raise NotImplementedError
