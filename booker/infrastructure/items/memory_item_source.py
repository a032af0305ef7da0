from __future__ import annotations

from booker.application.ports.item_source import ItemSourcePort
from booker.domain.entities.item import AvailableItem


class MemoryItemSource(ItemSourcePort):
    def __init__(self, items: list[AvailableItem] | None = None) -> None:
        self._items = list(items or [])

    def set_items(self, items: list[AvailableItem]) -> None:
        self._items = list(items)

    def list_available_items(self) -> list[AvailableItem]:
        return list(self._items)
