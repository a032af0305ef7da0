from __future__ import annotations

import logging
from typing import Callable

from booker.application.exceptions import InvalidSubOption, UnknownItem
from booker.application.ports.item_source import ItemSourcePort
from booker.domain.entities.item import AvailableItem, Category, SubOption
from booker.domain.entities.selection import Selection

SelectionListener = Callable[[Selection | None], None]

DEFAULT_FIELD_OPTIONS: dict[Category, list[int]] = {
    Category.indoor: [1, 2, 3],
    Category.outdoor: [1, 2, 3, 4, 5],
}


class SelectionStore:
    """
    Holds the operator's slot choice and per-category field choices.

    Every change publishes a fresh Selection (or None) to subscribers; the
    booking scheduler is one of them.
    """

    def __init__(self, field_options: dict[Category, list[int]] | None = None) -> None:
        self._field_options = field_options or DEFAULT_FIELD_OPTIONS
        self._items: list[AvailableItem] = []
        self._item: AvailableItem | None = None
        self._fields: dict[Category, int] = {}
        self._current: Selection | None = None
        self._listeners: list[SelectionListener] = []
        self._logger = logging.getLogger(__name__)

    @property
    def current(self) -> Selection | None:
        return self._current

    @property
    def items(self) -> list[AvailableItem]:
        return list(self._items)

    @property
    def field_options(self) -> dict[Category, list[int]]:
        return {category: list(numbers) for category, numbers in self._field_options.items()}

    def chosen_field(self, category: Category) -> int | None:
        return self._fields.get(category)

    def subscribe(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def refresh(self, source: ItemSourcePort) -> list[AvailableItem]:
        items = source.list_available_items()
        self.set_available_items(items)
        return items

    def set_available_items(self, items: list[AvailableItem]) -> None:
        """Replace the listed slots. A changed list invalidates the current selection."""
        changed = items != self._items
        self._items = list(items)
        if changed and self._item is not None:
            self._logger.info("Slot list changed, clearing selection", extra={"item": self._item.ref})
            self.clear()

    def select_item(self, ref: str) -> Selection:
        item = next((i for i in self._items if i.ref == ref), None)
        if item is None:
            raise UnknownItem(f"Slot {ref!r} is not listed")
        self._item = item
        return self._publish()

    def select_sub_option(self, category: Category, number: int) -> Selection | None:
        allowed = self._field_options.get(category, [])
        if number not in allowed:
            raise InvalidSubOption(f"{category.value} field {number} is not offered (choose from {allowed})")
        self._fields[category] = number
        if self._item is None:
            return None
        return self._publish()

    def clear(self) -> None:
        self._item = None
        self._fields = {}
        if self._current is not None:
            self._current = None
            self._notify(None)

    def _publish(self) -> Selection:
        item = self._item
        number = self._fields.get(item.category)
        sub_option = SubOption(item.category, number) if number is not None else None
        selection = Selection(item=item, sub_option=sub_option)
        if selection == self._current:
            return selection
        self._current = selection
        self._logger.info(
            "Selection changed",
            extra={"item": item.ref, "sub_option": sub_option.label if sub_option else None},
        )
        self._notify(selection)
        return selection

    def _notify(self, selection: Selection | None) -> None:
        for listener in self._listeners:
            listener(selection)
