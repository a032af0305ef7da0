from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from booker.domain.entities.item import AvailableItem, Category, SubOption


@dataclass(frozen=True)
class Selection:
    item: AvailableItem
    sub_option: SubOption | None = None

    @property
    def label(self) -> str:
        return self.item.label

    @property
    def category(self) -> Category:
        return self.item.category

    @property
    def target_date(self) -> date | None:
        return self.item.target_date
