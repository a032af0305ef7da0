from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class Category(str, Enum):
    indoor = "indoor"
    outdoor = "outdoor"


def infer_category(label: str) -> Category:
    """Derive the slot category from its label text."""
    # TODO: take the category from the item source once it exposes one; label matching is fragile.
    if "indoor" in label.lower():
        return Category.indoor
    return Category.outdoor


@dataclass(frozen=True)
class AvailableItem:
    ref: str  # handle the executor uses to open this slot
    label: str
    start_time: str  # as displayed, e.g. "18:00"
    target_date: date | None = None

    @property
    def category(self) -> Category:
        return infer_category(self.label)


@dataclass(frozen=True)
class SubOption:
    category: Category
    number: int

    @property
    def label(self) -> str:
        return f"Field {self.number}"
