"""
Tests for the operator's slot and field selection.
"""

from __future__ import annotations

from datetime import date

import pytest

from booker.application.exceptions import InvalidSubOption, UnknownItem
from booker.application.use_cases.selection import SelectionStore
from booker.domain.entities.item import AvailableItem, Category, SubOption
from booker.infrastructure.items.memory_item_source import MemoryItemSource

OUTDOOR = AvailableItem(ref="slot-1", label="Beachvolley Outdoor", start_time="18:00", target_date=date(2025, 11, 6))
INDOOR = AvailableItem(ref="slot-2", label="Beachvolley Indoor", start_time="20:00", target_date=date(2025, 11, 6))


def _store() -> tuple[SelectionStore, list]:
    store = SelectionStore()
    published: list = []
    store.subscribe(published.append)
    store.set_available_items([OUTDOOR, INDOOR])
    return store, published


def test_category_is_inferred_from_label():
    assert OUTDOOR.category == Category.outdoor
    assert INDOOR.category == Category.indoor
    assert AvailableItem(ref="x", label="Padel", start_time="10:00").category == Category.outdoor


def test_selecting_item_publishes_selection_without_field():
    store, published = _store()
    selection = store.select_item("slot-1")

    assert selection.item == OUTDOOR
    assert selection.sub_option is None
    assert published == [selection]
    assert store.current == selection


def test_field_choice_is_kept_per_category():
    """Switching between indoor and outdoor slots restores each category's field."""
    store, published = _store()
    store.select_sub_option(Category.outdoor, 4)
    store.select_sub_option(Category.indoor, 1)
    assert published == []

    outdoor = store.select_item("slot-1")
    assert outdoor.sub_option == SubOption(Category.outdoor, 4)

    indoor = store.select_item("slot-2")
    assert indoor.sub_option == SubOption(Category.indoor, 1)
    assert indoor.label == "Beachvolley Indoor"
    assert len(published) == 2


def test_changing_field_republishes():
    store, published = _store()
    store.select_item("slot-1")
    selection = store.select_sub_option(Category.outdoor, 2)

    assert selection.sub_option.label == "Field 2"
    assert published[-1] == selection
    assert store.chosen_field(Category.outdoor) == 2


def test_unknown_item_and_invalid_field_are_rejected():
    store, published = _store()
    with pytest.raises(UnknownItem):
        store.select_item("slot-9")
    with pytest.raises(InvalidSubOption):
        store.select_sub_option(Category.indoor, 4)
    assert published == []
    assert store.current is None


def test_clear_notifies_only_when_something_was_selected():
    store, published = _store()
    store.clear()
    assert published == []

    store.select_item("slot-1")
    store.clear()
    assert published[-1] is None
    assert store.current is None
    assert store.chosen_field(Category.outdoor) is None


def test_changed_slot_list_clears_selection():
    store, published = _store()
    store.select_item("slot-1")

    store.set_available_items([OUTDOOR, INDOOR])
    assert store.current is not None

    store.refresh(MemoryItemSource([INDOOR]))
    assert store.current is None
    assert published[-1] is None
    assert store.items == [INDOOR]


def test_custom_field_options():
    store = SelectionStore(field_options={Category.indoor: [1], Category.outdoor: [7]})
    store.select_sub_option(Category.outdoor, 7)
    assert store.field_options == {Category.indoor: [1], Category.outdoor: [7]}
    with pytest.raises(InvalidSubOption):
        store.select_sub_option(Category.outdoor, 1)


def test_unchanged_selection_is_not_republished():
    """A field pick for the other category, or the same field again, leaves the selection as is."""
    store, published = _store()
    store.select_sub_option(Category.outdoor, 2)
    selection = store.select_item("slot-1")

    assert store.select_sub_option(Category.indoor, 3) == selection
    assert store.select_sub_option(Category.outdoor, 2) == selection
    assert store.select_item("slot-1") == selection
    assert published == [selection]

    store.select_sub_option(Category.outdoor, 5)
    assert published[-1].sub_option == SubOption(Category.outdoor, 5)
    assert len(published) == 2
