from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from booker.domain.entities.schedule import Schedule
from booker.domain.entities.selection import Selection


class BookingEventKind(str, Enum):
    selection_changed = "selection_changed"
    selection_cleared = "selection_cleared"
    preparation_due = "preparation_due"
    preparation_succeeded = "preparation_succeeded"
    preparation_failed = "preparation_failed"
    commit_due = "commit_due"
    commit_succeeded = "commit_succeeded"
    commit_failed = "commit_failed"
    manual_trigger = "manual_trigger"


@dataclass(frozen=True)
class BookingEvent:
    kind: BookingEventKind
    selection: Selection | None = None
    schedule: Schedule | None = None
    reason: str | None = None
    recovered: bool = False  # fired by reconciliation after a missed deadline
