from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Schedule:
    preparation_deadline: datetime | None = None
    commit_deadline: datetime | None = None
    can_act_immediately: bool = False

    @property
    def has_deadlines(self) -> bool:
        return (
            not self.can_act_immediately
            and self.preparation_deadline is not None
            and self.commit_deadline is not None
        )


IMMEDIATE = Schedule(can_act_immediately=True)
