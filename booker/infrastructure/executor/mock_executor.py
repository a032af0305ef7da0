from __future__ import annotations

import logging

from booker.application.exceptions import ConfirmNotAvailable, TargetNotOpenable
from booker.application.ports.action_executor import ActionExecutorPort
from booker.domain.entities.item import AvailableItem, SubOption


class MockActionExecutor(ActionExecutorPort):
    """Dry-run executor: logs and records each step instead of touching a page."""

    def __init__(
        self,
        openable: bool = True,
        available_options: set[SubOption] | None = None,
        confirmable: bool = True,
    ) -> None:
        self.openable = openable
        self.available_options = available_options  # None matches any option
        self.confirmable = confirmable
        self.calls: list[tuple[str, object]] = []
        self._opened: AvailableItem | None = None
        self._logger = logging.getLogger(__name__)

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    async def open(self, item: AvailableItem) -> None:
        self.calls.append(("open", item.ref))
        if not self.openable:
            raise TargetNotOpenable(f"Reserve button for {item.ref} not found")
        self._opened = item
        self._logger.info("Mock booking dialog opened", extra={"item": item.ref})

    async def select_option(self, sub_option: SubOption) -> bool:
        self.calls.append(("select_option", sub_option))
        if self._opened is None:
            return False
        matched = self.available_options is None or sub_option in self.available_options
        self._logger.info(
            "Mock field selection",
            extra={"sub_option": sub_option.label, "reason": "matched" if matched else "no match"},
        )
        return matched

    async def confirm(self) -> None:
        self.calls.append(("confirm", None))
        if not self.confirmable or self._opened is None:
            raise ConfirmNotAvailable("Book button not found")
        self._logger.info("Mock booking confirmed", extra={"item": self._opened.ref})
