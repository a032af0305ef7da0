from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from booker.application.ports.item_source import ItemSourcePort
from booker.application.utils.date_parser import parse_day_selector
from booker.domain.entities.item import AvailableItem


class JsonItemSource(ItemSourcePort):
    """
    Reads bookable slots from a JSON snapshot of the schedule page:

        {"day": {"date": "2025-11-06", "label": "Do 6-11"},
         "items": [{"ref": "slot-1", "label": "Beachvolley Outdoor", "start_time": "18:00"}]}

    The file is re-read on every call so an external scraper can rewrite it.
    """

    def __init__(self, path: str, timezone: ZoneInfo) -> None:
        self._path = Path(path)
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def list_available_items(self) -> list[AvailableItem]:
        data = self._load()
        day = data.get("day")
        if not isinstance(day, dict):
            day = {}
        reference_year = datetime.now(self._timezone).year
        day_date = parse_day_selector(_text(day.get("date")), _text(day.get("label")), reference_year)

        items: list[AvailableItem] = []
        raw_items = data.get("items")
        if not isinstance(raw_items, list):
            raw_items = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                self._logger.info("Skipping malformed slot entry", extra={"reason": repr(raw)})
                continue
            ref = raw.get("ref")
            label = str(raw.get("label") or "").strip()
            start_time = str(raw.get("start_time") or "").strip()
            if not (ref and label and start_time):
                self._logger.info("Skipping incomplete slot", extra={"item": ref})
                continue
            target_date = parse_day_selector(_text(raw.get("date")), None, reference_year) or day_date
            items.append(
                AvailableItem(ref=str(ref), label=label, start_time=start_time, target_date=target_date)
            )
        return items

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            self._logger.warning("Items file missing", extra={"reason": str(self._path)})
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.error("Items file unreadable", extra={"reason": str(e)})
            return {}
        return data if isinstance(data, dict) else {}


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None
