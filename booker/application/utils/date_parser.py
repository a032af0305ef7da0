from __future__ import annotations

import re
from datetime import date, datetime

DAY_MONTH_PATTERN = re.compile(r"\b(\d{1,2})-(\d{1,2})\b")


def parse_day_selector(date_attr: str | None, button_text: str | None, reference_year: int) -> date | None:
    """
    Read the target date off a day-selector button.

    An ISO ``data-date`` attribute wins; otherwise a day-month pair in the label
    ("Do 6-11") is read in reference_year. Returns None when neither parses.
    """
    if date_attr:
        try:
            return datetime.fromisoformat(date_attr.strip()).date()
        except ValueError:
            pass

    if button_text:
        match = DAY_MONTH_PATTERN.search(button_text)
        if match:
            day = int(match.group(1))
            month = int(match.group(2))
            try:
                return date(reference_year, month, day)
            except ValueError:
                pass

    return None
