from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone

from booker.domain.entities.schedule import IMMEDIATE, Schedule

DEFAULT_OPENING_TIME = time(9, 0)
DEFAULT_PREPARATION_LEAD = timedelta(seconds=60)

logger = logging.getLogger(__name__)


def seconds_until(instant: datetime, now: datetime) -> float:
    """Elapsed-time difference, compared in UTC so DST shifts are accounted for."""
    return (instant.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds()


def window_opening(target_date: date, opening_time: time, tz) -> datetime:
    """Booking for target_date opens at opening_time on the previous calendar day."""
    return datetime.combine(target_date - timedelta(days=1), opening_time, tzinfo=tz)


def compute_schedule(
    target_date: date | None,
    now: datetime,
    opening_time: time = DEFAULT_OPENING_TIME,
    preparation_lead: timedelta = DEFAULT_PREPARATION_LEAD,
) -> Schedule:
    """
    Decide whether the slot can be booked right away, and if not when to prepare and commit.

    An unknown target date is treated as today.
    """
    if preparation_lead <= timedelta(0):
        raise ValueError("preparation_lead must be positive")

    if target_date is None:
        logger.warning("Could not determine target date, defaulting to today")
        return IMMEDIATE

    commit_deadline = window_opening(target_date, opening_time, now.tzinfo)
    if seconds_until(commit_deadline, now) <= 0:
        return IMMEDIATE

    return Schedule(
        preparation_deadline=commit_deadline - preparation_lead,
        commit_deadline=commit_deadline,
        can_act_immediately=False,
    )
