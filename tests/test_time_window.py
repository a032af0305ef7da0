"""
Tests for booking window computation.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from booker.application.utils.time_window import compute_schedule, seconds_until, window_opening

TZ = ZoneInfo("Europe/Brussels")


def test_today_is_immediately_actionable_at_any_hour():
    """A slot for today can be booked right away, whatever the time."""
    for hour in (0, 8, 9, 23):
        now = datetime(2025, 11, 4, hour, 30, tzinfo=TZ)
        schedule = compute_schedule(now.date(), now)
        assert schedule.can_act_immediately is True
        assert schedule.preparation_deadline is None
        assert schedule.commit_deadline is None


def test_tomorrow_after_opening_time_is_immediate():
    now = datetime(2025, 11, 4, 9, 0, tzinfo=TZ)
    assert compute_schedule(date(2025, 11, 5), now).can_act_immediately is True

    now = datetime(2025, 11, 4, 17, 45, tzinfo=TZ)
    assert compute_schedule(date(2025, 11, 5), now).can_act_immediately is True


def test_tomorrow_before_opening_time_is_scheduled():
    now = datetime(2025, 11, 4, 8, 0, tzinfo=TZ)
    schedule = compute_schedule(date(2025, 11, 5), now)

    assert schedule.can_act_immediately is False
    assert schedule.commit_deadline == datetime(2025, 11, 4, 9, 0, tzinfo=TZ)
    assert schedule.preparation_deadline == datetime(2025, 11, 4, 8, 59, tzinfo=TZ)


def test_two_or_more_days_out_uses_previous_day_opening():
    """Commit at 09:00 the day before, prepare exactly 60s earlier."""
    now = datetime(2025, 11, 4, 10, 0, tzinfo=TZ)
    for days_out in (2, 3, 7):
        target = now.date() + timedelta(days=days_out)
        schedule = compute_schedule(target, now)

        assert schedule.can_act_immediately is False
        assert schedule.commit_deadline == datetime.combine(target - timedelta(days=1), time(9, 0), tzinfo=TZ)
        assert schedule.commit_deadline - schedule.preparation_deadline == timedelta(seconds=60)
        assert schedule.commit_deadline > schedule.preparation_deadline


def test_unknown_target_date_defaults_to_today():
    now = datetime(2025, 11, 4, 6, 0, tzinfo=TZ)
    schedule = compute_schedule(None, now)
    assert schedule.can_act_immediately is True
    assert schedule.has_deadlines is False


def test_past_target_date_is_immediate():
    now = datetime(2025, 11, 4, 6, 0, tzinfo=TZ)
    assert compute_schedule(date(2025, 11, 1), now).can_act_immediately is True


def test_custom_opening_time_and_lead():
    now = datetime(2025, 11, 4, 10, 0, tzinfo=TZ)
    schedule = compute_schedule(
        date(2025, 11, 7),
        now,
        opening_time=time(7, 30),
        preparation_lead=timedelta(seconds=90),
    )
    assert schedule.commit_deadline == datetime(2025, 11, 6, 7, 30, tzinfo=TZ)
    assert schedule.preparation_deadline == datetime(2025, 11, 6, 7, 28, 30, tzinfo=TZ)


def test_non_positive_lead_is_rejected():
    now = datetime(2025, 11, 4, 10, 0, tzinfo=TZ)
    with pytest.raises(ValueError):
        compute_schedule(date(2025, 11, 7), now, preparation_lead=timedelta(0))


def test_seconds_until_spans_dst_change():
    """Europe/Brussels falls back on 2025-10-26; the night is 25 hours long."""
    now = datetime(2025, 10, 25, 9, 0, tzinfo=TZ)
    opening = window_opening(date(2025, 10, 27), time(9, 0), TZ)
    assert seconds_until(opening, now) == 25 * 3600
