from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from booker.application.utils.countdown import countdown_message, format_deadline, format_time_remaining
from booker.application.utils.time_window import compute_schedule
from booker.domain.entities.booking_state import BookingPhase, BookingState
from booker.domain.entities.effect import ManualTriggerOffer
from booker.domain.entities.item import AvailableItem, Category, SubOption
from booker.domain.entities.selection import Selection

TZ = ZoneInfo("Europe/Brussels")


def test_format_time_remaining():
    assert format_time_remaining(3 * 3600 + 25 * 60 + 12) == "3h 25m"
    assert format_time_remaining(3600) == "1h 0m"
    assert format_time_remaining(42 * 60 + 30) == "42m"
    assert format_time_remaining(5 * 60) == "5m"
    assert format_time_remaining(4 * 60 + 59) == "4m 59s"
    assert format_time_remaining(61.9) == "1m 1s"
    assert format_time_remaining(59) == "59s"
    assert format_time_remaining(0) == "0s"
    assert format_time_remaining(-3) == "0s"


def test_format_deadline():
    assert format_deadline(datetime(2025, 11, 5, 8, 59, tzinfo=TZ)) == "Nov 5, 08:59 AM"


def _state(phase: BookingPhase) -> BookingState:
    item = AvailableItem(ref="slot-1", label="Beachvolley Outdoor", start_time="18:00", target_date=date(2025, 11, 6))
    selection = Selection(item=item, sub_option=SubOption(Category.outdoor, 2))
    schedule = compute_schedule(item.target_date, datetime(2025, 11, 4, 10, 0, tzinfo=TZ))
    return BookingState(phase=phase, selection=selection, schedule=schedule)


def test_countdown_before_preparation():
    message, offer = countdown_message(
        _state(BookingPhase.awaiting_window), datetime(2025, 11, 4, 10, 0, tzinfo=TZ)
    )
    assert message == "⏰ Preparing booking in 22h 59m (at Nov 5, 08:59 AM)"
    assert offer == ManualTriggerOffer.secondary


def test_countdown_between_preparation_and_commit():
    now = datetime(2025, 11, 5, 8, 59, 20, tzinfo=TZ)

    message, _ = countdown_message(_state(BookingPhase.preparation_ready), now)
    assert message == "✅ Ready! Booking in 40s"

    message, _ = countdown_message(_state(BookingPhase.awaiting_window), now)
    assert message == "⏰ Booking in 40s"


def test_no_countdown_after_commit_deadline_or_without_deadlines():
    assert countdown_message(_state(BookingPhase.preparation_ready), datetime(2025, 11, 5, 9, 0, tzinfo=TZ)) is None
    assert countdown_message(BookingState(), datetime(2025, 11, 5, 9, 0, tzinfo=TZ)) is None
