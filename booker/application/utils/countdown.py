from __future__ import annotations

from datetime import datetime

from booker.application.utils.time_window import seconds_until
from booker.domain.entities.booking_state import BookingPhase, BookingState
from booker.domain.entities.effect import ManualTriggerOffer

SHOW_SECONDS_BELOW = 300


def format_time_remaining(seconds: float) -> str:
    """Render a remaining duration; seconds are only shown in the last five minutes."""
    total_seconds = max(int(seconds), 0)
    hours, rest = divmod(total_seconds, 3600)
    minutes, secs = divmod(rest, 60)

    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        if total_seconds < SHOW_SECONDS_BELOW:
            return f"{minutes}m {secs}s"
        return f"{minutes}m"
    return f"{secs}s"


def format_deadline(instant: datetime) -> str:
    """e.g. 'Nov 6, 08:59 AM'"""
    return f"{instant:%b} {instant.day}, {instant:%I:%M %p}"


def countdown_message(state: BookingState, now: datetime) -> tuple[str, ManualTriggerOffer] | None:
    """Status line for the next pending deadline, or None when nothing is counting down."""
    schedule = state.schedule
    if state.selection is None or schedule is None or not schedule.has_deadlines:
        return None

    until_preparation = seconds_until(schedule.preparation_deadline, now)
    if until_preparation > 0:
        return (
            f"⏰ Preparing booking in {format_time_remaining(until_preparation)} "
            f"(at {format_deadline(schedule.preparation_deadline)})",
            ManualTriggerOffer.secondary,
        )

    until_commit = seconds_until(schedule.commit_deadline, now)
    if until_commit > 0:
        if state.phase == BookingPhase.preparation_ready:
            return f"✅ Ready! Booking in {format_time_remaining(until_commit)}", ManualTriggerOffer.secondary
        return f"⏰ Booking in {format_time_remaining(until_commit)}", ManualTriggerOffer.secondary

    return None
