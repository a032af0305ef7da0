"""
Booking state machine.

``transition`` is pure: it takes the current state and an event and returns the
next state together with the effects the scheduler must carry out. Events that
do not apply to the current phase are ignored, which is how late or duplicate
timer firings are coalesced.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from booker.application.exceptions import BookingError, MissingSelection, MissingSubOption
from booker.domain.entities.booking_event import BookingEvent, BookingEventKind
from booker.domain.entities.booking_state import BookingPhase, BookingState
from booker.domain.entities.effect import (
    ARM_DEADLINES,
    CANCEL_ALL,
    REFRESH_COUNTDOWN,
    RUN_COMMIT,
    RUN_PREPARATION,
    SCHEDULE_MANUAL_COMMIT,
    START_TICKER,
    Effect,
    ManualTriggerOffer,
    report,
)
from booker.domain.entities.selection import Selection

READY_TO_BOOK = "✅ Ready to book"
WAITING_FOR_SELECTION = "Status: Waiting for selection..."
PREPARING = "🔄 Preparing booking..."
READY_EXECUTING = "✅ Ready! Executing booking..."
BOOKING_NOW = "🚀 Booking NOW!"


@dataclass(frozen=True)
class Transition:
    state: BookingState
    effects: tuple[Effect, ...] = ()

    @property
    def ignored(self) -> bool:
        return not self.effects


def check_ready(selection: Selection | None) -> Selection:
    """Return selection if both the slot and its field are chosen, else raise."""
    if selection is None:
        raise MissingSelection()
    if selection.sub_option is None:
        raise MissingSubOption(selection.category.value)
    return selection


def precondition_message(error: BookingError) -> str:
    if isinstance(error, MissingSubOption):
        return f"❌ Please select an {error.category} field first!"
    return "❌ No slot selected!"


def success_message(selection: Selection) -> str:
    field = f" ({selection.sub_option.label})" if selection.sub_option else ""
    return f"🎉 Booking completed for {selection.item.start_time}{field}! Check if successful."


def transition(state: BookingState, event: BookingEvent) -> Transition:
    kind = event.kind

    if kind == BookingEventKind.selection_cleared or (
        kind == BookingEventKind.selection_changed and event.selection is None
    ):
        return Transition(BookingState(), (CANCEL_ALL, report(WAITING_FOR_SELECTION)))

    if kind == BookingEventKind.selection_changed:
        return _on_selection(event)

    if kind == BookingEventKind.preparation_due:
        if state.phase != BookingPhase.awaiting_window:
            return Transition(state)
        try:
            check_ready(state.selection)
        except BookingError as e:
            return Transition(
                replace(state, phase=BookingPhase.failed, error=str(e)),
                (CANCEL_ALL, report(precondition_message(e))),
            )
        return Transition(
            replace(state, phase=BookingPhase.preparing, error=None),
            (report(PREPARING), RUN_PREPARATION),
        )

    if kind == BookingEventKind.manual_trigger:
        if state.in_flight:
            return Transition(state)
        try:
            check_ready(state.selection)
        except BookingError:
            # Refused; the scheduler reports and raises, the phase stays put.
            return Transition(state)
        return Transition(
            replace(state, phase=BookingPhase.preparing, manual=True, error=None),
            (CANCEL_ALL, report(PREPARING), RUN_PREPARATION),
        )

    if kind == BookingEventKind.preparation_succeeded:
        if state.phase != BookingPhase.preparing:
            return Transition(state)
        ready = replace(state, phase=BookingPhase.preparation_ready)
        if state.manual:
            return Transition(ready, (report(READY_EXECUTING), SCHEDULE_MANUAL_COMMIT))
        return Transition(ready, (REFRESH_COUNTDOWN,))

    if kind == BookingEventKind.commit_due:
        if state.phase != BookingPhase.preparation_ready:
            return Transition(state)
        return Transition(
            replace(state, phase=BookingPhase.committing),
            (CANCEL_ALL, report(BOOKING_NOW), RUN_COMMIT),
        )

    if kind == BookingEventKind.commit_succeeded:
        if state.phase != BookingPhase.committing:
            return Transition(state)
        return Transition(
            replace(state, phase=BookingPhase.succeeded),
            (CANCEL_ALL, report(success_message(state.selection))),
        )

    if kind in (BookingEventKind.preparation_failed, BookingEventKind.commit_failed):
        expected = (
            BookingPhase.preparing
            if kind == BookingEventKind.preparation_failed
            else BookingPhase.committing
        )
        if state.phase != expected:
            return Transition(state)
        return Transition(
            replace(state, phase=BookingPhase.failed, error=event.reason),
            (CANCEL_ALL, report(f"❌ {event.reason}")),
        )

    return Transition(state)


def _on_selection(event: BookingEvent) -> Transition:
    selection = event.selection
    schedule = event.schedule
    if schedule is None:
        raise ValueError("selection_changed requires a schedule")

    if schedule.can_act_immediately:
        return Transition(
            BookingState(
                phase=BookingPhase.immediately_actionable,
                selection=selection,
                schedule=schedule,
            ),
            (CANCEL_ALL, report(READY_TO_BOOK, ManualTriggerOffer.primary)),
        )

    return Transition(
        BookingState(phase=BookingPhase.awaiting_window, selection=selection, schedule=schedule),
        (CANCEL_ALL, ARM_DEADLINES, START_TICKER),
    )
