from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta
from typing import Any, Awaitable, Callable, Coroutine

from booker.application.exceptions import (
    BookingError,
    ConfirmNotAvailable,
    OptionNotMatched,
    TargetNotOpenable,
)
from booker.application.ports.action_executor import ActionExecutorPort
from booker.application.ports.clock import ClockPort, TimerHandle
from booker.application.ports.status_reporter import StatusReporterPort
from booker.application.use_cases.booking_transitions import (
    check_ready,
    precondition_message,
    transition,
)
from booker.application.utils.countdown import countdown_message
from booker.application.utils.time_window import (
    DEFAULT_OPENING_TIME,
    DEFAULT_PREPARATION_LEAD,
    compute_schedule,
    seconds_until,
)
from booker.domain.entities.booking_event import BookingEvent, BookingEventKind
from booker.domain.entities.booking_state import BookingPhase, BookingState
from booker.domain.entities.effect import Effect, EffectKind, ManualTriggerOffer
from booker.domain.entities.selection import Selection

PREPARE_FAILED = "Could not prepare booking. Please check manually."
COMMIT_FAILED = "Could not complete booking. Please check manually!"


@dataclass(frozen=True)
class ArmedDeadlines:
    preparation: TimerHandle | None = None
    commit: TimerHandle | None = None
    countdown: TimerHandle | None = None
    reconcile: TimerHandle | None = None

    def cancel_all(self) -> ArmedDeadlines:
        for handle in (self.preparation, self.commit, self.countdown, self.reconcile):
            if handle is not None:
                handle.cancel()
        return ArmedDeadlines()

    @property
    def empty(self) -> bool:
        return all(h is None for h in (self.preparation, self.commit, self.countdown, self.reconcile))


class BookingScheduler:
    """
    Drives one booking cycle per selection.

    Deadlines are armed as one-shot clock callbacks. Because those can fire late
    (or effectively never) when the host sleeps, a periodic reconciliation pass
    compares the wall clock against the live schedule and fires whichever phase
    is overdue. All mutation of state goes through ``_dispatch``.
    """

    def __init__(
        self,
        clock: ClockPort,
        executor: ActionExecutorPort,
        reporter: StatusReporterPort,
        opening_time: time = DEFAULT_OPENING_TIME,
        preparation_lead: timedelta = DEFAULT_PREPARATION_LEAD,
        reconcile_interval: float = 20.0,
        countdown_interval: float = 1.0,
        settle_after_open: float = 1.0,
        settle_after_select: float = 0.4,
        settle_after_confirm: float = 0.5,
        manual_commit_delay: float = 1.5,
        executor_timeout: float = 10.0,
    ) -> None:
        self._clock = clock
        self._executor = executor
        self._reporter = reporter
        self._opening_time = opening_time
        self._preparation_lead = preparation_lead
        self._reconcile_interval = reconcile_interval
        self._countdown_interval = countdown_interval
        self._settle_after_open = settle_after_open
        self._settle_after_select = settle_after_select
        self._settle_after_confirm = settle_after_confirm
        self._manual_commit_delay = manual_commit_delay
        self._executor_timeout = executor_timeout

        self._state = BookingState()
        self._armed = ArmedDeadlines()
        self._phase_task: asyncio.Task | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> BookingState:
        return self._state

    @property
    def armed(self) -> ArmedDeadlines:
        return self._armed

    # Inputs

    def on_selection_changed(self, selection: Selection | None) -> None:
        if selection is None:
            self._dispatch(BookingEvent(BookingEventKind.selection_cleared))
            return

        schedule = compute_schedule(
            selection.target_date,
            self._clock.now(),
            self._opening_time,
            self._preparation_lead,
        )
        self._dispatch(
            BookingEvent(BookingEventKind.selection_changed, selection=selection, schedule=schedule)
        )

    def on_active_again(self) -> None:
        """Host regained focus or woke up: re-arm timers from the wall clock, then reconcile."""
        self._logger.info("Active again", extra={"phase": self._state.phase.value})
        if self._state.phase in (BookingPhase.awaiting_window, BookingPhase.preparation_ready):
            self._rearm_deadlines()
        self.reconcile()

    def trigger_manual(self) -> None:
        """Run preparation and commit back to back, ignoring the schedule."""
        state = self._state
        if state.in_flight:
            self._logger.info("Manual trigger ignored, phase in flight", extra={"phase": state.phase.value})
            return
        try:
            check_ready(state.selection)
        except BookingError as e:
            self._report(precondition_message(e), ManualTriggerOffer.none)
            raise
        self._logger.info("Manual booking triggered", extra={"item": state.selection.item.ref})
        self._dispatch(BookingEvent(BookingEventKind.manual_trigger))

    def reset(self) -> None:
        self._dispatch(BookingEvent(BookingEventKind.selection_cleared))

    def reconcile(self) -> None:
        """Fire at most one overdue phase, gated on the current phase."""
        state = self._state
        schedule = state.schedule
        if state.manual or schedule is None or not schedule.has_deadlines:
            return

        now = self._clock.now()
        if state.phase == BookingPhase.awaiting_window:
            overdue = -seconds_until(schedule.preparation_deadline, now)
            if overdue >= 0:
                self._logger.warning(
                    "Preparation deadline passed without firing, recovering",
                    extra={"deadline": schedule.preparation_deadline.isoformat(), "recovered": overdue},
                )
                self._dispatch(BookingEvent(BookingEventKind.preparation_due, recovered=True))
        elif state.phase == BookingPhase.preparation_ready:
            overdue = -seconds_until(schedule.commit_deadline, now)
            if overdue >= 0:
                self._logger.warning(
                    "Commit deadline passed without firing, recovering",
                    extra={"deadline": schedule.commit_deadline.isoformat(), "recovered": overdue},
                )
                self._dispatch(BookingEvent(BookingEventKind.commit_due, recovered=True))

    # State machine plumbing

    def _dispatch(self, event: BookingEvent) -> None:
        previous = self._state
        result = transition(previous, event)
        if result.ignored:
            self._logger.debug(
                "Event ignored", extra={"event": event.kind.value, "phase": previous.phase.value}
            )
            return

        self._state = result.state
        self._logger.info(
            "Booking transition",
            extra={
                "event": event.kind.value,
                "phase": f"{previous.phase.value}->{result.state.phase.value}",
                "recovered": event.recovered or None,
                "reason": event.reason,
            },
        )
        for effect in result.effects:
            self._apply(effect)

    def _apply(self, effect: Effect) -> None:
        kind = effect.kind
        if kind == EffectKind.cancel_all:
            self._cancel_all()
        elif kind == EffectKind.arm_deadlines:
            self._arm_deadlines()
        elif kind == EffectKind.start_ticker:
            self._armed = replace(
                self._armed,
                countdown=self._clock.call_every(self._countdown_interval, self._refresh_countdown),
            )
            self._refresh_countdown()
        elif kind == EffectKind.refresh_countdown:
            self._refresh_countdown()
        elif kind == EffectKind.run_preparation:
            self._spawn(self._run_preparation())
        elif kind == EffectKind.run_commit:
            self._spawn(self._run_commit())
        elif kind == EffectKind.schedule_manual_commit:
            self._spawn(self._commit_after_manual_delay())
        elif kind == EffectKind.report:
            self._report(effect.message or "", effect.offer)

    def _cancel_all(self) -> None:
        self._armed = self._armed.cancel_all()
        task = self._phase_task
        self._phase_task = None
        # A phase task dispatching its own failure must not cancel itself mid-step.
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

    def _arm(self, deadline: datetime, callback: Callable[[], None], now: datetime) -> TimerHandle:
        return self._clock.call_later(max(seconds_until(deadline, now), 0.0), callback)

    def _arm_deadlines(self) -> None:
        schedule = self._state.schedule
        now = self._clock.now()
        self._armed = replace(
            self._armed,
            preparation=self._arm(schedule.preparation_deadline, self._on_preparation_deadline, now),
            commit=self._arm(schedule.commit_deadline, self._on_commit_deadline, now),
            reconcile=self._clock.call_every(self._reconcile_interval, self.reconcile),
        )
        self._logger.info(
            "Booking scheduled",
            extra={
                "deadline": schedule.commit_deadline.isoformat(),
                "prepare_in": round(seconds_until(schedule.preparation_deadline, now)),
                "book_in": round(seconds_until(schedule.commit_deadline, now)),
            },
        )

    def _rearm_deadlines(self) -> None:
        schedule = self._state.schedule
        if schedule is None or not schedule.has_deadlines:
            return
        for handle in (self._armed.preparation, self._armed.commit):
            if handle is not None:
                handle.cancel()

        now = self._clock.now()
        preparation = None
        commit = None
        if (
            self._state.phase == BookingPhase.awaiting_window
            and seconds_until(schedule.preparation_deadline, now) > 0
        ):
            preparation = self._arm(schedule.preparation_deadline, self._on_preparation_deadline, now)
        if seconds_until(schedule.commit_deadline, now) > 0:
            commit = self._arm(schedule.commit_deadline, self._on_commit_deadline, now)
        self._armed = replace(self._armed, preparation=preparation, commit=commit)

    def _on_preparation_deadline(self) -> None:
        self._armed = replace(self._armed, preparation=None)
        self._dispatch(BookingEvent(BookingEventKind.preparation_due))

    def _on_commit_deadline(self) -> None:
        self._armed = replace(self._armed, commit=None)
        self._dispatch(BookingEvent(BookingEventKind.commit_due))

    def _refresh_countdown(self) -> None:
        if self._state.phase not in (BookingPhase.awaiting_window, BookingPhase.preparation_ready):
            return
        line = countdown_message(self._state, self._clock.now())
        if line is not None:
            self._report(*line)

    def _report(self, message: str, offer: ManualTriggerOffer) -> None:
        try:
            self._reporter.report(self._state.phase, message, offer)
        except Exception:
            self._logger.exception("Status reporter failed", extra={"phase": self._state.phase.value})

    # Phase runners

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        self._phase_task = asyncio.get_running_loop().create_task(coro)

    async def _call(self, step: Awaitable[Any]) -> Any:
        """Await one executor step, bounded by executor_timeout on the injected clock."""
        call = asyncio.ensure_future(step)
        deadline = asyncio.ensure_future(self._clock.sleep(self._executor_timeout))
        try:
            done, _ = await asyncio.wait({call, deadline}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            deadline.cancel()
            if not call.done():
                call.cancel()
        if call not in done:
            raise asyncio.TimeoutError()
        return call.result()

    async def _run_preparation(self) -> None:
        selection = self._state.selection
        try:
            await self._call(self._executor.open(selection.item))
            await self._clock.sleep(self._settle_after_open)
            matched = await self._call(self._executor.select_option(selection.sub_option))
            await self._clock.sleep(self._settle_after_select)
            if not matched:
                raise OptionNotMatched(f"Could not select {selection.sub_option.label}. Please check manually.")
        except OptionNotMatched as e:
            self._fail(BookingEventKind.preparation_failed, str(e))
        except TargetNotOpenable:
            self._fail(BookingEventKind.preparation_failed, PREPARE_FAILED)
        except asyncio.TimeoutError:
            self._fail(BookingEventKind.preparation_failed, PREPARE_FAILED, timed_out=True)
        except Exception:
            self._logger.exception("Unexpected executor error during preparation")
            self._fail(BookingEventKind.preparation_failed, PREPARE_FAILED)
        else:
            self._dispatch(BookingEvent(BookingEventKind.preparation_succeeded))
            # A recovered preparation can finish after the commit deadline already passed
            self.reconcile()

    async def _run_commit(self) -> None:
        try:
            await self._call(self._executor.confirm())
        except ConfirmNotAvailable:
            self._fail(BookingEventKind.commit_failed, COMMIT_FAILED)
            return
        except asyncio.TimeoutError:
            self._fail(BookingEventKind.commit_failed, COMMIT_FAILED, timed_out=True)
            return
        except Exception:
            self._logger.exception("Unexpected executor error during commit")
            self._fail(BookingEventKind.commit_failed, COMMIT_FAILED)
            return

        await self._clock.sleep(self._settle_after_confirm)
        self._dispatch(BookingEvent(BookingEventKind.commit_succeeded))

    async def _commit_after_manual_delay(self) -> None:
        await self._clock.sleep(self._manual_commit_delay)
        self._dispatch(BookingEvent(BookingEventKind.commit_due))

    def _fail(self, kind: BookingEventKind, reason: str, timed_out: bool = False) -> None:
        self._logger.error(
            "Booking phase failed",
            extra={"event": kind.value, "reason": "executor timed out" if timed_out else reason},
        )
        self._dispatch(BookingEvent(kind, reason=reason))


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None
