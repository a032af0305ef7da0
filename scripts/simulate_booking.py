#!/usr/bin/env python3
"""
Dry-run a booking cycle on a virtual clock (no HTTP, no target page).

Usage:
  python3 scripts/simulate_booking.py --target 2025-11-06 --now 2025-11-04T10:00
  python3 scripts/simulate_booking.py --target 2025-11-06 --suspend 90000
  python3 scripts/simulate_booking.py --target 2025-11-04 --manual

What it does:
- Selects one outdoor slot for the target date with the chosen field
- Runs the scheduler against MockActionExecutor on a ManualClock
- Fast-forwards past the commit deadline (optionally sleeping the "host" first)
- Prints every status line and executor call in order
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date, datetime, time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booker.application.use_cases.booking_scheduler import BookingScheduler
from booker.application.use_cases.selection import SelectionStore
from booker.core.config import settings
from booker.domain.entities.item import AvailableItem, Category
from booker.infrastructure.clock.manual_clock import ManualClock
from booker.infrastructure.executor.mock_executor import MockActionExecutor
from booker.infrastructure.reporter.memory_reporter import MemoryStatusReporter


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate a timed booking on a virtual clock")
    parser.add_argument("--target", required=True, help="slot date, YYYY-MM-DD")
    parser.add_argument("--now", help="simulated start, YYYY-MM-DDTHH:MM (default: current time)")
    parser.add_argument("--field", type=int, default=1, help="outdoor field number")
    parser.add_argument("--suspend", type=float, default=0.0, help="seconds the host sleeps right after selecting")
    parser.add_argument("--manual", action="store_true", help="press 'book now' instead of waiting")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> None:
    tz = ZoneInfo(settings.BOOKING_TIMEZONE)
    start = datetime.fromisoformat(args.now).replace(tzinfo=tz) if args.now else datetime.now(tz)

    clock = ManualClock(start)
    executor = MockActionExecutor()
    reporter = MemoryStatusReporter(history_limit=100_000)
    scheduler = BookingScheduler(
        clock=clock,
        executor=executor,
        reporter=reporter,
        opening_time=time(settings.WINDOW_OPEN_HOUR, settings.WINDOW_OPEN_MINUTE),
        preparation_lead=timedelta(seconds=settings.PREPARATION_LEAD_SECONDS),
        reconcile_interval=settings.RECONCILE_INTERVAL_SECONDS,
        # One countdown line per minute keeps the transcript readable
        countdown_interval=60.0,
        manual_commit_delay=settings.MANUAL_COMMIT_DELAY_SECONDS,
    )

    store = SelectionStore()
    store.subscribe(scheduler.on_selection_changed)
    item = AvailableItem(
        ref="sim-1",
        label="Beachvolley Outdoor",
        start_time="18:00",
        target_date=date.fromisoformat(args.target),
    )
    store.set_available_items([item])
    store.select_sub_option(Category.outdoor, args.field)
    store.select_item(item.ref)

    schedule = scheduler.state.schedule
    print("\nBooking Simulation")
    print("-" * 60)
    print(f"now:        {clock.now().isoformat()}")
    print(f"phase:      {scheduler.state.phase.value}")
    if schedule.has_deadlines:
        print(f"prepare at: {schedule.preparation_deadline.isoformat()}")
        print(f"commit at:  {schedule.commit_deadline.isoformat()}")
    print("-" * 60)

    if args.suspend:
        clock.suspend(args.suspend)
        print(f"(host slept {args.suspend:.0f}s, woke at {clock.now().isoformat()})")

    if args.manual or not schedule.has_deadlines:
        scheduler.trigger_manual()
        await clock.advance(10)
    else:
        # Leave room for reconciliation to recover both phases after a long sleep
        end = max(schedule.commit_deadline, clock.now())
        await clock.advance_to(end + timedelta(seconds=max(settings.RECONCILE_INTERVAL_SECONDS * 3, 10)))

    previous = None
    for entry in reporter.history():
        # Countdown lines repeat per minute; keep the first one of each phase
        if previous is not None and previous.phase == entry.phase and entry.message.startswith(("⏰", "✅ Ready! Booking")):
            continue
        previous = entry
        print(f"[{entry.phase.value:>22}] {entry.message}")

    print("-" * 60)
    print("executor calls:", ", ".join(name for name, _ in executor.calls) or "none")
    print(f"final phase: {scheduler.state.phase.value}")


def main() -> None:
    asyncio.run(_run(_parse_args()))


if __name__ == "__main__":
    main()
