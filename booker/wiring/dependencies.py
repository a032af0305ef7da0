from datetime import time, timedelta
from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from booker.core.config import settings
from booker.application.ports.action_executor import ActionExecutorPort
from booker.application.ports.clock import ClockPort
from booker.application.ports.item_source import ItemSourcePort
from booker.application.ports.status_reporter import StatusReporterPort
from booker.application.use_cases.booking_scheduler import BookingScheduler
from booker.application.use_cases.selection import SelectionStore
from booker.domain.entities.item import Category
from booker.infrastructure.clock.asyncio_clock import AsyncioClock
from booker.infrastructure.executor.mock_executor import MockActionExecutor
from booker.infrastructure.items.json_item_source import JsonItemSource
from booker.infrastructure.reporter.memory_reporter import FanOutStatusReporter, MemoryStatusReporter
from booker.infrastructure.reporter.webhook_reporter import WebhookStatusReporter


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BOOKING_TIMEZONE)


@lru_cache
def get_clock() -> ClockPort:
    return AsyncioClock(get_timezone())


@lru_cache
def get_executor() -> ActionExecutorPort:
    logger = logging.getLogger(__name__)
    logger.info("Using MockActionExecutor (dry run), ENV=%s", settings.ENV)
    return MockActionExecutor()


@lru_cache
def get_memory_reporter() -> MemoryStatusReporter:
    return MemoryStatusReporter(history_limit=settings.STATUS_HISTORY_LIMIT)


@lru_cache
def get_webhook_reporter() -> WebhookStatusReporter | None:
    if not settings.STATUS_WEBHOOK_URL:
        return None
    return WebhookStatusReporter(settings.STATUS_WEBHOOK_URL)


def get_status_reporter() -> StatusReporterPort:
    webhook = get_webhook_reporter()
    if webhook is None:
        return get_memory_reporter()
    return FanOutStatusReporter([get_memory_reporter(), webhook])


@lru_cache
def get_item_source() -> ItemSourcePort:
    return JsonItemSource(settings.ITEMS_FILE, get_timezone())


@lru_cache
def get_scheduler() -> BookingScheduler:
    return BookingScheduler(
        clock=get_clock(),
        executor=get_executor(),
        reporter=get_status_reporter(),
        opening_time=time(settings.WINDOW_OPEN_HOUR, settings.WINDOW_OPEN_MINUTE),
        preparation_lead=timedelta(seconds=settings.PREPARATION_LEAD_SECONDS),
        reconcile_interval=settings.RECONCILE_INTERVAL_SECONDS,
        countdown_interval=settings.COUNTDOWN_INTERVAL_SECONDS,
        settle_after_open=settings.SETTLE_AFTER_OPEN_SECONDS,
        settle_after_select=settings.SETTLE_AFTER_SELECT_SECONDS,
        settle_after_confirm=settings.SETTLE_AFTER_CONFIRM_SECONDS,
        manual_commit_delay=settings.MANUAL_COMMIT_DELAY_SECONDS,
        executor_timeout=settings.EXECUTOR_TIMEOUT_SECONDS,
    )


@lru_cache
def get_selection_store() -> SelectionStore:
    store = SelectionStore(
        field_options={
            Category.indoor: list(settings.INDOOR_FIELDS),
            Category.outdoor: list(settings.OUTDOOR_FIELDS),
        }
    )
    store.subscribe(get_scheduler().on_selection_changed)
    return store
