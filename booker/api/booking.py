from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from booker.api.schemas import (
    ItemSchema,
    ItemsResponseSchema,
    ScheduleSchema,
    SelectionSchema,
    SelectItemRequestSchema,
    StatusReportSchema,
    StatusResponseSchema,
    SubOptionRequestSchema,
)
from booker.application.exceptions import InvalidSubOption, MissingSelection, MissingSubOption, UnknownItem
from booker.application.ports.item_source import ItemSourcePort
from booker.application.use_cases.booking_scheduler import BookingScheduler
from booker.application.use_cases.selection import SelectionStore
from booker.domain.entities.status_report import StatusReport
from booker.infrastructure.reporter.memory_reporter import MemoryStatusReporter
from booker.wiring.dependencies import (
    get_item_source,
    get_memory_reporter,
    get_scheduler,
    get_selection_store,
)

# Handlers are async so they run on the event loop that owns the scheduler's timers.
router = APIRouter()
logger = logging.getLogger(__name__)


def _items_response(store: SelectionStore) -> ItemsResponseSchema:
    current = store.current
    return ItemsResponseSchema(
        items=[
            ItemSchema(
                ref=item.ref,
                label=item.label,
                start_time=item.start_time,
                target_date=item.target_date,
                category=item.category,
            )
            for item in store.items
        ],
        field_options=store.field_options,
        chosen_fields={
            category: number
            for category in store.field_options
            if (number := store.chosen_field(category)) is not None
        },
        selected_ref=current.item.ref if current else None,
    )


def _report_schema(entry: StatusReport) -> StatusReportSchema:
    return StatusReportSchema(
        phase=entry.phase,
        message=entry.message,
        offer=entry.offer,
        reported_at=entry.reported_at,
    )


def _status_response(
    scheduler: BookingScheduler,
    reporter: MemoryStatusReporter,
    history: int = 10,
) -> StatusResponseSchema:
    state = scheduler.state
    selection = state.selection
    schedule = state.schedule
    latest = reporter.latest
    return StatusResponseSchema(
        phase=state.phase,
        selection=(
            SelectionSchema(
                ref=selection.item.ref,
                label=selection.label,
                start_time=selection.item.start_time,
                target_date=selection.target_date,
                category=selection.category,
                sub_option=selection.sub_option.number if selection.sub_option else None,
            )
            if selection
            else None
        ),
        schedule=(
            ScheduleSchema(
                preparation_deadline=schedule.preparation_deadline,
                commit_deadline=schedule.commit_deadline,
                can_act_immediately=schedule.can_act_immediately,
            )
            if schedule
            else None
        ),
        error=state.error,
        latest=_report_schema(latest) if latest else None,
        history=[_report_schema(entry) for entry in reporter.history(history)],
    )


@router.get("/items", response_model=ItemsResponseSchema)
async def list_items(
    store: SelectionStore = Depends(get_selection_store),
    source: ItemSourcePort = Depends(get_item_source),
):
    store.refresh(source)
    return _items_response(store)


@router.post("/selection", response_model=StatusResponseSchema)
async def select_item(
    req: SelectItemRequestSchema,
    store: SelectionStore = Depends(get_selection_store),
    scheduler: BookingScheduler = Depends(get_scheduler),
    reporter: MemoryStatusReporter = Depends(get_memory_reporter),
):
    try:
        store.select_item(req.ref)
    except UnknownItem as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _status_response(scheduler, reporter)


@router.post("/selection/sub-option", response_model=StatusResponseSchema)
async def select_sub_option(
    req: SubOptionRequestSchema,
    store: SelectionStore = Depends(get_selection_store),
    scheduler: BookingScheduler = Depends(get_scheduler),
    reporter: MemoryStatusReporter = Depends(get_memory_reporter),
):
    try:
        store.select_sub_option(req.category, req.number)
    except InvalidSubOption as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _status_response(scheduler, reporter)


@router.delete("/selection", response_model=StatusResponseSchema)
async def clear_selection(
    store: SelectionStore = Depends(get_selection_store),
    scheduler: BookingScheduler = Depends(get_scheduler),
    reporter: MemoryStatusReporter = Depends(get_memory_reporter),
):
    store.clear()
    return _status_response(scheduler, reporter)


@router.post("/book-now", response_model=StatusResponseSchema)
async def book_now(
    scheduler: BookingScheduler = Depends(get_scheduler),
    reporter: MemoryStatusReporter = Depends(get_memory_reporter),
):
    try:
        scheduler.trigger_manual()
    except (MissingSelection, MissingSubOption) as e:
        logger.info("Manual trigger refused", extra={"reason": str(e)})
        raise HTTPException(status_code=400, detail=str(e))
    return _status_response(scheduler, reporter)


@router.post("/active", response_model=StatusResponseSchema)
async def active_again(
    scheduler: BookingScheduler = Depends(get_scheduler),
    reporter: MemoryStatusReporter = Depends(get_memory_reporter),
):
    scheduler.on_active_again()
    return _status_response(scheduler, reporter)


@router.get("/status", response_model=StatusResponseSchema)
async def status(
    history: int = Query(10, ge=0, le=200),
    scheduler: BookingScheduler = Depends(get_scheduler),
    reporter: MemoryStatusReporter = Depends(get_memory_reporter),
):
    return _status_response(scheduler, reporter, history)
