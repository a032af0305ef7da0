from datetime import date, datetime

from pydantic import BaseModel, Field

from booker.domain.entities.booking_state import BookingPhase
from booker.domain.entities.effect import ManualTriggerOffer
from booker.domain.entities.item import Category


class ItemSchema(BaseModel):
    ref: str
    label: str
    start_time: str
    target_date: date | None = None
    category: Category


class ItemsResponseSchema(BaseModel):
    items: list[ItemSchema]
    field_options: dict[Category, list[int]]
    chosen_fields: dict[Category, int] = Field(default_factory=dict)
    selected_ref: str | None = None


class SelectItemRequestSchema(BaseModel):
    ref: str


class SubOptionRequestSchema(BaseModel):
    category: Category
    number: int


class SelectionSchema(BaseModel):
    ref: str
    label: str
    start_time: str
    target_date: date | None = None
    category: Category
    sub_option: int | None = None


class ScheduleSchema(BaseModel):
    preparation_deadline: datetime | None = None
    commit_deadline: datetime | None = None
    can_act_immediately: bool


class StatusReportSchema(BaseModel):
    phase: BookingPhase
    message: str
    offer: ManualTriggerOffer
    reported_at: float | None = None


class StatusResponseSchema(BaseModel):
    phase: BookingPhase
    selection: SelectionSchema | None = None
    schedule: ScheduleSchema | None = None
    error: str | None = None
    latest: StatusReportSchema | None = None
    history: list[StatusReportSchema] = Field(default_factory=list)
