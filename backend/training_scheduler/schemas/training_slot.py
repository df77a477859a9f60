# backend/training_scheduler/schemas/training_slot.py
"""
Training slot schemas: booking requests, availability and listings.

Request models validate the bucket label against the fixed catalogue and
require a location for onsite training, so services can trust them.
"""

import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, TIME_SLOTS
from ..core.enums import SelectionStrategy, SlotStatus, TrainingMode
from .base import StandardizedModel, StrictRequestModel
from .trainer import TrainerSummary

DateType = datetime.date


class _BookingRequestBase(StrictRequestModel):
    onboarding_id: str = Field(..., min_length=1)
    date: DateType
    time_slot: str
    training_mode: TrainingMode
    location: Optional[str] = None
    languages: List[str] = Field(default_factory=list)

    @field_validator("time_slot")
    @classmethod
    def validate_time_slot(cls, v: str) -> str:
        if v not in TIME_SLOTS:
            raise ValueError(f"Unknown time slot {v!r}; expected one of {', '.join(TIME_SLOTS)}")
        return v

    @field_validator("location")
    @classmethod
    def normalize_location(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return " ".join(v.split()) or None

    @model_validator(mode="after")
    def require_onsite_location(self) -> "_BookingRequestBase":
        if self.training_mode is TrainingMode.ONSITE and not self.location:
            raise ValueError("Onsite training requires a location")
        return self


class ExplicitBookingRequest(_BookingRequestBase):
    """Manager books a specific trainer."""

    trainer_id: str = Field(..., min_length=1)


class AutoAssignBookingRequest(_BookingRequestBase):
    """The engine picks the trainer."""

    strategy: Optional[SelectionStrategy] = None
    reuse_existing: bool = False


class AvailableSlot(StandardizedModel):
    time_slot: str
    available_trainers: List[TrainerSummary]


class DayAvailability(StandardizedModel):
    date: DateType
    available_slots: List[AvailableSlot]


class TrainingSlotResponse(StandardizedModel):
    id: str
    slot_date: DateType = Field(..., serialization_alias="date")
    time_slot: str
    training_mode: TrainingMode
    location: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    status: SlotStatus
    trainer_id: str
    onboarding_id: str
    trainer_name: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    completed_at: Optional[datetime.datetime] = None
    cancelled_at: Optional[datetime.datetime] = None

    @model_validator(mode="before")
    @classmethod
    def pull_trainer_name(cls, data: Any) -> Any:
        trainer = getattr(data, "trainer", None)
        if trainer is not None and not isinstance(data, dict):
            values = {key: getattr(data, key, None) for key in cls.model_fields}
            values["trainer_name"] = trainer.name
            return values
        return data


class SlotFilters(StrictRequestModel):
    """Optional filters for the admin slot listing."""

    start_date: Optional[DateType] = None
    end_date: Optional[DateType] = None
    trainer_id: Optional[str] = None
    status: Optional[SlotStatus] = None
    training_mode: Optional[TrainingMode] = None
    location: Optional[str] = None

    @model_validator(mode="after")
    def validate_range(self) -> "SlotFilters":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class SlotPage(StandardizedModel):
    items: List[TrainingSlotResponse]
    total: int
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1, le=MAX_PAGE_SIZE)


def clamp_limit(limit: Optional[int]) -> int:
    """Clamp a requested page size into [1, MAX_PAGE_SIZE]."""
    if not limit or limit < 1:
        return DEFAULT_PAGE_SIZE
    return min(limit, MAX_PAGE_SIZE)
