# backend/training_scheduler/schemas/trainer.py
"""
Trainer directory schemas.

Languages come from a closed list; locations are free text region
names matched permissively at query time.
"""

import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.enums import TrainerLanguage, TrainerStatus
from .base import StandardizedModel, StrictRequestModel


def _clean_locations(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    cleaned = [" ".join(value.split()) for value in values]
    return [value for value in cleaned if value]


class TrainerCreate(StrictRequestModel):
    """Payload a manager submits to add a trainer."""

    name: str = Field(..., min_length=1, max_length=255)
    languages: List[TrainerLanguage] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    status: TrainerStatus = TrainerStatus.ACTIVE
    created_by_manager_id: Optional[str] = Field(None, max_length=64)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Trainer name cannot be blank")
        return v

    @field_validator("locations")
    @classmethod
    def normalize_locations(cls, v: List[str]) -> List[str]:
        return _clean_locations(v) or []


class TrainerUpdate(StrictRequestModel):
    """Partial trainer update; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    languages: Optional[List[TrainerLanguage]] = None
    locations: Optional[List[str]] = None
    status: Optional[TrainerStatus] = None

    @field_validator("locations")
    @classmethod
    def normalize_locations(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_locations(v)


class TrainerSummary(StandardizedModel):
    id: str
    name: str
    languages: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    status: TrainerStatus
    created_at: Optional[datetime.datetime] = None


class TrainerWorkload(StandardizedModel):
    """Booked-slot count of one trainer over a date range."""

    trainer_id: str
    name: str
    booked_count: int
    start_date: datetime.date
    end_date: datetime.date
