"""Pydantic schemas for trainer directory and training slot payloads."""

from .trainer import TrainerCreate, TrainerSummary, TrainerUpdate, TrainerWorkload
from .training_slot import (
    AutoAssignBookingRequest,
    AvailableSlot,
    DayAvailability,
    ExplicitBookingRequest,
    SlotFilters,
    SlotPage,
    TrainingSlotResponse,
)

__all__ = [
    "AutoAssignBookingRequest",
    "AvailableSlot",
    "DayAvailability",
    "ExplicitBookingRequest",
    "SlotFilters",
    "SlotPage",
    "TrainerCreate",
    "TrainerSummary",
    "TrainerUpdate",
    "TrainerWorkload",
    "TrainingSlotResponse",
]
