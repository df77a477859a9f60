from fastapi import HTTPException
import pytest

from training_scheduler.core.exceptions import (
    ConflictException,
    DomainException,
    HolidayProviderUnavailableException,
    InvalidSlotStateException,
    NoTrainersAvailableException,
    NotFoundException,
    SlotConflictException,
    TrainerIneligibleException,
    TrainerRequirementMismatchException,
    ValidationException,
)


@pytest.mark.parametrize(
    "exc,status_code,code",
    [
        (ValidationException("bad bucket"), 400, "ValidationException"),
        (NotFoundException("gone", code="SLOT_NOT_FOUND"), 404, "SLOT_NOT_FOUND"),
        (SlotConflictException(), 409, "SLOT_CONFLICT"),
        (
            TrainerRequirementMismatchException("no", constraint="location"),
            409,
            "TRAINER_REQUIREMENT_MISMATCH",
        ),
        (TrainerIneligibleException("T1", "trainer is inactive"), 422, "TRAINER_INELIGIBLE"),
        (NoTrainersAvailableException(), 422, "NO_TRAINERS_AVAILABLE"),
        (InvalidSlotStateException("S1", "cancelled", "completed"), 409, "INVALID_SLOT_STATE"),
        (HolidayProviderUnavailableException("MY-10", 2025, "timeout"), 503, "HOLIDAY_PROVIDER_UNAVAILABLE"),
    ],
)
def test_http_mapping(exc, status_code, code):
    http_exc = exc.to_http_exception()

    assert isinstance(http_exc, HTTPException)
    assert http_exc.status_code == status_code
    assert http_exc.detail["code"] == code
    assert http_exc.detail["message"] == exc.message


def test_conflict_family():
    assert isinstance(SlotConflictException(), ConflictException)
    assert isinstance(InvalidSlotStateException("S1", "cancelled", "completed"), ConflictException)
    assert isinstance(NoTrainersAvailableException(), DomainException)


def test_mismatch_details_carry_constraint():
    exc = TrainerRequirementMismatchException(
        "Trainer Chong does not serve Selangor",
        constraint="location",
        details={"location": "Selangor"},
    )
    assert exc.details == {"constraint": "location", "location": "Selangor"}


def test_invalid_state_message():
    exc = InvalidSlotStateException("S1", "cancelled", "completed")
    assert str(exc) == "Training slot S1 is already cancelled and cannot be marked completed"
    assert exc.details["current_status"] == "cancelled"
