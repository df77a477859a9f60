# backend/training_scheduler/core/exceptions.py
"""
Domain-specific exceptions for the training scheduling engine.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException using the class status code."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class SlotConflictException(ConflictException):
    """Raised when a trainer is already booked for the requested date and bucket."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot is already booked for the selected trainer",
            code="SLOT_CONFLICT",
            details=details or {},
        )


class TrainerRequirementMismatchException(ConflictException):
    """Raised when an explicitly chosen trainer does not serve the requested location/language."""

    def __init__(self, message: str, *, constraint: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="TRAINER_REQUIREMENT_MISMATCH",
            details={"constraint": constraint, **(details or {})},
        )


class TrainerIneligibleException(BusinessRuleException):
    """Raised when a trainer exists but cannot take new assignments."""

    def __init__(self, trainer_id: str, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Trainer {trainer_id} is not eligible: {reason}",
            code="TRAINER_INELIGIBLE",
            details={"trainer_id": trainer_id, "reason": reason, **(details or {})},
        )


class NoTrainersAvailableException(BusinessRuleException):
    """Raised when auto-assignment finds no eligible and free trainer."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "No trainers available for the specified requirements",
            code="NO_TRAINERS_AVAILABLE",
            details=details or {},
        )


class InvalidSlotStateException(ConflictException):
    """Raised when a training slot transition is attempted from a terminal status."""

    def __init__(self, slot_id: str, current_status: str, requested_status: str):
        super().__init__(
            message=(
                f"Training slot {slot_id} is already {current_status} "
                f"and cannot be marked {requested_status}"
            ),
            code="INVALID_SLOT_STATE",
            details={
                "slot_id": slot_id,
                "current_status": current_status,
                "requested_status": requested_status,
            },
        )


class HolidayProviderUnavailableException(ServiceException):
    """Raised when the public-holiday calendar cannot be consulted."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, region_code: str, year: int, reason: str):
        super().__init__(
            message=f"Holiday calendar unavailable for {region_code} ({year}): {reason}",
            code="HOLIDAY_PROVIDER_UNAVAILABLE",
            details={"region": region_code, "year": year},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
