# backend/training_scheduler/services/training_booking_service.py
"""
Training Booking Service

Entry points that create and move training slots:
- explicit booking of a chosen trainer
- auto-assignment through a selection strategy
- cancel / complete transitions
- slot listings for onboarding cases, trainers and admins

Booking runs the conflict check and the insert in one transaction. The
partial unique index on booked slots is the final arbiter when two
requests race; the losing insert surfaces as SlotConflictException and is
never retried.
"""

from datetime import date, datetime, timezone
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import TIME_SLOTS
from ..core.enums import SelectionStrategy, SlotStatus, TrainingMode
from ..core.exceptions import (
    DomainException,
    InvalidSlotStateException,
    NoTrainersAvailableException,
    NotFoundException,
    SlotConflictException,
    TrainerIneligibleException,
    TrainerRequirementMismatchException,
    ValidationException,
)
from ..models.trainer import Trainer
from ..models.training_slot import TrainingSlot
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.onboarding_repository import OnboardingRepository
from ..repositories.training_slot_repository import TrainingSlotRepository
from ..schemas.training_slot import (
    AutoAssignBookingRequest,
    ExplicitBookingRequest,
    SlotFilters,
    SlotPage,
    TrainingSlotResponse,
    clamp_limit,
)
from .base import BaseService
from .trainer_directory_service import TrainerDirectoryService
from .trainer_selection import get_selector

logger = logging.getLogger(__name__)

ENTRY_EXPLICIT = "explicit"
ENTRY_AUTO_ASSIGN = "auto_assign"


def _clean_location(location: Optional[str]) -> Optional[str]:
    if location is None:
        return None
    return " ".join(location.split()) or None


def _clean_languages(languages: Optional[Iterable[Any]]) -> List[str]:
    cleaned: List[str] = []
    for language in languages or []:
        value = str(getattr(language, "value", language)).strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def describe_request(
    mode: TrainingMode,
    location: Optional[str],
    languages: List[str],
    slot_date: date,
    time_slot: str,
) -> str:
    """Human summary, e.g. 'Onsite training in Selangor speaking Malay on 2025-03-01 at 14:00'."""
    parts = [f"{mode.label} training"]
    if mode is TrainingMode.ONSITE and location:
        parts.append(f"in {location}")
    if languages:
        parts.append(f"speaking {', '.join(languages)}")
    parts.append(f"on {slot_date.isoformat()} at {time_slot}")
    return " ".join(parts)


class TrainingBookingService(BaseService):
    """
    Booking orchestrator for training slots.

    Wires the trainer directory, the slot ledger and the selection
    strategies together and owns every slot write.
    """

    def __init__(
        self,
        db: Session,
        directory: Optional[TrainerDirectoryService] = None,
        slot_repository: Optional[TrainingSlotRepository] = None,
        onboarding_repository: Optional[OnboardingRepository] = None,
    ):
        super().__init__(db)
        self.directory = directory or TrainerDirectoryService(db)
        self.slot_repository = slot_repository or RepositoryFactory.create_training_slot_repository(db)
        self.onboarding_repository = (
            onboarding_repository or RepositoryFactory.create_onboarding_repository(db)
        )

    # Validation helpers

    def _validate_request(
        self,
        time_slot: str,
        mode: Any,
        location: Optional[str],
        languages: Optional[Iterable[Any]],
    ) -> Tuple[TrainingMode, Optional[str], List[str]]:
        if time_slot not in TIME_SLOTS:
            raise ValidationException(
                f"Unknown time slot {time_slot!r}",
                details={"time_slot": time_slot, "allowed": list(TIME_SLOTS)},
            )
        try:
            training_mode = TrainingMode(getattr(mode, "value", mode))
        except ValueError:
            raise ValidationException(
                f"Unknown training mode {mode!r}",
                details={"mode": str(mode), "allowed": [m.value for m in TrainingMode]},
            )

        cleaned_location = _clean_location(location)
        if training_mode is TrainingMode.ONSITE and not cleaned_location:
            raise ValidationException(
                "Onsite training requires a location",
                details={"mode": training_mode.value, "time_slot": time_slot},
            )
        if training_mode is TrainingMode.REMOTE:
            cleaned_location = None
        return training_mode, cleaned_location, _clean_languages(languages)

    @staticmethod
    def _request_details(
        slot_date: date,
        time_slot: str,
        mode: TrainingMode,
        location: Optional[str],
        languages: List[str],
    ) -> Dict[str, Any]:
        return {
            "date": slot_date.isoformat(),
            "time_slot": time_slot,
            "mode": mode.value,
            "location": location,
            "languages": list(languages),
        }

    def _require_onboarding(self, onboarding_id: str) -> None:
        if not self.onboarding_repository.exists_case(onboarding_id):
            raise NotFoundException(
                f"Onboarding case {onboarding_id} not found",
                code="ONBOARDING_NOT_FOUND",
                details={"onboarding_id": onboarding_id},
            )

    def _require_bookable_trainer(self, trainer_id: str) -> Trainer:
        trainer = self.directory.get_trainer(trainer_id)
        if not trainer.is_active:
            raise TrainerIneligibleException(trainer_id, f"trainer is {trainer.status}")
        return trainer

    def _insert_slot(
        self,
        *,
        onboarding_id: str,
        trainer: Trainer,
        slot_date: date,
        time_slot: str,
        mode: TrainingMode,
        location: Optional[str],
        languages: List[str],
        details: Dict[str, Any],
    ) -> TrainingSlot:
        conflict_details = {**details, "trainer_id": trainer.id, "constraint": "trainer_bucket"}
        conflict_message = (
            f"Trainer {trainer.name} is already booked on {slot_date.isoformat()} at {time_slot}"
        )
        try:
            with self.transaction():
                if self.slot_repository.has_booked_slot(slot_date, time_slot, trainer.id):
                    raise SlotConflictException(conflict_message, details=conflict_details)
                slot = self.slot_repository.create_booked_slot(
                    onboarding_id=onboarding_id,
                    trainer_id=trainer.id,
                    slot_date=slot_date,
                    time_slot=time_slot,
                    training_mode=mode,
                    location=location,
                    languages=languages,
                )
        except IntegrityError as exc:
            self.logger.warning(
                f"Booking race lost for trainer {trainer.id} on {slot_date} {time_slot}"
            )
            raise SlotConflictException(conflict_message, details=conflict_details) from exc

        self.logger.info(
            f"Booked slot {slot.id}: trainer={trainer.id} onboarding={onboarding_id} "
            f"{slot_date} {time_slot} {mode.value}"
        )
        return slot

    # Booking entry points

    @BaseService.measure_operation("book_slot")
    def book_slot(
        self,
        onboarding_id: str,
        trainer_id: str,
        slot_date: date,
        time_slot: str,
        mode: TrainingMode,
        location: Optional[str] = None,
        languages: Optional[Iterable[str]] = None,
    ) -> TrainingSlot:
        """
        Book a specific trainer for an onboarding case.

        Raises:
            ValidationException: Unknown bucket or mode, onsite without location
            NotFoundException: Unknown onboarding case or trainer
            TrainerIneligibleException: Trainer is inactive
            TrainerRequirementMismatchException: Trainer does not serve the location/languages
            SlotConflictException: Trainer already booked in that bucket
        """
        self.log_operation(
            "book_slot",
            onboarding_id=onboarding_id,
            trainer_id=trainer_id,
            date=slot_date,
            time_slot=time_slot,
        )
        try:
            training_mode, location, wanted = self._validate_request(
                time_slot, mode, location, languages
            )
            details = self._request_details(slot_date, time_slot, training_mode, location, wanted)
            self._require_onboarding(onboarding_id)
            trainer = self._require_bookable_trainer(trainer_id)

            if training_mode is TrainingMode.ONSITE and not trainer.serves_location(location):
                raise TrainerRequirementMismatchException(
                    f"Trainer {trainer.name} does not serve {location}",
                    constraint="location",
                    details={**details, "trainer_id": trainer.id},
                )
            if wanted and not trainer.speaks_any(wanted):
                raise TrainerRequirementMismatchException(
                    f"Trainer {trainer.name} does not speak {', '.join(wanted)}",
                    constraint="languages",
                    details={**details, "trainer_id": trainer.id},
                )

            slot = self._insert_slot(
                onboarding_id=onboarding_id,
                trainer=trainer,
                slot_date=slot_date,
                time_slot=time_slot,
                mode=training_mode,
                location=location,
                languages=wanted,
                details=details,
            )
        except DomainException as exc:
            prometheus_metrics.record_booking(ENTRY_EXPLICIT, exc.code)
            raise

        prometheus_metrics.record_booking(ENTRY_EXPLICIT, "booked")
        return slot

    @BaseService.measure_operation("auto_assign_slot")
    def auto_assign_slot(
        self,
        onboarding_id: str,
        slot_date: date,
        time_slot: str,
        mode: TrainingMode,
        location: Optional[str] = None,
        languages: Optional[Iterable[str]] = None,
        strategy: Optional[SelectionStrategy] = None,
        reuse_existing: bool = False,
    ) -> TrainingSlot:
        """
        Pick a free eligible trainer and book them.

        With ``reuse_existing`` an onboarding case that already holds a booked
        slot gets that slot back instead of a second booking.

        Raises:
            ValidationException: Unknown bucket, mode or strategy; onsite without location
            NotFoundException: Unknown onboarding case
            NoTrainersAvailableException: Nobody eligible, or everyone eligible is booked
            SlotConflictException: The chosen trainer was taken by a concurrent booking
        """
        self.log_operation(
            "auto_assign_slot",
            onboarding_id=onboarding_id,
            date=slot_date,
            time_slot=time_slot,
            strategy=getattr(strategy, "value", strategy),
        )
        try:
            training_mode, location, wanted = self._validate_request(
                time_slot, mode, location, languages
            )
            details = self._request_details(slot_date, time_slot, training_mode, location, wanted)
            self._require_onboarding(onboarding_id)

            if reuse_existing:
                existing = self.slot_repository.get_booked_for_onboarding(onboarding_id)
                if existing is not None:
                    self.logger.info(
                        f"Onboarding {onboarding_id} already holds slot {existing.id}; reusing it"
                    )
                    prometheus_metrics.record_booking(ENTRY_AUTO_ASSIGN, "reused")
                    return existing

            description = describe_request(training_mode, location, wanted, slot_date, time_slot)

            pool = self.directory.find_eligible(training_mode, location, wanted)
            if not pool:
                raise NoTrainersAvailableException(
                    f"No trainer available for {description}",
                    details={**details, "constraint": "eligibility"},
                )

            booked = self.slot_repository.get_booked_trainer_ids(slot_date, time_slot)
            free = [trainer for trainer in pool if trainer.id not in booked]
            if not free:
                raise NoTrainersAvailableException(
                    f"No trainer available for {description}",
                    details={**details, "constraint": "availability", "eligible": len(pool)},
                )

            selector = get_selector(
                strategy or settings.default_selection_strategy, self.slot_repository
            )
            trainer = selector.select(free, slot_date)

            slot = self._insert_slot(
                onboarding_id=onboarding_id,
                trainer=trainer,
                slot_date=slot_date,
                time_slot=time_slot,
                mode=training_mode,
                location=location,
                languages=wanted,
                details=details,
            )
        except DomainException as exc:
            prometheus_metrics.record_booking(ENTRY_AUTO_ASSIGN, exc.code)
            raise

        prometheus_metrics.record_booking(ENTRY_AUTO_ASSIGN, "booked")
        return slot

    def book(self, request: ExplicitBookingRequest) -> TrainingSlot:
        """Explicit booking from a validated request payload."""
        return self.book_slot(
            request.onboarding_id,
            request.trainer_id,
            request.date,
            request.time_slot,
            request.training_mode,
            request.location,
            request.languages,
        )

    def auto_assign(self, request: AutoAssignBookingRequest) -> TrainingSlot:
        """Auto-assignment from a validated request payload."""
        return self.auto_assign_slot(
            request.onboarding_id,
            request.date,
            request.time_slot,
            request.training_mode,
            request.location,
            request.languages,
            strategy=request.strategy,
            reuse_existing=request.reuse_existing,
        )

    # Lifecycle

    def _transition(self, slot_id: str, target: SlotStatus) -> TrainingSlot:
        slot = self.slot_repository.get_by_id(slot_id)
        if slot is None:
            raise NotFoundException(
                f"Training slot {slot_id} not found",
                code="SLOT_NOT_FOUND",
                details={"slot_id": slot_id},
            )
        if slot.is_terminal:
            raise InvalidSlotStateException(slot_id, slot.status, target.value)

        with self.transaction():
            changed = self.slot_repository.transition_from_booked(
                slot_id, target, datetime.now(timezone.utc)
            )
        self.db.refresh(slot)
        if not changed:
            # Another request moved the slot between our read and the update
            raise InvalidSlotStateException(slot_id, slot.status, target.value)

        self.logger.info(f"Training slot {slot_id} is now {target.value}")
        return slot

    @BaseService.measure_operation("cancel_slot")
    def cancel_slot(self, slot_id: str) -> TrainingSlot:
        """booked -> cancelled. Terminal slots raise InvalidSlotStateException untouched."""
        self.log_operation("cancel_slot", slot_id=slot_id)
        return self._transition(slot_id, SlotStatus.CANCELLED)

    @BaseService.measure_operation("complete_slot")
    def complete_slot(self, slot_id: str) -> TrainingSlot:
        """booked -> completed. Terminal slots raise InvalidSlotStateException untouched."""
        self.log_operation("complete_slot", slot_id=slot_id)
        return self._transition(slot_id, SlotStatus.COMPLETED)

    # Listings

    def list_by_onboarding(self, onboarding_id: str) -> List[TrainingSlot]:
        """Every slot of an onboarding case, any status, ordered by date then bucket."""
        return self.slot_repository.list_by_onboarding(onboarding_id)

    def list_by_trainer(
        self,
        trainer_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TrainingSlot]:
        """Booked slots of a trainer, optionally limited to an inclusive date range."""
        if start_date and end_date and start_date > end_date:
            raise ValidationException(
                "Start date must be on or before end date",
                details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )
        self.directory.get_trainer(trainer_id)
        return self.slot_repository.list_booked_by_trainer(trainer_id, start_date, end_date)

    @BaseService.measure_operation("list_slots")
    def list_slots(
        self,
        filters: Optional[SlotFilters] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> SlotPage:
        """Admin listing with optional filters and 1-based pagination."""
        filters = filters or SlotFilters()
        page = max(page, 1)
        page_size = clamp_limit(limit)

        items, total = self.slot_repository.search(
            start_date=filters.start_date,
            end_date=filters.end_date,
            trainer_id=filters.trainer_id,
            status=filters.status,
            training_mode=filters.training_mode,
            location=_clean_location(filters.location),
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return SlotPage(
            items=[TrainingSlotResponse.model_validate(item) for item in items],
            total=total,
            page=page,
            limit=page_size,
        )
