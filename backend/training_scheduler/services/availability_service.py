# backend/training_scheduler/services/availability_service.py
"""
Availability Service

Computes which time-of-day buckets are open for a training request.

A bucket is open when at least one eligible trainer holds no booked slot
in it on the requested date. Buckets are reported in catalogue order
with the free trainers of each; closed buckets are omitted.
"""

from datetime import date
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import TIME_SLOTS
from ..core.enums import TrainingMode
from ..core.exceptions import ValidationException
from ..models.trainer import Trainer
from ..repositories import RepositoryFactory
from ..repositories.training_slot_repository import TrainingSlotRepository
from ..schemas.trainer import TrainerSummary
from ..schemas.training_slot import AvailableSlot, DayAvailability
from ..utils.business_days import is_business_day, iter_dates
from .base import BaseService
from .trainer_directory_service import TrainerDirectoryService

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    """Open buckets per date for a mode/location/language request."""

    def __init__(
        self,
        db: Session,
        directory: Optional[TrainerDirectoryService] = None,
        slot_repository: Optional[TrainingSlotRepository] = None,
    ):
        super().__init__(db)
        self.directory = directory or TrainerDirectoryService(db)
        self.slot_repository = slot_repository or RepositoryFactory.create_training_slot_repository(db)

    def _open_buckets(self, slot_date: date, pool: List[Trainer]) -> List[AvailableSlot]:
        booked_by_bucket = self.slot_repository.get_booked_trainer_ids_by_bucket(slot_date)

        available: List[AvailableSlot] = []
        for time_slot in TIME_SLOTS:
            booked = booked_by_bucket.get(time_slot, set())
            free = [trainer for trainer in pool if trainer.id not in booked]
            if free:
                available.append(
                    AvailableSlot(
                        time_slot=time_slot,
                        available_trainers=[TrainerSummary.model_validate(t) for t in free],
                    )
                )
        return available

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(
        self,
        slot_date: date,
        mode: TrainingMode,
        location: Optional[str] = None,
        languages: Optional[Iterable[str]] = None,
    ) -> List[AvailableSlot]:
        """
        Open buckets on ``slot_date`` with the trainers free in each.

        Returns an empty list when no trainer is eligible or every bucket is taken.
        """
        pool = self.directory.find_eligible(mode, location, languages)
        if not pool:
            self.logger.info(
                f"No eligible trainers for {TrainingMode(mode).value} on {slot_date} "
                f"(location={location!r})"
            )
            return []
        return self._open_buckets(slot_date, pool)

    @BaseService.measure_operation("get_availability_for_range")
    def get_availability_for_range(
        self,
        start_date: date,
        end_date: date,
        mode: TrainingMode,
        location: Optional[str] = None,
        languages: Optional[Iterable[str]] = None,
        holidays: Optional[Iterable[date]] = None,
    ) -> List[DayAvailability]:
        """
        Per-day availability over an inclusive range.

        Weekends and the supplied holidays are skipped; days without any
        open bucket are omitted.
        """
        if start_date > end_date:
            raise ValidationException(
                "Start date must be on or before end date",
                details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )

        pool = self.directory.find_eligible(mode, location, languages)
        if not pool:
            return []

        holiday_set = frozenset(holidays or ())
        days: List[DayAvailability] = []
        for day in iter_dates(start_date, end_date):
            if not is_business_day(day, holiday_set):
                continue
            open_buckets = self._open_buckets(day, pool)
            if open_buckets:
                days.append(DayAvailability(date=day, available_slots=open_buckets))
        return days
