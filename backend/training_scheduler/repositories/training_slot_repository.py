# backend/training_scheduler/repositories/training_slot_repository.py
"""
TrainingSlot Repository (the slot ledger)

Authoritative record of booked, completed and cancelled training
occurrences. Besides plain lookups it provides:
- per-bucket booked trainer sets for availability
- assignment counts and recency for trainer selection
- compare-and-swap status transitions so a terminal slot is never revived

Double-booking is prevented by the partial unique index on booked rows;
``create_booked_slot`` lets the resulting IntegrityError propagate.
"""

from collections import defaultdict
from datetime import date, datetime
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, cast

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..core.enums import SlotStatus, TrainingMode
from ..core.exceptions import RepositoryException
from ..models.training_slot import TrainingSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

BOOKED = SlotStatus.BOOKED.value


class TrainingSlotRepository(BaseRepository[TrainingSlot]):
    """Repository for slot ledger reads and writes."""

    def __init__(self, db: Session):
        super().__init__(db, TrainingSlot)
        self.logger = logging.getLogger(__name__)

    # Availability queries

    def get_booked_for_date(self, slot_date: date) -> List[TrainingSlot]:
        """All booked slots on a date, ordered by bucket."""
        try:
            return cast(
                List[TrainingSlot],
                self.db.query(TrainingSlot)
                .filter(TrainingSlot.slot_date == slot_date, TrainingSlot.status == BOOKED)
                .order_by(TrainingSlot.time_slot)
                .all(),
            )
        except Exception as e:
            self.logger.error(f"Error getting booked slots for {slot_date}: {str(e)}")
            raise RepositoryException(f"Failed to get booked slots: {str(e)}")

    def get_booked_trainer_ids_by_bucket(self, slot_date: date) -> Dict[str, Set[str]]:
        """Map each bucket on ``slot_date`` to the trainer ids already booked in it."""
        booked: Dict[str, Set[str]] = defaultdict(set)
        for slot in self.get_booked_for_date(slot_date):
            booked[slot.time_slot].add(slot.trainer_id)
        return dict(booked)

    def get_booked_trainer_ids(self, slot_date: date, time_slot: str) -> Set[str]:
        """Trainer ids booked at a specific date and bucket."""
        try:
            rows = (
                self.db.query(TrainingSlot.trainer_id)
                .filter(
                    TrainingSlot.slot_date == slot_date,
                    TrainingSlot.time_slot == time_slot,
                    TrainingSlot.status == BOOKED,
                )
                .all()
            )
            return {row[0] for row in rows}
        except Exception as e:
            self.logger.error(f"Error getting booked trainers: {str(e)}")
            raise RepositoryException(f"Failed to get booked trainers: {str(e)}")

    def has_booked_slot(self, slot_date: date, time_slot: str, trainer_id: str) -> bool:
        """Whether the trainer already holds a booked slot at this date and bucket."""
        try:
            return (
                self.db.query(TrainingSlot.id)
                .filter(
                    TrainingSlot.slot_date == slot_date,
                    TrainingSlot.time_slot == time_slot,
                    TrainingSlot.trainer_id == trainer_id,
                    TrainingSlot.status == BOOKED,
                )
                .first()
                is not None
            )
        except Exception as e:
            self.logger.error(f"Error checking slot conflict: {str(e)}")
            raise RepositoryException(f"Failed to check slot conflict: {str(e)}")

    # Writes

    def create_booked_slot(
        self,
        *,
        onboarding_id: str,
        trainer_id: str,
        slot_date: date,
        time_slot: str,
        training_mode: TrainingMode,
        location: Optional[str],
        languages: Iterable[str],
    ) -> TrainingSlot:
        """Insert a booked slot. Remote slots never store a location."""
        mode = TrainingMode(training_mode)
        return self.create(
            onboarding_id=onboarding_id,
            trainer_id=trainer_id,
            slot_date=slot_date,
            time_slot=time_slot,
            training_mode=mode.value,
            location=location if mode is TrainingMode.ONSITE else None,
            languages=list(languages or []),
            status=BOOKED,
        )

    def transition_from_booked(
        self, slot_id: str, new_status: SlotStatus, changed_at: datetime
    ) -> bool:
        """
        Move a slot out of BOOKED in a single conditional UPDATE.

        Returns False when the slot was not booked at the time of the update,
        which leaves the row untouched.
        """
        target = SlotStatus(new_status)
        values: Dict[str, Any] = {"status": target.value, "updated_at": changed_at}
        if target is SlotStatus.COMPLETED:
            values["completed_at"] = changed_at
        elif target is SlotStatus.CANCELLED:
            values["cancelled_at"] = changed_at
        else:
            raise ValueError(f"Cannot transition a slot to {target.value}")

        try:
            updated = (
                self.db.query(TrainingSlot)
                .filter(TrainingSlot.id == slot_id, TrainingSlot.status == BOOKED)
                .update(values, synchronize_session="fetch")
            )
            self.db.flush()
            return bool(updated)
        except Exception as e:
            self.logger.error(f"Error updating slot {slot_id} status: {str(e)}")
            raise RepositoryException(f"Failed to update slot status: {str(e)}")

    # Selection statistics

    def count_booked_by_trainer(
        self,
        trainer_ids: List[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Dict[str, int]:
        """
        Count booked slots per trainer, optionally within an inclusive date range.

        Trainers without bookings are reported with a count of 0.
        """
        if not trainer_ids:
            return {}
        try:
            query = self.db.query(TrainingSlot.trainer_id, func.count(TrainingSlot.id)).filter(
                TrainingSlot.trainer_id.in_(trainer_ids),
                TrainingSlot.status == BOOKED,
            )
            if start_date is not None:
                query = query.filter(TrainingSlot.slot_date >= start_date)
            if end_date is not None:
                query = query.filter(TrainingSlot.slot_date <= end_date)
            counts = dict(query.group_by(TrainingSlot.trainer_id).all())
            return {trainer_id: int(counts.get(trainer_id, 0)) for trainer_id in trainer_ids}
        except Exception as e:
            self.logger.error(f"Error counting trainer assignments: {str(e)}")
            raise RepositoryException(f"Failed to count assignments: {str(e)}")

    def latest_booked_at_by_trainer(self, trainer_ids: List[str]) -> Dict[str, datetime]:
        """Most recent booked-slot creation time per trainer (absent when never assigned)."""
        if not trainer_ids:
            return {}
        try:
            rows = (
                self.db.query(TrainingSlot.trainer_id, func.max(TrainingSlot.created_at))
                .filter(
                    TrainingSlot.trainer_id.in_(trainer_ids),
                    TrainingSlot.status == BOOKED,
                )
                .group_by(TrainingSlot.trainer_id)
                .all()
            )
            return {trainer_id: latest for trainer_id, latest in rows if latest is not None}
        except Exception as e:
            self.logger.error(f"Error loading last assignments: {str(e)}")
            raise RepositoryException(f"Failed to load last assignments: {str(e)}")

    # Listings

    def get_booked_for_onboarding(self, onboarding_id: str) -> Optional[TrainingSlot]:
        """The earliest booked slot of an onboarding case, if any."""
        try:
            return cast(
                Optional[TrainingSlot],
                self.db.query(TrainingSlot)
                .filter(TrainingSlot.onboarding_id == onboarding_id, TrainingSlot.status == BOOKED)
                .order_by(TrainingSlot.slot_date, TrainingSlot.time_slot)
                .first(),
            )
        except Exception as e:
            self.logger.error(f"Error getting booked slot for onboarding: {str(e)}")
            raise RepositoryException(f"Failed to get onboarding slot: {str(e)}")

    def list_by_onboarding(self, onboarding_id: str) -> List[TrainingSlot]:
        """Every slot of an onboarding case, in any status, ordered by date and bucket."""
        try:
            return cast(
                List[TrainingSlot],
                self.db.query(TrainingSlot)
                .options(joinedload(TrainingSlot.trainer))
                .filter(TrainingSlot.onboarding_id == onboarding_id)
                .order_by(TrainingSlot.slot_date, TrainingSlot.time_slot)
                .all(),
            )
        except Exception as e:
            self.logger.error(f"Error listing onboarding slots: {str(e)}")
            raise RepositoryException(f"Failed to list onboarding slots: {str(e)}")

    def list_booked_by_trainer(
        self,
        trainer_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TrainingSlot]:
        """Booked slots of a trainer, optionally within an inclusive date range."""
        try:
            query = (
                self.db.query(TrainingSlot)
                .options(joinedload(TrainingSlot.onboarding))
                .filter(TrainingSlot.trainer_id == trainer_id, TrainingSlot.status == BOOKED)
            )
            if start_date is not None:
                query = query.filter(TrainingSlot.slot_date >= start_date)
            if end_date is not None:
                query = query.filter(TrainingSlot.slot_date <= end_date)
            return cast(
                List[TrainingSlot],
                query.order_by(TrainingSlot.slot_date, TrainingSlot.time_slot).all(),
            )
        except Exception as e:
            self.logger.error(f"Error listing trainer slots: {str(e)}")
            raise RepositoryException(f"Failed to list trainer slots: {str(e)}")

    def search(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        trainer_id: Optional[str] = None,
        status: Optional[SlotStatus] = None,
        training_mode: Optional[TrainingMode] = None,
        location: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[TrainingSlot], int]:
        """Filtered, paginated slot listing. Returns (page items, total matches)."""
        try:
            query = self.db.query(TrainingSlot)
            if start_date is not None:
                query = query.filter(TrainingSlot.slot_date >= start_date)
            if end_date is not None:
                query = query.filter(TrainingSlot.slot_date <= end_date)
            if trainer_id:
                query = query.filter(TrainingSlot.trainer_id == trainer_id)
            if status is not None:
                query = query.filter(TrainingSlot.status == SlotStatus(status).value)
            if training_mode is not None:
                query = query.filter(
                    TrainingSlot.training_mode == TrainingMode(training_mode).value
                )
            if location:
                query = query.filter(TrainingSlot.location == location)

            total = query.count()
            items = (
                query.options(joinedload(TrainingSlot.trainer))
                .order_by(TrainingSlot.slot_date, TrainingSlot.time_slot, TrainingSlot.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
            return cast(List[TrainingSlot], items), total
        except Exception as e:
            self.logger.error(f"Error searching training slots: {str(e)}")
            raise RepositoryException(f"Failed to search training slots: {str(e)}")
