# backend/training_scheduler/repositories/trainer_repository.py
"""
Trainer Repository

Data access for the trainer directory. Eligibility matching on locations
and languages happens in Python on top of ``list_active`` because both
fields are JSON lists matched with containment semantics.
"""

import logging
from typing import List, Optional, cast

from sqlalchemy.orm import Session

from ..core.enums import TrainerStatus
from ..core.exceptions import RepositoryException
from ..models.trainer import Trainer
from ..models.training_slot import TrainingSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TrainerRepository(BaseRepository[Trainer]):
    """Repository for trainer directory queries."""

    def __init__(self, db: Session):
        super().__init__(db, Trainer)
        self.logger = logging.getLogger(__name__)

    def list_active(self) -> List[Trainer]:
        """All active trainers ordered by name."""
        try:
            return cast(
                List[Trainer],
                self.db.query(Trainer)
                .filter(Trainer.status == TrainerStatus.ACTIVE.value)
                .order_by(Trainer.name, Trainer.id)
                .all(),
            )
        except Exception as e:
            self.logger.error(f"Error listing active trainers: {str(e)}")
            raise RepositoryException(f"Failed to list active trainers: {str(e)}")

    def list_trainers(self, status: Optional[TrainerStatus] = None) -> List[Trainer]:
        """All trainers, newest first, optionally filtered by status."""
        try:
            query = self.db.query(Trainer)
            if status is not None:
                query = query.filter(Trainer.status == TrainerStatus(status).value)
            return cast(
                List[Trainer],
                query.order_by(Trainer.created_at.desc(), Trainer.id.desc()).all(),
            )
        except Exception as e:
            self.logger.error(f"Error listing trainers: {str(e)}")
            raise RepositoryException(f"Failed to list trainers: {str(e)}")

    def is_referenced_by_slots(self, trainer_id: str) -> bool:
        """Whether any training slot, in any status, points at this trainer."""
        try:
            return (
                self.db.query(TrainingSlot.id)
                .filter(TrainingSlot.trainer_id == trainer_id)
                .first()
                is not None
            )
        except Exception as e:
            self.logger.error(f"Error checking trainer references: {str(e)}")
            raise RepositoryException(f"Failed to check trainer references: {str(e)}")
