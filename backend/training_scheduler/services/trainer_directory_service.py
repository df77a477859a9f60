# backend/training_scheduler/services/trainer_directory_service.py
"""
Trainer Directory Service

Answers "which trainers can deliver this kind of training" and lets
onboarding managers maintain the trainer roster.

Eligibility:
- only active trainers
- onsite with a location: the location must be contained in one of the
  trainer's serviced regions (case-insensitive)
- languages given: the trainer speaks at least one of them
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import TrainerStatus, TrainingMode
from ..core.exceptions import ConflictException, NotFoundException
from ..models.trainer import Trainer
from ..repositories import RepositoryFactory
from ..repositories.trainer_repository import TrainerRepository
from ..schemas.trainer import TrainerCreate, TrainerUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


def _enum_values(values: Iterable[object]) -> List[str]:
    return [str(getattr(value, "value", value)) for value in values]


class TrainerDirectoryService(BaseService):
    """Read and manage the trainer directory."""

    def __init__(self, db: Session, repository: Optional[TrainerRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_trainer_repository(db)

    @BaseService.measure_operation("find_eligible")
    def find_eligible(
        self,
        mode: TrainingMode,
        location: Optional[str] = None,
        languages: Optional[Iterable[str]] = None,
    ) -> List[Trainer]:
        """
        Active trainers matching the requested mode, location and languages.

        Location only constrains onsite training. No match returns an empty list.
        """
        training_mode = TrainingMode(mode)
        wanted_languages = list(languages or [])
        check_location = training_mode is TrainingMode.ONSITE and bool(location)

        eligible = [
            trainer
            for trainer in self.repository.list_active()
            if (not check_location or trainer.serves_location(location))
            and trainer.speaks_any(wanted_languages)
        ]

        self.logger.debug(
            f"{len(eligible)} eligible trainers for {training_mode.value} "
            f"location={location!r} languages={wanted_languages}"
        )
        return eligible

    def get_trainer(self, trainer_id: str) -> Trainer:
        trainer = self.repository.get_by_id(trainer_id)
        if trainer is None:
            raise NotFoundException(
                f"Trainer {trainer_id} not found",
                code="TRAINER_NOT_FOUND",
                details={"trainer_id": trainer_id},
            )
        return trainer

    def list_trainers(self, status: Optional[TrainerStatus] = None) -> List[Trainer]:
        return self.repository.list_trainers(status)

    @BaseService.measure_operation("create_trainer")
    def create_trainer(self, data: TrainerCreate) -> Trainer:
        """Add a trainer to the directory."""
        self.log_operation("create_trainer", name=data.name)
        with self.transaction():
            trainer = self.repository.create(
                name=data.name,
                languages=_enum_values(data.languages),
                locations=list(data.locations),
                status=TrainerStatus(data.status).value,
                created_by_manager_id=data.created_by_manager_id,
            )
        self.logger.info(f"Created trainer {trainer.id} ({trainer.name})")
        return trainer

    @BaseService.measure_operation("update_trainer")
    def update_trainer(self, trainer_id: str, data: TrainerUpdate) -> Trainer:
        """Apply a partial update. Existing slots keep their trainer."""
        trainer = self.get_trainer(trainer_id)
        changes = data.model_dump(exclude_unset=True)
        if "languages" in changes and changes["languages"] is not None:
            changes["languages"] = _enum_values(changes["languages"])
        if "status" in changes and changes["status"] is not None:
            changes["status"] = TrainerStatus(changes["status"]).value
        changes = {key: value for key, value in changes.items() if value is not None}

        self.log_operation("update_trainer", trainer_id=trainer_id, fields=sorted(changes))
        if not changes:
            return trainer
        with self.transaction():
            updated = self.repository.update(trainer_id, **changes)
        return updated or trainer

    @BaseService.measure_operation("toggle_trainer_status")
    def toggle_status(self, trainer_id: str) -> Trainer:
        """Flip a trainer between active and inactive."""
        trainer = self.get_trainer(trainer_id)
        new_status = TrainerStatus.INACTIVE if trainer.is_active else TrainerStatus.ACTIVE
        with self.transaction():
            trainer.status = new_status.value
            self.db.flush()
        self.logger.info(f"Trainer {trainer_id} is now {new_status.value}")
        return trainer

    @BaseService.measure_operation("delete_trainer")
    def delete_trainer(self, trainer_id: str) -> None:
        """
        Hard-delete a trainer that no slot references.

        Raises:
            NotFoundException: Unknown trainer
            ConflictException: Slots reference the trainer; deactivate instead
        """
        self.get_trainer(trainer_id)
        if self.repository.is_referenced_by_slots(trainer_id):
            raise ConflictException(
                "Trainer has training slots and cannot be deleted; deactivate the trainer instead",
                code="TRAINER_IN_USE",
                details={"trainer_id": trainer_id},
            )
        with self.transaction():
            self.repository.delete(trainer_id)
        self.logger.info(f"Deleted trainer {trainer_id}")
