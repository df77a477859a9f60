# backend/training_scheduler/services/trainer_selection.py
"""
Trainer selection strategies for auto-assignment.

Two load-balancing policies share one interface:

- weekly_load: fewest booked slots in the Monday-Sunday week of the
  session date; ties keep pool order.
- lifetime_load: fewest booked slots overall, then the trainer whose last
  assignment is oldest; trainers never assigned win ties.

Both only look at booked slots, so cancelled and completed sessions do
not count against a trainer.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Type

from sqlalchemy.orm import Session

from ..core.enums import SelectionStrategy
from ..core.exceptions import NoTrainersAvailableException, ValidationException
from ..models.trainer import Trainer
from ..repositories import RepositoryFactory
from ..repositories.trainer_repository import TrainerRepository
from ..repositories.training_slot_repository import TrainingSlotRepository
from ..schemas.trainer import TrainerWorkload
from ..utils.business_days import week_bounds
from .base import BaseService

logger = logging.getLogger(__name__)


class TrainerSelector(ABC):
    """Pick one trainer from a pool of free, eligible trainers."""

    strategy: SelectionStrategy

    def __init__(self, repository: TrainingSlotRepository):
        self.repository = repository

    def select(self, pool: Sequence[Trainer], reference_date: date) -> Trainer:
        candidates = list(pool)
        if not candidates:
            raise NoTrainersAvailableException(
                details={"date": reference_date.isoformat(), "strategy": self.strategy.value}
            )
        if len(candidates) == 1:
            return candidates[0]

        chosen = self.rank(candidates, reference_date)[0]
        logger.debug(
            "Strategy %s picked trainer %s out of %d candidates for %s",
            self.strategy.value,
            chosen.id,
            len(candidates),
            reference_date,
        )
        return chosen

    @abstractmethod
    def rank(self, pool: List[Trainer], reference_date: date) -> List[Trainer]:
        """Return the pool ordered from most to least preferred."""


class WeeklyLoadSelector(TrainerSelector):
    strategy = SelectionStrategy.WEEKLY_LOAD

    def rank(self, pool: List[Trainer], reference_date: date) -> List[Trainer]:
        week_start, week_end = week_bounds(reference_date)
        counts = self.repository.count_booked_by_trainer(
            [trainer.id for trainer in pool], week_start, week_end
        )
        # sorted() is stable, so equal counts keep pool order
        return sorted(pool, key=lambda trainer: counts.get(trainer.id, 0))


class LifetimeLoadSelector(TrainerSelector):
    strategy = SelectionStrategy.LIFETIME_LOAD

    def rank(self, pool: List[Trainer], reference_date: date) -> List[Trainer]:
        trainer_ids = [trainer.id for trainer in pool]
        counts = self.repository.count_booked_by_trainer(trainer_ids)
        latest = self.repository.latest_booked_at_by_trainer(trainer_ids)

        def sort_key(trainer: Trainer) -> Tuple[int, bool, datetime]:
            last = latest.get(trainer.id)
            return (counts.get(trainer.id, 0), last is not None, last or datetime.min)

        return sorted(pool, key=sort_key)


SELECTORS: Dict[SelectionStrategy, Type[TrainerSelector]] = {
    SelectionStrategy.WEEKLY_LOAD: WeeklyLoadSelector,
    SelectionStrategy.LIFETIME_LOAD: LifetimeLoadSelector,
}


def get_selector(name: str, repository: TrainingSlotRepository) -> TrainerSelector:
    """Build the selector registered under ``name``."""
    try:
        strategy = SelectionStrategy(getattr(name, "value", name))
    except ValueError:
        raise ValidationException(
            f"Unknown selection strategy {name!r}",
            details={"strategy": str(name), "allowed": [s.value for s in SelectionStrategy]},
        )
    return SELECTORS[strategy](repository)


class TrainerWorkloadService(BaseService):
    """Booked-slot counts per trainer, for dashboards and fairness checks."""

    def __init__(
        self,
        db: Session,
        slot_repository: Optional[TrainingSlotRepository] = None,
        trainer_repository: Optional[TrainerRepository] = None,
    ):
        super().__init__(db)
        self.slot_repository = slot_repository or RepositoryFactory.create_training_slot_repository(db)
        self.trainer_repository = trainer_repository or RepositoryFactory.create_trainer_repository(db)

    @BaseService.measure_operation("get_trainer_workload")
    def get_trainer_workload(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> List[TrainerWorkload]:
        """Booked counts of every active trainer; defaults to the current week."""
        if start_date is None or end_date is None:
            week_start, week_end = week_bounds(date.today())
            start_date = start_date or week_start
            end_date = end_date or week_end
        if start_date > end_date:
            raise ValidationException(
                "Start date must be on or before end date",
                details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )

        trainers = self.trainer_repository.list_active()
        counts = self.slot_repository.count_booked_by_trainer(
            [trainer.id for trainer in trainers], start_date, end_date
        )
        return [
            TrainerWorkload(
                trainer_id=trainer.id,
                name=trainer.name,
                booked_count=counts.get(trainer.id, 0),
                start_date=start_date,
                end_date=end_date,
            )
            for trainer in trainers
        ]

    def is_assignment_balanced(
        self, trainer_ids: Sequence[str], start_date: date, end_date: date
    ) -> bool:
        """True when booked counts across ``trainer_ids`` differ by at most one."""
        ids = list(dict.fromkeys(trainer_ids))
        if len(ids) <= 1:
            return True
        counts = self.slot_repository.count_booked_by_trainer(ids, start_date, end_date)
        return max(counts.values()) - min(counts.values()) <= 1
