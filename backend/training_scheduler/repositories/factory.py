# backend/training_scheduler/repositories/factory.py
"""
Repository Factory

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .onboarding_repository import OnboardingRepository
    from .trainer_repository import TrainerRepository
    from .training_slot_repository import TrainingSlotRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_trainer_repository(db: Session) -> "TrainerRepository":
        """Create repository for the trainer directory."""
        from .trainer_repository import TrainerRepository

        return TrainerRepository(db)

    @staticmethod
    def create_training_slot_repository(db: Session) -> "TrainingSlotRepository":
        """Create repository for the slot ledger."""
        from .training_slot_repository import TrainingSlotRepository

        return TrainingSlotRepository(db)

    @staticmethod
    def create_onboarding_repository(db: Session) -> "OnboardingRepository":
        """Create read-only repository for onboarding cases."""
        from .onboarding_repository import OnboardingRepository

        return OnboardingRepository(db)
