# backend/training_scheduler/repositories/__init__.py
"""
Repository Pattern Implementation for the training scheduling engine.

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- RepositoryFactory: Factory for creating repository instances
- TrainerRepository: Trainer directory lookups
- TrainingSlotRepository: The slot ledger (booked/completed/cancelled slots)
- OnboardingRepository: Read-only onboarding case reader

Usage:
    from training_scheduler.repositories import RepositoryFactory

    # In a service:
    ledger = RepositoryFactory.create_training_slot_repository(db)
    booked = ledger.get_booked_trainer_ids(slot_date, "09:00")
"""

from .base_repository import BaseRepository
from .factory import RepositoryFactory
from .onboarding_repository import OnboardingRepository
from .trainer_repository import TrainerRepository
from .training_slot_repository import TrainingSlotRepository

__all__ = [
    "BaseRepository",
    "RepositoryFactory",
    "OnboardingRepository",
    "TrainerRepository",
    "TrainingSlotRepository",
]
