"""
Database models for the training scheduling engine.

- Trainer: trainer directory records
- TrainingSlot: slot ledger entries (booked / completed / cancelled)
- OnboardingCase: read-only view of the onboarding portal's cases
"""

from .onboarding import OnboardingCase
from .trainer import Trainer
from .training_slot import TrainingSlot

__all__ = [
    "OnboardingCase",
    "Trainer",
    "TrainingSlot",
]
