# backend/training_scheduler/core/enums.py
"""
Core enums for the training scheduling engine.

Values are the strings persisted in the database, so members must
never be renamed without a data migration.
"""

from enum import Enum


class TrainingMode(str, Enum):
    """How a training session is delivered."""

    REMOTE = "remote_training"
    ONSITE = "onsite_training"

    @property
    def label(self) -> str:
        return "Onsite" if self is TrainingMode.ONSITE else "Remote"


class SlotStatus(str, Enum):
    """Training slot lifecycle statuses."""

    BOOKED = "booked"  # Default on creation
    COMPLETED = "completed"  # Terminal
    CANCELLED = "cancelled"  # Terminal


class TrainerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TrainerLanguage(str, Enum):
    ENGLISH = "English"
    MALAY = "Malay"
    CHINESE = "Chinese"


class MilestoneCategory(str, Enum):
    """Onboarding services that carry a business-day SLA window."""

    HARDWARE_DELIVERY = "hardware_delivery"
    HARDWARE_INSTALLATION = "hardware_installation"
    REMOTE_TRAINING = "remote_training"
    ONSITE_TRAINING = "onsite_training"


class SelectionStrategy(str, Enum):
    """Named trainer selection policies used by auto-assignment."""

    WEEKLY_LOAD = "weekly_load"
    LIFETIME_LOAD = "lifetime_load"
