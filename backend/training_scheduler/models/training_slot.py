# backend/training_scheduler/models/training_slot.py
"""
TrainingSlot model: the unit of the slot ledger.

A slot records one training occurrence (date + time-of-day bucket) for
one onboarding case, delivered by one trainer. Slots are created booked,
move once to completed or cancelled, and are never deleted.

The partial unique index on (slot_date, time_slot, trainer_id) for booked
rows is what guarantees a trainer is never double-booked, even when two
bookings race past the application-level availability check.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import SlotStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base

BOOKED_TRAINER_BUCKET_INDEX = "uq_training_slots_booked_trainer_bucket"

TERMINAL_STATUSES = frozenset({SlotStatus.COMPLETED.value, SlotStatus.CANCELLED.value})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrainingSlot(Base):
    """Booked, completed or cancelled training occurrence."""

    __tablename__ = "training_slots"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    slot_date = Column(Date, nullable=False, index=True)
    time_slot = Column(String(5), nullable=False)
    training_mode = Column(String(32), nullable=False)
    location = Column(String(255), nullable=True)  # Onsite only
    languages = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default=SlotStatus.BOOKED.value, index=True)

    trainer_id = Column(String(26), ForeignKey("trainers.id"), nullable=False, index=True)
    onboarding_id = Column(
        String(26), ForeignKey("onboarding_cases.id"), nullable=False, index=True
    )

    # Python-side default keeps sub-second ordering for assignment recency
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    trainer = relationship("Trainer", backref="training_slots")
    onboarding = relationship("OnboardingCase", backref="training_slots")

    __table_args__ = (
        CheckConstraint(
            "status IN ('booked', 'completed', 'cancelled')",
            name="ck_training_slots_status",
        ),
        CheckConstraint(
            "training_mode IN ('remote_training', 'onsite_training')",
            name="ck_training_slots_mode",
        ),
        CheckConstraint(
            "training_mode <> 'onsite_training' OR location IS NOT NULL",
            name="ck_training_slots_onsite_location",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<TrainingSlot {self.id}: trainer={self.trainer_id}, "
            f"date={self.slot_date}, time={self.time_slot}, status={self.status}>"
        )

    @property
    def is_booked(self) -> bool:
        return self.status == SlotStatus.BOOKED.value

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "date": self.slot_date.isoformat() if self.slot_date else None,
            "time_slot": self.time_slot,
            "training_mode": self.training_mode,
            "location": self.location,
            "languages": list(self.languages or []),
            "status": self.status,
            "trainer_id": self.trainer_id,
            "onboarding_id": self.onboarding_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
        }


Index(
    BOOKED_TRAINER_BUCKET_INDEX,
    TrainingSlot.slot_date,
    TrainingSlot.time_slot,
    TrainingSlot.trainer_id,
    unique=True,
    postgresql_where=text("status = 'booked'"),
    sqlite_where=text("status = 'booked'"),
)


Index(
    "ix_training_slots_date_time_slot",
    TrainingSlot.slot_date,
    TrainingSlot.time_slot,
)
