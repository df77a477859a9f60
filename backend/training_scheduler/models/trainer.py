# backend/training_scheduler/models/trainer.py
"""
Trainer model for the training scheduling engine.

Trainers are created by onboarding managers and deliver remote or
onsite training sessions. Only active trainers take new assignments;
trainers are deactivated rather than deleted once slots reference them.
"""

from typing import Any, Iterable, Optional

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, String
from sqlalchemy.sql import func

from ..core.enums import TrainerStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base


def _normalize(value: Any) -> str:
    text = str(getattr(value, "value", value))
    return " ".join(text.split()).casefold()


class Trainer(Base):
    """
    Trainer record with spoken languages and serviced regions.

    Location and language matching is deliberately permissive: a requested
    location matches when it is contained in any of the trainer's location
    strings, and a language request matches when any one language is shared.
    """

    __tablename__ = "trainers"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(255), nullable=False)
    languages = Column(JSON, nullable=False, default=list)
    locations = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default=TrainerStatus.ACTIVE.value, index=True)
    created_by_manager_id = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="ck_trainers_status"),
    )

    def __repr__(self) -> str:
        return f"<Trainer {self.id}: {self.name} status={self.status}>"

    @property
    def is_active(self) -> bool:
        return self.status == TrainerStatus.ACTIVE.value

    def serves_location(self, location: Optional[str]) -> bool:
        """Return True when ``location`` is contained in any serviced region."""
        if not location:
            return True
        wanted = _normalize(location)
        return any(wanted in _normalize(region) for region in self.locations or [])

    def speaks_any(self, languages: Optional[Iterable[str]]) -> bool:
        """Return True when at least one requested language is spoken (empty request matches)."""
        wanted = {_normalize(lang) for lang in languages or [] if lang}
        if not wanted:
            return True
        spoken = {_normalize(lang) for lang in self.languages or []}
        return bool(wanted & spoken)
