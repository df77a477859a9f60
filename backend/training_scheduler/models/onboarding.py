# backend/training_scheduler/models/onboarding.py
"""
Onboarding case as seen by the scheduling engine.

The onboarding portal owns these records; the engine only checks that a
case exists and reads its training preferences. Training slots reference
the case by foreign key.
"""

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class OnboardingCase(Base):
    __tablename__ = "onboarding_cases"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    account_name = Column(String(255), nullable=False)
    training_mode = Column(String(32), nullable=True)
    training_location = Column(String(255), nullable=True)
    training_languages = Column(JSON, nullable=False, default=list)
    delivery_state = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<OnboardingCase {self.id}: {self.account_name}>"
