# backend/training_scheduler/repositories/onboarding_repository.py
"""
Read-only access to onboarding cases owned by the onboarding portal.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models.onboarding import OnboardingCase
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class OnboardingRepository(BaseRepository[OnboardingCase]):
    """Onboarding case reader: ``exists`` and ``get`` only."""

    def __init__(self, db: Session):
        super().__init__(db, OnboardingCase)

    def exists_case(self, onboarding_id: str) -> bool:
        return self.exists(id=onboarding_id)

    def get(self, onboarding_id: str) -> Optional[OnboardingCase]:
        return self.get_by_id(onboarding_id)
