from datetime import date, datetime, timezone
from typing import Callable, Iterable, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from training_scheduler.core.enums import SlotStatus, TrainerStatus, TrainingMode
from training_scheduler.database import Base

# Import models so Base.metadata is populated for create_all.
import training_scheduler.models  # noqa: F401
from training_scheduler.models import OnboardingCase, Trainer, TrainingSlot


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    """Session on a fresh in-memory database; services commit freely."""
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_trainer(db: Session) -> Callable[..., Trainer]:
    def _make(
        name: str,
        languages: Iterable[str] = ("English",),
        locations: Iterable[str] = ("Selangor",),
        status: TrainerStatus = TrainerStatus.ACTIVE,
    ) -> Trainer:
        trainer = Trainer(
            name=name,
            languages=list(languages),
            locations=list(locations),
            status=status.value,
        )
        db.add(trainer)
        db.commit()
        return trainer

    return _make


@pytest.fixture
def make_onboarding(db: Session) -> Callable[..., OnboardingCase]:
    def _make(
        account_name: str = "Kopi Corner Sdn Bhd",
        training_mode: TrainingMode = TrainingMode.REMOTE,
        delivery_state: Optional[str] = "Selangor",
    ) -> OnboardingCase:
        case = OnboardingCase(
            account_name=account_name,
            training_mode=training_mode.value,
            delivery_state=delivery_state,
        )
        db.add(case)
        db.commit()
        return case

    return _make


@pytest.fixture
def make_slot(db: Session, make_onboarding) -> Callable[..., TrainingSlot]:
    """Insert a ledger row directly, bypassing the booking service."""

    def _make(
        trainer: Trainer,
        slot_date: date,
        time_slot: str = "09:00",
        status: SlotStatus = SlotStatus.BOOKED,
        onboarding: Optional[OnboardingCase] = None,
        created_at: Optional[datetime] = None,
    ) -> TrainingSlot:
        case = onboarding or make_onboarding()
        slot = TrainingSlot(
            trainer_id=trainer.id,
            onboarding_id=case.id,
            slot_date=slot_date,
            time_slot=time_slot,
            training_mode=TrainingMode.REMOTE.value,
            languages=[],
            status=status.value,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db.add(slot)
        db.commit()
        return slot

    return _make
