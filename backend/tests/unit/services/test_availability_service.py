from datetime import date

import pytest

from training_scheduler.core.constants import TIME_SLOTS
from training_scheduler.core.enums import SlotStatus, TrainingMode
from training_scheduler.core.exceptions import ValidationException
from training_scheduler.services.availability_service import AvailabilityService

DAY = date(2025, 3, 3)


@pytest.fixture
def availability(db):
    return AvailabilityService(db)


class TestGetAvailableSlots:
    def test_all_buckets_open_in_catalogue_order(self, availability, make_trainer):
        make_trainer("Aisyah")

        slots = availability.get_available_slots(DAY, TrainingMode.REMOTE)

        assert [s.time_slot for s in slots] == list(TIME_SLOTS)

    def test_booked_trainer_removed_from_bucket(self, availability, make_trainer, make_slot):
        aisyah = make_trainer("Aisyah")
        ben = make_trainer("Ben")
        make_slot(aisyah, DAY, "10:00")

        slots = {s.time_slot: s for s in availability.get_available_slots(DAY, TrainingMode.REMOTE)}

        assert [t.id for t in slots["10:00"].available_trainers] == [ben.id]
        assert {t.id for t in slots["09:00"].available_trainers} == {aisyah.id, ben.id}

    def test_fully_booked_bucket_omitted(self, availability, make_trainer, make_slot):
        aisyah = make_trainer("Aisyah")
        make_slot(aisyah, DAY, "14:00")

        buckets = [s.time_slot for s in availability.get_available_slots(DAY, TrainingMode.REMOTE)]

        assert "14:00" not in buckets
        assert len(buckets) == len(TIME_SLOTS) - 1

    def test_cancelled_and_completed_slots_do_not_block(self, availability, make_trainer, make_slot):
        aisyah = make_trainer("Aisyah")
        make_slot(aisyah, DAY, "09:00", status=SlotStatus.CANCELLED)
        make_slot(aisyah, DAY, "09:30", status=SlotStatus.COMPLETED)

        buckets = [s.time_slot for s in availability.get_available_slots(DAY, TrainingMode.REMOTE)]

        assert buckets[:2] == ["09:00", "09:30"]

    def test_other_dates_do_not_block(self, availability, make_trainer, make_slot):
        aisyah = make_trainer("Aisyah")
        make_slot(aisyah, date(2025, 3, 4), "09:00")
        assert len(availability.get_available_slots(DAY, TrainingMode.REMOTE)) == len(TIME_SLOTS)

    def test_no_eligible_trainers(self, availability, make_trainer):
        make_trainer("Chong", languages=["Chinese"], locations=["Penang"])
        make_trainer("Lim", languages=["English", "Chinese"], locations=["Penang", "Kedah"])

        slots = availability.get_available_slots(
            date(2025, 3, 1), TrainingMode.ONSITE, "Selangor", ["Malay"]
        )

        assert slots == []

    def test_trainer_summary_fields(self, availability, make_trainer):
        make_trainer("Aisyah", languages=["Malay"], locations=["Selangor"])

        trainer = availability.get_available_slots(DAY, TrainingMode.REMOTE)[0].available_trainers[0]

        assert trainer.name == "Aisyah"
        assert trainer.languages == ["Malay"]
        assert trainer.status == "active"


class TestGetAvailabilityForRange:
    def test_skips_weekends_and_holidays(self, availability, make_trainer):
        make_trainer("Aisyah")

        days = availability.get_availability_for_range(
            date(2025, 3, 7),
            date(2025, 3, 11),
            TrainingMode.REMOTE,
            holidays=[date(2025, 3, 10)],
        )

        assert [d.date for d in days] == [date(2025, 3, 7), date(2025, 3, 11)]

    def test_fully_booked_day_omitted(self, availability, make_trainer, make_slot):
        aisyah = make_trainer("Aisyah")
        for time_slot in TIME_SLOTS:
            make_slot(aisyah, date(2025, 3, 4), time_slot)

        days = availability.get_availability_for_range(
            date(2025, 3, 3), date(2025, 3, 5), TrainingMode.REMOTE
        )

        assert [d.date for d in days] == [date(2025, 3, 3), date(2025, 3, 5)]

    def test_start_after_end_rejected(self, availability):
        with pytest.raises(ValidationException):
            availability.get_availability_for_range(
                date(2025, 3, 5), date(2025, 3, 3), TrainingMode.REMOTE
            )

    def test_empty_pool_returns_nothing(self, availability):
        assert (
            availability.get_availability_for_range(
                date(2025, 3, 3), date(2025, 3, 7), TrainingMode.REMOTE
            )
            == []
        )
