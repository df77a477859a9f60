from datetime import date, datetime, timedelta, timezone

import pytest

from training_scheduler.core.enums import SelectionStrategy, SlotStatus
from training_scheduler.core.exceptions import NoTrainersAvailableException, ValidationException
from training_scheduler.repositories import RepositoryFactory
from training_scheduler.services.trainer_selection import (
    LifetimeLoadSelector,
    TrainerWorkloadService,
    WeeklyLoadSelector,
    get_selector,
)

MONDAY = date(2025, 3, 3)
WEDNESDAY = date(2025, 3, 5)
SUNDAY = date(2025, 3, 9)


@pytest.fixture
def ledger(db):
    return RepositoryFactory.create_training_slot_repository(db)


class TestWeeklyLoadSelector:
    def test_picks_least_loaded_this_week(self, ledger, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        c = make_trainer("C")
        make_slot(a, MONDAY, "09:00")
        make_slot(a, WEDNESDAY, "09:00")
        make_slot(c, SUNDAY, "09:00")

        chosen = WeeklyLoadSelector(ledger).select([a, b, c], WEDNESDAY)

        assert chosen.id == b.id

    def test_only_counts_the_reference_week(self, ledger, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        # Heavy load for A in the previous and next weeks does not count
        for offset in (1, 2, 3):
            make_slot(a, MONDAY - timedelta(days=offset), "09:00")
            make_slot(a, SUNDAY + timedelta(days=offset), "09:00")
        make_slot(b, WEDNESDAY, "09:00")

        assert WeeklyLoadSelector(ledger).select([a, b], WEDNESDAY).id == a.id

    def test_sunday_reference_uses_preceding_monday_week(self, ledger, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        make_slot(a, MONDAY, "09:00")
        make_slot(b, SUNDAY + timedelta(days=1), "09:00")

        assert WeeklyLoadSelector(ledger).select([a, b], SUNDAY).id == b.id

    def test_cancelled_and_completed_not_counted(self, ledger, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        make_slot(a, MONDAY, "09:00", status=SlotStatus.CANCELLED)
        make_slot(a, MONDAY, "09:30", status=SlotStatus.COMPLETED)
        make_slot(b, MONDAY, "10:00")

        assert WeeklyLoadSelector(ledger).select([a, b], MONDAY).id == a.id

    def test_ties_keep_pool_order(self, ledger, make_trainer):
        a = make_trainer("A")
        b = make_trainer("B")

        assert WeeklyLoadSelector(ledger).select([b, a], MONDAY).id == b.id

    def test_empty_pool(self, ledger):
        with pytest.raises(NoTrainersAvailableException):
            WeeklyLoadSelector(ledger).select([], MONDAY)

    def test_single_trainer_returned_without_queries(self, make_trainer):
        a = make_trainer("A")

        class ExplodingLedger:
            def count_booked_by_trainer(self, *args, **kwargs):
                raise AssertionError("should not be called")

        assert WeeklyLoadSelector(ExplodingLedger()).select([a], MONDAY) is a

    def test_never_picks_strictly_busier_trainer(self, ledger, make_trainer, make_slot):
        trainers = [make_trainer(name) for name in ("A", "B", "C", "D")]
        buckets = ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]
        selector = WeeklyLoadSelector(ledger)
        week_start, week_end = MONDAY, SUNDAY

        for bucket in buckets:
            counts = ledger.count_booked_by_trainer([t.id for t in trainers], week_start, week_end)
            chosen = selector.select(trainers, WEDNESDAY)
            assert counts[chosen.id] == min(counts.values())
            make_slot(chosen, WEDNESDAY, bucket)


class TestLifetimeLoadSelector:
    def test_lowest_all_time_count_wins(self, ledger, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        make_slot(a, date(2024, 1, 10), "09:00")
        make_slot(a, date(2024, 6, 10), "09:00")
        make_slot(b, date(2024, 3, 10), "09:00")

        assert LifetimeLoadSelector(ledger).select([a, b], MONDAY).id == b.id

    def test_older_last_assignment_breaks_ties(self, ledger, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        base = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
        make_slot(a, MONDAY, "09:00", created_at=base + timedelta(hours=2))
        make_slot(b, MONDAY, "09:30", created_at=base)

        assert LifetimeLoadSelector(ledger).select([a, b], MONDAY).id == b.id

    def test_never_assigned_first_on_equal_count(self, ledger, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        make_slot(a, MONDAY, "09:00", status=SlotStatus.CANCELLED)

        # Both have zero booked slots; neither has a booked assignment timestamp
        assert LifetimeLoadSelector(ledger).select([a, b], MONDAY).id == a.id

        make_slot(a, MONDAY, "09:30")
        make_slot(b, MONDAY, "10:00")
        c = make_trainer("C")
        make_slot(c, MONDAY, "10:30", status=SlotStatus.COMPLETED)
        d = make_trainer("D")

        assert LifetimeLoadSelector(ledger).select([a, b, c, d], MONDAY).id == c.id

    def test_empty_pool(self, ledger):
        with pytest.raises(NoTrainersAvailableException):
            LifetimeLoadSelector(ledger).select([], MONDAY)


class TestGetSelector:
    def test_by_enum(self, ledger):
        assert isinstance(get_selector(SelectionStrategy.LIFETIME_LOAD, ledger), LifetimeLoadSelector)

    def test_by_name(self, ledger):
        assert isinstance(get_selector("weekly_load", ledger), WeeklyLoadSelector)

    def test_unknown_name(self, ledger):
        with pytest.raises(ValidationException):
            get_selector("round_robin", ledger)


class TestTrainerWorkloadService:
    def test_workload_for_range(self, db, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        make_slot(a, MONDAY, "09:00")
        make_slot(a, WEDNESDAY, "09:00")
        make_slot(b, date(2025, 3, 12), "09:00")

        workload = TrainerWorkloadService(db).get_trainer_workload(MONDAY, SUNDAY)

        assert {w.name: w.booked_count for w in workload} == {"A": 2, "B": 0}
        assert all(w.start_date == MONDAY and w.end_date == SUNDAY for w in workload)

    def test_defaults_to_current_week(self, db, make_trainer):
        make_trainer("A")

        workload = TrainerWorkloadService(db).get_trainer_workload()

        assert workload[0].start_date.weekday() == 0
        assert (workload[0].end_date - workload[0].start_date).days == 6

    def test_invalid_range(self, db):
        with pytest.raises(ValidationException):
            TrainerWorkloadService(db).get_trainer_workload(SUNDAY, MONDAY)

    def test_is_assignment_balanced(self, db, make_trainer, make_slot):
        a = make_trainer("A")
        b = make_trainer("B")
        service = TrainerWorkloadService(db)

        make_slot(a, MONDAY, "09:00")
        assert service.is_assignment_balanced([a.id, b.id], MONDAY, SUNDAY)

        make_slot(a, MONDAY, "09:30")
        assert not service.is_assignment_balanced([a.id, b.id], MONDAY, SUNDAY)
        assert service.is_assignment_balanced([a.id], MONDAY, SUNDAY)
