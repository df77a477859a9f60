from datetime import date, timedelta

import pytest

from training_scheduler.utils.business_days import (
    add_business_days,
    is_business_day,
    iter_dates,
    next_business_day_on_or_after,
    week_bounds,
)


class TestAddBusinessDays:
    def test_friday_plus_one_is_monday(self):
        assert add_business_days(date(2025, 3, 7), 1) == date(2025, 3, 10)

    def test_start_date_never_counts(self):
        assert add_business_days(date(2025, 3, 3), 1) == date(2025, 3, 4)

    def test_skips_holidays(self):
        # Friday 2025-08-29 +1 skips Monday 2025-09-01 when it is a holiday
        holidays = {date(2025, 9, 1)}
        assert add_business_days(date(2025, 8, 29), 1, holidays) == date(2025, 9, 2)

    def test_holiday_on_weekend_changes_nothing(self):
        holidays = {date(2025, 8, 31)}  # Sunday
        assert add_business_days(date(2025, 8, 29), 1, holidays) == date(2025, 9, 1)

    def test_weekend_start(self):
        assert add_business_days(date(2025, 3, 8), 1) == date(2025, 3, 10)

    def test_multiple_weeks(self):
        assert add_business_days(date(2025, 3, 3), 10) == date(2025, 3, 17)

    def test_zero_rolls_forward_to_business_day(self):
        assert add_business_days(date(2025, 3, 8), 0) == date(2025, 3, 10)
        assert add_business_days(date(2025, 3, 5), 0) == date(2025, 3, 5)

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            add_business_days(date(2025, 3, 5), -1)

    @pytest.mark.parametrize("n_days", [1, 2, 3, 5, 8])
    def test_result_is_nth_business_day_after_start(self, n_days):
        holidays = {date(2025, 3, 31), date(2025, 4, 1)}
        start = date(2025, 3, 27)
        result = add_business_days(start, n_days, holidays)
        assert result > start
        assert is_business_day(result, holidays)
        between = iter_dates(start + timedelta(days=1), result)
        assert sum(1 for day in between if is_business_day(day, holidays)) == n_days


def test_is_business_day():
    assert is_business_day(date(2025, 3, 3))
    assert not is_business_day(date(2025, 3, 1))
    assert not is_business_day(date(2025, 3, 2))
    assert not is_business_day(date(2025, 3, 3), [date(2025, 3, 3)])


def test_next_business_day_on_or_after_skips_holiday_monday():
    assert next_business_day_on_or_after(date(2025, 3, 1), {date(2025, 3, 3)}) == date(2025, 3, 4)


class TestWeekBounds:
    def test_midweek(self):
        assert week_bounds(date(2025, 3, 5)) == (date(2025, 3, 3), date(2025, 3, 9))

    def test_sunday_belongs_to_preceding_monday(self):
        assert week_bounds(date(2025, 3, 9)) == (date(2025, 3, 3), date(2025, 3, 9))

    def test_monday_starts_week(self):
        assert week_bounds(date(2025, 3, 10)) == (date(2025, 3, 10), date(2025, 3, 16))


def test_iter_dates_inclusive():
    assert list(iter_dates(date(2025, 3, 1), date(2025, 3, 3))) == [
        date(2025, 3, 1),
        date(2025, 3, 2),
        date(2025, 3, 3),
    ]
    assert list(iter_dates(date(2025, 3, 3), date(2025, 3, 1))) == []
