"""Business day helpers: weekends, holiday sets and Monday-based weeks."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Iterator, Optional

BUSINESS_WEEKDAYS = {0, 1, 2, 3, 4}


def _as_holiday_set(holidays: Optional[Iterable[date]]) -> frozenset[date]:
    return frozenset(holidays or ())


def is_business_day(day: date, holidays: Optional[Iterable[date]] = None) -> bool:
    """Return True for Monday-Friday dates that are not in ``holidays``."""
    return day.weekday() in BUSINESS_WEEKDAYS and day not in _as_holiday_set(holidays)


def next_business_day_on_or_after(day: date, holidays: Optional[Iterable[date]] = None) -> date:
    """Roll ``day`` forward until it lands on a business day."""
    holiday_set = _as_holiday_set(holidays)
    current = day
    while not is_business_day(current, holiday_set):
        current += timedelta(days=1)
    return current


def add_business_days(
    start: date, n_days: int, holidays: Optional[Iterable[date]] = None
) -> date:
    """
    Add business days to a date, skipping weekends and holiday dates.

    The start date itself never counts. ``n_days == 0`` returns the first
    business day on or after ``start``.
    """
    if n_days < 0:
        raise ValueError("n_days must be non-negative")

    holiday_set = _as_holiday_set(holidays)

    if n_days == 0:
        return next_business_day_on_or_after(start, holiday_set)

    remaining = n_days
    current = start

    while remaining > 0:
        current += timedelta(days=1)
        if current.weekday() not in BUSINESS_WEEKDAYS:
            continue
        if current in holiday_set:
            continue
        remaining -= 1

    return current


def week_bounds(day: date) -> tuple[date, date]:
    """
    Return the (Monday, Sunday) pair of the week containing ``day``.

    Sunday belongs to the week that started the preceding Monday.
    """
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
