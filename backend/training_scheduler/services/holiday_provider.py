# backend/training_scheduler/services/holiday_provider.py
"""
Public holiday calendars consumed by SLA math and range availability.

The real calendar source is external to the engine; anything exposing
``get_holidays(year, region_code)`` can be plugged in. Two providers ship
with the engine:

- CalendarHolidayProvider: national and state calendars from the
  ``holidays`` package plus the dates configured in
  ``settings.extra_holidays`` (ad-hoc replacement or cuti peristiwa days).
- FailSafeHolidayProvider: wraps another provider and either degrades to
  "no holidays" or raises HolidayProviderUnavailableException when the
  wrapped provider fails.
"""

from __future__ import annotations

from datetime import date
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Set

import holidays

from ..core.config import settings
from ..core.exceptions import HolidayProviderUnavailableException

logger = logging.getLogger(__name__)


class HolidayProvider(Protocol):
    def get_holidays(self, year: int, region_code: str) -> Set[date]:
        """Return the non-working dates of ``year`` for ``region_code``."""
        ...


def split_region_code(region_code: str) -> tuple[str, Optional[str]]:
    """Split an ISO 3166-2 code such as ``MY-10`` into (``MY``, ``10``)."""
    country, _, subdivision = region_code.strip().upper().partition("-")
    return country, subdivision or None


class CalendarHolidayProvider:
    """
    Public holidays from the ``holidays`` package plus configured extra dates.

    Extra dates keyed by country (``MY``) apply to every region of that
    country; dates keyed by region (``MY-10``) apply to that region only.
    Unsupported countries or subdivisions raise NotImplementedError.
    """

    def __init__(self, extra_holidays: Optional[Mapping[str, Iterable[date]]] = None):
        source = settings.extra_holidays if extra_holidays is None else extra_holidays
        self._extra: Dict[str, List[date]] = {
            code.upper(): list(days) for code, days in source.items()
        }

    def get_holidays(self, year: int, region_code: str) -> Set[date]:
        country, subdivision = split_region_code(region_code)
        calendar = holidays.country_holidays(country, subdiv=subdivision, years=year)
        result: Set[date] = set(calendar.keys())

        for code in {country, region_code.strip().upper()}:
            result |= {day for day in self._extra.get(code, []) if day.year == year}

        return result


class FailSafeHolidayProvider:
    """Shield callers from an unreliable holiday provider."""

    def __init__(self, inner: HolidayProvider, fail_open: Optional[bool] = None):
        self.inner = inner
        self.fail_open = settings.holiday_provider_fail_open if fail_open is None else fail_open

    def get_holidays(self, year: int, region_code: str) -> Set[date]:
        try:
            return set(self.inner.get_holidays(year, region_code))
        except Exception as exc:
            if self.fail_open:
                logger.warning(
                    "Holiday provider failed for %s/%s, assuming no holidays: %s",
                    region_code,
                    year,
                    exc,
                )
                return set()
            raise HolidayProviderUnavailableException(region_code, year, str(exc)) from exc


def holidays_for_years(provider: HolidayProvider, region_code: str, years: Iterable[int]) -> Set[date]:
    """Union of the provider's holidays over several years."""
    result: Set[date] = set()
    for year in sorted(set(years)):
        result |= provider.get_holidays(year, region_code)
    return result
