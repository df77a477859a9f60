# backend/training_scheduler/services/milestone_schedule_service.py
"""
SLA date math for onboarding milestones.

Each milestone category (hardware delivery, installation, remote and onsite
training) has a configured {min, max} window in business days relative to
its prerequisite event. The module-level functions are pure: they take the
holiday set as an argument and perform no I/O. MilestoneScheduleService
adds the holiday lookup for callers that only know a region.
"""

from __future__ import annotations

from datetime import date
import logging
from typing import Iterable, Mapping, Optional, Set

from ..core.config import SlaWindow, settings
from ..core.constants import FALLBACK_DELIVERY_TIME, TRAINING_DAYS_AFTER_INSTALLATION
from ..core.enums import MilestoneCategory
from ..utils.business_days import add_business_days, is_business_day
from .holiday_provider import (
    CalendarHolidayProvider,
    FailSafeHolidayProvider,
    HolidayProvider,
    holidays_for_years,
)

logger = logging.getLogger(__name__)


def _window(
    milestone: MilestoneCategory, windows: Optional[Mapping[MilestoneCategory, SlaWindow]]
) -> SlaWindow:
    category = MilestoneCategory(milestone)
    if windows is None:
        return settings.sla_window_for(category)
    return windows[category]


def min_date_for(
    milestone: MilestoneCategory,
    reference_date: date,
    holidays: Optional[Iterable[date]] = None,
    windows: Optional[Mapping[MilestoneCategory, SlaWindow]] = None,
) -> date:
    """Earliest legal date: ``min`` business days after ``reference_date``."""
    return add_business_days(reference_date, _window(milestone, windows).min, holidays)


def max_date_for(
    milestone: MilestoneCategory,
    reference_date: date,
    holidays: Optional[Iterable[date]] = None,
    windows: Optional[Mapping[MilestoneCategory, SlaWindow]] = None,
) -> date:
    """Latest date inside the SLA: ``max`` business days after ``reference_date``."""
    return add_business_days(reference_date, _window(milestone, windows).max, holidays)


def is_within_window(
    milestone: MilestoneCategory,
    reference_date: date,
    candidate: date,
    holidays: Optional[Iterable[date]] = None,
    windows: Optional[Mapping[MilestoneCategory, SlaWindow]] = None,
) -> bool:
    """Whether ``candidate`` is a business day between the window's floor and ceiling."""
    holiday_set = frozenset(holidays or ())
    floor = min_date_for(milestone, reference_date, holiday_set, windows)
    ceiling = max_date_for(milestone, reference_date, holiday_set, windows)
    return floor <= candidate <= ceiling and is_business_day(candidate, holiday_set)


def min_installation_date(
    delivery_confirmed: date,
    delivery_state: str,
    holidays: Optional[Iterable[date]] = None,
    delivery_windows: Optional[Mapping[str, SlaWindow]] = None,
) -> date:
    """
    Earliest installation date once delivery is confirmed.

    Uses the upper bound of the state's delivery estimate so installation is
    never booked before the hardware can have arrived.
    """
    windows = settings.delivery_time_by_state if delivery_windows is None else delivery_windows
    window = windows.get(delivery_state) or SlaWindow(**FALLBACK_DELIVERY_TIME)
    return add_business_days(delivery_confirmed, window.max, holidays)


def min_training_date(
    installation_confirmed: date, holidays: Optional[Iterable[date]] = None
) -> date:
    """Training starts at least one business day after installation is confirmed."""
    return add_business_days(installation_confirmed, TRAINING_DAYS_AFTER_INSTALLATION, holidays)


class MilestoneScheduleService:
    """Resolves holidays for a region and applies the SLA date math."""

    def __init__(
        self,
        holiday_provider: Optional[HolidayProvider] = None,
        region_code: Optional[str] = None,
        windows: Optional[Mapping[MilestoneCategory, SlaWindow]] = None,
    ):
        provider = holiday_provider or CalendarHolidayProvider()
        if not isinstance(provider, FailSafeHolidayProvider):
            provider = FailSafeHolidayProvider(provider)
        self.holiday_provider = provider
        self.region_code = region_code or settings.holiday_region
        self.windows = windows

    def holidays_around(self, reference_date: date, region_code: Optional[str] = None) -> Set[date]:
        """
        Holidays of the reference year and the next one.

        A window of up to ten business days can cross New Year, so both
        calendars are needed.
        """
        region = region_code or self.region_code
        return holidays_for_years(
            self.holiday_provider, region, (reference_date.year, reference_date.year + 1)
        )

    def min_date_for_region(
        self,
        milestone: MilestoneCategory,
        reference_date: date,
        region_code: Optional[str] = None,
    ) -> date:
        holidays = self.holidays_around(reference_date, region_code)
        result = min_date_for(milestone, reference_date, holidays, self.windows)
        logger.debug(
            "Minimum %s date from %s in %s: %s",
            MilestoneCategory(milestone).value,
            reference_date,
            region_code or self.region_code,
            result,
        )
        return result

    def validate_milestone_date(
        self,
        milestone: MilestoneCategory,
        reference_date: date,
        candidate: date,
        region_code: Optional[str] = None,
    ) -> bool:
        holidays = self.holidays_around(reference_date, region_code)
        return is_within_window(milestone, reference_date, candidate, holidays, self.windows)
