# backend/training_scheduler/core/config.py
from datetime import date
import logging
import os
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_DELIVERY_TIME_BY_STATE
from .enums import MilestoneCategory, SelectionStrategy

logger = logging.getLogger(__name__)


class SlaWindow(BaseModel):
    """A {min, max} business-day window relative to a prerequisite event."""

    min: int = Field(..., ge=0, description="Earliest business day offset")
    max: int = Field(..., ge=0, description="Latest business day offset")

    @model_validator(mode="after")
    def _check_order(self) -> "SlaWindow":
        if self.min > self.max:
            raise ValueError(f"SLA window min ({self.min}) must not exceed max ({self.max})")
        return self


def _default_sla_windows() -> Dict[MilestoneCategory, SlaWindow]:
    return {
        MilestoneCategory.HARDWARE_DELIVERY: SlaWindow(min=1, max=10),
        MilestoneCategory.HARDWARE_INSTALLATION: SlaWindow(min=2, max=5),
        MilestoneCategory.REMOTE_TRAINING: SlaWindow(min=1, max=5),
        # Onsite needs more coordination than remote
        MilestoneCategory.ONSITE_TRAINING: SlaWindow(min=3, max=10),
    }


def _default_delivery_windows() -> Dict[str, SlaWindow]:
    return {
        state: SlaWindow(**window) for state, window in DEFAULT_DELIVERY_TIME_BY_STATE.items()
    }


class Settings(BaseSettings):
    database_url: str = Field(
        default="sqlite+pysqlite:///./training_scheduler.db",
        description="SQLAlchemy URL for the trainer directory and slot ledger",
    )
    sql_echo: bool = Field(default=False, description="Echo SQL statements to the log")
    environment: str = Field(default="development", description="Deployment environment name")

    # Public holiday calendar
    holiday_region: str = Field(
        default="MY-10",
        description="Default region code passed to the holiday provider (MY-10 = Selangor)",
    )
    holiday_provider_fail_open: bool = Field(
        default=True,
        description="Treat holiday provider failures as 'no holidays' instead of raising",
    )
    extra_holidays: Dict[str, List[date]] = Field(
        default_factory=dict,
        description="Holiday dates added to the calendar, keyed by country (MY) or region (MY-10)",
    )

    # Trainer assignment
    default_selection_strategy: SelectionStrategy = Field(
        default=SelectionStrategy.WEEKLY_LOAD,
        description="Selector used by auto-assignment when the caller does not pick one",
    )

    # Milestone SLA windows (business days)
    sla_windows: Dict[MilestoneCategory, SlaWindow] = Field(default_factory=_default_sla_windows)
    delivery_time_by_state: Dict[str, SlaWindow] = Field(
        default_factory=_default_delivery_windows
    )

    slow_operation_threshold_seconds: float = Field(
        default=1.0, description="Service operations slower than this are logged as warnings"
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        env_prefix="TRAINING_SCHEDULER_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("sla_windows")
    @classmethod
    def _require_all_milestones(
        cls, value: Dict[MilestoneCategory, SlaWindow]
    ) -> Dict[MilestoneCategory, SlaWindow]:
        missing = [category.value for category in MilestoneCategory if category not in value]
        if missing:
            raise ValueError(f"sla_windows is missing entries for: {', '.join(missing)}")
        return value

    def sla_window_for(self, milestone: MilestoneCategory) -> SlaWindow:
        return self.sla_windows[MilestoneCategory(milestone)]


settings = Settings()
logger.info(
    "[CONFIG] Training scheduler: environment=%s holiday_region=%s selection_strategy=%s",
    settings.environment,
    settings.holiday_region,
    settings.default_selection_strategy.value,
)
