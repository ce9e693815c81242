from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasknudge import ARGS_DIR
from tasknudge.engine.models import PeakEnergyTime, TimeOfDay

logger = logging.getLogger(__name__)

PREFERENCES_PATH = ARGS_DIR / "notifications.yaml"


# =============================================================================
# NotificationPreferences (args/notifications.yaml)
# =============================================================================

class NotificationPreferences(BaseModel):
    model_config = ConfigDict(extra="allow")

    frequency_multiplier: float = Field(default=1.0, gt=0)
    minimum_lead_time: int = Field(default=5, ge=0)

    quiet_hours_enabled: bool = Field(default=True)
    quiet_hours_start: str = Field(default="22:00")
    quiet_hours_end: str = Field(default="07:00")

    high_priority_enabled: bool = Field(default=True)
    medium_priority_enabled: bool = Field(default=True)
    low_priority_enabled: bool = Field(default=False)

    overdue_reminders_enabled: bool = Field(default=True)
    due_today_reminders_enabled: bool = Field(default=True)
    upcoming_reminders_enabled: bool = Field(default=True)
    daily_summary_enabled: bool = Field(default=True)

    # Stored for the settings screen; not used for scheduling
    custom_reminder_times: list[int] = Field(default_factory=lambda: [15, 60, 1440])
    # Fallback when UserProfile.peak_energy_time is unset
    peak_energy_time: PeakEnergyTime = Field(default=PeakEnergyTime.MORNING)

    # Per-channel switches on the device
    check_in_reminders: bool = Field(default=True)
    task_reminders: bool = Field(default=True)
    ai_recommendations: bool = Field(default=True)
    overdue_alerts: bool = Field(default=True)
    check_in_frequency: int = Field(default=4, ge=1, le=24)

    @field_validator("quiet_hours_start", "quiet_hours_end", mode="before")
    @classmethod
    def _normalize_time(cls, value: object) -> str:
        # Database values come back as "HH:MM:SS"
        return str(TimeOfDay.parse(str(value)))

    @property
    def quiet_start(self) -> TimeOfDay:
        return TimeOfDay.parse(self.quiet_hours_start)

    @property
    def quiet_end(self) -> TimeOfDay:
        return TimeOfDay.parse(self.quiet_hours_end)

    def disabled_priorities(self) -> list[str]:
        flags = {
            "high": self.high_priority_enabled,
            "medium": self.medium_priority_enabled,
            "low": self.low_priority_enabled,
        }
        return [priority for priority, enabled in flags.items() if not enabled]


class NotificationsFile(BaseModel):
    model_config = ConfigDict(extra="allow")
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)


# =============================================================================
# load_preferences
# =============================================================================

def load_preferences(path: Optional[Path] = None) -> NotificationPreferences:
    yaml_path = Path(path) if path is not None else PREFERENCES_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return NotificationsFile.model_validate(raw).notifications
    except Exception as e:
        logger.warning(f"Preferences validation failed for {yaml_path}: {e}, using defaults")
        return NotificationPreferences()
