"""
Tool: Decision Engine Models
Purpose: Data structures consumed and produced by the notification decision engine

Usage:
    from tasknudge.engine.models import (
        Task,
        UserProfile,
        TimeOfDay,
        ScheduledNotificationTime,
        NotificationSchedule,
        NotificationSummary,
    )

Inputs are parsed once at the boundary (from_dict) so the engine itself never
touches raw strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority. Low priority never produces automatic notifications."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class NotificationType(str, Enum):
    """Semantic type of a scheduled notification."""

    ADVANCE_NOTICE = "advance-notice"
    REMINDER = "reminder"
    FINAL_REMINDER = "final-reminder"
    OVERDUE = "overdue"
    DAILY_SUMMARY = "daily-summary"


class PeakEnergyTime(str, Enum):
    """Static user-set energy preference."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


WORK_CATEGORY = "work"


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z' for UTC."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Wall-clock time of day parsed from an "HH:MM" string."""

    hour: int
    minute: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise ValueError(f"Invalid time of day: {self.hour:02d}:{self.minute:02d}")

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """
        Parse "HH:MM" (database values like "HH:MM:SS" are accepted too).

        Raises:
            ValueError: If the string is not a valid time of day
        """
        parts = value.strip().split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid time of day: {value!r}")
        return cls(int(parts[0]), int(parts[1]))

    @property
    def minutes(self) -> int:
        """Minutes since midnight."""
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass
class Task:
    """
    Task record as seen by the engine.

    Only the fields that influence notification timing are carried.
    """

    id: str
    title: str
    status: TaskStatus | str = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    estimated_duration: int | None = None  # minutes
    category: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_work_task(self) -> bool:
        return self.category == WORK_CATEGORY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value if isinstance(self.status, TaskStatus) else self.status,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "estimated_duration": self.estimated_duration,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """
        Create from a persistence-layer row.

        Unknown status strings (e.g. "pending") are kept as-is and count as
        not completed. Unknown priorities raise ValueError.
        """
        status: TaskStatus | str = data.get("status") or TaskStatus.NOT_STARTED
        try:
            status = TaskStatus(status)
        except ValueError:
            pass

        due_date = data.get("due_date")
        if isinstance(due_date, str):
            due_date = parse_datetime(due_date) if due_date else None

        duration = data.get("estimated_duration")

        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            status=status,
            priority=TaskPriority(data.get("priority") or TaskPriority.MEDIUM),
            due_date=due_date,
            estimated_duration=int(duration) if duration is not None else None,
            category=data.get("category"),
        )


@dataclass
class UserProfile:
    """
    Work-hours window and energy preference for one user.
    """

    work_hours_start: TimeOfDay = field(default_factory=lambda: TimeOfDay(9, 0))
    work_hours_end: TimeOfDay = field(default_factory=lambda: TimeOfDay(17, 0))
    peak_energy_time: PeakEnergyTime | None = None
    timezone: str | None = None  # IANA name; None means naive local time

    @property
    def tzinfo(self) -> tzinfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        return {
            "work_hours_start": str(self.work_hours_start),
            "work_hours_end": str(self.work_hours_end),
            "peak_energy_time": self.peak_energy_time.value if self.peak_energy_time else None,
            "timezone": self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        """Create from a profile row ("HH:MM" strings are parsed here, once)."""
        peak = data.get("peak_energy_time")
        return cls(
            work_hours_start=TimeOfDay.parse(data.get("work_hours_start") or "09:00"),
            work_hours_end=TimeOfDay.parse(data.get("work_hours_end") or "17:00"),
            peak_energy_time=PeakEnergyTime(peak) if peak else None,
            timezone=data.get("timezone"),
        )


@dataclass(frozen=True)
class ScheduledNotificationTime:
    """One notification instant chosen by the engine."""

    time: datetime
    type: NotificationType
    priority: TaskPriority
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time.isoformat(),
            "type": self.type.value,
            "priority": self.priority.value,
            "reason": self.reason,
        }


@dataclass
class NotificationSchedule:
    """Full engine output for one task, sorted ascending by time."""

    task_id: str
    task_title: str
    notifications: list[ScheduledNotificationTime] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "taskId": self.task_id,
            "taskTitle": self.task_title,
            "notifications": [n.to_dict() for n in self.notifications],
        }


@dataclass
class NotificationSummary:
    """Counts across a batch of schedules."""

    total: int = 0
    by_priority: dict[str, int] = field(
        default_factory=lambda: {p.value: 0 for p in TaskPriority}
    )
    by_type: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "byPriority": dict(self.by_priority),
            "byType": dict(self.by_type),
        }
