"""
Tool: Scheduling Models
Purpose: Data structures handed to the platform notification scheduler

Usage:
    from tasknudge.scheduling.models import (
        DescriptorType,
        NotificationDescriptor,
        SchedulePlan,
        SchedulerState,
        Suppression,
    )
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from tasknudge.engine.models import NotificationSummary


class DescriptorType(str, Enum):
    """
    Everything the scheduler may hand to the platform.

    The first five mirror the engine's NotificationType values.
    """

    ADVANCE_NOTICE = "advance-notice"
    REMINDER = "reminder"
    FINAL_REMINDER = "final-reminder"
    OVERDUE = "overdue"
    DAILY_SUMMARY = "daily-summary"
    TASK_REMINDER = "task-reminder"
    CHECK_IN = "check-in"
    AI_RECOMMENDATION = "ai-recommendation"
    OVERDUE_ALERT = "overdue-alert"


def generate_notification_id(descriptor_type: str, identifier: str) -> int:
    """
    Stable platform notification ID for a (type, identifier) pair.

    Local notification APIs want a positive 32-bit int.
    """
    digest = hashlib.sha256(f"{descriptor_type}-{identifier}".encode()).digest()
    return int.from_bytes(digest[:4], "big") % 2147483647


@dataclass
class NotificationDescriptor:
    """
    One notification ready for the platform scheduler or push sender.
    """

    id: int
    title: str
    body: str
    schedule_at: datetime
    type: DescriptorType
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "schedule_at": self.schedule_at.isoformat(),
            "type": self.type.value,
            "data": dict(self.data),
        }

    def to_push_payload(self) -> dict[str, Any]:
        """Convert to the payload the server-side push sender expects."""
        return {
            "title": self.title,
            "body": self.body,
            "tag": f"{self.type.value}-{self.id}",
            "data": {**self.data, "type": self.type.value},
        }


@dataclass(frozen=True)
class Suppression:
    """A notification the engine proposed but preferences held back."""

    task_id: str | None
    type: DescriptorType
    schedule_at: datetime
    reason: str
    retry_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "type": self.type.value,
            "schedule_at": self.schedule_at.isoformat(),
            "reason": self.reason,
            "retry_at": self.retry_at.isoformat() if self.retry_at else None,
        }


@dataclass
class SchedulePlan:
    """
    Result of one scheduling pass.

    The caller cancels `cancel_ids` and every pending notification of
    `cancel_types` on the platform first, then schedules `descriptors`.
    """

    descriptors: list[NotificationDescriptor] = field(default_factory=list)
    cancel_ids: list[int] = field(default_factory=list)
    cancel_types: list[DescriptorType] = field(default_factory=list)
    suppressed: list[Suppression] = field(default_factory=list)
    summary: NotificationSummary | None = None
    skipped: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "descriptors": [d.to_dict() for d in self.descriptors],
            "cancel_ids": list(self.cancel_ids),
            "cancel_types": [t.value for t in self.cancel_types],
            "suppressed": [s.to_dict() for s in self.suppressed],
            "summary": self.summary.to_dict() if self.summary else None,
            "skipped": self.skipped,
        }


@dataclass
class SchedulerState:
    """
    Caller-owned memory between scheduling passes.

    One instance per user. Nothing here is persisted by this package.
    """

    overdue_counts: dict[str, int] = field(default_factory=dict)
    # "{task_id}-{type}-{epoch_ms}" -> platform notification id
    scheduled: dict[str, int] = field(default_factory=dict)
    last_schedule_key: str | None = None
    last_check_in_key: str | None = None
    daily_nudge_date: date | None = None
    overdue_count_date: date | None = None

    def reset_daily_counts(self, today: date) -> None:
        """Overdue reminder caps are per day."""
        if self.overdue_count_date is not None and self.overdue_count_date != today:
            self.overdue_counts.clear()
        self.overdue_count_date = today
