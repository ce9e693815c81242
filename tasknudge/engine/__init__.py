"""Notification Decision Engine

Pure functions that map (task, profile, overdue count, now) to the list of
notification instants worth scheduling. No I/O, no stored state: callers
recompute whenever tasks or the profile change and diff against what they
already handed to the platform.

Components:
    models.py: Task, UserProfile and schedule data structures
    timing.py: Lead times, peak energy windows, work-hours clamping
    decision_engine.py: The branch logic and batch/summary helpers
"""

from tasknudge.engine.decision_engine import (
    MAX_OVERDUE_REMINDERS,
    calculate_all_notification_schedules,
    calculate_notification_schedule,
    get_notification_summary,
)
from tasknudge.engine.models import (
    NotificationSchedule,
    NotificationSummary,
    NotificationType,
    PeakEnergyTime,
    ScheduledNotificationTime,
    Task,
    TaskPriority,
    TaskStatus,
    TimeOfDay,
    UserProfile,
)

__all__ = [
    "MAX_OVERDUE_REMINDERS",
    "NotificationSchedule",
    "NotificationSummary",
    "NotificationType",
    "PeakEnergyTime",
    "ScheduledNotificationTime",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TimeOfDay",
    "UserProfile",
    "calculate_all_notification_schedules",
    "calculate_notification_schedule",
    "get_notification_summary",
]
