"""Notification Scheduling - everything around the pure decision engine

Philosophy:
    The engine answers "when would a nudge help?". This layer answers
    "should this user actually get it?": their switches, their quiet hours,
    and whether the platform already has it queued.

Components:
    preferences.py: NotificationPreferences (pydantic) loaded from args/notifications.yaml
    quiet_hours.py: Do-not-disturb window checks
    content.py: Titles and bodies per notification type
    models.py: Descriptors, plans and the caller-owned SchedulerState
    scheduler.py: NotificationScheduler, the per-user planning pass
"""

from tasknudge.scheduling.models import (
    DescriptorType,
    NotificationDescriptor,
    SchedulePlan,
    SchedulerState,
    Suppression,
)
from tasknudge.scheduling.preferences import NotificationPreferences, load_preferences
from tasknudge.scheduling.scheduler import NotificationScheduler

__all__ = [
    "DescriptorType",
    "NotificationDescriptor",
    "NotificationPreferences",
    "NotificationScheduler",
    "SchedulePlan",
    "SchedulerState",
    "Suppression",
    "load_preferences",
]
