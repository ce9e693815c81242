"""
Tool: Notification Copy
Purpose: Turn engine output into the title/body a user actually sees

Usage:
    from tasknudge.scheduling.content import build_task_notification

The engine only decides timing and classification. Wording lives here so it
can change without touching the decision logic.
"""

from __future__ import annotations

from tasknudge.engine.models import NotificationType, ScheduledNotificationTime, TaskPriority


PRIORITY_MARKERS = {
    TaskPriority.HIGH: "🔴",
    TaskPriority.MEDIUM: "🟡",
    TaskPriority.LOW: "🟢",
}

TITLE_TEMPLATES = {
    NotificationType.ADVANCE_NOTICE: "📅 Upcoming: {title}",
    NotificationType.REMINDER: "⏰ Reminder: {title}",
    NotificationType.FINAL_REMINDER: "🚨 Starting Soon: {title}",
    NotificationType.OVERDUE: "⚠️ Overdue: {title}",
    NotificationType.DAILY_SUMMARY: "🎯 High Priority: {title}",
}

PEAK_ENERGY_BODY = "Consider tackling this during your peak energy time"


def build_task_notification(task_title: str, notification: ScheduledNotificationTime) -> tuple[str, str]:
    """
    Build (title, body) for a task notification.

    Args:
        task_title: Display title of the task
        notification: The engine's scheduled instant

    Returns:
        Tuple of notification title and body
    """
    marker = PRIORITY_MARKERS[TaskPriority(notification.priority)]
    template = TITLE_TEMPLATES.get(NotificationType(notification.type), "📌 {title}")
    title = template.format(title=task_title)

    if notification.type == NotificationType.DAILY_SUMMARY:
        body = f"{marker} {PEAK_ENERGY_BODY}"
    else:
        body = f"{marker} {notification.reason}"

    return title, body


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def build_overdue_alert(overdue_count: int, high_priority_count: int) -> tuple[str, str]:
    """Digest copy for all overdue tasks at once."""
    title = f"⚠️ {pluralize(overdue_count, 'task')} need attention"
    if high_priority_count > 0:
        body = f"You have {pluralize(high_priority_count, 'overdue high-priority task')}"
    else:
        body = f"You have {pluralize(overdue_count, 'overdue task')}"
    return title, body


def build_daily_recommendation(open_task_count: int, max_recommended: int = 5) -> tuple[str, str]:
    """Copy for the morning AI recommendation nudge."""
    count = min(open_task_count, max_recommended)
    return (
        "Your Daily Task Recommendations 🎯",
        f"We've prepared {count} tasks matched to your energy levels",
    )


def build_check_in() -> tuple[str, str]:
    return "Time for a check-in! ✨", "How's your energy and mood right now?"
