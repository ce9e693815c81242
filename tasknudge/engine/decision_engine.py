"""
Tool: Notification Decision Engine
Purpose: Decide when (and why) to nudge the user about a task

Evaluates a task against the user's profile and returns the notification
instants worth scheduling, based on:
    - Priority level (low priority never notifies on its own)
    - Due date/time specificity (exact time vs. date only)
    - Estimated duration (longer tasks get a longer final lead time)
    - Category ("work" tasks are kept inside work hours)
    - Peak energy preference (for high-priority tasks without a deadline)

Usage:
    from tasknudge.engine.decision_engine import (
        calculate_notification_schedule,
        calculate_all_notification_schedules,
        get_notification_summary,
    )

    schedule = calculate_notification_schedule(task, profile)
    for notification in schedule.notifications:
        print(notification.time, notification.type.value, notification.reason)

Design:
    Every function here is pure. The current instant is a parameter
    (defaulting to the clock), and anything that has to be remembered
    between runs, such as how many overdue reminders already went out,
    is passed in by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone

from tasknudge.engine.models import (
    NotificationSchedule,
    NotificationSummary,
    NotificationType,
    ScheduledNotificationTime,
    Task,
    TaskPriority,
    UserProfile,
)
from tasknudge.engine.timing import (
    adjust_to_work_hours,
    align_to_clock,
    get_lead_time_for_duration,
    get_peak_energy_hours,
    has_specific_time,
)


# High priority overdue tasks: at most this many reminders per day
MAX_OVERDUE_REMINDERS = 3
OVERDUE_REMINDER_INTERVAL = timedelta(hours=4)

ADVANCE_NOTICE_OFFSET = timedelta(hours=24)
REMINDER_OFFSET = timedelta(hours=2)

MORNING_REMINDER_HOUR = 9

# Date-only high priority tasks get a reminder at each of these on the due date
DATE_ONLY_REMINDERS: tuple[tuple[int, int, str], ...] = (
    (9, 0, "morning"),
    (14, 0, "afternoon"),
    (18, 0, "evening"),
)


def _resolve_now(now: datetime | None, profile: UserProfile) -> datetime:
    if now is None:
        return datetime.now(profile.tzinfo)
    return now


def _shift(moment: datetime, delta: timedelta) -> datetime:
    """Move by an absolute duration (DST-safe for aware datetimes)."""
    if moment.tzinfo is None:
        return moment + delta
    return (moment.astimezone(timezone.utc) + delta).astimezone(moment.tzinfo)


def _at(moment: datetime, hour: int, minute: int = 0) -> datetime:
    return moment.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _start_of_day(moment: datetime) -> datetime:
    return _at(moment, 0)


def _empty(task: Task) -> NotificationSchedule:
    return NotificationSchedule(task_id=task.id, task_title=task.title, notifications=[])


def _schedule_undated(
    task: Task,
    profile: UserProfile,
    now: datetime,
) -> list[ScheduledNotificationTime]:
    # Medium priority without a deadline stays quiet; high priority work
    # surfaces once, at the start of tomorrow's peak energy window
    if task.priority != TaskPriority.HIGH or not task.is_work_task:
        return []

    peak_start, _ = get_peak_energy_hours(profile.peak_energy_time)
    reminder_time = _at(now + timedelta(days=1), peak_start)
    adjusted = adjust_to_work_hours(reminder_time, profile, True)

    if adjusted <= now:
        return []

    return [
        ScheduledNotificationTime(
            time=adjusted,
            type=NotificationType.DAILY_SUMMARY,
            priority=TaskPriority.HIGH,
            reason="High priority task without deadline - peak energy reminder",
        )
    ]


def _schedule_overdue(
    task: Task,
    profile: UserProfile,
    now: datetime,
    existing_overdue_reminders: int,
) -> list[ScheduledNotificationTime]:
    if existing_overdue_reminders >= MAX_OVERDUE_REMINDERS:
        return []

    if task.priority == TaskPriority.HIGH:
        next_reminder = _shift(now, OVERDUE_REMINDER_INTERVAL)
        adjusted = adjust_to_work_hours(next_reminder, profile, task.is_work_task)
        if adjusted <= now:
            return []
        return [
            ScheduledNotificationTime(
                time=adjusted,
                type=NotificationType.OVERDUE,
                priority=TaskPriority.HIGH,
                reason=(
                    f"Overdue high priority - reminder "
                    f"{existing_overdue_reminders + 1} of {MAX_OVERDUE_REMINDERS}"
                ),
            )
        ]

    # Medium: one reminder per day at 9am
    reminder_time = _at(now, MORNING_REMINDER_HOUR)
    if reminder_time <= now:
        reminder_time = _at(now + timedelta(days=1), MORNING_REMINDER_HOUR)

    return [
        ScheduledNotificationTime(
            time=reminder_time,
            type=NotificationType.OVERDUE,
            priority=TaskPriority.MEDIUM,
            reason="Overdue medium priority - daily reminder",
        )
    ]


def _schedule_high_priority(
    task: Task,
    profile: UserProfile,
    now: datetime,
    due_date: datetime,
    is_due_today: bool,
) -> list[ScheduledNotificationTime]:
    notifications: list[ScheduledNotificationTime] = []
    is_work = task.is_work_task

    if has_specific_time(due_date):
        offsets = (
            (ADVANCE_NOTICE_OFFSET, NotificationType.ADVANCE_NOTICE,
             "24hr advance notice for high priority"),
            (REMINDER_OFFSET, NotificationType.REMINDER,
             "2hr reminder before scheduled time"),
        )
        for offset, notification_type, reason in offsets:
            candidate = _shift(due_date, -offset)
            if candidate <= now:
                continue
            adjusted = adjust_to_work_hours(candidate, profile, is_work)
            if adjusted > now:
                notifications.append(
                    ScheduledNotificationTime(adjusted, notification_type, TaskPriority.HIGH, reason)
                )

        # The final reminder is about starting on time, so it is never clamped
        lead_time = get_lead_time_for_duration(task.estimated_duration)
        final_reminder = _shift(due_date, -timedelta(minutes=lead_time))
        if final_reminder > now:
            notifications.append(
                ScheduledNotificationTime(
                    final_reminder,
                    NotificationType.FINAL_REMINDER,
                    TaskPriority.HIGH,
                    f"{lead_time}min final reminder",
                )
            )
        return notifications

    for hour, minute, label in DATE_ONLY_REMINDERS:
        candidate = _at(due_date, hour, minute)
        if candidate <= now:
            continue
        adjusted = adjust_to_work_hours(candidate, profile, is_work)
        if adjusted > now:
            notifications.append(
                ScheduledNotificationTime(
                    adjusted,
                    NotificationType.REMINDER,
                    TaskPriority.HIGH,
                    f"High priority due date - {label} reminder",
                )
            )

    if not is_due_today:
        advance = _at(due_date - timedelta(days=1), MORNING_REMINDER_HOUR)
        if advance > now:
            notifications.append(
                ScheduledNotificationTime(
                    advance,
                    NotificationType.ADVANCE_NOTICE,
                    TaskPriority.HIGH,
                    "24hr advance notice for high priority",
                )
            )

    return notifications


def _schedule_medium_priority(
    task: Task,
    profile: UserProfile,
    now: datetime,
    due_date: datetime,
) -> list[ScheduledNotificationTime]:
    if has_specific_time(due_date):
        candidate = _shift(due_date, -REMINDER_OFFSET)
        reason = "2hr reminder for medium priority task"
    else:
        candidate = _at(due_date, MORNING_REMINDER_HOUR)
        reason = "Medium priority due date - morning reminder"

    if candidate <= now:
        return []

    adjusted = adjust_to_work_hours(candidate, profile, task.is_work_task)
    if adjusted <= now:
        return []

    return [ScheduledNotificationTime(adjusted, NotificationType.REMINDER, TaskPriority.MEDIUM, reason)]


def calculate_notification_schedule(
    task: Task,
    profile: UserProfile,
    existing_overdue_reminders: int = 0,
    now: datetime | None = None,
) -> NotificationSchedule:
    """
    Calculate the notification schedule for a single task.

    Args:
        task: The task to evaluate
        profile: The user's work hours and energy preference
        existing_overdue_reminders: Overdue reminders already delivered today
            (tracked by the caller)
        now: The instant of computation; defaults to the current time in the
            profile's timezone

    Returns:
        NotificationSchedule whose notifications are all strictly after
        `now`, sorted ascending by time
    """
    if task.is_completed or task.priority == TaskPriority.LOW:
        return _empty(task)

    now = _resolve_now(now, profile)

    if task.due_date is None:
        notifications = _schedule_undated(task, profile, now)
        return NotificationSchedule(task.id, task.title, notifications)

    due_date = align_to_clock(task.due_date, now)
    due_day = _start_of_day(due_date).date()
    today = _start_of_day(now).date()

    if due_day < today:
        notifications = _schedule_overdue(task, profile, now, existing_overdue_reminders)
    elif task.priority == TaskPriority.HIGH:
        notifications = _schedule_high_priority(task, profile, now, due_date, due_day == today)
    else:
        notifications = _schedule_medium_priority(task, profile, now, due_date)

    notifications.sort(key=lambda n: n.time)
    return NotificationSchedule(task.id, task.title, notifications)


def calculate_all_notification_schedules(
    tasks: Iterable[Task],
    profile: UserProfile,
    overdue_counts: Mapping[str, int] | None = None,
    now: datetime | None = None,
) -> list[NotificationSchedule]:
    """
    Calculate schedules for every open task, keeping only non-empty ones.

    A single `now` is shared by the whole batch.
    """
    overdue_counts = overdue_counts or {}
    now = _resolve_now(now, profile)

    schedules = (
        calculate_notification_schedule(task, profile, overdue_counts.get(task.id, 0), now)
        for task in tasks
        if not task.is_completed
    )
    return [schedule for schedule in schedules if schedule.notifications]


def get_notification_summary(schedules: Iterable[NotificationSchedule]) -> NotificationSummary:
    """Count notifications across schedules, by priority and by type."""
    summary = NotificationSummary()

    for schedule in schedules:
        for notification in schedule.notifications:
            summary.total += 1
            priority = TaskPriority(notification.priority).value
            summary.by_priority[priority] = summary.by_priority.get(priority, 0) + 1
            notification_type = NotificationType(notification.type).value
            summary.by_type[notification_type] = summary.by_type.get(notification_type, 0) + 1

    return summary
