"""
Tool: Notification Scheduler
Purpose: Turn engine schedules into platform-ready notifications, respecting user preferences

Usage:
    from tasknudge.scheduling.scheduler import NotificationScheduler

    scheduler = NotificationScheduler(profile, preferences, state)
    plan = scheduler.plan_task_notifications(tasks)
    platform.cancel(plan.cancel_ids)
    platform.schedule(plan.descriptors)

Responsibilities (everything the pure engine deliberately leaves out):
    - Remember what was already scheduled, so re-runs don't duplicate
    - Track overdue reminders handed out today (the engine's rate cap input)
    - Apply priority/type/channel switches and quiet hours
    - Write the title and body the user sees
    - Plan check-ins, the morning recommendation nudge and the overdue digest

Nothing is sent from here. The caller cancels `plan.cancel_ids` (and any
pending notification of `plan.cancel_types`) and schedules `plan.descriptors`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import date, datetime, timedelta

from tasknudge.engine.decision_engine import (
    calculate_all_notification_schedules,
    get_notification_summary,
)
from tasknudge.engine.models import (
    NotificationType,
    ScheduledNotificationTime,
    Task,
    TaskPriority,
    UserProfile,
)
from tasknudge.engine.timing import align_to_clock
from tasknudge.logging_config import get_logger
from tasknudge.scheduling.content import (
    build_check_in,
    build_daily_recommendation,
    build_overdue_alert,
    build_task_notification,
)
from tasknudge.scheduling.models import (
    DescriptorType,
    NotificationDescriptor,
    SchedulePlan,
    SchedulerState,
    Suppression,
    generate_notification_id,
)
from tasknudge.scheduling.preferences import NotificationPreferences
from tasknudge.scheduling.quiet_hours import is_in_quiet_hours, quiet_hours_end_after

logger = get_logger(__name__)

CHECK_IN_DAYS = 7
DAILY_RECOMMENDATION_HOUR = 8
OVERDUE_ALERT_HOUR = 9
MAX_RECOMMENDED_TASKS = 5

# Device-level switch that gates each descriptor type
CHANNEL_SETTINGS: dict[DescriptorType, str] = {
    DescriptorType.ADVANCE_NOTICE: "task_reminders",
    DescriptorType.REMINDER: "task_reminders",
    DescriptorType.FINAL_REMINDER: "task_reminders",
    DescriptorType.TASK_REMINDER: "task_reminders",
    DescriptorType.OVERDUE: "overdue_alerts",
    DescriptorType.OVERDUE_ALERT: "overdue_alerts",
    DescriptorType.DAILY_SUMMARY: "ai_recommendations",
    DescriptorType.AI_RECOMMENDATION: "ai_recommendations",
    DescriptorType.CHECK_IN: "check_in_reminders",
}


def _open_tasks(tasks: Sequence[Task]) -> list[Task]:
    return [task for task in tasks if not task.is_completed]


def _next_at_hour(now: datetime, hour: int) -> datetime:
    """Today at `hour`, or tomorrow if that has already passed."""
    candidate = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if candidate <= now:
        candidate = (now + timedelta(days=1)).replace(hour=hour, minute=0, second=0, microsecond=0)
    return candidate


def _local_due_day(task: Task, now: datetime) -> date | None:
    due = task.due_date
    if due is None:
        return None
    return align_to_clock(due, now).date()


def _is_overdue(task: Task, now: datetime) -> bool:
    due_day = _local_due_day(task, now)
    return due_day is not None and due_day < now.date()


def schedule_key(tasks: Sequence[Task]) -> str:
    """Identity of the open task list; unchanged key means nothing to redo."""
    return "|".join(
        f"{task.id}-{task.due_date.isoformat() if task.due_date else None}-{TaskPriority(task.priority).value}"
        for task in _open_tasks(tasks)
    )


def notification_key(task_id: str, notification: ScheduledNotificationTime) -> str:
    epoch_ms = int(notification.time.timestamp() * 1000)
    return f"{task_id}-{NotificationType(notification.type).value}-{epoch_ms}"


class NotificationScheduler:
    """
    Caller-side orchestration around the decision engine for one user.

    The scheduler mutates only its SchedulerState, which the caller owns and
    may keep between runs (or pass a fresh one to start over).
    """

    def __init__(
        self,
        profile: UserProfile,
        preferences: NotificationPreferences | None = None,
        state: SchedulerState | None = None,
        user_id: str | None = None,
    ):
        self.profile = profile
        self.preferences = preferences or NotificationPreferences()
        self.state = state if state is not None else SchedulerState()
        self.user_id = user_id
        self._log = logger.bind(user_id=user_id) if user_id else logger

    def _now(self, now: datetime | None) -> datetime:
        return now if now is not None else datetime.now(self.profile.tzinfo)

    def _engine_profile(self) -> UserProfile:
        # Peak energy from notification settings fills in when the profile has none
        if self.profile.peak_energy_time is not None:
            return self.profile
        return replace(self.profile, peak_energy_time=self.preferences.peak_energy_time)

    # ─────────────────────────────────────────────────────────────────────
    # Preference filtering
    # ─────────────────────────────────────────────────────────────────────

    def _suppression_reason(
        self,
        descriptor_type: DescriptorType,
        schedule_at: datetime,
        now: datetime,
        priority: TaskPriority | None = None,
        due_today: bool = False,
    ) -> str | None:
        prefs = self.preferences

        channel = CHANNEL_SETTINGS[descriptor_type]
        if not getattr(prefs, channel):
            return f"{channel}_disabled"

        if priority is not None and priority.value in prefs.disabled_priorities():
            return f"{priority.value}_priority_disabled"

        if descriptor_type == DescriptorType.OVERDUE and not prefs.overdue_reminders_enabled:
            return "overdue_reminders_disabled"
        if descriptor_type == DescriptorType.DAILY_SUMMARY and not prefs.daily_summary_enabled:
            return "daily_summary_disabled"
        if descriptor_type == DescriptorType.ADVANCE_NOTICE and not prefs.upcoming_reminders_enabled:
            return "upcoming_reminders_disabled"
        if descriptor_type in (DescriptorType.REMINDER, DescriptorType.FINAL_REMINDER):
            if due_today and not prefs.due_today_reminders_enabled:
                return "due_today_reminders_disabled"
            if not due_today and not prefs.upcoming_reminders_enabled:
                return "upcoming_reminders_disabled"

        if schedule_at - now < timedelta(minutes=prefs.minimum_lead_time):
            return "below_minimum_lead_time"

        if prefs.quiet_hours_enabled and is_in_quiet_hours(
            schedule_at, prefs.quiet_start, prefs.quiet_end
        ):
            return "quiet_hours"

        return None

    def _suppress(
        self,
        plan: SchedulePlan,
        task_id: str | None,
        descriptor_type: DescriptorType,
        schedule_at: datetime,
        reason: str,
    ) -> None:
        retry_at = None
        if reason == "quiet_hours":
            retry_at = quiet_hours_end_after(
                schedule_at, self.preferences.quiet_start, self.preferences.quiet_end
            )
        plan.suppressed.append(Suppression(task_id, descriptor_type, schedule_at, reason, retry_at))
        self._log.debug(
            "notification_suppressed",
            task_id=task_id,
            type=descriptor_type.value,
            reason=reason,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Task notifications (decision engine)
    # ─────────────────────────────────────────────────────────────────────

    def plan_task_notifications(self, tasks: Sequence[Task], now: datetime | None = None) -> SchedulePlan:
        """
        Plan smart task notifications for the current task list.

        Notifications already handed to the platform are not repeated. Ones
        that no longer appear in the fresh schedule (task completed,
        rescheduled, or now suppressed) come back in `cancel_ids`.

        Args:
            tasks: The user's tasks (completed ones are ignored)
            now: Instant of computation; defaults to the current time

        Returns:
            SchedulePlan; `skipped` is True when the task list has not
            changed since the last pass
        """
        now = self._now(now)
        state = self.state
        state.reset_daily_counts(now.date())

        key = schedule_key(tasks)
        if state.last_schedule_key == key:
            return SchedulePlan(skipped=True)

        plan = SchedulePlan()

        schedules = calculate_all_notification_schedules(
            tasks, self._engine_profile(), state.overdue_counts, now
        )
        plan.summary = get_notification_summary(schedules)
        self._log.info("smart_notifications_summary", **plan.summary.to_dict())

        tasks_by_id = {task.id: task for task in tasks}
        wanted: set[str] = set()

        for schedule in schedules:
            task = tasks_by_id[schedule.task_id]
            due_today = _local_due_day(task, now) == now.date()

            for notification in schedule.notifications:
                descriptor_type = DescriptorType(NotificationType(notification.type).value)
                reason = self._suppression_reason(
                    descriptor_type,
                    notification.time,
                    now,
                    priority=TaskPriority(notification.priority),
                    due_today=due_today,
                )
                if reason:
                    self._suppress(plan, schedule.task_id, descriptor_type, notification.time, reason)
                    continue

                identity = notification_key(schedule.task_id, notification)
                wanted.add(identity)
                if identity in state.scheduled:
                    continue

                title, body = build_task_notification(schedule.task_title, notification)
                descriptor = NotificationDescriptor(
                    id=generate_notification_id(descriptor_type.value, identity),
                    title=title,
                    body=body,
                    schedule_at=notification.time,
                    type=descriptor_type,
                    data={
                        "type": DescriptorType.TASK_REMINDER.value,
                        "taskId": schedule.task_id,
                        "notificationType": descriptor_type.value,
                    },
                )
                plan.descriptors.append(descriptor)
                state.scheduled[identity] = descriptor.id

                if descriptor_type == DescriptorType.OVERDUE:
                    state.overdue_counts[schedule.task_id] = (
                        state.overdue_counts.get(schedule.task_id, 0) + 1
                    )

        for identity in sorted(set(state.scheduled) - wanted):
            plan.cancel_ids.append(state.scheduled.pop(identity))

        state.last_schedule_key = key
        self._log.info(
            "smart_notifications_planned",
            scheduled=len(plan.descriptors),
            cancelled=len(plan.cancel_ids),
            suppressed=len(plan.suppressed),
        )
        return plan

    def cancel_task(self, task_id: str) -> list[int]:
        """
        Forget everything scheduled for a task (completed or rescheduled).

        Returns:
            Platform notification IDs the caller should cancel
        """
        prefix = f"{task_id}-"
        type_prefixes = tuple(f"{t.value}-" for t in NotificationType)
        removed = [
            key
            for key in self.state.scheduled
            if key.startswith(prefix) and key[len(prefix):].startswith(type_prefixes)
        ]
        ids = [self.state.scheduled.pop(key) for key in removed]
        self.state.overdue_counts.pop(task_id, None)
        # Force the next pass to rebuild even if the task list looks the same
        self.state.last_schedule_key = None
        return ids

    # ─────────────────────────────────────────────────────────────────────
    # Check-ins, daily recommendation, overdue digest
    # ─────────────────────────────────────────────────────────────────────

    def check_in_frequency(self) -> int:
        """Check-ins per work day, scaled by the user's frequency multiplier."""
        prefs = self.preferences
        return max(1, round(prefs.check_in_frequency * prefs.frequency_multiplier))

    def plan_check_in_reminders(self, now: datetime | None = None) -> SchedulePlan:
        """
        Spread check-in reminders evenly across work hours for the next week.
        """
        now = self._now(now)
        frequency = self.check_in_frequency()
        start = self.profile.work_hours_start
        end = self.profile.work_hours_end

        key = f"{start}-{end}-{frequency}"
        if self.state.last_check_in_key == key:
            return SchedulePlan(skipped=True)

        # Work windows that wrap past midnight are not supported
        if end.minutes <= start.minutes:
            self._log.warning(
                "check_ins_skipped",
                reason="work_hours_end_not_after_start",
                work_hours_start=str(start),
                work_hours_end=str(end),
            )
            return SchedulePlan(skipped=True)

        plan = SchedulePlan(cancel_types=[DescriptorType.CHECK_IN])

        work_start = now.replace(hour=start.hour, minute=start.minute, second=0, microsecond=0)
        work_end = now.replace(hour=end.hour, minute=end.minute, second=0, microsecond=0)
        interval = (work_end - work_start) / frequency
        title, body = build_check_in()

        for day_offset in range(CHECK_IN_DAYS):
            day_start = work_start + timedelta(days=day_offset)
            for i in range(frequency):
                check_in_time = day_start + interval * i
                if check_in_time <= now:
                    continue

                reason = self._suppression_reason(DescriptorType.CHECK_IN, check_in_time, now)
                if reason:
                    self._suppress(plan, None, DescriptorType.CHECK_IN, check_in_time, reason)
                    continue

                plan.descriptors.append(
                    NotificationDescriptor(
                        id=generate_notification_id(
                            DescriptorType.CHECK_IN.value, check_in_time.isoformat()
                        ),
                        title=title,
                        body=body,
                        schedule_at=check_in_time,
                        type=DescriptorType.CHECK_IN,
                        data={"type": DescriptorType.CHECK_IN.value},
                    )
                )

        self.state.last_check_in_key = key
        self._log.info("check_ins_planned", scheduled=len(plan.descriptors))
        return plan

    def plan_daily_recommendation(
        self, tasks: Sequence[Task], now: datetime | None = None
    ) -> SchedulePlan:
        """
        One morning nudge pointing at the day's AI recommendations.

        Planned at most once per calendar day, and only when open tasks exist.
        """
        now = self._now(now)
        today = now.date()
        if self.state.daily_nudge_date == today:
            return SchedulePlan(skipped=True)

        open_tasks = _open_tasks(tasks)
        if not open_tasks:
            self._log.info("daily_recommendation_skipped", reason="no_open_tasks")
            return SchedulePlan(skipped=True)

        plan = SchedulePlan(cancel_types=[DescriptorType.AI_RECOMMENDATION])
        schedule_at = _next_at_hour(now, DAILY_RECOMMENDATION_HOUR)

        reason = self._suppression_reason(DescriptorType.AI_RECOMMENDATION, schedule_at, now)
        if reason:
            self._suppress(plan, None, DescriptorType.AI_RECOMMENDATION, schedule_at, reason)
        else:
            title, body = build_daily_recommendation(len(open_tasks), MAX_RECOMMENDED_TASKS)
            plan.descriptors.append(
                NotificationDescriptor(
                    id=generate_notification_id(
                        DescriptorType.AI_RECOMMENDATION.value, schedule_at.date().isoformat()
                    ),
                    title=title,
                    body=body,
                    schedule_at=schedule_at,
                    type=DescriptorType.AI_RECOMMENDATION,
                    data={"type": DescriptorType.AI_RECOMMENDATION.value},
                )
            )

        self.state.daily_nudge_date = today
        return plan

    def plan_overdue_alert(self, tasks: Sequence[Task], now: datetime | None = None) -> SchedulePlan:
        """
        A single 9am digest covering every overdue open task.
        """
        now = self._now(now)
        plan = SchedulePlan(cancel_types=[DescriptorType.OVERDUE_ALERT])

        overdue = [task for task in _open_tasks(tasks) if _is_overdue(task, now)]
        if not overdue:
            return plan

        high_priority_count = sum(1 for task in overdue if task.priority == TaskPriority.HIGH)
        schedule_at = _next_at_hour(now, OVERDUE_ALERT_HOUR)

        reason = self._suppression_reason(DescriptorType.OVERDUE_ALERT, schedule_at, now)
        if reason:
            self._suppress(plan, None, DescriptorType.OVERDUE_ALERT, schedule_at, reason)
            return plan

        title, body = build_overdue_alert(len(overdue), high_priority_count)
        plan.descriptors.append(
            NotificationDescriptor(
                id=generate_notification_id(
                    DescriptorType.OVERDUE_ALERT.value, schedule_at.date().isoformat()
                ),
                title=title,
                body=body,
                schedule_at=schedule_at,
                type=DescriptorType.OVERDUE_ALERT,
                data={
                    "type": DescriptorType.OVERDUE_ALERT.value,
                    "taskIds": [task.id for task in overdue],
                },
            )
        )
        return plan

    def plan_all(self, tasks: Sequence[Task], now: datetime | None = None) -> SchedulePlan:
        """
        Run every planner in the order the app does on startup and merge the results.
        """
        now = self._now(now)
        merged = SchedulePlan()

        for plan in (
            self.plan_check_in_reminders(now),
            self.plan_task_notifications(tasks, now),
            self.plan_daily_recommendation(tasks, now),
            self.plan_overdue_alert(tasks, now),
        ):
            merged.descriptors.extend(plan.descriptors)
            merged.cancel_ids.extend(plan.cancel_ids)
            merged.cancel_types.extend(t for t in plan.cancel_types if t not in merged.cancel_types)
            merged.suppressed.extend(plan.suppressed)
            if plan.summary is not None:
                merged.summary = plan.summary

        merged.descriptors.sort(key=lambda d: d.schedule_at)
        return merged
