"""Tests for tasknudge/engine/models.py"""

from datetime import datetime, timedelta, timezone

import pytest

from tasknudge.engine.models import (
    NotificationSchedule,
    NotificationType,
    PeakEnergyTime,
    ScheduledNotificationTime,
    Task,
    TaskPriority,
    TaskStatus,
    TimeOfDay,
    UserProfile,
    parse_datetime,
)


class TestParseDatetime:
    def test_naive(self):
        assert parse_datetime("2026-03-04T15:30:00") == datetime(2026, 3, 4, 15, 30)

    def test_trailing_z_is_utc(self):
        assert parse_datetime("2026-03-04T15:30:00Z") == datetime(2026, 3, 4, 15, 30, tzinfo=timezone.utc)

    def test_offset(self):
        parsed = parse_datetime("2026-03-04T15:30:00+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)


class TestTimeOfDay:
    def test_parse_hh_mm(self):
        assert TimeOfDay.parse("08:30") == TimeOfDay(8, 30)

    def test_parse_database_seconds(self):
        assert TimeOfDay.parse("17:30:00") == TimeOfDay(17, 30)

    def test_str_round_trip(self):
        assert str(TimeOfDay.parse("7:05")) == "07:05"

    def test_minutes(self):
        assert TimeOfDay(9, 15).minutes == 555

    @pytest.mark.parametrize("value", ["", "9", "25:00", "12:60", "ab:cd", "1:2:3:4"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            TimeOfDay.parse(value)

    def test_ordering(self):
        assert TimeOfDay(7, 0) < TimeOfDay(22, 0)


class TestTask:
    def test_from_dict(self, sample_task_row):
        task = Task.from_dict(sample_task_row)

        assert task.id == sample_task_row["id"]
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.priority == TaskPriority.HIGH
        assert task.due_date == datetime(2026, 3, 4, 15, 30)
        assert task.estimated_duration == 120
        assert task.is_work_task is False
        assert task.is_completed is False

    def test_to_dict_matches_row(self, sample_task_row):
        assert Task.from_dict(sample_task_row).to_dict() == sample_task_row

    def test_unknown_status_kept_and_not_completed(self):
        task = Task.from_dict({"id": "t", "title": "x", "status": "pending", "priority": "medium"})

        assert task.status == "pending"
        assert task.is_completed is False

    def test_unknown_priority_raises(self):
        with pytest.raises(ValueError):
            Task.from_dict({"id": "t", "title": "x", "priority": "urgent"})

    def test_missing_fields_default(self):
        task = Task.from_dict({"id": 42})

        assert task.id == "42"
        assert task.status == TaskStatus.NOT_STARTED
        assert task.priority == TaskPriority.MEDIUM
        assert task.due_date is None
        assert task.estimated_duration is None

    def test_empty_due_date_is_none(self):
        assert Task.from_dict({"id": "t", "due_date": ""}).due_date is None

    def test_work_category(self):
        assert Task(id="t", title="x", category="work").is_work_task is True


class TestUserProfile:
    def test_from_dict(self, sample_profile_row):
        profile = UserProfile.from_dict(sample_profile_row)

        assert profile.work_hours_start == TimeOfDay(8, 30)
        assert profile.work_hours_end == TimeOfDay(17, 30)
        assert profile.peak_energy_time == PeakEnergyTime.AFTERNOON
        assert profile.tzinfo is None

    def test_defaults(self):
        profile = UserProfile.from_dict({})

        assert profile.work_hours_start == TimeOfDay(9, 0)
        assert profile.work_hours_end == TimeOfDay(17, 0)
        assert profile.peak_energy_time is None

    def test_to_dict(self, sample_profile_row):
        data = UserProfile.from_dict(sample_profile_row).to_dict()

        assert data == {
            "work_hours_start": "08:30",
            "work_hours_end": "17:30",
            "peak_energy_time": "afternoon",
            "timezone": None,
        }

    def test_invalid_work_hours_raise(self):
        with pytest.raises(ValueError):
            UserProfile.from_dict({"work_hours_start": "nine"})


class TestNotificationSchedule:
    def test_to_dict_keys(self):
        schedule = NotificationSchedule(
            task_id="t",
            task_title="Pay rent",
            notifications=[
                ScheduledNotificationTime(
                    datetime(2026, 3, 3, 9, 0),
                    NotificationType.REMINDER,
                    TaskPriority.MEDIUM,
                    "Medium priority due date - morning reminder",
                )
            ],
        )

        assert schedule.to_dict() == {
            "taskId": "t",
            "taskTitle": "Pay rent",
            "notifications": [
                {
                    "time": "2026-03-03T09:00:00",
                    "type": "reminder",
                    "priority": "medium",
                    "reason": "Medium priority due date - morning reminder",
                }
            ],
        }
