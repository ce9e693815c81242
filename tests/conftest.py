"""Shared test fixtures for TaskNudge tests.

This module provides common fixtures used across all test modules:
- A fixed clock so schedules are reproducible
- Standard profile, task and preference data

Usage:
    def test_something(fixed_now, work_profile):
        schedule = calculate_notification_schedule(task, work_profile, now=fixed_now)
        ...
"""

from datetime import datetime
from pathlib import Path

import pytest

from tasknudge.engine.models import (
    PeakEnergyTime,
    Task,
    TaskPriority,
    TaskStatus,
    TimeOfDay,
    UserProfile,
)
from tasknudge.scheduling.preferences import NotificationPreferences


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"


# ─────────────────────────────────────────────────────────────────────────────
# Clock Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def fixed_now() -> datetime:
    """Monday 2 March 2026, 07:00 local time."""
    return datetime(2026, 3, 2, 7, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Profile Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def work_profile() -> UserProfile:
    """Standard 09:00-17:00 profile with a morning energy peak."""
    return UserProfile(
        work_hours_start=TimeOfDay(9, 0),
        work_hours_end=TimeOfDay(17, 0),
        peak_energy_time=PeakEnergyTime.MORNING,
    )


@pytest.fixture
def relaxed_preferences() -> NotificationPreferences:
    """Preferences with quiet hours and the minimum lead time switched off."""
    return NotificationPreferences(quiet_hours_enabled=False, minimum_lead_time=0)


# ─────────────────────────────────────────────────────────────────────────────
# Task Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults.

    Returns:
        callable accepting Task field overrides
    """

    def _make(**overrides) -> Task:
        fields = {
            "id": "task_1",
            "title": "Write quarterly report",
            "status": TaskStatus.NOT_STARTED,
            "priority": TaskPriority.HIGH,
            "due_date": None,
            "estimated_duration": None,
            "category": "work",
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def sample_task_row() -> dict:
    """Task row as it comes back from the database.

    Returns:
        dict with task fields
    """
    return {
        "id": "b7c1e0e2-4d8a-4c1b-9a57-1f7f0c2b9a10",
        "title": "File taxes",
        "due_date": "2026-03-04T15:30:00",
        "status": "in-progress",
        "priority": "high",
        "estimated_duration": 120,
        "category": "personal",
    }


@pytest.fixture
def sample_profile_row() -> dict:
    """Profile row as it comes back from the database."""
    return {
        "work_hours_start": "08:30",
        "work_hours_end": "17:30:00",
        "peak_energy_time": "afternoon",
    }
