"""
Tool: Timing Helpers
Purpose: Small time calculations shared by the decision engine

Usage:
    from tasknudge.engine.timing import (
        align_to_clock,
        get_lead_time_for_duration,
        get_peak_energy_hours,
        has_specific_time,
        adjust_to_work_hours,
        is_within_work_hours,
    )
"""

from __future__ import annotations

from datetime import datetime

from tasknudge.engine.models import PeakEnergyTime, UserProfile


PEAK_ENERGY_HOURS: dict[PeakEnergyTime, tuple[int, int]] = {
    PeakEnergyTime.MORNING: (8, 12),
    PeakEnergyTime.AFTERNOON: (12, 17),
    PeakEnergyTime.EVENING: (17, 21),
}

# Used when the user never picked a peak energy time
DEFAULT_PEAK_HOURS = (9, 12)

DEFAULT_LEAD_TIME_MINUTES = 15


def align_to_clock(moment: datetime, now: datetime) -> datetime:
    """
    Express `moment` on the same kind of clock as `now`.

    Aware values are converted to `now`'s zone, or to naive local time when
    `now` is naive. A naive value read against an aware `now` is taken to be
    wall-clock time in `now`'s zone.
    """
    if moment.tzinfo is not None:
        if now.tzinfo is not None:
            return moment.astimezone(now.tzinfo)
        return moment.astimezone().replace(tzinfo=None)
    if now.tzinfo is not None:
        return moment.replace(tzinfo=now.tzinfo)
    return moment


def has_specific_time(due_date: datetime) -> bool:
    """
    Whether the due date carries a time of day.

    An exact midnight is read as "date only". A task genuinely due at
    midnight is indistinguishable from one with no time set.
    """
    return not (due_date.hour == 0 and due_date.minute == 0)


def get_peak_energy_hours(preference: PeakEnergyTime | None) -> tuple[int, int]:
    """Map a peak energy preference to its (start_hour, end_hour) window."""
    if preference is None:
        return DEFAULT_PEAK_HOURS
    return PEAK_ENERGY_HOURS.get(PeakEnergyTime(preference), DEFAULT_PEAK_HOURS)


def get_lead_time_for_duration(duration_minutes: int | None) -> int:
    """
    Minutes before a specific due time at which the final reminder fires.

    Longer tasks need more runway to get started.
    """
    if not duration_minutes:
        return DEFAULT_LEAD_TIME_MINUTES
    if duration_minutes >= 120:
        return 30
    if duration_minutes >= 60:
        return 20
    if duration_minutes <= 30:
        return 10
    return DEFAULT_LEAD_TIME_MINUTES


def is_within_work_hours(moment: datetime, profile: UserProfile) -> bool:
    """Inclusive minute-level check against the profile's work window."""
    value = moment.hour * 60 + moment.minute
    return profile.work_hours_start.minutes <= value <= profile.work_hours_end.minutes


def adjust_to_work_hours(moment: datetime, profile: UserProfile, is_work_task: bool) -> datetime:
    """
    Snap a work task's notification into the work-hours window.

    Only the hour is compared: anything in the end hour itself (e.g. 17:40
    for a 17:00 end) is left alone. The date never changes.
    """
    if not is_work_task:
        return moment

    start = profile.work_hours_start
    end = profile.work_hours_end

    if moment.hour < start.hour:
        return moment.replace(hour=start.hour, minute=start.minute, second=0, microsecond=0)
    if moment.hour > end.hour:
        return moment.replace(hour=end.hour, minute=end.minute, second=0, microsecond=0)
    return moment
