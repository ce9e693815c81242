"""
Tool: Quiet Hours
Purpose: Decide whether a notification instant falls in the user's do-not-disturb window

Usage:
    from tasknudge.scheduling.quiet_hours import (
        is_in_quiet_hours,
        quiet_hours_end_after,
    )

Quiet hours are compared at minute resolution and are inclusive at both
ends. Overnight windows (e.g. 22:00 - 07:00) wrap midnight.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from tasknudge.engine.models import TimeOfDay


def is_in_quiet_hours(moment: datetime, start: TimeOfDay, end: TimeOfDay) -> bool:
    """
    Check whether a moment's wall-clock time lies inside quiet hours.

    Args:
        moment: The instant to check
        start: Quiet hours start
        end: Quiet hours end

    Returns:
        True if notifications should be held back at this moment
    """
    current = moment.hour * 60 + moment.minute

    if start.minutes <= end.minutes:
        # Same day range
        return start.minutes <= current <= end.minutes

    # Overnight range
    return current >= start.minutes or current <= end.minutes


def quiet_hours_end_after(moment: datetime, start: TimeOfDay, end: TimeOfDay) -> datetime | None:
    """
    First minute after the quiet window containing `moment`.

    The end minute itself is still quiet, so the result is one minute past it.

    Returns:
        The retry instant, or None if `moment` is not in quiet hours
    """
    if not is_in_quiet_hours(moment, start, end):
        return None

    ends_at = moment.replace(hour=end.hour, minute=end.minute, second=0, microsecond=0)

    # Overnight window, still before midnight: it ends tomorrow
    if start.minutes > end.minutes and moment.hour * 60 + moment.minute >= start.minutes:
        ends_at += timedelta(days=1)

    return ends_at + timedelta(minutes=1)
