#!/usr/bin/env python3
"""
TaskNudge Command Line Interface

Main entry point for the `tasknudge` command. Shows what will be sent and
when, without sending anything.

Usage:
    tasknudge preview --tasks tasks.json --profile profile.json
    tasknudge preview --tasks tasks.json --profile profile.json --now 2026-03-02T07:00
    tasknudge plan --tasks tasks.json --profile profile.json --preferences prefs.yaml
    tasknudge --version

Input:
    tasks.json: JSON list of task rows (id, title, due_date, status,
                priority, estimated_duration, category)
    profile.json: JSON object (work_hours_start, work_hours_end,
                  peak_energy_time, timezone)

Output:
    JSON result with success status and data
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from tasknudge import __version__
from tasknudge.engine.decision_engine import (
    calculate_all_notification_schedules,
    get_notification_summary,
)
from tasknudge.engine.models import Task, UserProfile, parse_datetime
from tasknudge.logging_config import get_logger, setup_logging
from tasknudge.scheduling.preferences import load_preferences
from tasknudge.scheduling.scheduler import NotificationScheduler

logger = get_logger(__name__)


def _read_json(path: str) -> Any:
    with open(path) as f:
        return json.load(f)


def _load_inputs(args) -> tuple[list[Task], UserProfile, Any]:
    raw_tasks = _read_json(args.tasks)
    if not isinstance(raw_tasks, list):
        raise ValueError("Tasks file must contain a JSON list")

    tasks = [Task.from_dict(row) for row in raw_tasks]
    profile = UserProfile.from_dict(_read_json(args.profile))
    now = parse_datetime(args.now) if args.now else None
    return tasks, profile, now


def cmd_preview(args) -> dict:
    """Run the decision engine over every task and summarize."""
    tasks, profile, now = _load_inputs(args)
    overdue_counts = _read_json(args.overdue_counts) if args.overdue_counts else {}

    schedules = calculate_all_notification_schedules(tasks, profile, overdue_counts, now)
    summary = get_notification_summary(schedules)

    return {
        "success": True,
        "data": {
            "schedules": [schedule.to_dict() for schedule in schedules],
            "summary": summary.to_dict(),
        },
    }


def cmd_plan(args) -> dict:
    """Run the full scheduling pass with user preferences applied."""
    tasks, profile, now = _load_inputs(args)
    preferences = load_preferences(Path(args.preferences) if args.preferences else None)

    scheduler = NotificationScheduler(profile, preferences, user_id=args.user)
    plan = scheduler.plan_all(tasks, now)

    return {"success": True, "data": plan.to_dict()}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasknudge",
        description="TaskNudge - preview task notification schedules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Engine output only
    tasknudge preview --tasks tasks.json --profile profile.json

    # Pin the clock for a reproducible preview
    tasknudge preview --tasks tasks.json --profile profile.json --now 2026-03-02T07:00

    # With quiet hours and notification switches applied
    tasknudge plan --tasks tasks.json --profile profile.json --preferences args/notifications.yaml
        """,
    )
    parser.add_argument("--version", action="version", version=f"tasknudge {__version__}")
    parser.add_argument("--log-level", default=None, help="Log level (default: TASKNUDGE_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--tasks", required=True, help="JSON file with a list of tasks")
        sub.add_argument("--profile", required=True, help="JSON file with the user profile")
        sub.add_argument("--now", help="ISO-8601 instant to compute from (default: now)")

    preview = subparsers.add_parser("preview", help="Show engine schedules and a summary")
    add_common(preview)
    preview.add_argument(
        "--overdue-counts",
        help="JSON object mapping task id to overdue reminders already sent today",
    )
    preview.set_defaults(func=cmd_preview)

    plan = subparsers.add_parser("plan", help="Show platform-ready notifications")
    add_common(plan)
    plan.add_argument("--preferences", help="YAML preferences file (default: args/notifications.yaml)")
    plan.add_argument("--user", help="User ID for log context")
    plan.set_defaults(func=cmd_plan)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    try:
        result = args.func(args)
    except (OSError, ValueError, KeyError) as e:
        logger.error("cli_failed", command=args.command, error=str(e))
        result = {"success": False, "error": str(e)}

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
