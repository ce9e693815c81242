"""TaskNudge - notification timing for a personal task tracker

Philosophy:
    A reminder is only useful if it lands at a moment the user can act on it.
    High-priority work gets a ramp of nudges, medium work gets one, and low
    priority stays silent unless the user goes looking.

Components:
    engine/: Pure notification decision engine (task + profile -> schedule)
    scheduling/: Caller-side orchestration (preferences, quiet hours, copy)
    cli.py: Preview what will be sent and when
    logging_config.py: structlog setup shared by the CLI
"""

from pathlib import Path

__version__ = "0.3.0"

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"
