"""TaskNudge Test Suite

Test organization:
- unit/engine/: Decision engine tests (schedules, timing, models)
- unit/scheduling/: Scheduler tests (preferences, quiet hours, copy, planning)
- unit/test_cli.py: Command line interface

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/engine/

    # With coverage
    pytest --cov=tasknudge --cov-report=term-missing
"""
