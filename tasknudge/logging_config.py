"""
Structured logging configuration using structlog wrapping stdlib.

Provides JSON-formatted structured log output in production and
human-readable console output in development. Logs go to stderr so the
CLI's JSON result on stdout stays machine-readable.

Usage:
    from tasknudge.logging_config import setup_logging
    setup_logging()
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog and the root stdlib logger.

    Args:
        level: Log level name; defaults to TASKNUDGE_LOG_LEVEL or INFO
        json_output: JSON lines instead of console output; defaults to
            TASKNUDGE_LOG_FORMAT=json
        stream: Where log lines go (default: stderr)
    """
    if level is None:
        level = os.environ.get("TASKNUDGE_LOG_LEVEL", "INFO")

    if json_output is None:
        json_output = os.environ.get("TASKNUDGE_LOG_FORMAT", "").lower() == "json"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Records from plain logging.getLogger() loggers go through the same renderer
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Structured logger; bind per-user context with `.bind(user_id=...)`."""
    return structlog.get_logger(name)


__all__ = ["get_logger", "setup_logging"]
