"""Logging setup (structlog).

Modules log through ``structlog.get_logger(__name__)`` with key/value events.
Call `configure_logging` once from an entry point; library code never
configures logging on import.
"""

from __future__ import annotations

import logging

import structlog

from .config import settings


def configure_logging(level: str | None = None) -> None:
    """Route structlog events to a console renderer at `level` (default from settings)."""
    name = (level or settings()["LOG_LEVEL"]).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level: {level!r}")
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        cache_logger_on_first_use=False,
    )


__all__ = ["configure_logging"]
