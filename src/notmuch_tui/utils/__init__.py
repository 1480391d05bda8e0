"""Utility functions for notmuch-tui."""

from __future__ import annotations

import logging
from typing import TextIO

import structlog

from notmuch_tui.config import Settings


def configure_logging(settings: Settings, file: TextIO | None = None) -> TextIO:
    """Route structlog output to the log file.

    The terminal belongs to curses while the UI runs, so nothing may be
    written to stdout or stderr.

    Args:
        settings: Application settings (log level and file).
        file: Open stream to log to instead of `settings.log_file`.

    Returns:
        The stream log lines are written to.
    """

    if file is None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file = settings.log_file.open("a", encoding="utf-8")

    level_name = "DEBUG" if settings.debug else settings.log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(file=file),
        cache_logger_on_first_use=False,
    )
    return file
