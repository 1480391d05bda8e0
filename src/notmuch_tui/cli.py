"""Command-line interface for notmuch-tui.

This module provides the main entry point that sets up logging and the
terminal and runs the application.
"""

from __future__ import annotations

import argparse
import curses
import locale
import sys
from pathlib import Path

import structlog

from notmuch_tui import __version__
from notmuch_tui.config import Settings, get_settings
from notmuch_tui.exceptions import ConfigurationError, NotmuchTuiError
from notmuch_tui.notmuch.client import NotmuchClient
from notmuch_tui.ui.app import App
from notmuch_tui.ui.events import Events
from notmuch_tui.ui.screen import CursesScreen
from notmuch_tui.utils import configure_logging

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notmuch-tui", description="Terminal client for notmuch")
    parser.add_argument(
        "query",
        nargs="*",
        help="Initial notmuch search (default: settings default_query)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="File receiving log output (default: settings log_file)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _run(stdscr, settings: Settings, query: str) -> None:
    screen = CursesScreen(stdscr)
    events = Events(screen.read_key, tick_rate=settings.tick_rate_ms / 1000)
    app = App(NotmuchClient(settings), screen, events, settings)
    if query:
        app.query = query
    app.run()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the notmuch-tui CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    parsed = _build_parser().parse_args(args)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    if parsed.log_file is not None:
        settings = settings.model_copy(update={"log_file": parsed.log_file})

    configure_logging(settings)
    logger.info("notmuch_tui_started", version=__version__, debug=settings.debug)

    locale.setlocale(locale.LC_ALL, "")
    try:
        curses.wrapper(_run, settings, " ".join(parsed.query))
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")
        return 130
    except NotmuchTuiError as exc:
        logger.exception("fatal_error", error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("notmuch_tui_shutdown")
    return 0


if __name__ == "__main__":
    sys.exit(main())
