"""notmuch command-line client.

This module provides a client for the three notmuch operations the UI needs:
showing a search as JSON, fetching the raw bytes of one part, and inserting a
composed message.

Notes:
    Every call is a blocking subprocess. There are no timeouts and no retries;
    failures surface through the process exit status.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

import structlog

from notmuch_tui.config import Settings
from notmuch_tui.exceptions import (
    AttachmentFetchFailed,
    ExternalToolFailed,
    NotmuchTuiError,
    SearchFailed,
)
from notmuch_tui.models import Message
from notmuch_tui.notmuch.parsing import parse_show_output

logger = structlog.get_logger()


class NotmuchClient:
    """Client for the notmuch executable.

    This client builds the command lines, runs them and maps failures to the
    application's exception types.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize notmuch client.

        Args:
            settings: Application settings. If None, uses default settings.
        """
        from notmuch_tui.config import get_settings

        self.settings = settings or get_settings()
        logger.info("notmuch_client_initialized", binary=self.settings.notmuch_bin)

    def search(self, query: str) -> list[Message]:
        """Run a search and return the thread roots.

        Args:
            query: notmuch search terms.

        Returns:
            Root messages of every matching thread, replies attached.

        Raises:
            SearchFailed: If notmuch could not be run or exited non-zero.
            MalformedThread: If the output is not the expected thread JSON.
        """

        logger.info("notmuch_search_started", query=query)
        stdout = self._run(
            ["show", "--format=json", "--include-html", query],
            error=SearchFailed,
        )
        messages = parse_show_output(stdout)
        logger.info("notmuch_search_completed", query=query, threads=len(messages))
        return messages

    def fetch_part(self, message_id: str, part_id: int) -> bytes:
        """Get the raw, decoded bytes of one MIME part.

        Raises:
            AttachmentFetchFailed: If notmuch could not be run or exited non-zero.
        """

        logger.info("notmuch_fetch_part", message_id=message_id, part_id=part_id)
        return self._run(
            ["show", "--format=raw", f"--part={part_id}", f"id:{message_id}"],
            error=AttachmentFetchFailed,
        )

    def insert(self, raw_message: bytes) -> None:
        """Store a message in the mail store and index it.

        Raises:
            ExternalToolFailed: If notmuch could not be run or exited non-zero.
        """

        args = ["insert"]
        if self.settings.insert_folder:
            args.append(f"--folder={self.settings.insert_folder}")
        args.extend(f"+{tag}" for tag in self.settings.insert_tags)

        logger.info("notmuch_insert", size=len(raw_message), folder=self.settings.insert_folder)
        self._run(args, error=ExternalToolFailed, stdin=raw_message)

    def command(self, args: Sequence[str]) -> list[str]:
        return [self.settings.notmuch_bin, *args]

    def _run(
        self,
        args: Sequence[str],
        *,
        error: type[NotmuchTuiError],
        stdin: bytes | None = None,
    ) -> bytes:
        cmd = self.command(args)
        try:
            proc = subprocess.run(cmd, input=stdin, capture_output=True, check=False)
        except OSError as exc:
            logger.exception("notmuch_invocation_failed", cmd=cmd, error=str(exc))
            raise error(f"Failed to run {cmd[0]}: {exc}") from exc

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            logger.error("notmuch_command_failed", cmd=cmd, returncode=proc.returncode, stderr=stderr)
            raise error(stderr or f"{' '.join(cmd)} exited with status {proc.returncode}")

        return proc.stdout
