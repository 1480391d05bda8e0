"""Composing new mail in an external editor.

The draft is a small header block (To, Subject), a blank line and the body.
After the editor exits the draft is parsed back and wrapped in a minimal RFC
5322 message for `notmuch insert`.
"""

from __future__ import annotations

import getpass
import os
import shlex
import socket
import subprocess
import tempfile
from contextlib import suppress
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from pathlib import Path

import structlog

from notmuch_tui.config import Settings
from notmuch_tui.exceptions import ExternalToolFailed

logger = structlog.get_logger()

DRAFT_TEMPLATE = "To: \nSubject: \n\n"


@dataclass(frozen=True)
class Draft:
    """The user's edited draft."""

    to: str
    subject: str
    body: str

    @property
    def is_blank(self) -> bool:
        return not self.subject.strip() and not self.body.strip()


def parse_draft(text: str) -> Draft:
    """Split an edited draft into its header fields and body.

    If the text before the first blank line is not a header block, the whole
    text is taken as the body.
    """

    head, sep, body = text.partition("\n\n")
    headers: dict[str, str] = {}
    for line in head.splitlines():
        name, colon, value = line.partition(":")
        if not colon or not name.strip() or " " in name.strip():
            return Draft(to="", subject="", body=text)
        headers[name.strip().lower()] = value.strip()

    if not sep and not headers:
        return Draft(to="", subject="", body=text)
    return Draft(to=headers.get("to", ""), subject=headers.get("subject", ""), body=body)


def build_envelope(draft: Draft, sender: str, *, domain: str = "localhost") -> bytes:
    """Assemble From/To/Date/Subject/Message-Id and the body into raw bytes."""

    msg = EmailMessage()
    msg["From"] = sender
    if draft.to:
        msg["To"] = draft.to
    msg["Date"] = formatdate(localtime=True)
    msg["Subject"] = draft.subject
    msg["Message-Id"] = make_msgid(domain=domain)
    msg.set_content(draft.body)
    return msg.as_bytes()


class Composer:
    """Runs the editor on a draft file and reads the result back."""

    def __init__(self, settings: Settings | None = None) -> None:
        from notmuch_tui.config import get_settings

        self.settings = settings or get_settings()

    @property
    def sender(self) -> str:
        if self.settings.compose_from:
            return self.settings.compose_from
        return f"{getpass.getuser()}@{socket.gethostname()}"

    def edit(self, template: str = DRAFT_TEMPLATE) -> Draft | None:
        """Let the user edit a draft.

        Returns:
            The parsed draft, or None when it was left unchanged or blank.

        Raises:
            ExternalToolFailed: If the editor cannot be started or exits non-zero.
        """

        # mkstemp creates the file readable and writable by the owner only.
        fd, path = tempfile.mkstemp(prefix="notmuch-tui-", suffix=".eml")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                fp.write(template)
            self._run_editor(path)
            try:
                text = Path(path).read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                logger.exception("compose_draft_unreadable", path=path, error=str(exc))
                raise ExternalToolFailed(f"Cannot read draft back: {exc}") from exc
        finally:
            with suppress(FileNotFoundError):
                os.unlink(path)

        if text == template:
            logger.info("compose_draft_unchanged")
            return None
        draft = parse_draft(text)
        if draft.is_blank:
            logger.info("compose_draft_blank")
            return None
        return draft

    def envelope(self, draft: Draft) -> bytes:
        return build_envelope(draft, self.sender, domain=socket.gethostname() or "localhost")

    def _run_editor(self, path: str) -> None:
        cmd = [*shlex.split(self.settings.editor), path]
        logger.info("compose_editor_started", cmd=cmd)
        try:
            proc = subprocess.run(cmd, check=False)
        except OSError as exc:
            logger.exception("compose_editor_unavailable", cmd=cmd, error=str(exc))
            raise ExternalToolFailed(f"Failed to run editor {cmd[0]}: {exc}") from exc
        if proc.returncode != 0:
            logger.error("compose_editor_failed", cmd=cmd, returncode=proc.returncode)
            raise ExternalToolFailed(f"Editor {cmd[0]} exited with status {proc.returncode}")
