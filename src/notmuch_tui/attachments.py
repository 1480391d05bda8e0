"""Opening attachments in an external viewer."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path

import structlog

from notmuch_tui.config import Settings
from notmuch_tui.exceptions import AttachmentFetchFailed, ExternalToolFailed
from notmuch_tui.models import Attachment, HtmlAttachment
from notmuch_tui.notmuch.client import NotmuchClient

logger = structlog.get_logger()


class AttachmentViewer:
    """Writes an attachment to a private temp file and runs the viewer on it."""

    def __init__(self, client: NotmuchClient, settings: Settings | None = None) -> None:
        from notmuch_tui.config import get_settings

        self.client = client
        self.settings = settings or get_settings()

    def content(self, message_id: str, attachment: Attachment) -> bytes:
        """Raw bytes of the attachment.

        Raises:
            AttachmentFetchFailed: If notmuch cannot extract the part.
        """

        if isinstance(attachment, HtmlAttachment):
            return attachment.raw_html.encode("utf-8")
        return self.client.fetch_part(message_id, attachment.part_id)

    def open(self, message_id: str, attachment: Attachment) -> None:
        """Show an attachment and remove its temp file once the viewer returns.

        Raises:
            AttachmentFetchFailed: If notmuch cannot extract the part.
            ExternalToolFailed: If the viewer cannot be started or exits non-zero.
        """

        data = self.content(message_id, attachment)

        # mkdtemp creates the directory accessible by the owner only.
        try:
            tmpdir = tempfile.mkdtemp(prefix="notmuch-tui-")
        except OSError as exc:
            logger.exception("attachment_tempdir_failed", message_id=message_id, error=str(exc))
            raise AttachmentFetchFailed(f"Cannot create temporary directory: {exc}") from exc
        try:
            path = Path(tmpdir) / attachment.temp_name(message_id)
            try:
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
                with os.fdopen(fd, "wb") as fp:
                    fp.write(data)
            except OSError as exc:
                logger.exception("attachment_write_failed", path=str(path), error=str(exc))
                raise AttachmentFetchFailed(f"Cannot write {path.name}: {exc}") from exc
            logger.info("attachment_written", path=str(path), size=len(data))
            self._run_viewer(path)
        finally:
            shutil.rmtree(tmpdir, ignore_errors=True)

    def _run_viewer(self, path: Path) -> None:
        cmd = [*shlex.split(self.settings.viewer), str(path)]
        logger.info("attachment_viewer_started", cmd=cmd)
        try:
            proc = subprocess.run(cmd, check=False)
        except OSError as exc:
            logger.exception("attachment_viewer_unavailable", cmd=cmd, error=str(exc))
            raise ExternalToolFailed(f"Failed to run viewer {cmd[0]}: {exc}") from exc
        if proc.returncode != 0:
            logger.error("attachment_viewer_failed", cmd=cmd, returncode=proc.returncode)
            raise ExternalToolFailed(f"Viewer {cmd[0]} exited with status {proc.returncode}")
