"""HTML-to-text conversion through an external dump command (lynx by default)."""

from __future__ import annotations

import shlex
import subprocess

import structlog

from notmuch_tui.config import Settings
from notmuch_tui.exceptions import ConversionFailed

logger = structlog.get_logger()


class HtmlConverter:
    """Callable converting HTML to width-constrained plain text."""

    def __init__(self, settings: Settings | None = None) -> None:
        from notmuch_tui.config import get_settings

        self.settings = settings or get_settings()
        self.width = self.settings.html_width

    @property
    def command(self) -> list[str]:
        return [arg.format(width=self.width) for arg in shlex.split(self.settings.html_dump_command)]

    def __call__(self, html: str) -> str:
        """Render `html` as plain text.

        Raises:
            ConversionFailed: If the dump command is missing or exits non-zero.
        """

        cmd = self.command
        logger.debug("html_conversion_started", cmd=cmd, html_length=len(html))
        try:
            proc = subprocess.run(cmd, input=html.encode("utf-8"), capture_output=True, check=False)
        except OSError as exc:
            logger.exception("html_conversion_unavailable", cmd=cmd, error=str(exc))
            raise ConversionFailed(f"Failed to run {cmd[0]}: {exc}") from exc

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            logger.error("html_conversion_failed", cmd=cmd, returncode=proc.returncode, stderr=stderr)
            raise ConversionFailed(stderr or f"{cmd[0]} exited with status {proc.returncode}")

        return proc.stdout.decode("utf-8", errors="replace")
