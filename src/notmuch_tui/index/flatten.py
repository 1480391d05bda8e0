"""Flattening of message trees into the rows of the index view."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from notmuch_tui.models import Message

TITLE_WIDTH = 45
DATE_WIDTH = 19
SENDER_WIDTH = 20
NO_SUBJECT = "<no subject>"
INDENT = "  "


@dataclass(frozen=True)
class DisplayRow:
    """One pre-rendered index line and the message it stands for."""

    text: str
    title: str
    message: Message

    @property
    def depth(self) -> int:
        return self.message.depth


def format_tags(tags: Iterable[str]) -> str:
    return "[" + ",".join(tags) + "]"


def _fit(text: str, width: int) -> str:
    return text[:width].ljust(width)


def format_row(message: Message, prefix: str = "", title_width: int = TITLE_WIDTH) -> DisplayRow:
    """Render a single message as an index row.

    Args:
        message: Message to render.
        prefix: Indentation preceding the subject.
        title_width: Width the indented subject is truncated and padded to.

    Returns:
        DisplayRow: The rendered row.
    """

    title = (prefix + (message.subject or NO_SUBJECT))[:title_width]
    marker = "*" if message.is_unread else "."
    text = (
        f" {marker} {message.date_relative[:DATE_WIDTH]:>{DATE_WIDTH}}  "
        f"{_fit(message.sender_name, SENDER_WIDTH)}  "
        f"{title:<{title_width}}  {format_tags(message.tags)}"
    )
    return DisplayRow(text=text, title=title, message=message)


def flatten_threads(messages: Sequence[Message], title_width: int = TITLE_WIDTH) -> list[DisplayRow]:
    """Serialize message trees into index rows in pre-order.

    Every message yields exactly one row; a message's row comes right before
    the rows of its replies, and siblings keep their thread order.
    """

    rows: list[DisplayRow] = []

    def visit(message: Message, prefix: str) -> None:
        rows.append(format_row(message, prefix, title_width))
        for reply in message.replies:
            visit(reply, prefix + INDENT)

    for message in messages:
        visit(message, INDENT * message.depth)
    return rows
