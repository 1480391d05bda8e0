"""curses rendering of the index and reading views."""

from __future__ import annotations

import curses
import textwrap
from collections.abc import Sequence

from notmuch_tui.index import DisplayRow
from notmuch_tui.models import Attachment, Message
from notmuch_tui.ui.keys import decode_key
from notmuch_tui.ui.viewport import ReaderPosition, Viewport

# Rows used by the index around the message list: search box (3), list
# title (1), status line (1).
INDEX_CHROME = 5
HEADER_FIELDS = ("From", "To", "Date", "Attachments", "Subject")

_PAIR_SELECTED = 1
_PAIR_HEADER = 2
_PAIR_ATTACHMENT = 3


def wrap_body(text: str, width: int) -> list[str]:
    """Split body text into display lines no wider than `width`."""

    width = max(1, width)
    lines: list[str] = []
    for line in text.expandtabs(4).splitlines():
        if len(line) <= width:
            lines.append(line)
        else:
            lines.extend(
                textwrap.wrap(line, width, replace_whitespace=False, drop_whitespace=False)
                or [""]
            )
    return lines


class Styles:
    """curses attributes for the UI elements, degraded to monochrome when needed."""

    def __init__(self) -> None:
        self.normal = curses.A_NORMAL
        self.selected = curses.A_REVERSE | curses.A_BOLD
        self.header = curses.A_NORMAL
        self.subject = curses.A_BOLD
        self.attachment = curses.A_NORMAL
        self.status = curses.A_DIM
        self.frame = curses.A_NORMAL
        self.active_frame = curses.A_BOLD

        if not curses.has_colors():
            return
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        curses.init_pair(_PAIR_SELECTED, curses.COLOR_YELLOW, background)
        curses.init_pair(_PAIR_HEADER, curses.COLOR_CYAN, background)
        curses.init_pair(_PAIR_ATTACHMENT, curses.COLOR_BLUE, background)
        self.selected = curses.color_pair(_PAIR_SELECTED) | curses.A_BOLD
        self.header = curses.color_pair(_PAIR_HEADER)
        self.attachment = curses.color_pair(_PAIR_ATTACHMENT)
        self.active_frame = curses.color_pair(_PAIR_SELECTED)


class CursesScreen:
    """Draws frames on a curses window and reports the space available."""

    def __init__(self, stdscr, poll_ms: int = 100) -> None:
        self.stdscr = stdscr
        self.stdscr.keypad(True)
        self.stdscr.timeout(poll_ms)
        self.styles = Styles()

    def read_key(self) -> str | None:
        """Wait up to the poll interval for a key; None on timeout or unknown keys."""

        try:
            raw = self.stdscr.get_wch()
        except curses.error:
            return None
        return decode_key(raw)

    def size(self) -> tuple[int, int]:
        return self.stdscr.getmaxyx()

    def index_height(self) -> int:
        height, _ = self.size()
        return max(1, height - INDEX_CHROME)

    def body_width(self) -> int:
        _, width = self.size()
        return max(1, width - 2)

    def body_height(self, attachment_count: int) -> int:
        height, _ = self.size()
        # Header block, a blank separator, the attachment list and the status line.
        reserved = len(HEADER_FIELDS) + 1 + attachment_count + 1
        return max(1, height - reserved)

    def draw_index(
        self,
        *,
        query: str,
        editing: bool,
        edit_buffer: str,
        rows: Sequence[DisplayRow],
        viewport: Viewport,
        status: str,
    ) -> None:
        scr = self.stdscr
        height, width = self.size()
        scr.erase()

        search_attr = self.styles.active_frame if editing else self.styles.frame
        list_attr = self.styles.frame if editing else self.styles.active_frame
        self._box(0, 0, 3, width, search_attr)
        self._addstr(1, 2, self._fit(edit_buffer if editing else query, width - 4), search_attr)

        self._addstr(3, 1, self._fit(f"Found: {len(rows)}", width - 2), list_attr | curses.A_BOLD)
        for screen_row, index in enumerate(viewport.visible_range(), start=4):
            attr = self.styles.selected if index == viewport.selected and not editing else self.styles.normal
            self._addstr(screen_row, 1, self._fit(rows[index].text, width - 2), attr)

        self._addstr(height - 1, 0, self._fit(status, width - 1), self.styles.status)

        if editing:
            self._cursor(True)
            self._move(1, min(2 + len(edit_buffer), width - 2))
        else:
            self._cursor(False)
        scr.refresh()

    def draw_message(
        self,
        *,
        message: Message,
        lines: Sequence[str],
        attachments: Sequence[Attachment],
        position: ReaderPosition,
        status: str,
    ) -> None:
        scr = self.stdscr
        height, width = self.size()
        scr.erase()
        self._cursor(False)

        row = 0
        for field in HEADER_FIELDS:
            if field == "Attachments":
                value, attr = str(len(attachments)), self.styles.attachment
            elif field == "Subject":
                value, attr = message.header(field), self.styles.subject
            else:
                value, attr = message.header(field), self.styles.header
            self._addstr(row, 1, self._fit(f"{field}: {value}", width - 2), attr)
            row += 1
        row += 1

        for line in lines[position.visible_lines()]:
            self._addstr(row, 1, self._fit(line, width - 2))
            row += 1

        for index, attachment in enumerate(attachments):
            chosen = index == position.selected_attachment
            label = f"{' > ' if chosen else ''}[{index:>2}: {attachment.label}]"
            attr = self.styles.selected if chosen else self.styles.attachment
            self._addstr(row, 1, self._fit(label, width - 2), attr)
            row += 1

        self._addstr(height - 1, 0, self._fit(status, width - 1), self.styles.status)
        scr.refresh()

    def suspend(self) -> None:
        """Hand the terminal to an external program."""

        curses.def_prog_mode()
        curses.endwin()

    def resume(self) -> None:
        curses.reset_prog_mode()
        self.stdscr.clear()
        self.stdscr.refresh()

    def _box(self, y: int, x: int, h: int, w: int, attr: int) -> None:
        if w < 2 or h < 2:
            return
        self._addstr(y, x, "+" + "-" * (w - 2) + "+", attr)
        for row in range(y + 1, y + h - 1):
            self._addstr(row, x, "|", attr)
            self._addstr(row, x + w - 1, "|", attr)
        self._addstr(y + h - 1, x, "+" + "-" * (w - 2) + "+", attr)

    @staticmethod
    def _fit(text: str, width: int) -> str:
        if width <= 0:
            return ""
        text = text.replace("\t", "    ")
        if len(text) <= width:
            return text
        if width <= 3:
            return text[:width]
        return text[: width - 3] + "..."

    def _addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            pass

    def _move(self, y: int, x: int) -> None:
        try:
            self.stdscr.move(y, x)
        except curses.error:
            pass

    @staticmethod
    def _cursor(visible: bool) -> None:
        try:
            curses.curs_set(1 if visible else 0)
        except curses.error:
            pass
