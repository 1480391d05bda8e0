"""Selection and scroll arithmetic for the index and reading views."""

from __future__ import annotations


class Viewport:
    """A selection cursor over `count` rows with a window of `height` rows.

    After every operation the window is shifted by the smallest amount that
    keeps `selected` visible, and never past the last full page.
    """

    def __init__(self, count: int = 0, height: int = 1) -> None:
        self.count = max(0, count)
        self.height = max(1, height)
        self.selected = 0
        self.scroll = 0

    @property
    def max_scroll(self) -> int:
        return max(0, self.count - self.height)

    def set_count(self, count: int) -> None:
        self.count = max(0, count)
        self._follow()

    def resize(self, height: int) -> None:
        self.height = max(1, height)
        self._follow()

    def move_next(self) -> None:
        if self.selected < self.count - 1:
            self.selected += 1
        self._follow()

    def move_prev(self) -> None:
        if self.selected > 0:
            self.selected -= 1
        self._follow()

    def jump_first(self) -> None:
        self.selected = 0
        self.scroll = 0

    def jump_last(self) -> None:
        self.selected = max(0, self.count - 1)
        self._follow()

    def visible_range(self) -> range:
        return range(self.scroll, min(self.count, self.scroll + self.height))

    def _follow(self) -> None:
        self.selected = min(max(0, self.selected), max(0, self.count - 1))
        if self.selected < self.scroll:
            self.scroll = self.selected
        elif self.selected >= self.scroll + self.height:
            self.scroll = self.selected - self.height + 1
        self.scroll = max(0, min(self.scroll, self.max_scroll))


class ReaderPosition:
    """Scroll position of an open message, extended over its attachments.

    Body lines and the attachment list form one axis: moving down scrolls the
    body until its last page is shown and then walks the attachments; moving
    up first walks back out of the attachments.
    """

    def __init__(self, line_count: int = 0, attachment_count: int = 0, height: int = 1) -> None:
        self.line_count = max(0, line_count)
        self.attachment_count = max(0, attachment_count)
        self.height = max(1, height)
        self.scroll = 0
        self.attachment = -1

    @property
    def max_scroll(self) -> int:
        return max(0, self.line_count - self.height)

    @property
    def selected_attachment(self) -> int | None:
        return self.attachment if self.attachment >= 0 else None

    def set_line_count(self, line_count: int) -> None:
        self.line_count = max(0, line_count)
        self._clamp()

    def resize(self, height: int) -> None:
        self.height = max(1, height)
        self._clamp()

    def move_down(self) -> None:
        if self.scroll < self.max_scroll:
            self.scroll += 1
        elif self.attachment < self.attachment_count - 1:
            self.attachment += 1

    def move_up(self) -> None:
        if self.attachment >= 0:
            self.attachment -= 1
        elif self.scroll > 0:
            self.scroll -= 1

    def jump_first(self) -> None:
        self.scroll = 0
        self.attachment = -1

    def jump_last(self) -> None:
        self.scroll = self.max_scroll

    def visible_lines(self) -> slice:
        return slice(self.scroll, self.scroll + self.height)

    def _clamp(self) -> None:
        self.scroll = max(0, min(self.scroll, self.max_scroll))
