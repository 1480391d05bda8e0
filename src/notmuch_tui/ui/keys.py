"""Key names and the two-keystroke gesture used for `gg`."""

from __future__ import annotations

import curses
from enum import Enum

DOWN = "<down>"
UP = "<up>"
ENTER = "<enter>"
ESC = "<esc>"
BACKSPACE = "<backspace>"
RESIZE = "<resize>"

_SPECIAL_CODES = {
    curses.KEY_DOWN: DOWN,
    curses.KEY_UP: UP,
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_RESIZE: RESIZE,
}

_CONTROL_CHARS = {
    "\n": ENTER,
    "\r": ENTER,
    "\x1b": ESC,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}


def decode_key(raw: int | str) -> str | None:
    """Map a `get_wch()` result to a key name.

    Returns the character itself for printable input, one of the module's
    symbolic names for keys the UI handles, and None for anything else.
    """

    if isinstance(raw, int):
        return _SPECIAL_CODES.get(raw)
    if raw in _CONTROL_CHARS:
        return _CONTROL_CHARS[raw]
    if raw.isprintable():
        return raw
    return None


class Gesture(Enum):
    """Outcome of feeding one key to a TwoKeyGesture."""

    PASS = "pass"
    ARMED = "armed"
    FIRED = "fired"
    CANCELLED = "cancelled"


class TwoKeyGesture:
    """State machine for a doubled keystroke such as `gg`.

    The first key arms it; the same key again fires it. Any other key while
    armed disarms it and is swallowed. Keys fed while idle pass through.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        self.armed = False

    def feed(self, key: str) -> Gesture:
        if self.armed:
            self.armed = False
            return Gesture.FIRED if key == self.key else Gesture.CANCELLED
        if key == self.key:
            self.armed = True
            return Gesture.ARMED
        return Gesture.PASS

    def reset(self) -> None:
        self.armed = False
