"""Unit tests for key decoding and the two-keystroke gesture."""

from __future__ import annotations

import curses

from notmuch_tui.ui import keys
from notmuch_tui.ui.keys import Gesture, TwoKeyGesture, decode_key


class TestDecodeKey:
    """Test suite for decode_key."""

    def test_special_keys(self) -> None:
        assert decode_key(curses.KEY_DOWN) == keys.DOWN
        assert decode_key(curses.KEY_UP) == keys.UP
        assert decode_key(curses.KEY_BACKSPACE) == keys.BACKSPACE
        assert decode_key(curses.KEY_RESIZE) == keys.RESIZE

    def test_control_characters(self) -> None:
        assert decode_key("\n") == keys.ENTER
        assert decode_key("\r") == keys.ENTER
        assert decode_key("\x1b") == keys.ESC
        assert decode_key("\x7f") == keys.BACKSPACE

    def test_printable_characters(self) -> None:
        assert decode_key("j") == "j"
        assert decode_key("G") == "G"
        assert decode_key("ä") == "ä"
        assert decode_key(" ") == " "

    def test_unknown_input(self) -> None:
        assert decode_key("\x01") is None
        assert decode_key(curses.KEY_F1) is None


class TestTwoKeyGesture:
    """Test suite for TwoKeyGesture class."""

    def test_same_key_twice_fires(self) -> None:
        gesture = TwoKeyGesture("g")

        assert gesture.feed("g") is Gesture.ARMED
        assert gesture.feed("g") is Gesture.FIRED
        assert gesture.armed is False

    def test_other_key_while_armed_cancels(self) -> None:
        gesture = TwoKeyGesture("g")

        gesture.feed("g")

        assert gesture.feed("j") is Gesture.CANCELLED
        assert gesture.feed("g") is Gesture.ARMED

    def test_idle_keys_pass_through(self) -> None:
        gesture = TwoKeyGesture("g")

        assert gesture.feed("j") is Gesture.PASS
        assert gesture.feed("G") is Gesture.PASS

    def test_reset(self) -> None:
        gesture = TwoKeyGesture("g")
        gesture.feed("g")

        gesture.reset()

        assert gesture.feed("j") is Gesture.PASS
