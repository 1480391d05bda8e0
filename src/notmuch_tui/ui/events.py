"""Keyboard and tick events merged into one queue.

A keyboard thread and a ticker thread each feed a shared queue that the UI
loop consumes. The keyboard thread ends after delivering the exit key (while
the exit key is enabled) and raises the shared exit flag; the ticker ends once
it sees the flag.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

logger = structlog.get_logger()

KeyReader = Callable[[], "str | None"]


class EventKind(Enum):
    INPUT = "input"
    TICK = "tick"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    key: str | None = None


TICK = Event(EventKind.TICK)


class Events:
    """Fan-in of keyboard input and periodic ticks.

    `read_key` must return within a short poll interval, yielding None when no
    key arrived, so that the keyboard thread can observe suspension and exit.
    """

    def __init__(self, read_key: KeyReader, tick_rate: float = 0.25, exit_key: str = "q") -> None:
        self._read_key = read_key
        self.tick_rate = tick_rate
        self.exit_key = exit_key

        self._queue: queue.Queue[Event] = queue.Queue()
        self._exit = threading.Event()
        self._exit_key_enabled = threading.Event()
        self._exit_key_enabled.set()
        self._suspended = threading.Event()
        self._parked = threading.Event()
        self._threads: list[threading.Thread] = []

    @property
    def exited(self) -> bool:
        return self._exit.is_set()

    def start(self) -> None:
        self._exit.clear()
        self._threads = [
            threading.Thread(target=self._keyboard_loop, name="events-keyboard", daemon=True),
            threading.Thread(target=self._tick_loop, name="events-tick", daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        logger.debug("events_started", tick_rate=self.tick_rate)

    def stop(self) -> None:
        self._exit.set()
        for thread in self._threads:
            if thread is not threading.current_thread():
                thread.join()
        self._threads = []
        logger.debug("events_stopped")

    def ensure_running(self) -> None:
        """Restart the producers after an exit key the UI did not act on."""

        if self._exit.is_set():
            self.stop()
            self.start()

    def next(self, timeout: float | None = None) -> Event:
        """Block until the next event arrives.

        Raises:
            queue.Empty: If `timeout` elapses first.
        """

        return self._queue.get(timeout=timeout)

    def enable_exit_key(self) -> None:
        self._exit_key_enabled.set()

    def disable_exit_key(self) -> None:
        self._exit_key_enabled.clear()

    def suspend(self, timeout: float = 1.0) -> None:
        """Stop reading keys so an external program can own the terminal."""

        self._parked.clear()
        self._suspended.set()
        if any(thread.is_alive() for thread in self._threads):
            self._parked.wait(timeout)

    def resume(self) -> None:
        self._suspended.clear()

    def _keyboard_loop(self) -> None:
        try:
            while not self._exit.is_set():
                if self._suspended.is_set():
                    self._parked.set()
                    self._exit.wait(self.tick_rate)
                    continue

                key = self._read_key()
                if key is None:
                    continue
                self._queue.put(Event(EventKind.INPUT, key))
                if self._exit_key_enabled.is_set() and key == self.exit_key:
                    break
        finally:
            self._parked.set()
            self._exit.set()

    def _tick_loop(self) -> None:
        while not self._exit.is_set():
            if not self._suspended.is_set():
                self._queue.put(TICK)
            self._exit.wait(self.tick_rate)
