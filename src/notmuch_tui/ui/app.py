"""Application state machine.

The app is always in one of five states. `run` dispatches on the current
state; each state handler runs its own input loop and returns once it has
chosen the next state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import structlog

from notmuch_tui.attachments import AttachmentViewer
from notmuch_tui.compose import Composer
from notmuch_tui.config import Settings
from notmuch_tui.content import HtmlConverter, body_attachments
from notmuch_tui.exceptions import (
    AttachmentFetchFailed,
    ConversionFailed,
    EmptySelection,
    ExternalToolFailed,
    MalformedThread,
    SearchFailed,
)
from notmuch_tui.index import DisplayRow, flatten_threads
from notmuch_tui.models import Attachment, Message
from notmuch_tui.notmuch.client import NotmuchClient
from notmuch_tui.ui import keys
from notmuch_tui.ui.events import Event, Events
from notmuch_tui.ui.keys import Gesture, TwoKeyGesture
from notmuch_tui.ui.screen import CursesScreen, wrap_body
from notmuch_tui.ui.viewport import ReaderPosition, Viewport

logger = structlog.get_logger()


class AppState(str, Enum):
    """States of the UI."""

    REFRESH = "refresh"
    INDEX = "index"
    VIEW = "view"
    COMPOSE = "compose"
    EXIT = "exit"


@dataclass
class OpenMessage:
    """A message opened in the reading view."""

    message: Message
    text: str
    attachments: list[Attachment]
    position: ReaderPosition
    lines: list[str] = field(default_factory=list)


class App:
    """notmuch-tui application.

    Collaborators are injected so the state machine can be driven without a
    terminal: `screen` draws frames and reports sizes, `events` yields keys
    and ticks, the client, composer and viewer wrap the external programs.
    """

    def __init__(
        self,
        client: NotmuchClient,
        screen: CursesScreen,
        events: Events,
        settings: Settings | None = None,
        *,
        html_to_text: Callable[[str], str] | None = None,
        composer: Composer | None = None,
        viewer: AttachmentViewer | None = None,
    ) -> None:
        from notmuch_tui.config import get_settings

        self.settings = settings or get_settings()
        self.client = client
        self.screen = screen
        self.events = events
        self.html_to_text = html_to_text or HtmlConverter(self.settings)
        self.composer = composer or Composer(self.settings)
        self.viewer = viewer or AttachmentViewer(client, self.settings)

        self.state = AppState.REFRESH
        self.query = self.settings.default_query
        self._shown_query = self.query
        self.messages: list[Message] = []
        self.rows: list[DisplayRow] = []
        self.viewport = Viewport()
        self.editing = False
        self.search_buffer = ""
        self.status = ""
        self.opened: OpenMessage | None = None

        self._index_gesture = TwoKeyGesture("g")
        self._view_gesture = TwoKeyGesture("g")

    def run(self) -> None:
        """Run the state machine until it reaches EXIT."""

        handlers = {
            AppState.REFRESH: self.refresh,
            AppState.INDEX: self.show_index,
            AppState.VIEW: self.show_message,
            AppState.COMPOSE: self.compose,
        }
        self.events.start()
        try:
            while self.state is not AppState.EXIT:
                logger.debug("app_state", state=self.state.value)
                handlers[self.state]()
        finally:
            self.events.stop()
        logger.info("app_exited")

    # Refresh

    def refresh(self) -> None:
        """Run the current search and rebuild the index rows."""

        query = self.query.strip() or self.settings.default_query
        try:
            messages = self.client.search(query)
        except (SearchFailed, MalformedThread) as exc:
            logger.error("refresh_failed", query=query, error=str(exc))
            self.status = f"Search failed: {exc}"
            self.query = self._shown_query
        else:
            self.query = query
            self._shown_query = query
            self.messages = messages
            self.rows = flatten_threads(messages, self.settings.title_width)
            self.viewport.set_count(len(self.rows))
            self.viewport.jump_first()
        self.state = AppState.INDEX

    # Index

    def show_index(self) -> None:
        self._sync_exit_key()
        while self.state is AppState.INDEX:
            self.render_index()
            self._dispatch(self._next_event(), self.handle_index_key)

    def render_index(self) -> None:
        self.viewport.resize(self.screen.index_height())
        self.screen.draw_index(
            query=self.query,
            editing=self.editing,
            edit_buffer=self.search_buffer,
            rows=self.rows,
            viewport=self.viewport,
            status=self.status,
        )

    def handle_index_key(self, key: str) -> None:
        if self.editing:
            self._handle_search_key(key)
            return

        gesture = self._index_gesture.feed(key)
        if gesture is Gesture.FIRED:
            self.viewport.jump_first()
            return
        if gesture is not Gesture.PASS:
            return

        self.status = ""
        if key in ("j", keys.DOWN):
            self.viewport.move_next()
        elif key in ("k", keys.UP):
            self.viewport.move_prev()
        elif key == "G":
            self.viewport.jump_last()
        elif key == "q":
            self.state = AppState.EXIT
        elif key == keys.ENTER:
            if self.rows and self.open_selected():
                self.state = AppState.VIEW
        elif key == "m":
            self.state = AppState.COMPOSE
        elif key == "l":
            self.editing = True
            self.search_buffer = ""
            self._sync_exit_key()

    def _handle_search_key(self, key: str) -> None:
        if key == keys.ENTER:
            self.query = self.search_buffer
            self.search_buffer = ""
            self.editing = False
            self.state = AppState.REFRESH
        elif key == keys.ESC:
            self.search_buffer = ""
            self.editing = False
            self._sync_exit_key()
        elif key == keys.BACKSPACE:
            self.search_buffer = self.search_buffer[:-1]
        elif len(key) == 1:
            self.search_buffer += key

    def selected_message(self) -> Message:
        if not self.rows:
            raise EmptySelection("No message selected")
        return self.rows[self.viewport.selected].message

    def open_selected(self) -> bool:
        """Extract the selected message's body; report failures in the status line."""

        message = self.selected_message()
        try:
            text, attachments = body_attachments(message.body, self.html_to_text)
        except ConversionFailed as exc:
            logger.error("open_message_failed", message_id=message.id, error=str(exc))
            self.status = f"Cannot render HTML body: {exc}"
            return False

        self.opened = OpenMessage(
            message=message,
            text=text,
            attachments=attachments,
            position=ReaderPosition(attachment_count=len(attachments)),
        )
        self._view_gesture.reset()
        logger.info("message_opened", message_id=message.id, attachments=len(attachments))
        return True

    # View

    def show_message(self) -> None:
        self._sync_exit_key()
        while self.state is AppState.VIEW:
            self.render_message()
            self._dispatch(self._next_event(), self.handle_view_key)
        self.opened = None

    def render_message(self) -> None:
        opened = self.opened
        if opened is None:
            self.state = AppState.INDEX
            return
        opened.lines = wrap_body(opened.text, self.screen.body_width())
        opened.position.set_line_count(len(opened.lines))
        opened.position.resize(self.screen.body_height(len(opened.attachments)))
        self.screen.draw_message(
            message=opened.message,
            lines=opened.lines,
            attachments=opened.attachments,
            position=opened.position,
            status=self.status,
        )

    def handle_view_key(self, key: str) -> None:
        opened = self.opened
        if opened is None:
            self.state = AppState.INDEX
            return
        position = opened.position

        gesture = self._view_gesture.feed(key)
        if gesture is Gesture.FIRED:
            position.jump_first()
            return
        if gesture is not Gesture.PASS:
            return

        self.status = ""
        if key in ("q", "i"):
            self.state = AppState.INDEX
        elif key in ("j", keys.DOWN):
            position.move_down()
        elif key in ("k", keys.UP):
            position.move_up()
        elif key == "G":
            position.jump_last()
        elif key == keys.ENTER and position.selected_attachment is not None:
            self.open_attachment(opened, opened.attachments[position.selected_attachment])

    def open_attachment(self, opened: OpenMessage, attachment: Attachment) -> None:
        self._hand_over_terminal()
        try:
            self.viewer.open(opened.message.id, attachment)
        except (AttachmentFetchFailed, ExternalToolFailed) as exc:
            logger.error("attachment_open_failed", message_id=opened.message.id, error=str(exc))
            self.status = f"Cannot open attachment: {exc}"
        finally:
            self._take_back_terminal()

    # Compose

    def compose(self) -> None:
        """Edit a new message and insert it, then refresh the index."""

        self._hand_over_terminal()
        try:
            draft = self.composer.edit()
            if draft is not None:
                self.client.insert(self.composer.envelope(draft))
                self.status = f"Inserted: {draft.subject or '<no subject>'}"
        except ExternalToolFailed as exc:
            logger.error("compose_failed", error=str(exc))
            self.status = f"Compose failed: {exc}"
        finally:
            self._take_back_terminal()
        self.state = AppState.REFRESH

    # Helpers

    def _next_event(self) -> Event:
        self.events.ensure_running()
        return self.events.next()

    def _dispatch(self, event: Event, handler: Callable[[str], None]) -> None:
        # Ticks and resizes only cause a redraw.
        if event.key is None or event.key == keys.RESIZE:
            return
        logger.debug("key_pressed", state=self.state.value, key=event.key)
        handler(event.key)

    def _sync_exit_key(self) -> None:
        if self.state is AppState.INDEX and not self.editing:
            self.events.enable_exit_key()
        else:
            self.events.disable_exit_key()

    def _hand_over_terminal(self) -> None:
        self.events.suspend()
        self.screen.suspend()

    def _take_back_terminal(self) -> None:
        self.screen.resume()
        self.events.resume()
