"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any, Callable

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo any structlog configuration a test installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def mock_settings(tmp_path):
    """Provide settings that never point at real user tools."""
    from notmuch_tui.config import Settings

    return Settings(
        notmuch_bin="notmuch",
        editor="true",
        viewer="true",
        log_level="DEBUG",
        log_file=tmp_path / "notmuch-tui.log",
        debug=True,
    )


@pytest.fixture
def message_node() -> Callable[..., dict[str, Any]]:
    """Factory for message objects shaped like `notmuch show --format=json`."""

    def build(
        msg_id: str,
        subject: str | None = None,
        *,
        tags: list[str] | None = None,
        body: list[dict[str, Any]] | None = None,
        sender: str = "Alice <alice@example.com>",
    ) -> dict[str, Any]:
        headers = {"From": sender, "To": "bob@example.com", "Date": "Mon, 01 Jan 2024 10:00:00 +0000"}
        if subject is not None:
            headers["Subject"] = subject
        return {
            "id": msg_id,
            "match": True,
            "excluded": False,
            "filename": [f"/mail/cur/{msg_id}"],
            "timestamp": 1704103200,
            "date_relative": "2024-01-01",
            "tags": tags if tags is not None else ["inbox"],
            "headers": headers,
            "body": body
            if body is not None
            else [{"id": 1, "content-type": "text/plain", "content": f"Body of {msg_id}\n"}],
        }

    return build


@pytest.fixture
def hi_thread_payload(message_node) -> list:
    """One thread: "Hi" with a single reply "Re: Hi"."""
    root = message_node("hi@example.com", "Hi", tags=["inbox", "unread"])
    reply = message_node("re-hi@example.com", "Re: Hi", sender="Bob <bob@example.com>")
    return [[[root, [[reply, []]]]]]


@pytest.fixture
def html_only_body() -> list[dict[str, Any]]:
    return [{"id": 1, "content-type": "text/html", "content": "<p>Hello <b>there</b></p>"}]
