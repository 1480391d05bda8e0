"""Helpers for parsing `notmuch show --format=json` output into message trees.

notmuch emits a list of threads; each thread is a list of top-level message
pairs; each pair is `[message, children]` where `children` is again a list of
pairs. Nothing in the JSON says which array is which, so nodes are
discriminated by probing their structure.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from pydantic import ValidationError

from notmuch_tui.exceptions import MalformedThread
from notmuch_tui.models import Message

logger = structlog.get_logger()


def _is_message_node(node: Any) -> bool:
    return isinstance(node, dict) and "id" in node


def _is_children_node(node: Any) -> bool:
    return isinstance(node, list) and all(isinstance(child, list) for child in node)


def parse_thread(thread: Any, depth: int = 0) -> Message:
    """Parse one `[message, children]` pair into a Message with its replies.

    Args:
        thread: Decoded JSON for the pair.
        depth: Nesting level assigned to the message.

    Returns:
        Message: The message, with `depth` set and `replies` parsed recursively.

    Raises:
        MalformedThread: If the pair does not have the expected shape.
    """

    if not isinstance(thread, list) or not 1 <= len(thread) <= 2:
        raise MalformedThread(f"Parse error: expected a [message, children] pair, got {_describe(thread)}")

    node = thread[0]
    if not _is_message_node(node):
        raise MalformedThread(f"Parse error: expected message, got {_describe(node)}")

    try:
        message = Message.model_validate(node)
    except ValidationError as exc:
        raise MalformedThread(f"Parse error: invalid message: {exc}") from exc

    replies: list[Message] = []
    if len(thread) == 2:
        children = thread[1]
        if not _is_children_node(children):
            raise MalformedThread(f"Parse error: expected children, got {_describe(children)}")
        replies = [parse_thread(child, depth + 1) for child in children]

    return message.model_copy(update={"depth": depth, "replies": replies})


def parse_thread_sets(payload: Any) -> list[Message]:
    """Convert decoded notmuch JSON into the ordered list of thread roots.

    Args:
        payload: Decoded JSON (a list of threads, each a list of pairs).

    Returns:
        list[Message]: Root messages of every thread, in output order.

    Raises:
        MalformedThread: On any shape violation. Nothing is returned partially.
    """

    if not isinstance(payload, list):
        raise MalformedThread(f"Parse error: expected a list of threads, got {_describe(payload)}")

    roots: list[Message] = []
    for thread_set in payload:
        if not isinstance(thread_set, list):
            raise MalformedThread(f"Parse error: expected a thread, got {_describe(thread_set)}")
        for thread in thread_set:
            roots.append(parse_thread(thread, 0))

    logger.debug("thread_parse_completed", thread_sets=len(payload), roots=len(roots))
    return roots


def parse_show_output(raw: bytes | str) -> list[Message]:
    """Decode and parse the stdout of `notmuch show --format=json`."""

    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedThread(f"notmuch returned invalid JSON: {exc}") from exc
    return parse_thread_sets(payload)


def _describe(node: Any) -> str:
    if isinstance(node, dict):
        return "an object"
    if isinstance(node, list):
        return f"a list of {len(node)}"
    return type(node).__name__
