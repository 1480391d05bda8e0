"""Plain-text body and attachment extraction from a message's MIME tree."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import structlog

from notmuch_tui.models import Attachment, BodyPart, EmbeddedMessage, FileAttachment, HtmlAttachment

logger = structlog.get_logger()

HtmlToText = Callable[[str], str]


def _walk(
    parts: Sequence[BodyPart | EmbeddedMessage], html: list[str], attachments: list[Attachment]
) -> str:
    text: list[str] = []
    for part in parts:
        if isinstance(part, EmbeddedMessage):
            text.append(_walk(part.body, html, attachments))
            continue
        if isinstance(part.content, str):
            if part.content_type.lower() == "text/html":
                html.append(part.content)
            else:
                text.append(part.content)
        elif isinstance(part.content, list):
            text.append(_walk(part.content, html, attachments))

        if part.filename is not None:
            attachments.append(
                FileAttachment(part_id=part.part_id, filename=part.filename, mime_type=part.content_type)
            )
    return "".join(text)


def body_attachments(
    parts: Sequence[BodyPart],
    html_to_text: HtmlToText,
) -> tuple[str, list[Attachment]]:
    """Extract the readable body and the attachment list of a message.

    HTML parts are collected for the whole message, not per multipart branch.
    When no other part supplied text, the collected HTML is rendered through
    `html_to_text`; the raw HTML is then also offered as a pseudo-attachment.

    Args:
        parts: The message's top-level body parts.
        html_to_text: Converter used for the HTML fallback.

    Returns:
        Plain text, and the attachments in depth-first part order.

    Raises:
        ConversionFailed: Propagated from `html_to_text`.
    """

    html: list[str] = []
    attachments: list[Attachment] = []

    text = _walk(parts, html, attachments)
    raw_html = "".join(html)

    if not text and raw_html:
        text = html_to_text(raw_html)
    if raw_html:
        attachments.append(HtmlAttachment(raw_html=raw_html))

    logger.debug("body_parsed", lines=text.count("\n"), attachments=len(attachments))
    return text, attachments
