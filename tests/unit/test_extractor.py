"""Unit tests for body and attachment extraction."""

from __future__ import annotations

import pytest

from notmuch_tui.content import body_attachments
from notmuch_tui.exceptions import ConversionFailed
from notmuch_tui.models import BodyPart, FileAttachment, HtmlAttachment


def _parts(raw: list[dict]) -> list[BodyPart]:
    return [BodyPart.model_validate(p) for p in raw]


class RecordingConverter:
    """Stand-in for the lynx dump that records what it was asked to convert."""

    def __init__(self, output: str = "converted text\n") -> None:
        self.output = output
        self.calls: list[str] = []

    def __call__(self, html: str) -> str:
        self.calls.append(html)
        return self.output


class TestBodyAttachments:
    """Test suite for body_attachments."""

    def test_plain_text_only(self) -> None:
        """Test that a single text/plain leaf is the body and yields no attachments."""
        convert = RecordingConverter()

        text, attachments = body_attachments(
            _parts([{"id": 1, "content-type": "text/plain", "content": "Hello\n"}]),
            convert,
        )

        assert text == "Hello\n"
        assert attachments == []
        assert convert.calls == []

    def test_html_only_falls_back_to_conversion(self, html_only_body) -> None:
        """Test that an HTML-only body is converted and kept as one Html attachment."""
        convert = RecordingConverter("Hello there\n")

        text, attachments = body_attachments(_parts(html_only_body), convert)

        assert text == "Hello there\n"
        assert convert.calls == ["<p>Hello <b>there</b></p>"]
        assert len(attachments) == 1
        assert isinstance(attachments[0], HtmlAttachment)
        assert attachments[0].raw_html == "<p>Hello <b>there</b></p>"

    def test_alternative_prefers_plain_text_but_keeps_html(self) -> None:
        convert = RecordingConverter()
        parts = _parts(
            [
                {
                    "id": 1,
                    "content-type": "multipart/alternative",
                    "content": [
                        {"id": 2, "content-type": "text/plain", "content": "plain body"},
                        {"id": 3, "content-type": "text/html", "content": "<p>html body</p>"},
                    ],
                }
            ]
        )

        text, attachments = body_attachments(parts, convert)

        assert text == "plain body"
        assert convert.calls == []
        assert attachments == [HtmlAttachment(raw_html="<p>html body</p>")]

    def test_html_is_collected_across_branches(self) -> None:
        """Test that HTML from separate branches is concatenated for the whole message."""
        convert = RecordingConverter()
        parts = _parts(
            [
                {
                    "id": 1,
                    "content-type": "multipart/mixed",
                    "content": [
                        {
                            "id": 2,
                            "content-type": "multipart/alternative",
                            "content": [{"id": 3, "content-type": "text/html", "content": "<p>one</p>"}],
                        },
                        {"id": 4, "content-type": "text/html", "content": "<p>two</p>"},
                    ],
                }
            ]
        )

        text, attachments = body_attachments(parts, convert)

        assert convert.calls == ["<p>one</p><p>two</p>"]
        assert text == "converted text\n"
        assert attachments == [HtmlAttachment(raw_html="<p>one</p><p>two</p>")]

    def test_file_parts_are_listed_once_in_walk_order(self) -> None:
        """Test that every part with a filename appears exactly once, depth-first."""
        parts = _parts(
            [
                {
                    "id": 1,
                    "content-type": "multipart/mixed",
                    "content": [
                        {"id": 2, "content-type": "text/plain", "content": "see attached"},
                        {
                            "id": 3,
                            "content-type": "message/rfc822",
                            "filename": "forwarded.eml",
                            "content": [
                                {"id": 4, "content-type": "image/png", "filename": "inner.png"},
                            ],
                        },
                        {"id": 5, "content-type": "text/plain", "filename": "notes.txt", "content": "\nnotes"},
                        {"id": 6, "content-type": "application/pdf", "filename": "report.pdf"},
                    ],
                }
            ]
        )

        text, attachments = body_attachments(parts, RecordingConverter())

        assert text == "see attached\nnotes"
        assert attachments == [
            FileAttachment(part_id=4, filename="inner.png", mime_type="image/png"),
            FileAttachment(part_id=3, filename="forwarded.eml", mime_type="message/rfc822"),
            FileAttachment(part_id=5, filename="notes.txt", mime_type="text/plain"),
            FileAttachment(part_id=6, filename="report.pdf", mime_type="application/pdf"),
        ]

    def test_html_attachment_with_filename_is_listed_twice_as_different_kinds(self) -> None:
        parts = _parts(
            [
                {"id": 1, "content-type": "text/plain", "content": "body"},
                {"id": 2, "content-type": "text/html", "filename": "page.html", "content": "<p>x</p>"},
            ]
        )

        _, attachments = body_attachments(parts, RecordingConverter())

        assert attachments == [
            FileAttachment(part_id=2, filename="page.html", mime_type="text/html"),
            HtmlAttachment(raw_html="<p>x</p>"),
        ]

    def test_empty_body_does_not_invoke_converter(self) -> None:
        """Test that a body without text or HTML is empty and skips the converter."""
        convert = RecordingConverter()

        text, attachments = body_attachments(
            _parts([{"id": 1, "content-type": "application/pdf", "filename": "a.pdf"}]),
            convert,
        )

        assert text == ""
        assert convert.calls == []
        assert attachments == [FileAttachment(part_id=1, filename="a.pdf", mime_type="application/pdf")]

    def test_no_parts(self) -> None:
        assert body_attachments([], RecordingConverter()) == ("", [])

    def test_conversion_failure_propagates(self, html_only_body) -> None:
        def failing(html: str) -> str:
            raise ConversionFailed("lynx not found")

        with pytest.raises(ConversionFailed):
            body_attachments(_parts(html_only_body), failing)

    def test_forwarded_message_is_walked(self) -> None:
        """Test that text and attachments inside a message/rfc822 part are kept."""
        parts = _parts(
            [
                {"id": 1, "content-type": "text/plain", "content": "See below.\n"},
                {
                    "id": 2,
                    "content-type": "message/rfc822",
                    "content": [
                        {
                            "headers": {"From": "carol@example.com", "Subject": "Original"},
                            "body": [
                                {
                                    "id": 3,
                                    "content-type": "multipart/mixed",
                                    "content": [
                                        {"id": 4, "content-type": "text/plain", "content": "Forwarded text\n"},
                                        {"id": 5, "content-type": "image/png", "filename": "pic.png"},
                                    ],
                                }
                            ],
                        }
                    ],
                },
            ]
        )

        text, attachments = body_attachments(parts, RecordingConverter())

        assert text == "See below.\nForwarded text\n"
        assert attachments == [FileAttachment(part_id=5, filename="pic.png", mime_type="image/png")]
