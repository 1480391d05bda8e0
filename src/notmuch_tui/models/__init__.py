"""Data models for notmuch-tui.

This module contains Pydantic models for the messages notmuch returns and the
attachments derived from them.
"""

from notmuch_tui.models.attachment import Attachment, FileAttachment, HtmlAttachment
from notmuch_tui.models.message import BodyPart, EmbeddedMessage, Message

__all__ = ["Attachment", "BodyPart", "EmbeddedMessage", "FileAttachment", "HtmlAttachment", "Message"]
