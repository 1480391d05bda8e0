"""Message content extraction.

Turns a message's MIME tree into displayable text plus the list of parts the
user can open.
"""

from .extractor import body_attachments
from .html import HtmlConverter

__all__ = ["HtmlConverter", "body_attachments"]
