"""Attachment descriptors derived from a message body."""

from __future__ import annotations

from pathlib import PurePath
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

# Bytes allowed for a temp file name; most filesystems stop at 255.
NAME_LIMIT = 200
# Longer "suffixes" are treated as part of the stem when shortening.
SUFFIX_LIMIT = 16


def shorten_name(name: str, limit: int = NAME_LIMIT) -> str:
    """Truncate `name` to `limit` UTF-8 bytes, keeping a short extension intact."""

    if len(name.encode("utf-8")) <= limit:
        return name
    suffix = PurePath(name).suffix
    if len(suffix.encode("utf-8")) > SUFFIX_LIMIT:
        suffix = ""
    stem = name[: len(name) - len(suffix)] if suffix else name
    budget = limit - len(suffix.encode("utf-8"))
    stem = stem.encode("utf-8")[:budget].decode("utf-8", errors="ignore")
    return stem + suffix


class FileAttachment(BaseModel):
    """A MIME part carrying a filename; its bytes are fetched on demand."""

    kind: Literal["file"] = "file"
    part_id: int = Field(description="Part number passed to `notmuch show --part`")
    filename: str = Field(description="Filename from the Content-Disposition")
    mime_type: str = Field(description="Content type of the part")

    @property
    def label(self) -> str:
        return f"{self.filename}  ({self.mime_type})"

    def temp_name(self, message_id: str) -> str:
        # Never let a crafted filename escape the temp directory.
        name = PurePath(self.filename.replace("\\", "/").replace("\x00", "")).name
        if name in ("", ".", ".."):
            return f"part-{self.part_id}"
        return shorten_name(name)


class HtmlAttachment(BaseModel):
    """The message's HTML alternative, kept openable next to the real attachments."""

    kind: Literal["html"] = "html"
    raw_html: str = Field(description="Concatenated text/html content of the message")

    @property
    def label(self) -> str:
        return "HTML part  (text/html)"

    def temp_name(self, message_id: str) -> str:
        stem = message_id.replace("/", "_").replace("\x00", "") or "message"
        return shorten_name(f"{stem}.html")


Attachment = Annotated[Union[FileAttachment, HtmlAttachment], Field(discriminator="kind")]
