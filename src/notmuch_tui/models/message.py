"""Message and body-part models as emitted by `notmuch show --format=json`.

Field names follow Python conventions; the notmuch JSON keys (which contain
dashes or clash with builtins) are mapped through aliases so that the models
validate straight from the decoded JSON.
"""

from __future__ import annotations

from email.utils import parseaddr

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BodyPart(BaseModel):
    """One node of a message's MIME tree.

    A leaf carries its payload as a string, a multipart container carries its
    child parts as a list. Parts notmuch does not inline (binary attachments)
    have no content at all.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    part_id: int = Field(alias="id", description="Part number, unique within the message")
    content_type: str = Field(alias="content-type", description="MIME type of the part")
    content: str | list[BodyPart] | list[EmbeddedMessage] | None = Field(
        default=None,
        union_mode="left_to_right",
        description="Payload, child parts, or the messages of a message/rfc822 part",
    )
    filename: str | None = Field(default=None, description="Attachment filename")

    content_charset: str | None = Field(default=None, alias="content-charset")
    content_transfer_encoding: str | None = Field(default=None, alias="content-transfer-encoding")
    content_length: int | None = Field(default=None, alias="content-length")

    @property
    def is_branch(self) -> bool:
        return isinstance(self.content, list)


class EmbeddedMessage(BaseModel):
    """A message carried inside a message/rfc822 part (a forwarded mail)."""

    model_config = ConfigDict(extra="ignore")

    headers: dict[str, str]
    body: list[BodyPart]


BodyPart.model_rebuild()


class Message(BaseModel):
    """A message node of a notmuch thread.

    `depth` and `replies` are not part of notmuch's message object; the thread
    parser fills them in from the nesting of the surrounding arrays.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(description="notmuch message ID (Message-Id without brackets)")
    timestamp: int = Field(description="Date header as seconds since epoch")
    date_relative: str = Field(default="", description="Human readable date computed by notmuch")
    tags: list[str] = Field(default_factory=list, description="notmuch tags")
    headers: dict[str, str] = Field(default_factory=dict, description="Selected message headers")
    body: list[BodyPart] = Field(default_factory=list, description="Top-level MIME parts")

    filenames: list[str] = Field(default_factory=list, alias="filename")
    matched: bool = Field(default=True, alias="match")
    excluded: bool = False

    depth: int = Field(default=0, ge=0, description="Reply nesting level, 0 for a thread root")
    replies: list[Message] = Field(default_factory=list, description="Direct replies in thread order")

    @field_validator("filenames", mode="before")
    @classmethod
    def _single_filename(cls, value: object) -> object:
        # notmuch before 0.25 emitted a single string here.
        if isinstance(value, str):
            return [value]
        return value

    def header(self, name: str, default: str = "") -> str:
        """Return a header value, or `default` when the header is missing."""

        return self.headers.get(name, default)

    @property
    def subject(self) -> str | None:
        return self.headers.get("Subject")

    @property
    def sender_name(self) -> str:
        """Display name of the From header, falling back to the bare address."""

        name, addr = parseaddr(self.header("From"))
        return name or addr

    @property
    def is_unread(self) -> bool:
        return "unread" in self.tags
