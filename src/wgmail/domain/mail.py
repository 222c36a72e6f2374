"""Mail payload value objects handed to the transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO

CONFIG_CONTENT_TYPE = "text/plain"
QR_CONTENT_TYPE = "image/png"


@dataclass(frozen=True)
class MailAttachment:
    """One attachment; ``embedded`` ones are referenced inline from the HTML body."""

    name: str
    content_type: str
    data: BinaryIO
    embedded: bool = False

    def __repr__(self) -> str:
        return (
            f"MailAttachment(name={self.name!r}, content_type={self.content_type!r}, "
            f"embedded={self.embedded!r})"
        )


@dataclass
class MailOptions:
    """HTML alternative and ordered attachments for a single message."""

    html_body: str = ""
    attachments: list[MailAttachment] = field(default_factory=list)
