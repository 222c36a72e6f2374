"""Outbox mailer - spools messages as ``.eml`` files instead of delivering them.

Each message is a ``multipart/alternative`` with the plain-text body and
the HTML body. Embedded attachments are added to the HTML part as
related content whose ``Content-ID`` is the attachment name, which is
what ``cid:`` references in the HTML templates point at.
"""

from __future__ import annotations

import uuid
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from pathlib import Path

import structlog

from wgmail.domain.errors import MailSendError
from wgmail.domain.mail import MailAttachment, MailOptions

log = structlog.get_logger(__name__)


def _split_content_type(content_type: str) -> tuple[str, str]:
    maintype, _, subtype = content_type.partition("/")
    return maintype or "application", subtype or "octet-stream"


def build_message(
    sender: str,
    subject: str,
    body: str,
    to: list[str],
    options: MailOptions,
) -> EmailMessage:
    """Assemble an RFC 822 message from a body and its mail options."""
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = ", ".join(to)
    msg["Subject"] = subject
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid()
    msg.set_content(body)

    if options.html_body:
        msg.add_alternative(options.html_body, subtype="html")
        html_part = msg.get_payload()[-1]
        for attachment in options.attachments:
            if attachment.embedded:
                _add_related(html_part, attachment)

    for attachment in options.attachments:
        if not attachment.embedded or not options.html_body:
            _add_attachment(msg, attachment)
    return msg


def _payload(attachment: MailAttachment) -> bytes:
    attachment.data.seek(0)
    return attachment.data.read()


def _add_related(part: EmailMessage, attachment: MailAttachment) -> None:
    maintype, subtype = _split_content_type(attachment.content_type)
    part.add_related(
        _payload(attachment),
        maintype=maintype,
        subtype=subtype,
        cid=f"<{attachment.name}>",
        filename=attachment.name,
        disposition="inline",
    )


def _add_attachment(msg: EmailMessage, attachment: MailAttachment) -> None:
    maintype, subtype = _split_content_type(attachment.content_type)
    msg.add_attachment(
        _payload(attachment),
        maintype=maintype,
        subtype=subtype,
        filename=attachment.name,
    )


class OutboxMailer:
    """Writes each sent message to ``<directory>/<uuid>.eml``."""

    def __init__(self, directory: Path, sender: str) -> None:
        self._directory = directory
        self._sender = sender

    def send(self, subject: str, body: str, to: list[str], options: MailOptions) -> None:
        if not to:
            raise MailSendError("no recipients given")
        msg = build_message(self._sender, subject, body, to, options)
        path = self._directory / f"{uuid.uuid4().hex}.eml"
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(msg.as_bytes())
        except OSError as exc:
            raise MailSendError(f"failed to spool mail to {path}: {exc}") from exc
        log.debug("mail.spooled", path=str(path), recipients=len(to))
