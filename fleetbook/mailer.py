"""Outgoing mail transport used to deliver backups."""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from .config import MailSettings, get_settings
from .errors import UpstreamFailureError

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    media_type: str


class Mailer(Protocol):
    def send(self, recipient: str, subject: str, body: str, attachment: Attachment | None = None) -> None:
        ...


class SmtpMailer:
    """Send messages through the SMTP relay described by :class:`MailSettings`."""

    def __init__(self, settings: MailSettings, timeout: float = 30.0) -> None:
        self._settings = settings
        self._timeout = timeout

    def build_message(
        self, recipient: str, subject: str, body: str, attachment: Attachment | None = None
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._settings.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body)
        if attachment is not None:
            maintype, _, subtype = attachment.media_type.partition("/")
            message.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return message

    def send(self, recipient: str, subject: str, body: str, attachment: Attachment | None = None) -> None:
        if not self._settings.configured:
            raise UpstreamFailureError("Mail transport is not configured")
        message = self.build_message(recipient, subject, body, attachment)
        try:
            with smtplib.SMTP(self._settings.host, self._settings.port, timeout=self._timeout) as smtp:
                if self._settings.use_tls:
                    smtp.starttls()
                if self._settings.user:
                    smtp.login(self._settings.user, self._settings.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise UpstreamFailureError(f"Failed to send mail to {recipient}: {exc}") from exc
        LOG.info("Sent %r to %s", subject, recipient)


def get_mailer() -> Mailer:
    """FastAPI dependency returning the configured mail transport."""

    return SmtpMailer(get_settings().mail)


__all__ = ["Attachment", "Mailer", "SmtpMailer", "get_mailer"]
