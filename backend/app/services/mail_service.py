"""
Folio Backend — Mail Service Implementations
==============================================

What:  Console and SMTP implementations of MailService.

ConsoleMailService:
    Logs each message instead of delivering it. Default for development so
    the contact form works without mail credentials.

SMTPMailService:
    Builds an EmailMessage and hands it to an SMTP relay. smtplib is blocking,
    so the exchange runs in a worker thread to keep the event loop free.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.config import Settings
from app.services.mail_base import MailService

logger = logging.getLogger(__name__)


class ConsoleMailService(MailService):
    def __init__(self, sender: str):
        self.sender = sender

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        reply_to: Optional[str] = None,
    ) -> None:
        logger.info(
            "Email (console backend)\nFrom: %s\nTo: %s\nReply-To: %s\nSubject: %s\n\n%s",
            self.sender,
            to,
            reply_to or "-",
            subject,
            body,
        )


class SMTPMailService(MailService):
    """
    Delivers mail through the configured SMTP server.

    Connection per message: contact submissions are rare, so a pooled
    connection would mostly sit idle and time out.
    """

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.timeout = settings.smtp_timeout
        self.sender = settings.mail_from

    def _build_message(
        self, to: str, subject: str, body: str, reply_to: Optional[str]
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        if reply_to:
            message["Reply-To"] = reply_to
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
            if self.use_tls:
                client.starttls()
            if self.username:
                client.login(self.username, self.password)
            client.send_message(message)

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        reply_to: Optional[str] = None,
    ) -> None:
        message = self._build_message(to, subject, body, reply_to)
        await asyncio.to_thread(self._deliver, message)
        logger.info("Email sent to %s: %s", to, subject)


def build_mail_service(settings: Settings) -> MailService:
    if settings.mail_backend == "smtp":
        return SMTPMailService(settings)
    return ConsoleMailService(settings.mail_from)
