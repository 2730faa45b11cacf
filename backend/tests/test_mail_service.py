"""
Folio Backend — Mail Service Tests
====================================

What:  Backend selection, message construction, and SMTP delivery with the
       SMTP client mocked out. No network access.
"""

import logging
from unittest.mock import patch

import pytest

from app.config import Settings
from app.services.mail_service import (
    ConsoleMailService,
    SMTPMailService,
    build_mail_service,
)


@pytest.fixture
def smtp_settings():
    return Settings(
        mail_backend="smtp",
        smtp_host="smtp.example.com",
        smtp_port=2525,
        smtp_username="mailer",
        smtp_password="s3cret",
        smtp_use_tls=True,
        mail_from="Folio <no-reply@example.com>",
    )


class TestBuildMailService:
    def test_console_is_default(self):
        service = build_mail_service(Settings(mail_backend="console"))
        assert isinstance(service, ConsoleMailService)

    def test_smtp_backend(self, smtp_settings):
        service = build_mail_service(smtp_settings)

        assert isinstance(service, SMTPMailService)
        assert service.host == "smtp.example.com"
        assert service.port == 2525

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError, match="Invalid mail_backend"):
            Settings(mail_backend="pigeon")


class TestBuildMessage:
    def test_headers_and_body(self, smtp_settings):
        service = SMTPMailService(smtp_settings)

        message = service._build_message(
            "owner@example.com", "New enquiry", "Hello there", reply_to="ada@example.com"
        )

        assert message["From"] == "Folio <no-reply@example.com>"
        assert message["To"] == "owner@example.com"
        assert message["Subject"] == "New enquiry"
        assert message["Reply-To"] == "ada@example.com"
        assert message.get_content().strip() == "Hello there"

    def test_reply_to_omitted_when_absent(self, smtp_settings):
        message = SMTPMailService(smtp_settings)._build_message("a@example.com", "Hi", "x", None)
        assert message["Reply-To"] is None


@pytest.mark.asyncio
class TestDelivery:
    async def test_smtp_send_uses_tls_and_login(self, smtp_settings):
        service = SMTPMailService(smtp_settings)

        with patch("app.services.mail_service.smtplib.SMTP") as smtp_cls:
            await service.send("owner@example.com", "New enquiry", "Hello there")

        smtp_cls.assert_called_once_with("smtp.example.com", 2525, timeout=smtp_settings.smtp_timeout)
        client = smtp_cls.return_value.__enter__.return_value
        client.starttls.assert_called_once()
        client.login.assert_called_once_with("mailer", "s3cret")
        sent = client.send_message.call_args.args[0]
        assert sent["To"] == "owner@example.com"

    async def test_smtp_errors_propagate(self, smtp_settings):
        service = SMTPMailService(smtp_settings)

        with patch("app.services.mail_service.smtplib.SMTP", side_effect=ConnectionRefusedError):
            with pytest.raises(ConnectionRefusedError):
                await service.send("owner@example.com", "New enquiry", "Hello there")

    async def test_console_logs_message(self, caplog):
        service = ConsoleMailService("Folio <no-reply@example.com>")

        with caplog.at_level(logging.INFO, logger="app.services.mail_service"):
            await service.send("ada@example.com", "Thanks", "We got it")

        assert "ada@example.com" in caplog.text
        assert "We got it" in caplog.text
