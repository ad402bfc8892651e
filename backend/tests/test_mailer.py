"""
Unit tests for the outbound mail service.

aiosmtplib.send is always mocked; no SMTP connections are made.
"""

import asyncio
import os
import pytest
from unittest.mock import AsyncMock, Mock, patch

for _key in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "TO_EMAIL", "SMTP_FROM"):
    os.environ.pop(_key, None)

import aiosmtplib

from formrelay.config import Settings
from formrelay.models.submission import OutboundMessage
from formrelay.services.mailer import (
    SMTPMailTransport,
    build_email_message,
    create_transport,
    dispatch,
    format_sender,
)


FULL_SMTP = dict(
    smtp_host="smtp.example.com",
    smtp_port=587,
    smtp_user="mailer@example.com",
    smtp_pass="secret",
)


def _make_message(**overrides) -> OutboundMessage:
    values = dict(
        subject="Quote request — Web design",
        body="New submission\n\nName: Bob\nContact: bob@x.com\nService: Web design\n\nMessage:\nHi",
        recipient="inbox@example.com",
        sender="Breaking Dev Lab <noreply@example.com>",
    )
    values.update(overrides)
    return OutboundMessage(**values)


def _make_transport(**overrides) -> SMTPMailTransport:
    values = dict(
        hostname="smtp.example.com",
        port=587,
        username="mailer@example.com",
        password="secret",
        timeout=5.0,
    )
    values.update(overrides)
    return SMTPMailTransport(**values)


class TestCreateTransport:

    def test_returns_transport_when_fully_configured(self):
        transport = create_transport(Settings(**FULL_SMTP, smtp_timeout=3.0))

        assert isinstance(transport, SMTPMailTransport)
        assert transport.hostname == "smtp.example.com"
        assert transport.port == 587
        assert transport.username == "mailer@example.com"
        assert transport.password == "secret"
        assert transport.timeout == 3.0

    @pytest.mark.parametrize("missing", sorted(FULL_SMTP))
    def test_returns_none_when_any_credential_missing(self, missing):
        values = {k: v for k, v in FULL_SMTP.items() if k != missing}
        assert create_transport(Settings(**values)) is None

    def test_port_465_uses_implicit_tls(self):
        assert _make_transport(port=465).use_tls is True
        assert _make_transport(port=587).use_tls is False


class TestBuildEmailMessage:

    def test_headers_and_body(self):
        email = build_email_message(_make_message())

        assert email["From"] == "Breaking Dev Lab <noreply@example.com>"
        assert email["To"] == "inbox@example.com"
        assert email["Subject"] == "Quote request — Web design"
        assert email.get_content_type() == "text/plain"
        assert "Name: Bob" in email.get_content()

    def test_format_sender_uses_display_name(self):
        config = Settings(to_email="inbox@example.com", smtp_from="noreply@example.com")
        assert format_sender(config) == "Breaking Dev Lab <noreply@example.com>"

    def test_format_sender_defaults_to_recipient(self):
        config = Settings(to_email="inbox@example.com", smtp_from_name="Acme")
        assert format_sender(config) == "Acme <inbox@example.com>"


class TestSMTPMailTransportSend:

    @pytest.mark.asyncio
    async def test_send_passes_credentials_to_aiosmtplib(self):
        transport = _make_transport(port=465)

        with patch("formrelay.services.mailer.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            await transport.send(_make_message())

        mock_send.assert_awaited_once()
        sent_email = mock_send.call_args.args[0]
        kwargs = mock_send.call_args.kwargs
        assert sent_email["To"] == "inbox@example.com"
        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["port"] == 465
        assert kwargs["username"] == "mailer@example.com"
        assert kwargs["password"] == "secret"
        assert kwargs["use_tls"] is True
        assert kwargs["timeout"] == 5.0

    @pytest.mark.asyncio
    async def test_send_propagates_smtp_errors(self):
        transport = _make_transport()

        with patch(
            "formrelay.services.mailer.aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPAuthenticationError(535, "bad credentials"),
        ):
            with pytest.raises(aiosmtplib.SMTPAuthenticationError):
                await transport.send(_make_message())


class TestDispatch:

    @pytest.mark.asyncio
    async def test_no_transport_is_unconfigured(self):
        outcome = await dispatch(_make_message(), None, timeout=1.0)

        assert outcome.status == "unconfigured"
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_successful_send(self):
        transport = Mock()
        transport.send = AsyncMock(return_value=None)
        message = _make_message()

        outcome = await dispatch(message, transport, timeout=1.0)

        assert outcome.status == "sent"
        transport.send.assert_awaited_once_with(message)

    @pytest.mark.asyncio
    async def test_transport_error_is_reported_not_raised(self):
        transport = Mock()
        transport.send = AsyncMock(side_effect=ConnectionRefusedError("connection refused"))

        outcome = await dispatch(_make_message(), transport, timeout=1.0)

        assert outcome.status == "failed"
        assert "ConnectionRefusedError" in outcome.error
        assert "connection refused" in outcome.error

    @pytest.mark.asyncio
    async def test_hanging_send_times_out(self):
        async def hang(message):
            await asyncio.sleep(5)

        transport = Mock()
        transport.send = hang

        outcome = await dispatch(_make_message(), transport, timeout=0.05)

        assert outcome.status == "failed"
        assert "timed out" in outcome.error
