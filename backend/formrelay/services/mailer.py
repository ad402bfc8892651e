"""
Outbound mail service.

Sends composed form notifications over SMTP with aiosmtplib. Delivery is
best-effort: dispatch() never raises, it reports what happened through a
DispatchOutcome and leaves logging to the caller.

The transport is optional. create_transport() returns None unless SMTP_HOST,
SMTP_PORT, SMTP_USER and SMTP_PASS are all configured.
"""

import asyncio
import logging
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import aiosmtplib

from formrelay.config import Settings
from formrelay.models.submission import DispatchOutcome, OutboundMessage

logger = logging.getLogger(__name__)

_IMPLICIT_TLS_PORT = 465


def build_email_message(message: OutboundMessage) -> EmailMessage:
    """Convert an OutboundMessage into a plain-text EmailMessage."""
    email = EmailMessage()
    email["From"] = message.sender
    email["To"] = message.recipient
    email["Subject"] = message.subject
    email.set_content(message.body)
    return email


def format_sender(settings: Settings) -> str:
    """Return the From header value, e.g. 'Breaking Dev Lab <hello@example.com>'."""
    return formataddr((settings.smtp_from_name, settings.from_address))


class SMTPMailTransport:
    """Sends messages to a single SMTP server using stored credentials."""

    def __init__(
        self,
        hostname: str,
        port: int,
        username: str,
        password: str,
        timeout: float,
    ):
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout
        # Port 465 speaks TLS from the first byte; other ports upgrade with
        # STARTTLS when the server advertises it.
        self.use_tls = port == _IMPLICIT_TLS_PORT

    async def send(self, message: OutboundMessage) -> None:
        """
        Deliver one message.

        Raises:
            aiosmtplib.SMTPException, OSError: on connection, auth or
            protocol failures.
        """
        await aiosmtplib.send(
            build_email_message(message),
            hostname=self.hostname,
            port=self.port,
            username=self.username,
            password=self.password,
            use_tls=self.use_tls,
            timeout=self.timeout,
        )


def create_transport(settings: Settings) -> Optional[SMTPMailTransport]:
    """Build the SMTP transport, or return None when SMTP is not fully configured."""
    if not settings.smtp_configured:
        return None

    return SMTPMailTransport(
        hostname=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_pass,
        timeout=settings.smtp_timeout,
    )


async def dispatch(
    message: OutboundMessage,
    transport: Optional[SMTPMailTransport],
    timeout: float,
) -> DispatchOutcome:
    """
    Attempt delivery once, bounded by timeout seconds.

    Returns:
        DispatchOutcome with status "sent", "failed" or "unconfigured".
        Never raises for transport errors.
    """
    if transport is None:
        return DispatchOutcome(status="unconfigured")

    try:
        await asyncio.wait_for(transport.send(message), timeout=timeout)
    except asyncio.TimeoutError:
        return DispatchOutcome(status="failed", error=f"timed out after {timeout}s")
    except Exception as exc:
        return DispatchOutcome(
            status="failed", error=f"{exc.__class__.__name__}: {exc}"
        )

    return DispatchOutcome(status="sent")
