"""Messaging - SMTP implementation of the Messenger protocol.

Invariants:
    - An empty recipient is rejected before any connection is opened
    - Any transport rejection surfaces as MessagingError with the transport's message
    - Blocking smtplib I/O never runs on the event loop (asyncio.to_thread)

Design Decisions:
    - One SMTP connection per message: sends are rare (one per returns email)
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from record_gateway.core.errors import MessagingError
from record_gateway.core.repository_protocols import OutboundMessage

logger = logging.getLogger(__name__)


class SmtpMessenger:
    """Messenger over an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout_seconds: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds

    async def send(self, message: OutboundMessage) -> None:
        if not message.to:
            raise MessagingError("Recipient address is required")
        await asyncio.to_thread(self._send_blocking, message)
        logger.info(f"Sent message to {message.to}: {message.subject}")

    def _send_blocking(self, message: OutboundMessage) -> None:
        email = EmailMessage()
        email["From"] = message.from_address
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content("This message requires an HTML-capable mail client.")
        email.add_alternative(message.html, subtype="html")
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send to {message.to} failed: {e}")
            raise MessagingError(str(e) or e.__class__.__name__) from e
