"""
SMTP mailer for transactional emails (Gmail SMTP over SSL by default).

smtplib is blocking, so each send runs in a worker thread to keep the event
loop free.
"""

import asyncio
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class EmailSendError(Exception):
    """Raised when a message could not be handed to the SMTP server."""

    def __init__(self, message: str, recipient: str | None = None):
        super().__init__(message)
        self.recipient = recipient


@dataclass(slots=True)
class OutgoingEmail:
    to: str
    subject: str
    html: str


class SmtpMailer:
    def __init__(
        self,
        host: str,
        port: int,
        username: str | None,
        password: str | None,
        sender_name: str,
        timeout_s: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender_name = sender_name
        self.timeout_s = timeout_s

    @classmethod
    def from_settings(cls, settings) -> "SmtpMailer":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.GMAIL_USER,
            password=settings.GMAIL_APP_PASSWORD,
            sender_name=settings.EMAIL_SENDER_NAME,
            timeout_s=settings.SMTP_TIMEOUT_S,
        )

    async def send(self, message: OutgoingEmail, sender_name: str | None = None) -> None:
        """
        Deliver one HTML email.

        Raises:
            EmailSendError: on missing credentials or any SMTP failure
        """
        if not self.username or not self.password:
            raise EmailSendError("SMTP credentials are not configured", recipient=message.to)
        if not message.to:
            raise EmailSendError("Recipient address is empty", recipient=message.to)

        from_address = formataddr((sender_name or self.sender_name, self.username))
        mime = self._build_mime(message, from_address)

        try:
            await asyncio.to_thread(self._deliver, message.to, mime.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP send failed", recipient=message.to, error=str(e))
            raise EmailSendError(f"SMTP send failed: {e}", recipient=message.to) from e

        logger.info("Email sent", recipient=message.to, subject=message.subject)

    def _build_mime(self, message: OutgoingEmail, from_address: str) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = from_address
        mime["To"] = message.to
        mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    def _deliver(self, recipient: str, raw_message: str) -> None:
        if self.port == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout_s)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout_s)

        # QUIT and close on exit, also when STARTTLS or login fails
        with server:
            if self.port != 465:
                server.starttls(context=ssl.create_default_context())
            server.login(self.username, self.password)
            server.sendmail(self.username, [recipient], raw_message)
