"""
Membership activation codes and inquiry acknowledgements.

Both are single transactional emails sent on behalf of the admin screens and
the public inquiry form; delivery failures propagate to the caller.
"""

from datetime import UTC, datetime

from app.infrastructure.observability.logging import get_logger
from app.services.email import SmtpMailer

from ..email_templates import activation_code_email, inquiry_received_email

logger = get_logger(__name__)


class MemberEmailService:
    def __init__(self, mailer: SmtpMailer, site_url: str):
        self.mailer = mailer
        self.site_url = site_url.rstrip("/")

    async def send_activation_code(
        self,
        member_name: str,
        member_email: str,
        activation_code: str,
        membership_name: str,
        duration_months: int | None = None,
        expires_at: datetime | None = None,
    ) -> None:
        """Raises EmailSendError when delivery fails."""
        expires_on = None
        if expires_at is not None:
            if expires_at.tzinfo is not None:
                expires_at = expires_at.astimezone(UTC)
            expires_on = expires_at.date()

        message = activation_code_email(
            to=member_email,
            member_name=member_name,
            activation_code=activation_code,
            membership_name=membership_name,
            duration_months=duration_months,
            expires_on=expires_on,
            activation_url=f"{self.site_url}/activate-membership",
        )
        await self.mailer.send(message)
        logger.info("Activation code sent", membership_name=membership_name)

    async def send_inquiry_acknowledgement(self, name: str, email: str) -> None:
        """Raises EmailSendError when delivery fails."""
        await self.mailer.send(inquiry_received_email(to=email, member_name=name))
        logger.info("Inquiry acknowledgement sent")
