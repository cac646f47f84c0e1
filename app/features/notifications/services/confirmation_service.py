"""
Booking confirmation emails sent right after a member books a class.
"""

from app.infrastructure.observability.logging import get_logger
from app.services.email import SmtpMailer

from ..email_templates import booking_confirmation_email

logger = get_logger(__name__)


class BookingConfirmationService:
    def __init__(self, mailer: SmtpMailer):
        self.mailer = mailer

    async def send_confirmation(
        self, name: str, email: str, class_name: str, class_time: str
    ) -> None:
        """Raises EmailSendError when delivery fails."""
        message = booking_confirmation_email(
            to=email, member_name=name, class_name=class_name, class_time=class_time
        )
        await self.mailer.send(message)
        logger.info("Booking confirmation sent", class_name=class_name)
