"""
Class cancellation fan-out.

Every member holding a confirmed or pending booking on the cancelled class
gets one in-app notification and one email. Recipients are processed
independently: a failure for one member is counted and the loop moves on.
"""

from app.db.helpers import DatabaseError
from app.infrastructure.observability.logging import get_logger
from app.services.email import SmtpMailer

from ..domain.models import (
    CancellationResult,
    ClassContext,
    NotificationRecord,
    NotificationType,
    RecipientOutcome,
)
from ..email_templates import class_cancelled_email
from ..repository import BookingRecipientRepository, NotificationRepository
from ..steps import run_step

logger = get_logger(__name__)


class CancellationNotificationError(Exception):
    """The affected bookings could not be loaded."""


class ClassCancellationService:
    def __init__(
        self,
        bookings: BookingRecipientRepository,
        notifications: NotificationRepository,
        mailer: SmtpMailer,
    ):
        self.bookings = bookings
        self.notifications = notifications
        self.mailer = mailer

    async def notify_class_cancellation(
        self,
        schedule_id: str,
        context: ClassContext,
        cancellation_reason: str | None = None,
    ) -> CancellationResult:
        try:
            recipients = await self.bookings.fetch_active_booking_recipients(
                schedule_id, context.class_date
            )
        except DatabaseError as e:
            raise CancellationNotificationError(f"Failed to load bookings: {e}") from e

        result = CancellationResult(schedule_id=schedule_id)
        if not recipients:
            logger.info("No active bookings found for cancelled class", schedule_id=schedule_id)
            return result

        if cancellation_reason:
            message = (
                f"{context.class_name} on {context.day_of_week} at {context.start_time} "
                f"has been cancelled. Reason: {cancellation_reason}"
            )
        else:
            message = (
                f"{context.class_name} on {context.day_of_week} at {context.start_time} "
                "has been cancelled."
            )

        for booking_id, member in recipients:
            notification = NotificationRecord(
                user_id=member.user_id,
                type=NotificationType.CLASS_CANCELLED,
                title="Class Cancelled",
                message=message,
                related_id=schedule_id,
            )
            email = class_cancelled_email(
                to=member.email or "",
                member_name=member.display_name,
                class_name=context.class_name,
                day_of_week=context.day_of_week,
                start_time=context.start_time,
                cancellation_reason=cancellation_reason,
            )

            notification_step = await run_step(
                "in_app_notification",
                lambda: self.notifications.create(notification),
                schedule_id=schedule_id,
                booking_id=booking_id,
            )
            email_step = await run_step(
                "email",
                lambda: self.mailer.send(email),
                schedule_id=schedule_id,
                booking_id=booking_id,
            )
            result.recipients.append(
                RecipientOutcome(
                    booking_id=booking_id,
                    user_id=member.user_id,
                    email=member.email,
                    notification=notification_step,
                    email_step=email_step,
                )
            )

        logger.info(
            "Class cancellation notifications processed",
            schedule_id=schedule_id,
            notified_count=result.notified_count,
            notifications_sent=result.notifications_sent,
            emails_sent=result.emails_sent,
            emails_failed=result.emails_failed,
        )
        return result
