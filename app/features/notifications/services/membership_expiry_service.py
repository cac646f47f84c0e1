"""
Membership expiry reminders.

Members whose membership ends exactly ``notice_days`` from today get one
reminder email. Each member is handled on its own; the audit row in
membership_notifications is best-effort.
"""

from collections.abc import Callable
from datetime import date, timedelta

from app.db.helpers import DatabaseError
from app.infrastructure.observability.logging import get_logger
from app.repositories.profile_repository import ProfileRepository
from app.services.email import EmailSendError, SmtpMailer

from ..domain.models import MembershipReminderResult, ReminderOutcome
from ..email_templates import membership_expiry_email

logger = get_logger(__name__)

EXPIRY_WARNING = "expiry_warning"


class MembershipExpiryError(Exception):
    """Expiring members could not be loaded."""


class MembershipExpiryService:
    def __init__(
        self,
        profiles: ProfileRepository,
        mailer: SmtpMailer,
        notice_days: int = 5,
        site_url: str = "",
        today: Callable[[], date] = date.today,
    ):
        self.profiles = profiles
        self.mailer = mailer
        self.notice_days = notice_days
        self.site_url = site_url.rstrip("/")
        self.today = today

    async def send_expiry_reminders(self) -> MembershipReminderResult:
        target_date = self.today() + timedelta(days=self.notice_days)
        logger.info("Checking for expiring memberships", expiry_date=target_date.isoformat())

        try:
            members = await self.profiles.fetch_members_expiring_on(target_date)
        except DatabaseError as e:
            raise MembershipExpiryError(f"Failed to load expiring memberships: {e}") from e

        result = MembershipReminderResult(expiry_date=target_date)
        if not members:
            logger.info("No memberships expiring", expiry_date=target_date.isoformat())
            return result

        membership_ids = sorted(
            {m.current_membership_id for m in members if m.current_membership_id}
        )
        try:
            plans = await self.profiles.fetch_membership_plans(membership_ids)
        except DatabaseError as e:
            # Reminders still go out with generic plan wording
            logger.error("Failed to load membership plans", error=str(e))
            plans = {}

        for member in members:
            plan = plans.get(member.current_membership_id or "")
            price_label = f"${plan.price:.2f}" if plan and plan.price is not None else "Contact us"
            message = membership_expiry_email(
                to=member.email,
                member_name=member.full_name or member.email.split("@")[0],
                membership_name=plan.name if plan else "Your Membership",
                expiry_date=member.membership_expiry_date,
                price_label=price_label,
                renew_url=f"{self.site_url}/manage-membership",
            )

            try:
                await self.mailer.send(message)
                result.outcomes.append(
                    ReminderOutcome(user_id=member.user_id, email=member.email, sent=True)
                )
            except EmailSendError as e:
                logger.error("Failed to send expiry reminder", user_id=member.user_id, error=str(e))
                result.outcomes.append(
                    ReminderOutcome(
                        user_id=member.user_id, email=member.email, sent=False, error=str(e)
                    )
                )

            try:
                await self.profiles.record_membership_notification(
                    member.user_id, EXPIRY_WARNING, member.membership_expiry_date
                )
            except DatabaseError as e:
                logger.warning(
                    "Failed to record membership notification",
                    user_id=member.user_id,
                    error=str(e),
                )

        logger.info(
            "Membership expiry reminders processed",
            count=result.count,
            notifications_sent=result.notifications_sent,
            errors=result.errors,
        )
        return result
