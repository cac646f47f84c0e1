"""
Waitlist promotion.

When a spot frees up on a schedule, the member at the head of its waitlist
gets a 24 hour window to claim it:

1. read the waiting entry at queue position 1 (required)
2. conditionally flip it to ``notified`` with ``expires_at = now + 24h`` (required)
3. insert an in-app notification (best-effort)
4. email the member (best-effort)

Expiring unclaimed entries is handled elsewhere; nothing here holds a timer.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from app.db.helpers import DatabaseError
from app.infrastructure.observability.logging import get_logger
from app.services.email import SmtpMailer

from ..domain.models import (
    ClassContext,
    NotificationRecord,
    NotificationType,
    PromotionOutcome,
    PromotionResult,
)
from ..email_templates import waitlist_spot_available_email
from ..repository import NotificationRepository, WaitlistRepository
from ..steps import run_step

logger = get_logger(__name__)

CLAIM_WINDOW = timedelta(hours=24)


class WaitlistProcessingError(Exception):
    """A required step (queue read or status update) failed."""


class WaitlistPromotionService:
    def __init__(
        self,
        waitlist: WaitlistRepository,
        notifications: NotificationRepository,
        mailer: SmtpMailer,
        site_url: str = "",
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.waitlist = waitlist
        self.notifications = notifications
        self.mailer = mailer
        self.site_url = site_url.rstrip("/")
        self.clock = clock

    async def promote_next_waiting(
        self, schedule_id: str, context: ClassContext
    ) -> PromotionResult:
        logger.info("Processing waitlist", schedule_id=schedule_id)

        try:
            entry = await self.waitlist.fetch_queue_head(schedule_id)
        except DatabaseError as e:
            raise WaitlistProcessingError(f"Failed to read waitlist: {e}") from e

        if entry is None:
            logger.info("No one on waitlist for this class", schedule_id=schedule_id)
            return PromotionResult(
                schedule_id=schedule_id, outcome=PromotionOutcome.NOBODY_WAITING
            )

        notified_at = self.clock()
        expires_at = notified_at + CLAIM_WINDOW

        try:
            claimed = await self.waitlist.claim_for_notification(
                entry.id, schedule_id, notified_at, expires_at
            )
        except DatabaseError as e:
            raise WaitlistProcessingError(f"Failed to update waitlist entry: {e}") from e

        if not claimed:
            # Another invocation promoted this entry first
            logger.info(
                "Waitlist entry already claimed by another invocation",
                schedule_id=schedule_id,
                entry_id=entry.id,
            )
            return PromotionResult(
                schedule_id=schedule_id, outcome=PromotionOutcome.CONTENTION_LOST
            )

        member = entry.member
        logger.info(
            "Waitlist entry promoted",
            schedule_id=schedule_id,
            entry_id=entry.id,
            user_id=member.user_id,
            expires_at=expires_at.isoformat(),
        )

        notification = NotificationRecord(
            user_id=member.user_id,
            type=NotificationType.WAITLIST_SPOT_AVAILABLE,
            title="Waitlist Update: Spot Available!",
            message=(
                f"A spot is now available for {context.class_name} on {context.day_of_week} "
                f"at {context.start_time}. Book within 24 hours to claim your spot!"
            ),
            related_id=schedule_id,
        )
        email = waitlist_spot_available_email(
            to=member.email or "",
            member_name=member.display_name,
            class_name=context.class_name,
            day_of_week=context.day_of_week,
            start_time=context.start_time,
            end_time=context.end_time,
            expires_at=expires_at,
            dashboard_url=f"{self.site_url}/dashboard",
        )

        steps = [
            await run_step(
                "in_app_notification",
                lambda: self.notifications.create(notification),
                schedule_id=schedule_id,
                user_id=member.user_id,
            ),
            await run_step(
                "email",
                lambda: self.mailer.send(email),
                schedule_id=schedule_id,
                user_id=member.user_id,
            ),
        ]

        return PromotionResult(
            schedule_id=schedule_id,
            outcome=PromotionOutcome.PROMOTED,
            entry_id=entry.id,
            member_name=member.display_name,
            expires_at=expires_at,
            steps=steps,
        )
