"""
Membership expiry reminder job.

Runs the reminder pass once (cron style) or on a daily loop when started as
a long-lived worker. The job owns its own database pool and mailer.
"""

import asyncio

from app.config import settings
from app.db.pool import DatabasePoolManager
from app.features.notifications.services import MembershipExpiryService
from app.infrastructure.observability.logging import get_logger
from app.repositories.profile_repository import ProfileRepository
from app.services.email import SmtpMailer

logger = get_logger(__name__)

RUN_INTERVAL_HOURS = 24
RETRY_DELAY_SECONDS = 1800


async def run_membership_expiry_job() -> dict:
    """Send one round of expiry reminders and return the counts."""
    db_pool = DatabasePoolManager.from_settings(settings, application_name="membership_expiry_job")
    await db_pool.initialize()

    try:
        service = MembershipExpiryService(
            ProfileRepository(db_pool),
            SmtpMailer.from_settings(settings),
            notice_days=settings.MEMBERSHIP_EXPIRY_NOTICE_DAYS,
            site_url=settings.SITE_URL,
        )
        result = await service.send_expiry_reminders()
    finally:
        await db_pool.close()

    return {
        "job_run": "membership_expiry",
        "expiry_date": result.expiry_date.isoformat(),
        "count": result.count,
        "notifications_sent": result.notifications_sent,
        "errors": result.errors,
    }


async def start_membership_expiry_scheduler():
    """Run the reminder job every RUN_INTERVAL_HOURS until cancelled."""
    logger.info("Starting membership expiry scheduler", interval_hours=RUN_INTERVAL_HOURS)

    while True:
        try:
            metrics = await run_membership_expiry_job()
            logger.info("Membership expiry job cycle completed", **metrics)
            await asyncio.sleep(RUN_INTERVAL_HOURS * 3600)
        except Exception as e:
            logger.error(
                "Error in membership expiry scheduler", error=str(e), error_type=type(e).__name__
            )
            await asyncio.sleep(RETRY_DELAY_SECONDS)
