"""
FastAPI dependencies that hand the process-wide clients to routes.

The clients are built once in the application lifespan and stored on
``app.state``; tests swap them through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from app.config import settings
from app.db.pool import DatabasePoolManager
from app.features.booking_calendar.repository import BookingCalendarRepository
from app.features.booking_calendar.service import BookingCalendarService
from app.features.notifications.repository import (
    BookingRecipientRepository,
    NotificationRepository,
    WaitlistRepository,
)
from app.features.notifications.services import (
    BookingConfirmationService,
    ClassCancellationService,
    MemberEmailService,
    MembershipExpiryService,
    WaitlistPromotionService,
)
from app.repositories.profile_repository import ProfileRepository
from app.services.email import SmtpMailer
from app.services.redis_client import RedisCache


def get_db(request: Request) -> DatabasePoolManager:
    return request.app.state.db_pool


def get_cache(request: Request) -> RedisCache | None:
    return getattr(request.app.state, "cache", None)


def get_mailer(request: Request) -> SmtpMailer:
    return request.app.state.mailer


def get_profile_repository(db: DatabasePoolManager = Depends(get_db)) -> ProfileRepository:
    return ProfileRepository(db)


def get_booking_calendar_service(
    db: DatabasePoolManager = Depends(get_db),
    cache: RedisCache | None = Depends(get_cache),
) -> BookingCalendarService:
    return BookingCalendarService(
        BookingCalendarRepository(db), cache=cache, cache_ttl_s=settings.CALENDAR_CACHE_TTL_S
    )


def get_waitlist_promotion_service(
    db: DatabasePoolManager = Depends(get_db),
    mailer: SmtpMailer = Depends(get_mailer),
) -> WaitlistPromotionService:
    return WaitlistPromotionService(
        WaitlistRepository(db), NotificationRepository(db), mailer, site_url=settings.SITE_URL
    )


def get_class_cancellation_service(
    db: DatabasePoolManager = Depends(get_db),
    mailer: SmtpMailer = Depends(get_mailer),
) -> ClassCancellationService:
    return ClassCancellationService(
        BookingRecipientRepository(db), NotificationRepository(db), mailer
    )


def get_booking_confirmation_service(
    mailer: SmtpMailer = Depends(get_mailer),
) -> BookingConfirmationService:
    return BookingConfirmationService(mailer)


def get_member_email_service(
    mailer: SmtpMailer = Depends(get_mailer),
) -> MemberEmailService:
    return MemberEmailService(mailer, site_url=settings.SITE_URL)


def get_membership_expiry_service(
    profiles: ProfileRepository = Depends(get_profile_repository),
    mailer: SmtpMailer = Depends(get_mailer),
) -> MembershipExpiryService:
    return MembershipExpiryService(
        profiles,
        mailer,
        notice_days=settings.MEMBERSHIP_EXPIRY_NOTICE_DAYS,
        site_url=settings.SITE_URL,
    )
