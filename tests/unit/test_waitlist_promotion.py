from datetime import UTC, datetime, timedelta

import pytest

from app.features.notifications.domain.models import (
    ClassContext,
    NotificationType,
    PromotionOutcome,
)
from app.features.notifications.services import (
    CLAIM_WINDOW,
    WaitlistProcessingError,
    WaitlistPromotionService,
)

FIXED_NOW = datetime(2025, 3, 4, 18, 30, tzinfo=UTC)


@pytest.fixture
def class_context():
    return ClassContext(
        class_name="Morning Spin", day_of_week="Tuesday", start_time="07:30", end_time="08:15"
    )


@pytest.fixture
def notifications(fake_notification_repository):
    return fake_notification_repository()


def _service(waitlist, notifications, mailer, clock=lambda: FIXED_NOW):
    return WaitlistPromotionService(
        waitlist, notifications, mailer, site_url="https://gym.example.com/", clock=clock
    )


@pytest.mark.asyncio
async def test_nobody_waiting(fake_waitlist_repository, notifications, fake_mailer, class_context):
    waitlist = fake_waitlist_repository(head=None)

    result = await _service(waitlist, notifications, fake_mailer).promote_next_waiting(
        "s-1", class_context
    )

    assert result.outcome == PromotionOutcome.NOBODY_WAITING
    assert result.notified_count == 0
    assert waitlist.claims == []
    assert notifications.created == []
    assert fake_mailer.sent == []


@pytest.mark.asyncio
async def test_promotes_head_of_queue(
    fake_waitlist_repository, waitlist_entry, notifications, fake_mailer, class_context
):
    waitlist = fake_waitlist_repository(head=waitlist_entry)

    result = await _service(waitlist, notifications, fake_mailer).promote_next_waiting(
        "s-1", class_context
    )

    assert result.promoted
    assert result.notified_count == 1
    assert result.entry_id == "w-1"
    assert result.member_name == "Member1 Smith"
    assert result.expires_at == FIXED_NOW + timedelta(hours=24)
    assert waitlist.claims == [
        {
            "entry_id": "w-1",
            "schedule_id": "s-1",
            "notified_at": FIXED_NOW,
            "expires_at": FIXED_NOW + CLAIM_WINDOW,
        }
    ]

    [notification] = notifications.created
    assert notification.type == NotificationType.WAITLIST_SPOT_AVAILABLE
    assert notification.user_id == "user-1"
    assert notification.related_id == "s-1"
    assert "Morning Spin on Tuesday at 07:30" in notification.message

    [email] = fake_mailer.sent
    assert email.to == "member1@example.com"
    assert email.subject == "Spot Available: Morning Spin on Tuesday"
    assert "https://gym.example.com/dashboard" in email.html
    assert "Wednesday, March 05, 2025 at 06:30 PM UTC" in email.html
    assert result.notification_created and result.email_sent


@pytest.mark.asyncio
async def test_expiry_uses_wall_clock(
    fake_waitlist_repository, waitlist_entry, notifications, fake_mailer, class_context
):
    service = WaitlistPromotionService(
        fake_waitlist_repository(head=waitlist_entry), notifications, fake_mailer
    )

    result = await service.promote_next_waiting("s-1", class_context)

    expected = datetime.now(UTC) + timedelta(hours=24)
    assert abs((result.expires_at - expected).total_seconds()) < 5


@pytest.mark.asyncio
async def test_email_failure_still_promotes(
    fake_waitlist_repository, waitlist_entry, notifications, fake_mailer, class_context
):
    fake_mailer.fail_for = {"member1@example.com"}

    result = await _service(
        fake_waitlist_repository(head=waitlist_entry), notifications, fake_mailer
    ).promote_next_waiting("s-1", class_context)

    assert result.outcome == PromotionOutcome.PROMOTED
    assert result.notification_created is True
    assert result.email_sent is False
    email_step = next(step for step in result.steps if step.name == "email")
    assert "550" in email_step.error


@pytest.mark.asyncio
async def test_notification_failure_does_not_block_email(
    fake_waitlist_repository,
    fake_notification_repository,
    waitlist_entry,
    fake_mailer,
    class_context,
):
    notifications = fake_notification_repository(fail_for={"user-1"})

    result = await _service(
        fake_waitlist_repository(head=waitlist_entry), notifications, fake_mailer
    ).promote_next_waiting("s-1", class_context)

    assert result.promoted
    assert result.notification_created is False
    assert result.email_sent is True
    assert len(fake_mailer.sent) == 1


@pytest.mark.asyncio
async def test_contention_lost_is_not_an_error(
    fake_waitlist_repository, waitlist_entry, notifications, fake_mailer, class_context
):
    waitlist = fake_waitlist_repository(head=waitlist_entry, claim_result=False)

    result = await _service(waitlist, notifications, fake_mailer).promote_next_waiting(
        "s-1", class_context
    )

    assert result.outcome == PromotionOutcome.CONTENTION_LOST
    assert result.notified_count == 0
    assert len(waitlist.claims) == 1
    assert notifications.created == []
    assert fake_mailer.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize("failure", ["read_error", "claim_error"])
async def test_required_step_failure_raises(
    fake_waitlist_repository, waitlist_entry, notifications, fake_mailer, class_context, failure
):
    waitlist = fake_waitlist_repository(head=waitlist_entry, **{failure: True})

    with pytest.raises(WaitlistProcessingError):
        await _service(waitlist, notifications, fake_mailer).promote_next_waiting(
            "s-1", class_context
        )

    assert notifications.created == []
    assert fake_mailer.sent == []
