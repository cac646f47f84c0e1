from datetime import date

import pytest

from app.features.notifications.domain.models import ClassContext, NotificationType
from app.features.notifications.services import (
    CancellationNotificationError,
    ClassCancellationService,
)


@pytest.fixture
def class_context():
    return ClassContext(
        class_name="HIIT",
        day_of_week="Friday",
        start_time="18:00",
        class_date=date(2025, 3, 7),
    )


@pytest.fixture
def three_recipients(member_contact):
    return [(f"b-{n}", member_contact(n)) for n in (1, 2, 3)]


@pytest.mark.asyncio
async def test_fan_out_counts_email_failures(
    fake_recipient_repository,
    fake_notification_repository,
    fake_mailer,
    three_recipients,
    class_context,
):
    bookings = fake_recipient_repository(three_recipients)
    notifications = fake_notification_repository()
    fake_mailer.fail_for = {"member2@example.com"}
    service = ClassCancellationService(bookings, notifications, fake_mailer)

    result = await service.notify_class_cancellation("s-9", class_context, "Instructor is ill")

    assert result.notified_count == 3
    assert result.notifications_sent == 3
    assert result.notifications_failed == 0
    assert result.emails_sent == 2
    assert result.emails_failed == 1
    assert [r.email_step.ok for r in result.recipients] == [True, False, True]
    assert bookings.calls == [("s-9", date(2025, 3, 7))]

    assert {n.type for n in notifications.created} == {NotificationType.CLASS_CANCELLED}
    assert notifications.created[0].message == (
        "HIIT on Friday at 18:00 has been cancelled. Reason: Instructor is ill"
    )
    assert [m.to for m in fake_mailer.sent] == ["member1@example.com", "member3@example.com"]
    assert "Instructor is ill" in fake_mailer.sent[0].html


@pytest.mark.asyncio
async def test_notification_failure_is_isolated_per_recipient(
    fake_recipient_repository,
    fake_notification_repository,
    fake_mailer,
    three_recipients,
    class_context,
):
    notifications = fake_notification_repository(fail_for={"user-1"})
    service = ClassCancellationService(
        fake_recipient_repository(three_recipients), notifications, fake_mailer
    )

    result = await service.notify_class_cancellation("s-9", class_context)

    assert result.notifications_sent == 2
    assert result.notifications_failed == 1
    assert result.emails_sent == 3
    assert notifications.created[0].message == "HIIT on Friday at 18:00 has been cancelled."


@pytest.mark.asyncio
async def test_no_active_bookings(
    fake_recipient_repository, fake_notification_repository, fake_mailer, class_context
):
    notifications = fake_notification_repository()
    service = ClassCancellationService(fake_recipient_repository([]), notifications, fake_mailer)

    result = await service.notify_class_cancellation("s-9", class_context)

    assert result.notified_count == 0
    assert notifications.created == []
    assert fake_mailer.sent == []


@pytest.mark.asyncio
async def test_booking_lookup_failure_raises(
    fake_recipient_repository, fake_notification_repository, fake_mailer, class_context
):
    service = ClassCancellationService(
        fake_recipient_repository(error=True), fake_notification_repository(), fake_mailer
    )

    with pytest.raises(CancellationNotificationError):
        await service.notify_class_cancellation("s-9", class_context)
