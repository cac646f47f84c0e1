from datetime import UTC, date, datetime, time

import pytest

from app.features.booking_calendar import repository as calendar_repository
from app.features.booking_calendar.repository import BookingCalendarRepository
from app.features.notifications import repository as notifications_repository
from app.features.notifications.repository import (
    BookingRecipientRepository,
    WaitlistRepository,
)


def _booking_row(**overrides):
    row = {
        "id": "b-1",
        "user_id": "u-1",
        "schedule_id": "s-1",
        "class_date": date(2025, 1, 6),
        "status": "confirmed",
        "booking_date": None,
        "created_at": None,
        "profile_id": "u-1",
        "first_name": "Sam",
        "last_name": "Lee",
        "email": "sam@example.com",
        "phone": None,
        "schedule_ref": "s-1",
        "day_of_week": "Monday",
        "start_time": time(7, 30),
        "end_time": time(8, 15),
        "max_capacity": 12,
        "class_id": "c-1",
        "class_name": "Spin",
        "class_description": None,
        "instructor_id": "i-1",
        "instructor_name": "Alex",
        "instructor_email": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def calendar_rows(monkeypatch):
    rows: list[dict] = []
    calls: list[tuple] = []

    async def _fetch_all(db, query, params=(), **kwargs):
        calls.append(params)
        return rows

    monkeypatch.setattr(calendar_repository, "fetch_all", _fetch_all)
    return rows, calls


@pytest.mark.asyncio
async def test_rows_map_to_bookings_with_details(calendar_rows):
    rows, calls = calendar_rows
    rows.append(_booking_row())

    [booking] = await BookingCalendarRepository(db=None).fetch_bookings_by_date_range(
        date(2025, 1, 6), date(2025, 1, 12)
    )

    assert calls == [(date(2025, 1, 6), date(2025, 1, 12))]
    assert booking.profile.email == "sam@example.com"
    assert booking.schedule.start_time == "07:30"
    assert booking.schedule.end_time == "08:15"
    assert booking.schedule.max_capacity == 12
    assert booking.schedule.class_info.name == "Spin"
    assert booking.schedule.instructor.name == "Alex"


@pytest.mark.asyncio
async def test_missing_joins_become_none(calendar_rows):
    rows, _ = calendar_rows
    rows.append(_booking_row(profile_id=None, class_id=None, instructor_id=None))
    rows.append(_booking_row(id="b-2", schedule_ref=None))

    first, second = await BookingCalendarRepository(db=None).fetch_bookings_by_date_range(
        date(2025, 1, 6), date(2025, 1, 6)
    )

    assert first.profile is None
    assert first.schedule.class_info is None
    assert first.schedule.instructor is None
    assert second.schedule is None


@pytest.mark.asyncio
async def test_timestamp_class_date_is_truncated_to_date(calendar_rows):
    rows, _ = calendar_rows
    rows.append(_booking_row(class_date=datetime(2025, 1, 6, 0, 0, tzinfo=UTC)))
    rows.append(_booking_row(id="b-2", class_date="2025-01-07T00:00:00"))

    first, second = await BookingCalendarRepository(db=None).fetch_bookings_by_date_range(
        date(2025, 1, 6), date(2025, 1, 7)
    )

    assert first.class_date == date(2025, 1, 6)
    assert second.class_date == date(2025, 1, 7)


@pytest.mark.asyncio
@pytest.mark.parametrize(("rowcount", "claimed"), [(1, True), (0, False)])
async def test_claim_reports_whether_a_row_changed(monkeypatch, rowcount, claimed):
    async def _execute_query(db, query, params=(), **kwargs):
        return rowcount

    monkeypatch.setattr(notifications_repository, "execute_query", _execute_query)
    now = datetime(2025, 3, 4, 18, 30, tzinfo=UTC)

    result = await WaitlistRepository(db=None).claim_for_notification("w-1", "s-1", now, now)

    assert result is claimed


@pytest.mark.asyncio
async def test_recipients_query_narrows_to_class_date(monkeypatch):
    seen: list[tuple[str, tuple]] = []

    async def _fetch_all(db, query, params=(), **kwargs):
        seen.append((query, params))
        return [
            {
                "id": "b-1",
                "user_id": "u-1",
                "email": "a@example.com",
                "first_name": "A",
                "last_name": None,
            }
        ]

    monkeypatch.setattr(notifications_repository, "fetch_all", _fetch_all)
    repo = BookingRecipientRepository(db=None)

    [(booking_id, member)] = await repo.fetch_active_booking_recipients("s-1")
    await repo.fetch_active_booking_recipients("s-1", date(2025, 1, 6))

    assert booking_id == "b-1"
    assert member.email == "a@example.com"
    assert "class_date" not in seen[0][0]
    assert "b.class_date = %s" in seen[1][0]
    assert seen[1][1][-1] == date(2025, 1, 6)
