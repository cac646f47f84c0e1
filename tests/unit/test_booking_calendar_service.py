from datetime import date

import pytest

from app.db.helpers import DatabaseError
from app.features.booking_calendar.domain.models import CalendarFilters, ViewMode
from app.features.booking_calendar.service import (
    BookingCalendarService,
    InvalidDateRangeError,
)


@pytest.mark.asyncio
async def test_week_calendar_aggregates_every_day(make_booking, fake_calendar_repository):
    repository = fake_calendar_repository(
        [
            make_booking("b-1", class_date=date(2025, 1, 6)),
            make_booking("b-2", class_date=date(2025, 1, 6), status="pending"),
            make_booking("b-3", class_date=date(2025, 1, 8), schedule_id="s-2"),
            make_booking("b-4", class_date=date(2025, 1, 13)),
        ]
    )
    service = BookingCalendarService(repository)

    view = await service.get_week_calendar(date(2025, 1, 9))

    assert view.view_mode == ViewMode.WEEK
    assert repository.fetch_calls == [(date(2025, 1, 6), date(2025, 1, 12))]
    assert len(view.day_summaries) == 7
    assert [day.total_bookings for day in view.day_summaries] == [2, 0, 1, 0, 0, 0, 0]
    assert view.stats.total_bookings == 3
    assert view.stats.busiest_day == date(2025, 1, 6)


@pytest.mark.asyncio
async def test_default_filters_hide_cancelled_bookings(make_booking, fake_calendar_repository):
    repository = fake_calendar_repository(
        [make_booking("b-1"), make_booking("b-2", status="cancelled")]
    )
    service = BookingCalendarService(repository)

    summary = await service.get_day_summary(date(2025, 1, 6))
    assert summary.total_bookings == 1

    everything = await service.get_day_summary(
        date(2025, 1, 6), CalendarFilters(statuses=["confirmed", "cancelled"])
    )
    assert everything.total_bookings == 2
    assert everything.cancelled_bookings == 1


@pytest.mark.asyncio
async def test_month_calendar_covers_whole_month(fake_calendar_repository):
    service = BookingCalendarService(fake_calendar_repository())

    view = await service.get_month_calendar(2025, 2)

    assert len(view.dates) == 28
    assert view.date_range.start_date == date(2025, 2, 1)
    assert view.date_range.end_date == date(2025, 2, 28)
    assert view.stats.total_bookings == 0


@pytest.mark.asyncio
async def test_custom_range_validation(fake_calendar_repository):
    service = BookingCalendarService(fake_calendar_repository())

    with pytest.raises(InvalidDateRangeError):
        await service.get_custom_range_calendar(date(2025, 2, 1), date(2025, 1, 1))

    with pytest.raises(InvalidDateRangeError):
        await service.get_custom_range_calendar(date(2025, 1, 1), date(2025, 4, 3))

    view = await service.get_custom_range_calendar(date(2025, 1, 1), date(2025, 4, 2))
    assert len(view.dates) == 92
    assert view.view_mode == ViewMode.CUSTOM


@pytest.mark.asyncio
async def test_fetched_range_is_cached(make_booking, fake_calendar_repository, fake_cache):
    repository = fake_calendar_repository([make_booking("b-1")])
    service = BookingCalendarService(repository, cache=fake_cache, cache_ttl_s=300)

    first = await service.get_week_calendar(date(2025, 1, 6))
    second = await service.get_week_calendar(date(2025, 1, 7))

    assert len(repository.fetch_calls) == 1
    assert fake_cache.ttls == {"booking_calendar:2025-01-06:2025-01-12": 300}
    assert second.day_summaries == first.day_summaries
    assert second.bookings == first.bookings


@pytest.mark.asyncio
async def test_fetch_failure_propagates(fake_calendar_repository):
    repository = fake_calendar_repository(
        error=DatabaseError("connection refused", operation="fetch_all")
    )
    service = BookingCalendarService(repository)

    with pytest.raises(DatabaseError):
        await service.get_week_calendar(date(2025, 1, 6))


@pytest.mark.asyncio
async def test_filter_options(fake_calendar_repository):
    service = BookingCalendarService(fake_calendar_repository())

    options = await service.get_filter_options()

    assert [o.name for o in options["classes"]] == ["Spin", "Yoga"]
    assert [o.name for o in options["instructors"]] == ["Alex"]
