"""
Booking calendar service.

Loads bookings for a date window (read-through Redis cache, 5 minute TTL by
default), applies the admin's filters and runs the pure aggregation over
every date of the window.
"""

from __future__ import annotations

from datetime import date

from app.infrastructure.observability.logging import get_logger
from app.services.redis_client import RedisCache

from . import aggregation, dates
from .domain.models import (
    BookingWithDetails,
    CalendarFilters,
    CalendarView,
    DateRange,
    DayBookingSummary,
    FilterOption,
    ViewMode,
)
from .repository import BookingCalendarRepository

logger = get_logger(__name__)

CACHE_KEY_PREFIX = "booking_calendar"
MAX_CUSTOM_RANGE_DAYS = 92


class InvalidDateRangeError(ValueError):
    """Custom range is reversed or too long."""


class BookingCalendarService:
    def __init__(
        self,
        repository: BookingCalendarRepository,
        cache: RedisCache | None = None,
        cache_ttl_s: int = 300,
    ):
        self.repository = repository
        self.cache = cache
        self.cache_ttl_s = cache_ttl_s

    async def get_week_calendar(
        self, current: date, filters: CalendarFilters | None = None
    ) -> CalendarView:
        week_dates = dates.get_week_dates(current)
        return await self._build_view(ViewMode.WEEK, week_dates, filters)

    async def get_month_calendar(
        self, year: int, month: int, filters: CalendarFilters | None = None
    ) -> CalendarView:
        month_dates = dates.get_month_dates(year, month)
        return await self._build_view(ViewMode.MONTH, month_dates, filters)

    async def get_custom_range_calendar(
        self, start_date: date, end_date: date, filters: CalendarFilters | None = None
    ) -> CalendarView:
        if start_date > end_date:
            raise InvalidDateRangeError("start_date must be on or before end_date")
        range_dates = dates.get_dates_in_range(start_date, end_date)
        if len(range_dates) > MAX_CUSTOM_RANGE_DAYS:
            raise InvalidDateRangeError(
                f"Date range cannot exceed {MAX_CUSTOM_RANGE_DAYS} days"
            )
        return await self._build_view(ViewMode.CUSTOM, range_dates, filters)

    async def get_day_summary(
        self, day: date, filters: CalendarFilters | None = None
    ) -> DayBookingSummary:
        bookings = await self.load_bookings(DateRange(day, day), filters)
        return aggregation.create_day_booking_summary(day, bookings)

    async def get_filter_options(self) -> dict[str, list[FilterOption]]:
        return {
            "classes": await self.repository.fetch_class_options(),
            "instructors": await self.repository.fetch_instructor_options(),
        }

    async def load_bookings(
        self, date_range: DateRange, filters: CalendarFilters | None = None
    ) -> list[BookingWithDetails]:
        """Fetch (or reuse cached) bookings for the window, then filter."""
        bookings = await self._fetch_range(date_range)
        return aggregation.apply_filters(bookings, filters or CalendarFilters())

    async def _build_view(
        self, view_mode: ViewMode, view_dates: list[date], filters: CalendarFilters | None
    ) -> CalendarView:
        date_range = DateRange(start_date=view_dates[0], end_date=view_dates[-1])
        bookings = await self.load_bookings(date_range, filters)

        day_summaries = aggregation.create_day_summaries(view_dates, bookings)
        stats = aggregation.calculate_calendar_stats(day_summaries)

        logger.info(
            "Booking calendar aggregated",
            view_mode=view_mode.value,
            start_date=date_range.start_date.isoformat(),
            end_date=date_range.end_date.isoformat(),
            booking_count=len(bookings),
            total_classes=sum(day.total_classes for day in day_summaries),
        )

        return CalendarView(
            view_mode=view_mode,
            date_range=date_range,
            dates=view_dates,
            day_summaries=day_summaries,
            stats=stats,
            bookings=bookings,
        )

    async def _fetch_range(self, date_range: DateRange) -> list[BookingWithDetails]:
        cache_key = self._cache_key(date_range)

        if self.cache:
            cached = await self.cache.get_json(cache_key)
            if cached is not None:
                logger.debug("Booking calendar cache hit", cache_key=cache_key)
                return [BookingWithDetails.from_dict(item) for item in cached]

        bookings = await self.repository.fetch_bookings_by_date_range(
            date_range.start_date, date_range.end_date
        )

        if self.cache:
            await self.cache.set_json(
                cache_key, [booking.to_dict() for booking in bookings], self.cache_ttl_s
            )

        return bookings

    @staticmethod
    def _cache_key(date_range: DateRange) -> str:
        return (
            f"{CACHE_KEY_PREFIX}:{date_range.start_date.isoformat()}:"
            f"{date_range.end_date.isoformat()}"
        )
