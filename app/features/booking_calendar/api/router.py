"""
Booking calendar routes.

Admin-only views over class bookings. Every view shares the same filter
query parameters; statuses default to confirmed + pending.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.auth.verify import admin_dependency
from app.db.helpers import DatabaseError
from app.dependencies import get_booking_calendar_service
from app.infrastructure.observability.logging import get_logger

from .. import aggregation, dates
from ..domain.models import (
    DEFAULT_STATUS_FILTER,
    BookingStatus,
    BookingWithDetails,
    CalendarFilters,
    CalendarStats,
    CalendarView,
    ClassWithBookings,
    DayBookingSummary,
    ViewMode,
)
from ..service import BookingCalendarService, InvalidDateRangeError
from .schemas import (
    BookingResponse,
    CalendarStatsResponse,
    CalendarViewResponse,
    ClassWithBookingsResponse,
    DaySummaryResponse,
    FilterOptionResponse,
    FilterOptionsResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/calendar", tags=["booking-calendar"])


def calendar_filters(
    class_ids: list[str] | None = Query(None, description="Only these classes"),
    instructor_ids: list[str] | None = Query(None, description="Only these instructors"),
    statuses: list[str] | None = Query(None, description="Booking statuses to include"),
) -> CalendarFilters:
    return CalendarFilters(
        class_ids=class_ids or [],
        instructor_ids=instructor_ids or [],
        statuses=statuses or list(DEFAULT_STATUS_FILTER),
    )


def _booking_response(booking: BookingWithDetails) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        user_id=booking.user_id,
        status=booking.status,
        member_name=booking.profile.display_name if booking.profile else "",
        member_email=booking.profile.email if booking.profile else None,
        booking_date=booking.booking_date,
    )


def _class_response(cls: ClassWithBookings) -> ClassWithBookingsResponse:
    return ClassWithBookingsResponse(
        schedule_id=cls.schedule_id,
        class_name=cls.class_name,
        class_date=cls.class_date,
        day_of_week=cls.day_of_week,
        start_time=cls.start_time,
        end_time=cls.end_time,
        max_capacity=cls.max_capacity,
        instructor_name=cls.instructor_name,
        booking_count=cls.booking_count,
        utilization_percent=cls.utilization_percent,
        utilization_level=aggregation.get_utilization_level(cls.utilization_percent).value,
        is_full=cls.is_full,
        is_nearly_full=cls.is_nearly_full,
        bookings=[_booking_response(booking) for booking in cls.bookings],
    )


def _day_response(day: DayBookingSummary) -> DaySummaryResponse:
    return DaySummaryResponse(
        date=day.date,
        label=dates.format_day_label(day.date),
        total_classes=day.total_classes,
        total_bookings=day.total_bookings,
        active_bookings=day.active_bookings,
        confirmed_bookings=day.confirmed_bookings,
        pending_bookings=day.pending_bookings,
        cancelled_bookings=day.cancelled_bookings,
        total_capacity=day.total_capacity,
        utilization_percent=day.utilization_percent,
        utilization_level=aggregation.get_utilization_level(day.utilization_percent).value,
        classes=[_class_response(cls) for cls in day.classes],
    )


def _stats_response(stats: CalendarStats) -> CalendarStatsResponse:
    return CalendarStatsResponse(
        total_bookings=stats.total_bookings,
        total_capacity=stats.total_capacity,
        avg_utilization=stats.avg_utilization,
        full_classes=stats.full_classes,
        available_spots=stats.available_spots,
        busiest_day=stats.busiest_day,
        most_popular_class=stats.most_popular_class,
    )


def _view_response(view: CalendarView, anchor: date | None = None) -> CalendarViewResponse:
    start_date = view.date_range.start_date
    end_date = view.date_range.end_date

    previous_date = next_date = None
    if anchor is not None and view.view_mode != ViewMode.CUSTOM:
        previous_date = dates.navigate_previous(anchor, view.view_mode)
        next_date = dates.navigate_next(anchor, view.view_mode)

    return CalendarViewResponse(
        view_mode=view.view_mode.value,
        start_date=start_date,
        end_date=end_date,
        range_label=dates.format_date_range(start_date, end_date),
        contains_today=dates.is_date_in_range(date.today(), start_date, end_date),
        previous_date=previous_date,
        next_date=next_date,
        days=[_day_response(day) for day in view.day_summaries],
        stats=_stats_response(view.stats),
    )


def _load_failed(e: DatabaseError, **log_context) -> HTTPException:
    logger.error("Failed to load booking calendar", error=str(e), **log_context)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to load booking calendar",
    )


@router.get("/week", response_model=CalendarViewResponse)
async def get_week_calendar(
    day: date | None = Query(None, alias="date", description="Any date in the week"),
    filters: CalendarFilters = Depends(calendar_filters),
    claims: dict = Depends(admin_dependency),
    service: BookingCalendarService = Depends(get_booking_calendar_service),
):
    """Monday..Sunday calendar for the week containing ``date`` (default today)."""
    anchor = day or date.today()
    try:
        view = await service.get_week_calendar(anchor, filters)
    except DatabaseError as e:
        raise _load_failed(e, view_mode="week", user_id=claims.get("sub")) from e

    return _view_response(view, anchor)


@router.get("/month", response_model=CalendarViewResponse)
async def get_month_calendar(
    year: int = Query(..., ge=2000, le=2100, description="Calendar year"),
    month: int = Query(..., ge=1, le=12, description="Calendar month (1-12)"),
    filters: CalendarFilters = Depends(calendar_filters),
    claims: dict = Depends(admin_dependency),
    service: BookingCalendarService = Depends(get_booking_calendar_service),
):
    """Every date of the given month."""
    try:
        view = await service.get_month_calendar(year, month, filters)
    except DatabaseError as e:
        raise _load_failed(e, view_mode="month", user_id=claims.get("sub")) from e

    return _view_response(view, date(year, month, 1))


@router.get("/range", response_model=CalendarViewResponse)
async def get_range_calendar(
    start_date: date = Query(..., description="First date (inclusive)"),
    end_date: date = Query(..., description="Last date (inclusive)"),
    filters: CalendarFilters = Depends(calendar_filters),
    claims: dict = Depends(admin_dependency),
    service: BookingCalendarService = Depends(get_booking_calendar_service),
):
    """Custom date range, used for the statistics panel."""
    try:
        view = await service.get_custom_range_calendar(start_date, end_date, filters)
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except DatabaseError as e:
        raise _load_failed(e, view_mode="custom", user_id=claims.get("sub")) from e

    return _view_response(view)


@router.get("/day", response_model=DaySummaryResponse)
async def get_day_summary(
    day: date = Query(..., alias="date", description="Calendar date"),
    filters: CalendarFilters = Depends(calendar_filters),
    claims: dict = Depends(admin_dependency),
    service: BookingCalendarService = Depends(get_booking_calendar_service),
):
    """Single day detail with every class and its bookings."""
    try:
        summary = await service.get_day_summary(day, filters)
    except DatabaseError as e:
        raise _load_failed(e, day=day.isoformat(), user_id=claims.get("sub")) from e

    return _day_response(summary)


@router.get("/filter-options", response_model=FilterOptionsResponse)
async def get_filter_options(
    claims: dict = Depends(admin_dependency),
    service: BookingCalendarService = Depends(get_booking_calendar_service),
):
    try:
        options = await service.get_filter_options()
    except DatabaseError as e:
        logger.error("Failed to load filter options", error=str(e), user_id=claims.get("sub"))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load filter options",
        ) from e

    return FilterOptionsResponse(
        classes=[FilterOptionResponse(id=o.id, name=o.name) for o in options["classes"]],
        instructors=[FilterOptionResponse(id=o.id, name=o.name) for o in options["instructors"]],
        statuses=[s.value for s in BookingStatus],
    )
