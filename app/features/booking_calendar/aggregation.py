"""
Booking calendar aggregation.

Turns a flat list of bookings into per-class, per-day and range-wide
summaries. Everything here is pure and synchronous: no I/O, no shared state,
same input -> same output.

Utilization is an integer percentage rounded half-up, computed the same way
at class, day and range level. Start times are compared as strings, which
orders correctly only for zero-padded ``HH:MM``/``HH:MM:SS`` values; anything
else degrades to plain lexical order without raising.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date
from enum import StrEnum

from .domain.models import (
    BookingStatus,
    BookingWithDetails,
    CalendarFilters,
    CalendarStats,
    ClassWithBookings,
    DayBookingSummary,
)

DEFAULT_CLASS_CAPACITY = 20
NEARLY_FULL_THRESHOLD = 80
UNKNOWN_CLASS_NAME = "Unknown"


class UtilizationLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def calculate_utilization(count: int, capacity: int) -> int:
    """
    Percentage of capacity taken, rounded half-up. Not clamped (can exceed 100).

    Returns 0 when capacity is 0 (or negative).
    """
    if capacity <= 0:
        return 0
    # Integer form of floor(count / capacity * 100 + 0.5), exact for all ints
    return (200 * count + capacity) // (2 * capacity)


def get_utilization_level(utilization_percent: int) -> UtilizationLevel:
    """Colour band used by the calendar cells: >=90 high, >=70 medium."""
    if utilization_percent >= 90:
        return UtilizationLevel.HIGH
    if utilization_percent >= 70:
        return UtilizationLevel.MEDIUM
    return UtilizationLevel.LOW


def group_bookings_by_date(
    bookings: Iterable[BookingWithDetails],
) -> dict[date, list[BookingWithDetails]]:
    grouped: dict[date, list[BookingWithDetails]] = defaultdict(list)
    for booking in bookings:
        grouped[booking.class_date].append(booking)
    return dict(grouped)


def group_bookings_by_schedule(bookings: Sequence[BookingWithDetails]) -> list[ClassWithBookings]:
    """
    One ClassWithBookings per (schedule, date), ordered by start time.

    Bookings without schedule details are skipped. Missing capacity falls
    back to DEFAULT_CLASS_CAPACITY.
    """
    groups: dict[tuple[str, date], list[BookingWithDetails]] = {}
    for booking in bookings:
        if booking.schedule is None:
            continue
        groups.setdefault((booking.schedule_id, booking.class_date), []).append(booking)

    classes = [_summarize_class(group) for group in groups.values()]
    # sorted() is stable, ties keep first-seen order
    return sorted(classes, key=lambda cls: cls.start_time or "")


def _summarize_class(group: list[BookingWithDetails]) -> ClassWithBookings:
    first = group[0]
    schedule = first.schedule

    booking_count = sum(1 for booking in group if booking.is_active)
    max_capacity = schedule.max_capacity or DEFAULT_CLASS_CAPACITY
    utilization_percent = calculate_utilization(booking_count, max_capacity)
    is_full = booking_count >= max_capacity

    return ClassWithBookings(
        schedule_id=first.schedule_id,
        class_name=(schedule.class_info and schedule.class_info.name) or UNKNOWN_CLASS_NAME,
        class_date=first.class_date,
        day_of_week=schedule.day_of_week,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        max_capacity=max_capacity,
        instructor_name=(schedule.instructor and schedule.instructor.name) or None,
        bookings=list(group),
        booking_count=booking_count,
        utilization_percent=utilization_percent,
        is_full=is_full,
        is_nearly_full=utilization_percent >= NEARLY_FULL_THRESHOLD and not is_full,
    )


def create_day_booking_summary(
    day: date, bookings: Iterable[BookingWithDetails]
) -> DayBookingSummary:
    """Summary for one date. Always returns a summary, zeroed when nothing matches."""
    day_bookings = [booking for booking in bookings if booking.class_date == day]
    classes = group_bookings_by_schedule(day_bookings)

    status_counts: dict[str, int] = defaultdict(int)
    for booking in day_bookings:
        status_counts[booking.status] += 1

    total_capacity = sum(cls.max_capacity for cls in classes)
    active_bookings = sum(cls.booking_count for cls in classes)

    return DayBookingSummary(
        date=day,
        total_classes=len(classes),
        total_bookings=len(day_bookings),
        confirmed_bookings=status_counts[BookingStatus.CONFIRMED],
        pending_bookings=status_counts[BookingStatus.PENDING],
        cancelled_bookings=status_counts[BookingStatus.CANCELLED],
        total_capacity=total_capacity,
        utilization_percent=calculate_utilization(active_bookings, total_capacity),
        classes=classes,
    )


def create_day_summaries(
    dates: Iterable[date], bookings: Sequence[BookingWithDetails]
) -> list[DayBookingSummary]:
    by_date = group_bookings_by_date(bookings)
    return [create_day_booking_summary(day, by_date.get(day, [])) for day in dates]


def calculate_calendar_stats(day_summaries: Sequence[DayBookingSummary]) -> CalendarStats:
    """Range-wide statistics. Empty input gives zeroed stats."""
    if not day_summaries:
        return CalendarStats()

    total_bookings = 0
    total_capacity = 0
    active_bookings = 0
    full_classes = 0
    available_spots = 0
    class_popularity: dict[str, int] = {}

    busiest = day_summaries[0]
    for day in day_summaries:
        total_bookings += day.total_bookings
        total_capacity += day.total_capacity
        if day.total_bookings > busiest.total_bookings:
            busiest = day

        for cls in day.classes:
            active_bookings += cls.booking_count
            if cls.is_full:
                full_classes += 1
            available_spots += max(0, cls.max_capacity - cls.booking_count)
            class_popularity[cls.class_name] = (
                class_popularity.get(cls.class_name, 0) + cls.booking_count
            )

    most_popular_class = None
    max_active = 0
    for class_name, count in class_popularity.items():
        if count > max_active:
            max_active = count
            most_popular_class = class_name

    return CalendarStats(
        total_bookings=total_bookings,
        total_capacity=total_capacity,
        avg_utilization=calculate_utilization(active_bookings, total_capacity),
        full_classes=full_classes,
        available_spots=available_spots,
        busiest_day=busiest.date,
        most_popular_class=most_popular_class,
    )


def apply_filters(
    bookings: Iterable[BookingWithDetails], filters: CalendarFilters
) -> list[BookingWithDetails]:
    """Keep bookings matching every non-empty filter list."""
    filtered = list(bookings)

    if filters.class_ids:
        class_ids = set(filters.class_ids)
        filtered = [
            booking
            for booking in filtered
            if booking.schedule and booking.schedule.class_info
            and booking.schedule.class_info.id in class_ids
        ]

    if filters.instructor_ids:
        instructor_ids = set(filters.instructor_ids)
        filtered = [
            booking
            for booking in filtered
            if booking.schedule and booking.schedule.instructor
            and booking.schedule.instructor.id in instructor_ids
        ]

    if filters.statuses:
        statuses = set(filters.statuses)
        filtered = [booking for booking in filtered if booking.status in statuses]

    return filtered
