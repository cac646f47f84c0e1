"""
Domain subpackage for the booking calendar feature.
"""

from .models import (
    BookingStatus,
    BookingWithDetails,
    CalendarFilters,
    CalendarStats,
    CalendarView,
    ClassWithBookings,
    DateRange,
    DayBookingSummary,
    ViewMode,
)

__all__ = [
    "BookingStatus",
    "BookingWithDetails",
    "CalendarFilters",
    "CalendarStats",
    "CalendarView",
    "ClassWithBookings",
    "DateRange",
    "DayBookingSummary",
    "ViewMode",
]
