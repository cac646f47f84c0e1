"""
Booking calendar API response models.
Built from the domain summaries in the router.
"""

import datetime as dt

from pydantic import BaseModel, Field


class BookingResponse(BaseModel):
    """One booking inside a class occurrence."""

    id: str = Field(..., description="Booking ID")
    user_id: str = Field(..., description="Member user ID")
    status: str = Field(..., description="Booking status")
    member_name: str = Field(default="", description="Member display name")
    member_email: str | None = Field(None, description="Member email")
    booking_date: dt.datetime | None = Field(None, description="When the booking was made")


class ClassWithBookingsResponse(BaseModel):
    """All bookings for one schedule on one date."""

    schedule_id: str = Field(..., description="Class schedule ID")
    class_name: str = Field(..., description="Class name")
    class_date: dt.date = Field(..., description="Occurrence date")
    day_of_week: str = Field(..., description="Scheduled day of week")
    start_time: str = Field(..., description="Start time (HH:MM)")
    end_time: str | None = Field(None, description="End time (HH:MM)")
    max_capacity: int = Field(..., description="Class capacity")
    instructor_name: str | None = Field(None, description="Instructor name")
    booking_count: int = Field(..., description="Confirmed plus pending bookings")
    utilization_percent: int = Field(..., description="Active bookings as % of capacity")
    utilization_level: str = Field(..., description="low, medium or high")
    is_full: bool = Field(..., description="Active bookings reached capacity")
    is_nearly_full: bool = Field(..., description="At least 80% utilized but not full")
    bookings: list[BookingResponse] = Field(
        default_factory=list, description="Bookings of every status"
    )


class DaySummaryResponse(BaseModel):
    """Aggregated bookings for one calendar date."""

    date: dt.date = Field(..., description="Calendar date")
    label: str = Field(..., description="Display label, e.g. Monday, Jan 06")
    total_classes: int = Field(..., description="Classes with bookings on this date")
    total_bookings: int = Field(..., description="Bookings of every status")
    active_bookings: int = Field(..., description="Confirmed plus pending bookings")
    confirmed_bookings: int = Field(..., description="Confirmed bookings")
    pending_bookings: int = Field(..., description="Pending bookings")
    cancelled_bookings: int = Field(..., description="Cancelled bookings")
    total_capacity: int = Field(..., description="Sum of class capacities")
    utilization_percent: int = Field(..., description="Active bookings as % of capacity")
    utilization_level: str = Field(..., description="low, medium or high")
    classes: list[ClassWithBookingsResponse] = Field(
        default_factory=list, description="Classes ordered by start time"
    )


class CalendarStatsResponse(BaseModel):
    """Statistics over the whole displayed range."""

    total_bookings: int = Field(..., description="Bookings of every status")
    total_capacity: int = Field(..., description="Sum of class capacities")
    avg_utilization: int = Field(..., description="Active bookings as % of total capacity")
    full_classes: int = Field(..., description="Class occurrences at capacity")
    available_spots: int = Field(..., description="Remaining spots across all classes")
    busiest_day: dt.date | None = Field(None, description="Date with the most bookings")
    most_popular_class: str | None = Field(None, description="Class with most active bookings")


class CalendarViewResponse(BaseModel):
    """Week, month or custom range calendar."""

    view_mode: str = Field(..., description="week, month or custom")
    start_date: dt.date = Field(..., description="First date of the range")
    end_date: dt.date = Field(..., description="Last date of the range")
    range_label: str = Field(..., description="Display label, e.g. Jan 06 - Jan 12, 2025")
    contains_today: bool = Field(..., description="Whether today falls inside the range")
    previous_date: dt.date | None = Field(None, description="Anchor date for the previous page")
    next_date: dt.date | None = Field(None, description="Anchor date for the next page")
    days: list[DaySummaryResponse] = Field(..., description="One summary per date in range")
    stats: CalendarStatsResponse = Field(..., description="Range statistics")


class FilterOptionResponse(BaseModel):
    id: str = Field(..., description="Option ID")
    name: str = Field(..., description="Option display name")


class FilterOptionsResponse(BaseModel):
    """Choices for the calendar filter controls."""

    classes: list[FilterOptionResponse] = Field(..., description="Classes, by name")
    instructors: list[FilterOptionResponse] = Field(..., description="Active instructors")
    statuses: list[str] = Field(..., description="Booking statuses")
