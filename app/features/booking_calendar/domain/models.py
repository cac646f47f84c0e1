"""
Domain models for the booking calendar.

Bookings arrive from the repository with their one-to-one joins already
normalized (a single related object or None). Summaries are computed fresh on
every aggregation call and never persisted.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class BookingStatus(StrEnum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


ACTIVE_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.PENDING})
DEFAULT_STATUS_FILTER = (BookingStatus.CONFIRMED, BookingStatus.PENDING)


class ViewMode(StrEnum):
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


@dataclass(slots=True)
class MemberProfile:
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None

    @property
    def display_name(self) -> str:
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or (self.email or "")


@dataclass(slots=True)
class ClassInfo:
    id: str
    name: str
    description: str | None = None


@dataclass(slots=True)
class InstructorInfo:
    id: str
    name: str
    email: str | None = None


@dataclass(slots=True)
class ScheduleDetails:
    id: str
    day_of_week: str
    start_time: str
    end_time: str | None = None
    max_capacity: int | None = None
    class_info: ClassInfo | None = None
    instructor: InstructorInfo | None = None


@dataclass(slots=True)
class BookingWithDetails:
    id: str
    user_id: str
    schedule_id: str
    class_date: date
    status: str
    booking_date: datetime | None = None
    created_at: datetime | None = None
    profile: MemberProfile | None = None
    schedule: ScheduleDetails | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["class_date"] = self.class_date.isoformat()
        data["booking_date"] = self.booking_date.isoformat() if self.booking_date else None
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BookingWithDetails":
        """Rebuild a booking from ``to_dict`` output (cache payloads)."""
        schedule_data = data.get("schedule")
        schedule = None
        if schedule_data:
            class_data = schedule_data.get("class_info")
            instructor_data = schedule_data.get("instructor")
            schedule = ScheduleDetails(
                id=schedule_data["id"],
                day_of_week=schedule_data.get("day_of_week", ""),
                start_time=schedule_data.get("start_time", ""),
                end_time=schedule_data.get("end_time"),
                max_capacity=schedule_data.get("max_capacity"),
                class_info=ClassInfo(**class_data) if class_data else None,
                instructor=InstructorInfo(**instructor_data) if instructor_data else None,
            )

        profile_data = data.get("profile")
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            schedule_id=data["schedule_id"],
            class_date=date.fromisoformat(data["class_date"]),
            status=data["status"],
            booking_date=_parse_datetime(data.get("booking_date")),
            created_at=_parse_datetime(data.get("created_at")),
            profile=MemberProfile(**profile_data) if profile_data else None,
            schedule=schedule,
        )


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


@dataclass(slots=True)
class ClassWithBookings:
    """All bookings for one schedule on one date."""

    schedule_id: str
    class_name: str
    class_date: date
    day_of_week: str
    start_time: str
    end_time: str | None
    max_capacity: int
    instructor_name: str | None
    bookings: list[BookingWithDetails]
    booking_count: int
    utilization_percent: int
    is_full: bool
    is_nearly_full: bool


@dataclass(slots=True)
class DayBookingSummary:
    date: date
    total_classes: int = 0
    total_bookings: int = 0
    confirmed_bookings: int = 0
    pending_bookings: int = 0
    cancelled_bookings: int = 0
    total_capacity: int = 0
    utilization_percent: int = 0
    classes: list[ClassWithBookings] = field(default_factory=list)

    @property
    def active_bookings(self) -> int:
        return sum(cls.booking_count for cls in self.classes)


@dataclass(slots=True)
class CalendarStats:
    total_bookings: int = 0
    total_capacity: int = 0
    avg_utilization: int = 0
    full_classes: int = 0
    available_spots: int = 0
    busiest_day: date | None = None
    most_popular_class: str | None = None


@dataclass(slots=True)
class CalendarFilters:
    class_ids: list[str] = field(default_factory=list)
    instructor_ids: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=lambda: list(DEFAULT_STATUS_FILTER))


@dataclass(slots=True)
class DateRange:
    start_date: date
    end_date: date


@dataclass(slots=True)
class CalendarView:
    """A fully aggregated calendar window, ready for presentation."""

    view_mode: ViewMode
    date_range: DateRange
    dates: list[date]
    day_summaries: list[DayBookingSummary]
    stats: CalendarStats
    bookings: list[BookingWithDetails]


@dataclass(slots=True)
class FilterOption:
    id: str
    name: str
