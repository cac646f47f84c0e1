"""
Row fetching for the booking calendar.

Joins bookings with member profiles, schedules, classes and instructors and
maps each row into a BookingWithDetails whose related objects are either a
single instance or None. Query failures surface as DatabaseError; callers
never receive partial results.
"""

from datetime import date, datetime, time
from typing import Any

from app.db.helpers import fetch_all
from app.db.pool import DatabasePoolManager
from app.infrastructure.observability.logging import get_logger

from .domain.models import (
    BookingWithDetails,
    ClassInfo,
    FilterOption,
    InstructorInfo,
    MemberProfile,
    ScheduleDetails,
)

logger = get_logger(__name__)


class BookingCalendarRepository:
    """Raw SQL reads for the admin booking calendar."""

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    async def fetch_bookings_by_date_range(
        self, start_date: date, end_date: date
    ) -> list[BookingWithDetails]:
        query = """
            SELECT
                b.id,
                b.user_id,
                b.schedule_id,
                b.class_date,
                b.status,
                b.booking_date,
                b.created_at,
                p.id AS profile_id,
                p.first_name,
                p.last_name,
                p.email,
                p.phone,
                s.id AS schedule_ref,
                s.day_of_week,
                s.start_time,
                s.end_time,
                s.max_capacity,
                c.id AS class_id,
                c.name AS class_name,
                c.description AS class_description,
                i.id AS instructor_id,
                i.name AS instructor_name,
                i.email AS instructor_email
            FROM bookings b
            LEFT JOIN profiles p ON p.id = b.user_id
            LEFT JOIN schedule s ON s.id = b.schedule_id
            LEFT JOIN classes c ON c.id = s.class_id
            LEFT JOIN instructors i ON i.id = s.instructor_id
            WHERE b.class_date >= %s
              AND b.class_date <= %s
            ORDER BY b.class_date ASC, b.created_at ASC
        """

        rows = await fetch_all(self.db, query, (start_date, end_date))
        bookings = [_row_to_booking(row) for row in rows]
        logger.debug(
            "Fetched bookings for calendar range",
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            booking_count=len(bookings),
        )
        return bookings

    async def fetch_class_options(self) -> list[FilterOption]:
        rows = await fetch_all(self.db, "SELECT id, name FROM classes ORDER BY name ASC")
        return [FilterOption(id=str(row["id"]), name=row["name"]) for row in rows]

    async def fetch_instructor_options(self) -> list[FilterOption]:
        rows = await fetch_all(
            self.db,
            "SELECT id, name FROM instructors WHERE is_active = true ORDER BY name ASC",
        )
        return [FilterOption(id=str(row["id"]), name=row["name"]) for row in rows]


def _format_time(value: Any) -> str | None:
    """TIME columns come back as datetime.time; keep a fixed HH:MM string."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value)


def _row_to_booking(row: dict[str, Any]) -> BookingWithDetails:
    profile = None
    if row.get("profile_id") is not None:
        profile = MemberProfile(
            first_name=row.get("first_name"),
            last_name=row.get("last_name"),
            email=row.get("email"),
            phone=row.get("phone"),
        )

    schedule = None
    if row.get("schedule_ref") is not None:
        class_info = None
        if row.get("class_id") is not None:
            class_info = ClassInfo(
                id=str(row["class_id"]),
                name=row.get("class_name") or "",
                description=row.get("class_description"),
            )

        instructor = None
        if row.get("instructor_id") is not None:
            instructor = InstructorInfo(
                id=str(row["instructor_id"]),
                name=row.get("instructor_name") or "",
                email=row.get("instructor_email"),
            )

        schedule = ScheduleDetails(
            id=str(row["schedule_ref"]),
            day_of_week=row.get("day_of_week") or "",
            start_time=_format_time(row.get("start_time")) or "",
            end_time=_format_time(row.get("end_time")),
            max_capacity=row.get("max_capacity"),
            class_info=class_info,
            instructor=instructor,
        )

    class_date = row["class_date"]
    if isinstance(class_date, datetime):
        class_date = class_date.date()
    elif not isinstance(class_date, date):
        class_date = date.fromisoformat(str(class_date)[:10])

    return BookingWithDetails(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        schedule_id=str(row["schedule_id"]),
        class_date=class_date,
        status=row["status"],
        booking_date=row.get("booking_date"),
        created_at=row.get("created_at"),
        profile=profile,
        schedule=schedule,
    )
