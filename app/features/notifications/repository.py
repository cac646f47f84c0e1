"""
Store access for the notification workflows.

Waitlist promotion relies on a conditional write instead of locks: the
update only applies while the entry is still ``waiting`` at queue position 1,
so when two triggers race for the same schedule exactly one of them changes
a row.
"""

from datetime import date, datetime

from app.db.helpers import execute_query, fetch_all, fetch_one
from app.db.pool import DatabasePoolManager
from app.infrastructure.observability.logging import get_logger

from .domain.models import MemberContact, NotificationRecord, WaitlistEntry, WaitlistStatus

logger = get_logger(__name__)

ACTIVE_BOOKING_STATUSES = ["confirmed", "pending"]


class WaitlistRepository:
    def __init__(self, db: DatabasePoolManager):
        self.db = db

    async def fetch_queue_head(self, schedule_id: str) -> WaitlistEntry | None:
        """The waiting entry at queue position 1, or None."""
        row = await fetch_one(
            self.db,
            """
            SELECT
                w.id,
                w.user_id,
                w.schedule_id,
                w.queue_position,
                w.status,
                p.email,
                p.first_name,
                p.last_name
            FROM waitlist w
            LEFT JOIN profiles p ON p.id = w.user_id
            WHERE w.schedule_id = %s
              AND w.status = %s
              AND w.queue_position = 1
            LIMIT 1
            """,
            (schedule_id, WaitlistStatus.WAITING.value),
        )
        if not row:
            return None

        return WaitlistEntry(
            id=str(row["id"]),
            schedule_id=str(row["schedule_id"]),
            queue_position=row["queue_position"],
            status=row["status"],
            member=MemberContact(
                user_id=str(row["user_id"]),
                email=row.get("email"),
                first_name=row.get("first_name"),
                last_name=row.get("last_name"),
            ),
        )

    async def claim_for_notification(
        self,
        entry_id: str,
        schedule_id: str,
        notified_at: datetime,
        expires_at: datetime,
    ) -> bool:
        """
        Move an entry from waiting to notified.

        Applies only if the row still has status=waiting and queue_position=1.
        Returns False when zero rows changed, meaning another invocation
        already promoted it or the queue moved.
        """
        updated = await execute_query(
            self.db,
            """
            UPDATE waitlist
            SET status = %s,
                notified_at = %s,
                expires_at = %s,
                updated_at = %s
            WHERE id = %s
              AND schedule_id = %s
              AND status = %s
              AND queue_position = 1
            """,
            (
                WaitlistStatus.NOTIFIED.value,
                notified_at,
                expires_at,
                notified_at,
                entry_id,
                schedule_id,
                WaitlistStatus.WAITING.value,
            ),
        )
        return updated == 1


class BookingRecipientRepository:
    def __init__(self, db: DatabasePoolManager):
        self.db = db

    async def fetch_active_booking_recipients(
        self, schedule_id: str, class_date: date | None = None
    ) -> list[tuple[str, MemberContact]]:
        """(booking_id, member) for every confirmed/pending booking on the schedule."""
        query = """
            SELECT b.id, b.user_id, p.email, p.first_name, p.last_name
            FROM bookings b
            LEFT JOIN profiles p ON p.id = b.user_id
            WHERE b.schedule_id = %s
              AND b.status = ANY(%s)
        """
        params: tuple = (schedule_id, ACTIVE_BOOKING_STATUSES)
        if class_date is not None:
            query += " AND b.class_date = %s"
            params = params + (class_date,)
        query += " ORDER BY b.created_at ASC"

        rows = await fetch_all(self.db, query, params)
        return [
            (
                str(row["id"]),
                MemberContact(
                    user_id=str(row["user_id"]),
                    email=row.get("email"),
                    first_name=row.get("first_name"),
                    last_name=row.get("last_name"),
                ),
            )
            for row in rows
        ]


class NotificationRepository:
    def __init__(self, db: DatabasePoolManager):
        self.db = db

    async def create(self, notification: NotificationRecord) -> None:
        await execute_query(
            self.db,
            """
            INSERT INTO notifications (user_id, type, title, message, related_id, is_read)
            VALUES (%s, %s, %s, %s, %s, false)
            """,
            (
                notification.user_id,
                notification.type.value,
                notification.title,
                notification.message,
                notification.related_id,
            ),
        )
        logger.debug(
            "Notification created",
            user_id=notification.user_id,
            notification_type=notification.type.value,
        )
