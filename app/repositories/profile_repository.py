"""
Reads against the profiles and memberships tables shared by several features.
"""

from dataclasses import dataclass
from datetime import date

from app.db.helpers import execute_query, fetch_all, fetch_one
from app.db.pool import DatabasePoolManager


@dataclass(slots=True)
class ExpiringMember:
    user_id: str
    email: str
    full_name: str | None
    membership_expiry_date: date
    current_membership_id: str | None


@dataclass(slots=True)
class MembershipPlan:
    id: str
    name: str
    price: float | None


class ProfileRepository:
    def __init__(self, db: DatabasePoolManager):
        self.db = db

    async def is_admin(self, user_id: str) -> bool:
        row = await fetch_one(
            self.db, "SELECT is_admin FROM profiles WHERE id = %s", (user_id,)
        )
        return bool(row and row.get("is_admin"))

    async def fetch_members_expiring_on(self, expiry_date: date) -> list[ExpiringMember]:
        rows = await fetch_all(
            self.db,
            """
            SELECT id, email, full_name, membership_expiry_date, current_membership_id
            FROM profiles
            WHERE membership_expiry_date = %s
              AND email IS NOT NULL
            """,
            (expiry_date,),
        )
        return [
            ExpiringMember(
                user_id=str(row["id"]),
                email=row["email"],
                full_name=row.get("full_name"),
                membership_expiry_date=row["membership_expiry_date"],
                current_membership_id=(
                    str(row["current_membership_id"]) if row.get("current_membership_id") else None
                ),
            )
            for row in rows
        ]

    async def fetch_membership_plans(self, membership_ids: list[str]) -> dict[str, MembershipPlan]:
        if not membership_ids:
            return {}
        rows = await fetch_all(
            self.db,
            "SELECT id, name, price FROM memberships WHERE id = ANY(%s)",
            (membership_ids,),
        )
        return {
            str(row["id"]): MembershipPlan(
                id=str(row["id"]), name=row["name"], price=row.get("price")
            )
            for row in rows
        }

    async def record_membership_notification(
        self, user_id: str, notification_type: str, expiry_date: date
    ) -> None:
        await execute_query(
            self.db,
            """
            INSERT INTO membership_notifications (user_id, notification_type, sent_at, expiry_date)
            VALUES (%s, %s, now(), %s)
            """,
            (user_id, notification_type, expiry_date),
        )
