"""
Domain models for member notifications: waitlist promotion, class
cancellation fan-out, booking confirmations and membership reminders.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum


class WaitlistStatus(StrEnum):
    WAITING = "waiting"
    NOTIFIED = "notified"
    EXPIRED = "expired"
    CLAIMED = "claimed"
    CANCELLED = "cancelled"


class NotificationType(StrEnum):
    WAITLIST_SPOT_AVAILABLE = "waitlist_spot_available"
    CLASS_CANCELLED = "class_cancelled"


class PromotionOutcome(StrEnum):
    PROMOTED = "promoted"
    NOBODY_WAITING = "nobody_waiting"
    CONTENTION_LOST = "contention_lost"


@dataclass(slots=True)
class ClassContext:
    """Display details of the class occurrence a trigger is about."""

    class_name: str
    day_of_week: str
    start_time: str
    end_time: str | None = None
    class_date: date | None = None


@dataclass(slots=True)
class MemberContact:
    user_id: str
    email: str | None
    first_name: str | None = None
    last_name: str | None = None

    @property
    def display_name(self) -> str:
        if self.first_name:
            return f"{self.first_name} {self.last_name or ''}".strip()
        return self.email or ""


@dataclass(slots=True)
class WaitlistEntry:
    id: str
    schedule_id: str
    queue_position: int
    status: str
    member: MemberContact


@dataclass(slots=True)
class NotificationRecord:
    user_id: str
    type: NotificationType
    title: str
    message: str
    related_id: str


@dataclass(slots=True)
class StepOutcome:
    """Result of one best-effort side effect."""

    name: str
    ok: bool
    error: str | None = None


@dataclass(slots=True)
class PromotionResult:
    schedule_id: str
    outcome: PromotionOutcome
    entry_id: str | None = None
    member_name: str | None = None
    expires_at: datetime | None = None
    steps: list[StepOutcome] = field(default_factory=list)

    @property
    def promoted(self) -> bool:
        return self.outcome == PromotionOutcome.PROMOTED

    @property
    def notified_count(self) -> int:
        return 1 if self.promoted else 0

    @property
    def notification_created(self) -> bool:
        return _step_ok(self.steps, "in_app_notification")

    @property
    def email_sent(self) -> bool:
        return _step_ok(self.steps, "email")


@dataclass(slots=True)
class RecipientOutcome:
    booking_id: str
    user_id: str
    email: str | None
    notification: StepOutcome
    email_step: StepOutcome


@dataclass(slots=True)
class CancellationResult:
    schedule_id: str
    recipients: list[RecipientOutcome] = field(default_factory=list)

    @property
    def notified_count(self) -> int:
        return len(self.recipients)

    @property
    def notifications_sent(self) -> int:
        return sum(1 for r in self.recipients if r.notification.ok)

    @property
    def notifications_failed(self) -> int:
        return self.notified_count - self.notifications_sent

    @property
    def emails_sent(self) -> int:
        return sum(1 for r in self.recipients if r.email_step.ok)

    @property
    def emails_failed(self) -> int:
        return self.notified_count - self.emails_sent


@dataclass(slots=True)
class ReminderOutcome:
    user_id: str
    email: str
    sent: bool
    error: str | None = None


@dataclass(slots=True)
class MembershipReminderResult:
    expiry_date: date
    outcomes: list[ReminderOutcome] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.outcomes)

    @property
    def notifications_sent(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.sent)

    @property
    def errors(self) -> int:
        return self.count - self.notifications_sent


def _step_ok(steps: list[StepOutcome], name: str) -> bool:
    return any(step.name == name and step.ok for step in steps)
