"""
Domain subpackage for member notifications.
"""

from .models import (
    CancellationResult,
    ClassContext,
    MemberContact,
    MembershipReminderResult,
    NotificationType,
    PromotionOutcome,
    PromotionResult,
    StepOutcome,
    WaitlistEntry,
)

__all__ = [
    "CancellationResult",
    "ClassContext",
    "MemberContact",
    "MembershipReminderResult",
    "NotificationType",
    "PromotionOutcome",
    "PromotionResult",
    "StepOutcome",
    "WaitlistEntry",
]
