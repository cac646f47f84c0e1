"""
Notification workflows.
"""

from .cancellation_service import CancellationNotificationError, ClassCancellationService
from .confirmation_service import BookingConfirmationService
from .member_email_service import MemberEmailService
from .membership_expiry_service import MembershipExpiryError, MembershipExpiryService
from .waitlist_service import CLAIM_WINDOW, WaitlistProcessingError, WaitlistPromotionService

__all__ = [
    "CLAIM_WINDOW",
    "BookingConfirmationService",
    "CancellationNotificationError",
    "ClassCancellationService",
    "MemberEmailService",
    "MembershipExpiryError",
    "MembershipExpiryService",
    "WaitlistProcessingError",
    "WaitlistPromotionService",
]
