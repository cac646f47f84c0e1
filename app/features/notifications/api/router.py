"""
Notification function endpoints.

Invoked by database triggers and cron, not by browsers directly, so the
payloads are parsed by hand: a malformed body is a 400 with an ``error``
message, a failed required step is a 500 with ``error`` and ``details``.
"""

from typing import TypeVar

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from app.dependencies import (
    get_booking_confirmation_service,
    get_class_cancellation_service,
    get_member_email_service,
    get_membership_expiry_service,
    get_waitlist_promotion_service,
)
from app.infrastructure.observability.logging import get_logger
from app.services.email import EmailSendError

from ..domain.models import ClassContext, PromotionOutcome
from ..services import (
    BookingConfirmationService,
    CancellationNotificationError,
    ClassCancellationService,
    MemberEmailService,
    MembershipExpiryError,
    MembershipExpiryService,
    WaitlistProcessingError,
    WaitlistPromotionService,
)
from .schemas import (
    ActivationCodeRequest,
    BookingConfirmationRequest,
    CancellationNotifiedResponse,
    ClassCancellationRequest,
    ClassTriggerRequest,
    EmailSentResponse,
    InquiryRequest,
    MembershipExpiryResponse,
    ProcessWaitlistRequest,
    WaitlistProcessedResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class InvalidPayloadError(Exception):
    pass


async def _read_payload(request: Request, schema: type[PayloadT]) -> PayloadT:
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidPayloadError("Request body must be valid JSON") from e

    try:
        return schema.model_validate(body)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][-1]) for err in e.errors() if err.get("loc"))
        raise InvalidPayloadError(f"Invalid payload: {fields or 'body'}") from e


def _error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _class_context(payload: ClassTriggerRequest) -> ClassContext:
    return ClassContext(
        class_name=payload.class_name,
        day_of_week=payload.day_of_week,
        start_time=payload.start_time,
        end_time=payload.end_time,
        class_date=payload.class_date,
    )


@router.post("/process-waitlist", response_model=WaitlistProcessedResponse)
async def process_waitlist(
    request: Request,
    service: WaitlistPromotionService = Depends(get_waitlist_promotion_service),
):
    """Offer a freed spot to the head of the schedule's waitlist."""
    try:
        payload = await _read_payload(request, ProcessWaitlistRequest)
    except InvalidPayloadError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))

    try:
        result = await service.promote_next_waiting(payload.schedule_id, _class_context(payload))
    except WaitlistProcessingError as e:
        logger.error("Error processing waitlist", schedule_id=payload.schedule_id, error=str(e))
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(e), details=repr(e.__cause__ or e)
        )

    if result.outcome == PromotionOutcome.NOBODY_WAITING:
        return WaitlistProcessedResponse(message="No one on waitlist", notified_count=0)

    if result.outcome == PromotionOutcome.CONTENTION_LOST:
        return WaitlistProcessedResponse(
            message="Waitlist entry already claimed", notified_count=0
        )

    return WaitlistProcessedResponse(
        message="Waitlist processed successfully",
        notified_count=result.notified_count,
        notification_created=result.notification_created,
        email_sent=result.email_sent,
        member_name=result.member_name,
        expires_at=result.expires_at,
    )


@router.post("/notify-class-cancellation", response_model=CancellationNotifiedResponse)
async def notify_class_cancellation(
    request: Request,
    service: ClassCancellationService = Depends(get_class_cancellation_service),
):
    """Tell every member with an active booking that the class is cancelled."""
    try:
        payload = await _read_payload(request, ClassCancellationRequest)
    except InvalidPayloadError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))

    try:
        result = await service.notify_class_cancellation(
            payload.schedule_id, _class_context(payload), payload.cancellation_reason
        )
    except CancellationNotificationError as e:
        logger.error(
            "Error notifying class cancellation", schedule_id=payload.schedule_id, error=str(e)
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(e), details=repr(e.__cause__ or e)
        )

    if result.notified_count == 0:
        return CancellationNotifiedResponse(
            message="No active bookings found for this class", notified_count=0
        )

    return CancellationNotifiedResponse(
        message="Notifications sent successfully",
        notified_count=result.notified_count,
        notifications_sent=result.notifications_sent,
        notifications_failed=result.notifications_failed,
        emails_sent=result.emails_sent,
        emails_failed=result.emails_failed,
    )


@router.post("/send-booking-confirmation", response_model=EmailSentResponse)
async def send_booking_confirmation(
    request: Request,
    service: BookingConfirmationService = Depends(get_booking_confirmation_service),
):
    try:
        payload = await _read_payload(request, BookingConfirmationRequest)
    except InvalidPayloadError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))

    if not payload.is_complete():
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "Missing required booking information"
        )

    try:
        await service.send_confirmation(
            payload.name, payload.email, payload.class_name, payload.class_time
        )
    except EmailSendError as e:
        logger.error("Error sending booking confirmation", error=str(e))
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return EmailSentResponse(message="Email sent successfully")


@router.post("/send-activation-code", response_model=EmailSentResponse)
async def send_activation_code(
    request: Request,
    service: MemberEmailService = Depends(get_member_email_service),
):
    """Email a membership activation code generated from the admin screens."""
    try:
        payload = await _read_payload(request, ActivationCodeRequest)
    except InvalidPayloadError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))

    if not payload.is_complete():
        return _error_response(status.HTTP_400_BAD_REQUEST, "Missing required fields")

    try:
        await service.send_activation_code(
            payload.member_name,
            payload.member_email,
            payload.activation_code,
            payload.membership_name,
            duration_months=payload.duration_months,
            expires_at=payload.expires_at,
        )
    except EmailSendError as e:
        logger.error("Error sending activation code email", error=str(e))
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return EmailSentResponse(message="Activation code sent successfully")


@router.post("/send-inquiry-email", response_model=EmailSentResponse)
async def send_inquiry_email(
    request: Request,
    service: MemberEmailService = Depends(get_member_email_service),
):
    try:
        payload = await _read_payload(request, InquiryRequest)
    except InvalidPayloadError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))

    if not payload.name or not payload.email:
        return _error_response(status.HTTP_400_BAD_REQUEST, "Name and email are required")

    try:
        await service.send_inquiry_acknowledgement(payload.name, payload.email)
    except EmailSendError as e:
        logger.error("Error sending inquiry email", error=str(e))
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return EmailSentResponse(message="Email sent successfully")


@router.post("/check-membership-expiry", response_model=MembershipExpiryResponse)
async def check_membership_expiry(
    service: MembershipExpiryService = Depends(get_membership_expiry_service),
):
    """Cron entry point for the membership expiry reminders."""
    try:
        result = await service.send_expiry_reminders()
    except MembershipExpiryError as e:
        logger.error("Fatal error in membership expiry check", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(e)},
        )

    return MembershipExpiryResponse(
        success=True,
        message=f"Processed {result.count} expiring memberships",
        count=result.count,
        notifications_sent=result.notifications_sent,
        errors=result.errors,
    )
