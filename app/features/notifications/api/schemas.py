"""
Request and response models for the notification function endpoints.

Payload field names match what the database triggers and the booking
dialog already send, including the camelCase booking confirmation body.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ClassTriggerRequest(BaseModel):
    """Class occurrence a trigger refers to."""

    schedule_id: str = Field(..., min_length=1, description="Class schedule ID")
    class_name: str = Field(..., min_length=1, description="Class name")
    day_of_week: str = Field(..., min_length=1, description="Scheduled day of week")
    start_time: str = Field(..., min_length=1, description="Start time")
    end_time: str | None = Field(None, description="End time")
    class_date: date | None = Field(None, description="Occurrence date, if known")


class ProcessWaitlistRequest(ClassTriggerRequest):
    pass


class ClassCancellationRequest(ClassTriggerRequest):
    cancellation_reason: str | None = Field(None, description="Shown to members")


class BookingConfirmationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", description="Member name")
    email: str = Field(default="", description="Member email")
    class_name: str = Field(default="", alias="className", description="Class name")
    class_time: str = Field(default="", alias="classTime", description="Class time label")

    def is_complete(self) -> bool:
        return all((self.name, self.email, self.class_name, self.class_time))


class WaitlistProcessedResponse(BaseModel):
    message: str = Field(..., description="Outcome summary")
    notified_count: int = Field(..., description="Members promoted (0 or 1)")
    notification_created: bool = Field(default=False, description="In-app notification saved")
    email_sent: bool = Field(default=False, description="Email delivered")
    member_name: str | None = Field(None, description="Promoted member")
    expires_at: datetime | None = Field(None, description="End of the claim window")


class CancellationNotifiedResponse(BaseModel):
    message: str = Field(..., description="Outcome summary")
    notified_count: int = Field(..., description="Members with an active booking")
    notifications_sent: int = Field(default=0, description="In-app notifications saved")
    notifications_failed: int = Field(default=0, description="In-app notifications not saved")
    emails_sent: int = Field(default=0, description="Emails delivered")
    emails_failed: int = Field(default=0, description="Emails not delivered")


class ActivationCodeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    member_name: str | None = Field(None, alias="memberName", description="Member name")
    member_email: str | None = Field(None, alias="memberEmail", description="Member email")
    activation_code: str | None = Field(None, alias="activationCode", description="Code")
    membership_name: str | None = Field(None, alias="membershipName", description="Plan name")
    duration_months: int | None = Field(None, alias="durationMonths", description="Plan length")
    expires_at: datetime | None = Field(None, alias="expiresAt", description="Code expiry")

    def is_complete(self) -> bool:
        return all(
            (self.member_name, self.member_email, self.activation_code, self.membership_name)
        )


class InquiryRequest(BaseModel):
    name: str | None = Field(None, description="Name from the inquiry form")
    email: str | None = Field(None, description="Email from the inquiry form")


class EmailSentResponse(BaseModel):
    message: str = Field(..., description="Outcome summary")


class MembershipExpiryResponse(BaseModel):
    success: bool = Field(..., description="Whether the run completed")
    message: str = Field(..., description="Outcome summary")
    count: int = Field(..., description="Memberships expiring on the target date")
    notifications_sent: int = Field(..., description="Reminder emails delivered")
    errors: int = Field(..., description="Reminder emails that failed")
