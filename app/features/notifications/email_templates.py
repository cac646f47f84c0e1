"""
HTML email bodies for member notifications.

All templates share the dark gym layout. Every interpolated value is escaped.
"""

from datetime import date, datetime
from html import escape

from app.services.email import OutgoingEmail

BRAND_NAME = "Power Ultra Gym"

_ACCENT_RED = "#E53E3E"
_ACCENT_GREEN = "#4ADE80"
_ACCENT_AMBER = "#F59E0B"


def _layout(preheader: str, content: str, footer_lines: list[str] | None = None) -> str:
    footer = "".join(f"<p>{line}</p>" for line in [BRAND_NAME, *(footer_lines or [])])
    year = datetime.now().year
    return f"""
<body style="font-family: 'Inter', Arial, sans-serif; background-color: #121212; color: #F5F5F5; margin: 0; padding: 0;">
  <span style="display: none; max-height: 0px; overflow: hidden;">{preheader}</span>
  <div style="padding: 20px; max-width: 600px; margin: auto;">
    <div style="border: 1px solid #333; border-radius: 0.5rem; padding: 30px; background-color: #1A1A1A;">
      {content}
      <p style="font-size: 16px; line-height: 1.6; margin: 16px 0 0 0;">
        Best regards,<br/><strong>The {BRAND_NAME} Team</strong>
      </p>
    </div>
    <div style="text-align: center; padding-top: 20px; font-size: 12px; color: #A0A0A0;">
      {footer}
      <p>&copy; {year} All rights reserved.</p>
    </div>
  </div>
</body>
"""


def _class_card(class_name: str, when: str, accent: str) -> str:
    return f"""
      <div style="background-color: #121212; border: 1px solid #333; border-radius: 0.5rem; padding: 20px; margin: 20px 0; text-align: center;">
        <p style="font-size: 20px; margin: 0; color: {accent}; font-weight: bold;">{class_name}</p>
        <p style="font-size: 16px; margin: 8px 0 0 0; color: #A0A0A0;">{when}</p>
      </div>"""


def _paragraph(text: str) -> str:
    return f'<p style="font-size: 16px; line-height: 1.6; margin: 16px 0;">{text}</p>'


def format_deadline(expires_at: datetime) -> str:
    """e.g. ``Tuesday, March 04, 2025 at 06:30 PM UTC``"""
    return expires_at.strftime("%A, %B %d, %Y at %I:%M %p %Z").strip()


def waitlist_spot_available_email(
    to: str,
    member_name: str,
    class_name: str,
    day_of_week: str,
    start_time: str,
    end_time: str | None,
    expires_at: datetime,
    dashboard_url: str,
) -> OutgoingEmail:
    name = escape(class_name)
    when = escape(f"{day_of_week} at {start_time}" + (f" - {end_time}" if end_time else ""))
    deadline = escape(format_deadline(expires_at))

    content = f"""
      <h1 style="color: {_ACCENT_GREEN}; font-size: 22px; margin-top: 0;">Great News, {escape(member_name)}!</h1>
      {_paragraph("A spot just opened up for the class you've been waiting for!")}
      {_class_card(name, when, _ACCENT_GREEN)}
      <div style="background-color: #2A1A1A; border-left: 3px solid {_ACCENT_AMBER}; padding: 15px; margin: 20px 0;">
        <p style="font-size: 14px; margin: 0; color: {_ACCENT_AMBER};">
          <strong>Time-Sensitive:</strong> You have 24 hours to book this class, until {deadline}.
          After that, the spot will go to the next person on the waitlist.
        </p>
      </div>
      {_paragraph("Log in to your dashboard now to secure your spot.")}
      <div style="text-align: center; margin: 30px 0;">
        <a href="{escape(dashboard_url)}" style="display: inline-block; background: {_ACCENT_RED}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 0.5rem; font-weight: bold;">Book Now</a>
      </div>"""

    return OutgoingEmail(
        to=to,
        subject=f"Spot Available: {class_name} on {day_of_week}",
        html=_layout(
            preheader=f"A spot is available for {name}! Book now before it's gone.",
            content=content,
            footer_lines=[f"This opportunity expires at {deadline}"],
        ),
    )


def class_cancelled_email(
    to: str,
    member_name: str,
    class_name: str,
    day_of_week: str,
    start_time: str,
    cancellation_reason: str | None = None,
) -> OutgoingEmail:
    name = escape(class_name)
    when = escape(f"{day_of_week} at {start_time}")

    reason_block = ""
    if cancellation_reason:
        reason_block = f"""
      <div style="background-color: #2A1A1A; border-left: 3px solid {_ACCENT_RED}; padding: 15px; margin: 20px 0;">
        <p style="font-size: 14px; margin: 0;"><strong>Reason:</strong> {escape(cancellation_reason)}</p>
      </div>"""

    content = f"""
      <h1 style="color: {_ACCENT_RED}; font-size: 22px; margin-top: 0;">Class Cancellation Notice</h1>
      {_paragraph(f"Dear {escape(member_name)},")}
      {_paragraph("We regret to inform you that the following class has been cancelled:")}
      {_class_card(name, when, _ACCENT_RED)}
      {reason_block}
      {_paragraph("We sincerely apologize for any inconvenience. Your booking has been automatically cancelled, and no charges will be applied.")}
      {_paragraph("Please check our schedule for other available classes that might interest you.")}"""

    return OutgoingEmail(
        to=to,
        subject=f"Class Cancelled: {class_name} on {day_of_week}",
        html=_layout(
            preheader=f"Your {name} class on {escape(day_of_week)} has been cancelled.",
            content=content,
        ),
    )


def booking_confirmation_email(
    to: str, member_name: str, class_name: str, class_time: str
) -> OutgoingEmail:
    name = escape(class_name)
    when = escape(class_time)

    content = f"""
      <h1 style="color: {_ACCENT_RED}; font-size: 22px; margin-top: 0;">Booking Confirmed, {escape(member_name)}!</h1>
      {_paragraph("You are all set! Your spot for the following class has been successfully booked:")}
      {_class_card(name, when, _ACCENT_RED)}
      {_paragraph("We look forward to seeing you at the class!")}"""

    return OutgoingEmail(
        to=to,
        subject=f"Your Class Booking is Confirmed: {class_name}",
        html=_layout(
            preheader=f"You're booked! Confirmation for {name} at {when}.",
            content=content,
        ),
    )


def membership_expiry_email(
    to: str,
    member_name: str,
    membership_name: str,
    expiry_date: date,
    price_label: str,
    renew_url: str,
) -> OutgoingEmail:
    expiry_label = escape(expiry_date.strftime("%B %d, %Y"))

    content = f"""
      <h1 style="color: {_ACCENT_AMBER}; font-size: 22px; margin-top: 0;">Your Membership Expires Soon</h1>
      {_paragraph(f"Hi {escape(member_name)},")}
      {_paragraph(f"This is a friendly reminder that your <strong>{escape(membership_name)}</strong> membership expires on <strong>{expiry_label}</strong>.")}
      {_class_card(escape(membership_name), f"Renewal: {escape(price_label)}", _ACCENT_AMBER)}
      {_paragraph("Renew before it expires to keep booking classes without interruption.")}
      <div style="text-align: center; margin: 30px 0;">
        <a href="{escape(renew_url)}" style="display: inline-block; background: {_ACCENT_RED}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 0.5rem; font-weight: bold;">Renew Membership</a>
      </div>"""

    return OutgoingEmail(
        to=to,
        subject="Your Gym Membership Expires Soon",
        html=_layout(
            preheader=f"Your membership expires on {expiry_label}.",
            content=content,
        ),
    )


def format_long_date(day: date) -> str:
    """e.g. ``January 5, 2025``"""
    return f"{day:%B} {day.day}, {day.year}"


def activation_code_email(
    to: str,
    member_name: str,
    activation_code: str,
    membership_name: str,
    duration_months: int | None,
    expires_on: date | None,
    activation_url: str,
) -> OutgoingEmail:
    plan = escape(membership_name)

    detail_rows = [("Plan:", plan)]
    if duration_months is not None:
        unit = "month" if duration_months == 1 else "months"
        detail_rows.append(("Duration:", f"{duration_months} {unit}"))
    expiry_note = ""
    if expires_on is not None:
        expiry_label = escape(format_long_date(expires_on))
        detail_rows.append(("Code Expires:", expiry_label))
        expiry_note = f"""
      <p style="font-size: 14px; line-height: 1.6; margin: 20px 0 0 0; color: #A0A0A0; text-align: center;">
        This code will expire on <strong>{expiry_label}</strong>
      </p>"""

    details = "".join(
        f'<tr><td style="color: #A0A0A0; padding: 4px 0;">{label}</td>'
        f'<td style="color: #F5F5F5; text-align: right; font-weight: 600;">{value}</td></tr>'
        for label, value in detail_rows
    )

    content = f"""
      <h1 style="color: {_ACCENT_RED}; font-size: 22px; margin-top: 0;">Welcome to {BRAND_NAME}, {escape(member_name)}!</h1>
      {_paragraph(f'Great news! Your <strong style="color: {_ACCENT_RED};">{plan}</strong> activation code is ready.')}
      <div style="background: {_ACCENT_RED}; border-radius: 0.75rem; padding: 24px; margin: 24px 0; text-align: center;">
        <p style="font-size: 14px; margin: 0 0 8px 0; color: #FFF; text-transform: uppercase; letter-spacing: 1px;">Your Activation Code</p>
        <p style="font-size: 32px; font-family: 'Courier New', monospace; font-weight: bold; margin: 0; color: #FFF; letter-spacing: 2px;">{escape(activation_code)}</p>
      </div>
      <div style="background-color: #121212; border: 1px solid #333; border-radius: 0.5rem; padding: 20px; margin: 20px 0;">
        <h3 style="color: {_ACCENT_RED}; font-size: 16px; margin: 0 0 12px 0;">Membership Details:</h3>
        <table style="width: 100%; font-size: 15px; line-height: 1.8;">{details}</table>
      </div>
      <div style="background: rgba(229, 62, 62, 0.1); border-left: 4px solid {_ACCENT_RED}; padding: 16px; margin: 20px 0;">
        <h3 style="color: {_ACCENT_RED}; font-size: 16px; margin: 0 0 12px 0;">How to Activate:</h3>
        <ol style="margin: 0; padding-left: 20px; font-size: 15px; line-height: 1.8;">
          <li>Log in to your {BRAND_NAME} account</li>
          <li>Navigate to the activation page</li>
          <li>Enter the code above</li>
          <li>Start enjoying your membership!</li>
        </ol>
      </div>
      <div style="text-align: center; margin: 30px 0 20px 0;">
        <a href="{escape(activation_url)}" style="display: inline-block; background: {_ACCENT_RED}; color: #FFF; text-decoration: none; padding: 14px 32px; border-radius: 0.5rem; font-weight: bold;">Activate Now</a>
      </div>{expiry_note}"""

    return OutgoingEmail(
        to=to,
        subject=f"Your Membership Activation Code - {membership_name}",
        html=_layout(
            preheader=f"Your activation code for {plan} is ready!",
            content=content,
            footer_lines=[
                'Need help? Contact us at <a href="mailto:info@powerultragym.com" '
                f'style="color: {_ACCENT_RED}; text-decoration: none;">info@powerultragym.com</a>'
            ],
        ),
    )


def inquiry_received_email(to: str, member_name: str) -> OutgoingEmail:
    content = f"""
      <h1 style="color: {_ACCENT_RED}; font-size: 22px; margin-top: 0;">Thank You for Your Inquiry, {escape(member_name)}!</h1>
      {_paragraph(f"We have received your inquiry for a membership at <strong>{BRAND_NAME}</strong>.")}
      {_paragraph("Our team will review your information and get in touch with you shortly to discuss the next steps.")}
      {_paragraph("Thank you for your interest in joining our community!")}"""

    return OutgoingEmail(
        to=to,
        subject="Membership Inquiry Received!",
        html=_layout(
            preheader="We've received your inquiry and will be in touch shortly!",
            content=content,
        ),
    )
