"""
Outbound email delivery.
"""

from .smtp_mailer import EmailSendError, OutgoingEmail, SmtpMailer

__all__ = ["EmailSendError", "OutgoingEmail", "SmtpMailer"]
