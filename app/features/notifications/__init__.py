"""
Member notification workflows.

Waitlist promotion, class cancellation fan-out, booking confirmations and
membership expiry reminders. Each workflow has a small set of required store
steps followed by best-effort in-app notifications and emails.
"""
