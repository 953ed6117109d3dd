"""SendGrid module for sending email through the v3 mail API."""

from .client import SendGridClient, build_mail_payload

__all__ = [
    "SendGridClient",
    "build_mail_payload",
]
