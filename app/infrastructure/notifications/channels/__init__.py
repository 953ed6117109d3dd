"""Notification channel implementations."""

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.email import EmailChannel
from infrastructure.notifications.channels.sms import SMSChannel

__all__ = [
    "NotificationChannel",
    "EmailChannel",
    "SMSChannel",
]
