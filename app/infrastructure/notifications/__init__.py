"""Notification dispatch for issue and trip events.

Provides email (SendGrid) and SMS (Mista) delivery of localized templates
with:
- Request validation and sanitizing
- Template resolution with english fallback
- SMS segment limits and grouping of identical bulk messages
- Per-item isolation in batches
- Failed results instead of exceptions

Usage:
    from infrastructure.notifications import NotificationService
    from infrastructure.services import get_settings, get_template_registry

    service = NotificationService(get_settings(), get_template_registry())

    result = service.dispatch_sms(
        {
            "phoneNumber": "250788000000",
            "subject": "received",
            "language": "fr",
            "name": "Alice",
            "ticketId": "T-1",
        }
    )
    if not result.success:
        logger.warning("sms_not_sent", error=result.error)
"""

# Models
from infrastructure.notifications.models import (
    BulkDispatchResult,
    DispatchErrorCode,
    DispatchResult,
    DispatchStatus,
    IssueNotification,
    PreparedMessage,
    TripDispatchResult,
    TripNotification,
    ValidationReport,
)

# Dispatcher
from infrastructure.notifications.dispatcher import NotificationDispatcher

# Channel interface
from infrastructure.notifications.channels.base import NotificationChannel

# Channel implementations
from infrastructure.notifications.channels.email import EmailChannel
from infrastructure.notifications.channels.sms import SMSChannel

# Service
from infrastructure.notifications.service import NotificationService

# Export all public interfaces
__all__ = [
    # Models
    "BulkDispatchResult",
    "DispatchErrorCode",
    "DispatchResult",
    "DispatchStatus",
    "IssueNotification",
    "PreparedMessage",
    "TripDispatchResult",
    "TripNotification",
    "ValidationReport",
    # Dispatcher
    "NotificationDispatcher",
    # Channel interface
    "NotificationChannel",
    # Channel implementations
    "EmailChannel",
    "SMSChannel",
    # Service
    "NotificationService",
]
