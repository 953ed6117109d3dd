"""Email channel implementation using SendGrid."""

from typing import Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import (
    DispatchErrorCode,
    IssueNotification,
    PreparedMessage,
    TripNotification,
)
from infrastructure.notifications.validation import is_valid_email
from infrastructure.operations import OperationResult, OperationStatus
from infrastructure.templates import (
    Channel,
    EventDomain,
    TemplateRegistry,
    TemplateRenderer,
    text_to_html,
)
from integrations.sendgrid import SendGridClient

logger = get_module_logger()

TEST_SUBJECT = "CES Email Service Test"
TEST_BODY = "This is a test email to verify the email service configuration."


class EmailChannel(NotificationChannel):
    """Email notification channel using the SendGrid mail API.

    Issue notifications are sent with ``from_name``, trip notifications
    with ``trip_from_name``; both use the client's sender address.
    """

    def __init__(
        self,
        templates: TemplateRegistry,
        renderer: TemplateRenderer,
        client: SendGridClient,
        from_name: Optional[str] = None,
        trip_from_name: Optional[str] = None,
    ):
        super().__init__(templates, renderer)
        self.client = client
        self.from_name = from_name
        self.trip_from_name = trip_from_name or from_name
        logger.info(
            "initialized_email_channel",
            backend="sendgrid",
            sender=client.from_address,
        )

    @property
    def channel_name(self) -> Channel:
        return Channel.EMAIL

    def resolve_recipient(
        self, notification: IssueNotification | TripNotification
    ) -> OperationResult:
        """Email addresses are used as given."""
        address = notification.recipient_for(self.channel_name)
        if not address:
            return OperationResult.permanent_error(
                message="Validation failed: email is required",
                error_code=DispatchErrorCode.VALIDATION_FAILED.value,
            )
        return OperationResult.success(
            data={"recipient": address}, message="Email validated"
        )

    def deliver(self, prepared: PreparedMessage) -> OperationResult:
        rendered = prepared.rendered
        from_name = (
            self.trip_from_name
            if prepared.template.domain is EventDomain.TRIP
            else self.from_name
        )
        return self.client.send(
            to=prepared.recipient,
            from_address=self.client.from_address,
            subject=rendered.subject,
            text=rendered.text,
            html=rendered.html,
            from_name=from_name,
        )

    def health_check(self) -> OperationResult:
        """Check the SendGrid configuration.

        No provider call is made; a missing key or sender address is
        reported as unhealthy.
        """
        configuration = {
            "hasApiKey": bool(self.client.settings.SENDGRID_API_KEY),
            "hasFromEmail": bool(self.client.from_address),
        }
        configuration["isConfigured"] = all(configuration.values())
        if configuration["isConfigured"]:
            return OperationResult.success(
                data=configuration, message="Email service configured"
            )
        return OperationResult.error(
            OperationStatus.PERMANENT_ERROR,
            "Email service is not configured",
            error_code="NOT_CONFIGURED",
            data=configuration,
        )

    def send_test(self, recipient: Optional[str] = None) -> OperationResult:
        """Send the configuration test email.

        Args:
            recipient: Address to send to (default: TEST_EMAIL setting)
        """
        to = (recipient or self.client.settings.TEST_EMAIL).strip()
        if not is_valid_email(to):
            return OperationResult.permanent_error(
                message="email must be a valid email address",
                error_code=DispatchErrorCode.VALIDATION_FAILED.value,
            )

        result = self.client.send(
            to=to,
            from_address=self.client.from_address,
            subject=TEST_SUBJECT,
            text=TEST_BODY,
            html=text_to_html(TEST_BODY),
            from_name=self.from_name,
        )
        logger.info(
            "email_test_sent" if result.is_success else "email_test_failed",
            recipient=to,
            error=None if result.is_success else result.message,
        )
        return result
