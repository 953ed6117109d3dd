"""Notification service for dependency injection.

Provides a class-based interface to the notification system for easier DI and testing.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.email import EmailChannel
from infrastructure.notifications.channels.sms import SMSChannel
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    BulkDispatchResult,
    DispatchResult,
    TripDispatchResult,
    ValidationReport,
)
from infrastructure.notifications.validation import validate_batch
from infrastructure.operations import OperationResult
from infrastructure.templates import (
    Channel,
    EventDomain,
    RenderedSms,
    SmsTemplate,
    Template,
    TemplateRegistry,
    TemplateRenderer,
)
from integrations.mista import MistaClient
from integrations.sendgrid import SendGridClient

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

# Placeholder values used to size an SMS template without a real request
SMS_SAMPLE_DATA = {
    "name": "Customer",
    "ticketId": "TK12345",
    "issueTitle": "Issue",
    "assignedTo": "Support Team",
    "escalatedTo": "Support Team",
    "responseMessage": "Resolved",
}


class NotificationService:
    """Class-based notification service.

    Wraps the NotificationDispatcher with a service interface to support
    dependency injection and easier testing with mocks. Channels are
    built from settings unless given.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.post("/sms/send")
        def send_sms(service: NotificationServiceDep, payload: Dict[str, Any]):
            result = service.dispatch_sms(payload)
            return result.model_dump(by_alias=True)

        # Direct instantiation
        from infrastructure.services import get_settings, get_template_registry
        from infrastructure.notifications import NotificationService

        service = NotificationService(get_settings(), get_template_registry())
        result = service.dispatch_email(payload)
    """

    def __init__(
        self,
        settings: "Settings",
        templates: TemplateRegistry,
        channels: Optional[Dict[str, NotificationChannel]] = None,
        renderer: Optional[TemplateRenderer] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Settings instance (required, passed from provider).
            templates: Loaded template registry, shared by every channel.
            channels: Optional dict of channel name to NotificationChannel.
                If not provided, creates SendGrid email and Mista SMS channels.
            renderer: Optional renderer; built from the dispatch settings
                when absent.
        """
        self.settings = settings
        self.templates = templates
        self.renderer = renderer or TemplateRenderer(
            sms_date_format=settings.dispatch.SMS_DATE_FORMAT,
            email_datetime_format=settings.dispatch.EMAIL_DATETIME_FORMAT,
        )
        if channels is None:
            channels = self._default_channels()
        self.dispatcher = NotificationDispatcher(channels=channels)

    def _default_channels(self) -> Dict[str, NotificationChannel]:
        timeout = self.settings.dispatch.TRANSPORT_TIMEOUT_SECONDS
        return {
            Channel.EMAIL.value: EmailChannel(
                templates=self.templates,
                renderer=self.renderer,
                client=SendGridClient(self.settings.sendgrid, timeout=timeout),
                from_name=self.settings.sendgrid.FROM_NAME,
                trip_from_name=self.settings.sendgrid.TRIP_FROM_NAME,
            ),
            Channel.SMS.value: SMSChannel(
                templates=self.templates,
                renderer=self.renderer,
                client=MistaClient(self.settings.mista, timeout=timeout),
                max_segments=self.settings.dispatch.MAX_SMS_SEGMENTS,
                group_identical=self.settings.dispatch.SMS_GROUP_IDENTICAL_MESSAGES,
            ),
        }

    def channel(self, channel: Channel) -> NotificationChannel:
        return self.dispatcher.channels[channel.value]

    def dispatch_email(self, request: Any) -> DispatchResult:
        return self.dispatcher.dispatch(Channel.EMAIL.value, request)

    def dispatch_sms(self, request: Any) -> DispatchResult:
        return self.dispatcher.dispatch(Channel.SMS.value, request)

    def dispatch_bulk_email(self, requests: Any) -> BulkDispatchResult:
        return self._dispatch_bulk(
            Channel.EMAIL, requests, self.settings.dispatch.MAX_EMAIL_BATCH_SIZE
        )

    def dispatch_bulk_sms(self, requests: Any) -> BulkDispatchResult:
        return self._dispatch_bulk(
            Channel.SMS, requests, self.settings.dispatch.MAX_SMS_BATCH_SIZE
        )

    def _dispatch_bulk(
        self, channel: Channel, requests: Any, max_size: int
    ) -> BulkDispatchResult:
        report = validate_batch(requests, channel, max_size)
        if not report.valid:
            logger.warning(
                "bulk_rejected",
                channel=channel.value,
                errors=report.errors,
                error_code=report.error_code,
            )
            return BulkDispatchResult(rejection=report)
        return BulkDispatchResult(
            results=self.dispatcher.dispatch_bulk(channel.value, requests)
        )

    def dispatch_trip(self, request: Any) -> TripDispatchResult:
        return self.dispatcher.dispatch_trip(request)

    def validate_trip_batch(self, requests: Any) -> ValidationReport:
        """Reject an empty or oversized trip batch before anything is sent."""
        report = validate_batch(
            requests, EventDomain.TRIP, self.settings.dispatch.MAX_TRIP_BATCH_SIZE
        )
        if not report.valid:
            logger.warning(
                "bulk_rejected",
                domain=EventDomain.TRIP.value,
                errors=report.errors,
                error_code=report.error_code,
            )
        return report

    def dispatch_bulk_trips(self, requests: Sequence[Any]) -> List[TripDispatchResult]:
        return self.dispatcher.dispatch_bulk_trips(requests)

    def list_event_types(
        self, channel: Channel, domain: EventDomain = EventDomain.ISSUE
    ) -> List[str]:
        return self.templates.store(domain, channel).event_keys()

    def list_languages(self) -> List[str]:
        return [language.value for language in self.templates.languages()]

    def template_languages(
        self, channel: Channel, domain: EventDomain = EventDomain.ISSUE
    ) -> Dict[str, List[str]]:
        """Languages present for each event key of a catalog."""
        store = self.templates.store(domain, channel)
        return {
            key: [language.value for language in by_language]
            for key, by_language in store.catalog.templates.items()
        }

    def get_template(
        self,
        channel: Channel,
        event_type: Any,
        language: Any,
        domain: EventDomain = EventDomain.ISSUE,
    ) -> Optional[Template]:
        return self.templates.store(domain, channel).resolve(event_type, language)

    def validate(
        self,
        channel: Channel,
        request: Any,
        domain: EventDomain = EventDomain.ISSUE,
    ) -> ValidationReport:
        return self.channel(channel).validate(request, domain)

    def validate_trip(self, request: Any) -> ValidationReport:
        return self.dispatcher.validate_trip(request)

    def template_info(
        self,
        event_type: Any,
        language: Any,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RenderedSms]:
        """Render an issue SMS template with sample values to preview its size.

        Values in ``data`` replace the samples.

        Returns:
            The rendered SMS with its segment info, or None for an unknown
            event type.
        """
        template = self.get_template(Channel.SMS, event_type, language)
        if not isinstance(template, SmsTemplate):
            return None
        values = {**SMS_SAMPLE_DATA, **{k: v for k, v in (data or {}).items() if v}}
        return self.renderer.render_sms(template, values)

    def health_check(self) -> Dict[str, bool]:
        return self.dispatcher.health_check()

    def channel_health(self, channel: Channel) -> OperationResult:
        return self.channel(channel).health_check()

    def send_test(
        self, channel: Channel, recipient: Optional[str] = None
    ) -> OperationResult:
        """Send the configuration test message through one channel."""
        return self.channel(channel).send_test(recipient)
