"""Notification channel abstract base class.

All channel implementations (Email, SMS) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from infrastructure.logging import bind_dispatch_context, get_module_logger
from infrastructure.notifications.models import (
    DispatchErrorCode,
    DispatchResult,
    IssueNotification,
    PreparedMessage,
    TripNotification,
    ValidationReport,
)
from infrastructure.notifications.validation import (
    ISSUE_FIELDS,
    RECIPIENT_FIELD,
    TRIP_FIELDS,
    sanitize_request,
    validate_issue_request,
    validate_trip_request,
)
from infrastructure.operations import OperationResult, OperationStatus
from infrastructure.templates import (
    Channel,
    EventDomain,
    RenderedMessage,
    TemplateRegistry,
    TemplateRenderer,
    TemplateStore,
    normalize_language,
)

logger = get_module_logger()

DOMAIN_FIELDS = {EventDomain.ISSUE: ISSUE_FIELDS, EventDomain.TRIP: TRIP_FIELDS}
CORRELATION_FIELD = {EventDomain.ISSUE: "ticketId", EventDomain.TRIP: "tripId"}
NOTIFICATION_MODELS = {
    EventDomain.ISSUE: IssueNotification,
    EventDomain.TRIP: TripNotification,
}


def as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_errors(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in detail['loc'])} {detail['msg']}"
        for detail in error.errors()
    ]


def _validation_failed(errors: List[str]) -> OperationResult:
    return OperationResult.error(
        OperationStatus.PERMANENT_ERROR,
        f"Validation failed: {', '.join(errors)}",
        error_code=DispatchErrorCode.VALIDATION_FAILED.value,
        data=errors,
    )


class NotificationChannel(ABC):
    """Abstract base class for notification channels.

    A channel owns the whole single-recipient path for one delivery medium:
    validate, resolve the template, render, check channel constraints,
    hand the message to its transport and map the outcome onto a
    DispatchResult. Failures at any step come back as failed results;
    nothing raises past ``dispatch``.

    Subclasses supply the transport specific parts:

    - ``channel_name``: Channel handled by the implementation
    - ``resolve_recipient``: Address in the transport's format
    - ``deliver``: One transport call for a prepared message
    - ``health_check``: Configuration state of the transport
    - ``send_test``: Fixed test message to a given recipient

    Args:
        templates: Registry holding the catalogs of every domain.
        renderer: Renderer used for placeholder substitution.

    Example:
        channel = SMSChannel(templates=registry, renderer=renderer, client=client)
        result = channel.dispatch(
            {
                "phoneNumber": "+250 788 000 000",
                "subject": "received",
                "language": "fr",
                "name": "Alice",
                "ticketId": "T-1",
            }
        )
        if not result.success:
            logger.warning("sms_not_sent", error=result.error)
    """

    def __init__(self, templates: TemplateRegistry, renderer: TemplateRenderer):
        self.templates = templates
        self.renderer = renderer

    @property
    @abstractmethod
    def channel_name(self) -> Channel:
        """Channel identifier (email, sms)."""
        pass

    @abstractmethod
    def resolve_recipient(
        self, notification: IssueNotification | TripNotification
    ) -> OperationResult:
        """Resolve the notification recipient to the transport's address format.

        Returns:
            OperationResult with the address under ``data["recipient"]``
        """
        pass

    @abstractmethod
    def deliver(self, prepared: PreparedMessage) -> OperationResult:
        """Hand one prepared message to the transport.

        Returns:
            The transport's OperationResult, unchanged
        """
        pass

    @abstractmethod
    def health_check(self) -> OperationResult:
        """Report whether the transport is configured.

        Returns:
            OperationResult whose data holds the configuration flags
        """
        pass

    @abstractmethod
    def send_test(self, recipient: Optional[str] = None) -> OperationResult:
        """Send the fixed configuration test message."""
        pass

    def check_rendered(self, rendered: RenderedMessage) -> List[str]:
        """Channel constraints on the rendered message; none by default."""
        return []

    def store(self, domain: EventDomain) -> TemplateStore:
        return self.templates.store(domain, self.channel_name)

    def validate_fields(self, data: Mapping[str, Any], domain: EventDomain) -> List[str]:
        """Field level validation of a sanitized payload."""
        event_keys = self.store(domain).event_keys()
        if domain is EventDomain.TRIP:
            return validate_trip_request(data, event_keys, channel=self.channel_name)
        return validate_issue_request(data, self.channel_name, event_keys)

    def prepare(
        self, request: Any, domain: EventDomain = EventDomain.ISSUE
    ) -> OperationResult:
        """Run every step before transport.

        Steps: sanitize, validate, parse, normalize the language, resolve
        the template, render, check channel constraints.

        Returns:
            SUCCESS carrying a PreparedMessage, PERMANENT_ERROR with
            VALIDATION_FAILED, or NOT_FOUND with TEMPLATE_NOT_FOUND
        """
        data = sanitize_request(request, DOMAIN_FIELDS[domain])

        errors = self.validate_fields(data, domain)
        if errors:
            return _validation_failed(errors)

        try:
            notification = NOTIFICATION_MODELS[domain].model_validate(
                self._channel_fields(data)
            )
        except ValidationError as e:
            return _validation_failed(_parse_errors(e))

        language = normalize_language(notification.language)
        template = self.store(domain).resolve(notification.event_key, language)
        if template is None:
            return OperationResult.not_found(
                message=(
                    f"Template not found for status: {notification.event_key} "
                    f"and language: {language.value}"
                ),
                error_code=DispatchErrorCode.TEMPLATE_NOT_FOUND.value,
            )

        resolved = self.resolve_recipient(notification)
        if not resolved.is_success:
            return resolved

        rendered = self.renderer.render(template, notification.template_data())
        errors = self.check_rendered(rendered)
        if errors:
            return _validation_failed(errors)

        return OperationResult.success(
            data=PreparedMessage(
                channel=self.channel_name,
                recipient=resolved.data["recipient"],
                notification=notification,
                template=template,
                rendered=rendered,
            ),
            message="Message prepared",
        )

    def validate(
        self, request: Any, domain: EventDomain = EventDomain.ISSUE
    ) -> ValidationReport:
        """Check a request without sending it.

        Covers everything ``dispatch`` checks before the transport call,
        including template resolution and the SMS segment cap.
        """
        try:
            prepared = self.prepare(request, domain)
        except Exception as e:
            logger.error(
                f"{self.channel_name.value}_validation_error",
                error=str(e),
                exc_info=True,
            )
            return ValidationReport.from_errors([f"Validation error: {e}"])
        if prepared.is_success:
            return ValidationReport.from_errors([])
        if isinstance(prepared.data, list):
            return ValidationReport.from_errors(prepared.data)
        return ValidationReport.from_errors([prepared.message])

    def dispatch(
        self, request: Any, domain: EventDomain = EventDomain.ISSUE
    ) -> DispatchResult:
        """Send one notification.

        Args:
            request: camelCase payload (mapping)
            domain: Event domain of the payload

        Returns:
            DispatchResult, failed rather than raised on every error
        """
        data = sanitize_request(request, DOMAIN_FIELDS[domain])
        ticket_id = as_text(data.get(CORRELATION_FIELD[domain]))

        with bind_dispatch_context(channel=self.channel_name.value, ticket_id=ticket_id):
            try:
                prepared = self.prepare(data, domain)
                if not prepared.is_success:
                    return self._rejected(data, domain, prepared)
                return self._finish(prepared.data, self.deliver(prepared.data))
            except Exception as e:
                return self._dispatch_error(data, domain, e)

    def dispatch_bulk(
        self, requests: Sequence[Any], domain: EventDomain = EventDomain.ISSUE
    ) -> List[DispatchResult]:
        """Send a batch, one result per request in request order.

        Every request is isolated: a failure never affects the others.
        """
        return [self.dispatch(request, domain) for request in requests]

    def _channel_fields(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Payload without the recipient fields of other channels."""
        ignored = {
            field
            for channel, field in RECIPIENT_FIELD.items()
            if channel is not self.channel_name
        }
        return {key: value for key, value in data.items() if key not in ignored}

    def _recipient(self, data: Mapping[str, Any]) -> Optional[str]:
        return as_text(data.get(RECIPIENT_FIELD[self.channel_name]))

    def _rejected(
        self, data: Mapping[str, Any], domain: EventDomain, operation: OperationResult
    ) -> DispatchResult:
        logger.warning(
            f"{self.channel_name.value}_rejected",
            error=operation.message,
            error_code=operation.error_code,
        )
        return DispatchResult.failed(
            channel=self.channel_name,
            message=operation.message,
            error_code=operation.error_code or DispatchErrorCode.VALIDATION_FAILED,
            recipient=self._recipient(data),
            ticket_id=as_text(data.get(CORRELATION_FIELD[domain])),
        )

    def _dispatch_error(
        self, data: Mapping[str, Any], domain: EventDomain, error: Exception
    ) -> DispatchResult:
        logger.error(
            f"{self.channel_name.value}_dispatch_error",
            error=str(error),
            exc_info=True,
        )
        return DispatchResult.failed(
            channel=self.channel_name,
            message=f"Failed to send {self.channel_name.value}",
            error_code=DispatchErrorCode.DISPATCH_ERROR,
            error=str(error),
            recipient=self._recipient(data),
            ticket_id=as_text(data.get(CORRELATION_FIELD[domain])),
        )

    def _finish(
        self, prepared: PreparedMessage, operation: OperationResult
    ) -> DispatchResult:
        """Map a transport outcome for one prepared message and log it."""
        result = DispatchResult.from_operation(
            channel=self.channel_name,
            operation=operation,
            recipient=prepared.recipient,
            ticket_id=prepared.correlation_id,
        )
        if result.success:
            logger.info(
                f"{self.channel_name.value}_sent",
                recipient=prepared.recipient,
                event_key=prepared.template.event_key,
                language=prepared.template.language.value,
                message_id=result.message_id,
            )
        else:
            logger.error(
                f"{self.channel_name.value}_failed",
                recipient=prepared.recipient,
                error=result.error,
                error_code=result.error_code,
                retryable=result.retryable,
            )
        return result
