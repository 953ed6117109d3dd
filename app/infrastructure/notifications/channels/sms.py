"""SMS channel implementation using Mista."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from infrastructure.logging import bind_dispatch_context, get_module_logger
from infrastructure.notifications.channels.base import (
    CORRELATION_FIELD,
    DOMAIN_FIELDS,
    NotificationChannel,
    as_text,
)
from infrastructure.notifications.models import (
    DispatchErrorCode,
    DispatchResult,
    IssueNotification,
    PreparedMessage,
    TripNotification,
)
from infrastructure.notifications.validation import (
    is_valid_phone_number,
    normalize_phone_number,
    sanitize_request,
)
from infrastructure.operations import OperationResult, OperationStatus
from infrastructure.templates import (
    DEFAULT_MAX_SEGMENTS,
    Channel,
    EventDomain,
    RenderedMessage,
    RenderedSms,
    SegmentEncoding,
    TemplateRegistry,
    TemplateRenderer,
    check_segment_limit,
)
from integrations.mista import MistaClient

logger = get_module_logger()

TEST_MESSAGE = "CES SMS Service Test - Configuration working correctly"

RECIPIENT_SEPARATOR = ", "

# (request index, sanitized payload, prepared message)
GroupMember = Tuple[int, Dict[str, Any], PreparedMessage]


class SMSChannel(NotificationChannel):
    """SMS notification channel using the Mista API.

    Phone numbers are sent digits-only. Messages longer than
    ``max_segments`` segments are rejected before the transport call.

    With ``group_identical`` set, a batch sends each distinct
    (message, encoding) pair once with all of its recipients joined in a
    single provider call, and every member shares the call's outcome.
    """

    def __init__(
        self,
        templates: TemplateRegistry,
        renderer: TemplateRenderer,
        client: MistaClient,
        max_segments: int = DEFAULT_MAX_SEGMENTS,
        group_identical: bool = True,
    ):
        super().__init__(templates, renderer)
        self.client = client
        self.max_segments = max_segments
        self.group_identical = group_identical
        logger.info(
            "initialized_sms_channel",
            backend="mista",
            sender_id=client.sender_id,
            group_identical=group_identical,
        )

    @property
    def channel_name(self) -> Channel:
        return Channel.SMS

    def resolve_recipient(
        self, notification: IssueNotification | TripNotification
    ) -> OperationResult:
        """Reduce the phone number to its digits."""
        phone_number = normalize_phone_number(
            notification.recipient_for(self.channel_name) or ""
        )
        if not phone_number:
            return OperationResult.permanent_error(
                message="Validation failed: phoneNumber is required",
                error_code=DispatchErrorCode.VALIDATION_FAILED.value,
            )
        return OperationResult.success(
            data={"recipient": phone_number}, message="Phone number validated"
        )

    def check_rendered(self, rendered: RenderedMessage) -> List[str]:
        if not isinstance(rendered, RenderedSms):
            return []
        error = check_segment_limit(rendered.segment_info, self.max_segments)
        return [error] if error else []

    def deliver(self, prepared: PreparedMessage) -> OperationResult:
        rendered = prepared.rendered
        return self.client.send(
            recipient=prepared.recipient,
            sender_id=self.client.sender_id,
            segment_kind=rendered.encoding.value,
            message=rendered.message,
        )

    def dispatch_bulk(
        self, requests: Sequence[Any], domain: EventDomain = EventDomain.ISSUE
    ) -> List[DispatchResult]:
        """Send a batch, grouping identical messages into one provider call.

        Requests that fail validation or rendering get their own failed
        result and are left out of every group. Results keep request order.
        """
        if not self.group_identical:
            return super().dispatch_bulk(requests, domain)

        results: List[Optional[DispatchResult]] = [None] * len(requests)
        groups: Dict[Tuple[str, SegmentEncoding], List[GroupMember]] = {}

        for index, request in enumerate(requests):
            data = sanitize_request(request, DOMAIN_FIELDS[domain])
            ticket_id = as_text(data.get(CORRELATION_FIELD[domain]))
            with bind_dispatch_context(channel=self.channel_name.value, ticket_id=ticket_id):
                try:
                    prepared = self.prepare(data, domain)
                except Exception as e:
                    results[index] = self._dispatch_error(data, domain, e)
                    continue

                if not prepared.is_success:
                    results[index] = self._rejected(data, domain, prepared)
                    continue

            message: PreparedMessage = prepared.data
            key = (message.rendered.message, message.rendered.encoding)
            groups.setdefault(key, []).append((index, data, message))

        for (text, encoding), members in groups.items():
            operation = self._send_group(text, encoding, members)
            for index, data, member in members:
                with bind_dispatch_context(
                    channel=self.channel_name.value, ticket_id=member.correlation_id
                ):
                    try:
                        results[index] = self._finish(member, operation)
                    except Exception as e:
                        results[index] = self._dispatch_error(data, domain, e)

        return results  # type: ignore[return-value]

    def _send_group(
        self, text: str, encoding: SegmentEncoding, members: List[GroupMember]
    ) -> OperationResult:
        """One provider call for every member; an exception fails the group."""
        recipients = RECIPIENT_SEPARATOR.join(m.recipient for _, _, m in members)
        try:
            operation = self.client.send(
                recipient=recipients,
                sender_id=self.client.sender_id,
                segment_kind=encoding.value,
                message=text,
            )
            logger.info(
                "sms_group_dispatched",
                recipient_count=len(members),
                encoding=encoding.value,
                success=operation.is_success,
            )
            return operation
        except Exception as e:
            logger.error(
                "sms_group_dispatch_error",
                recipient_count=len(members),
                error=str(e),
                exc_info=True,
            )
            return OperationResult.permanent_error(
                message=f"Failed to send sms: {e}",
                error_code=DispatchErrorCode.DISPATCH_ERROR.value,
            )

    def health_check(self) -> OperationResult:
        """Check the Mista configuration without calling the provider."""
        configuration = {
            "hasApiToken": bool(self.client.settings.SMS_API_TOKEN),
            "hasSenderId": bool(self.client.sender_id),
        }
        configuration["isConfigured"] = all(configuration.values())
        if configuration["isConfigured"]:
            return OperationResult.success(
                data=configuration, message="SMS service configured"
            )
        return OperationResult.error(
            OperationStatus.PERMANENT_ERROR,
            "SMS service is not configured",
            error_code="NOT_CONFIGURED",
            data=configuration,
        )

    def send_test(self, recipient: Optional[str] = None) -> OperationResult:
        """Send the configuration test SMS.

        Args:
            recipient: Phone number to send to (default: TEST_PHONE setting)
        """
        phone_number = normalize_phone_number(
            recipient or self.client.settings.TEST_PHONE
        )
        if not is_valid_phone_number(phone_number):
            return OperationResult.permanent_error(
                message="phoneNumber must be a valid phone number (7-15 digits)",
                error_code=DispatchErrorCode.VALIDATION_FAILED.value,
            )

        result = self.client.send(
            recipient=phone_number,
            sender_id=self.client.sender_id,
            segment_kind=SegmentEncoding.PLAIN.value,
            message=TEST_MESSAGE,
        )
        logger.info(
            "sms_test_sent" if result.is_success else "sms_test_failed",
            recipient=phone_number,
            error=None if result.is_success else result.message,
        )
        return result
