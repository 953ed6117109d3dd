"""Notification dispatch models.

Request models are parsed from camelCase wire payloads after validation;
result models are what every dispatch path returns instead of raising.

Uses Pydantic BaseModel for:
- camelCase aliases shared by requests and responses
- Type safety on parsed requests
- JSON serialization of results for the API layer
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from infrastructure.operations import OperationResult
from infrastructure.templates import (
    Channel,
    EventDomain,
    RenderedMessage,
    Template,
    normalize_event_key,
)


class DispatchStatus(str, Enum):
    """Outcome of a single dispatch attempt."""

    SENT = "sent"
    FAILED = "failed"


class DispatchErrorCode(str, Enum):
    """Machine error codes carried by failed dispatch results."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    PROVIDER_REJECTED = "PROVIDER_REJECTED"
    NO_RESPONSE = "NO_RESPONSE"
    REQUEST_ERROR = "REQUEST_ERROR"
    DISPATCH_ERROR = "DISPATCH_ERROR"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class IssueNotification(_CamelModel):
    """Issue status change to notify a customer about.

    Exactly one recipient field is used per channel: ``email`` for email,
    ``phone_number`` (wire name ``phoneNumber``) for SMS.

    Attributes:
        subject: Issue status (event type), e.g. "received" or "in-progress"
        language: Free-form language hint
        name: Customer display name
        ticket_id: Optional ticket id, used as correlation id
    """

    email: Optional[str] = None
    phone_number: Optional[str] = None
    subject: str
    language: Optional[str] = None
    name: Optional[str] = None
    ticket_id: Optional[str] = None
    issue_title: Optional[str] = None
    assigned_to: Optional[str] = None
    escalated_to: Optional[str] = None
    response_message: Optional[str] = None

    @property
    def domain(self) -> EventDomain:
        return EventDomain.ISSUE

    @property
    def event_key(self) -> str:
        return normalize_event_key(self.subject)

    @property
    def correlation_id(self) -> Optional[str]:
        return self.ticket_id

    def recipient_for(self, channel: Channel) -> Optional[str]:
        return self.email if channel is Channel.EMAIL else self.phone_number

    def template_data(self) -> Dict[str, Any]:
        """Placeholder values keyed by their camelCase template names."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"email", "phone_number", "subject", "language"},
        )


class TripNotification(_CamelModel):
    """Trip milestone to notify a traveler about.

    Attributes:
        notification_type: trip_remaining_time or trip_arrival_notice
        destination_name: Where the trip ends
        remaining_time: Free text duration, e.g. "2 hours"
        trip_id: Optional trip id, used as correlation id
    """

    email: Optional[str] = None
    phone_number: Optional[str] = None
    notification_type: str
    language: Optional[str] = None
    name: Optional[str] = None
    destination_name: Optional[str] = None
    remaining_time: Optional[str] = None
    trip_id: Optional[str] = None

    @property
    def domain(self) -> EventDomain:
        return EventDomain.TRIP

    @property
    def event_key(self) -> str:
        return normalize_event_key(self.notification_type)

    @property
    def correlation_id(self) -> Optional[str]:
        return self.trip_id

    def recipient_for(self, channel: Channel) -> Optional[str]:
        return self.email if channel is Channel.EMAIL else self.phone_number

    def template_data(self) -> Dict[str, Any]:
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"email", "phone_number", "notification_type", "language"},
        )


class ValidationReport(_CamelModel):
    """Outcome of validating a request without sending it.

    Attributes:
        valid: True when the request would be dispatched
        errors: Human readable problems, in field order
        error_code: Set for batch-level rejections (INVALID_INPUT,
            BATCH_SIZE_EXCEEDED)
    """

    valid: bool
    errors: List[str] = Field(default_factory=list)
    error_code: Optional[str] = None

    @classmethod
    def from_errors(
        cls, errors: List[str], error_code: Optional[str] = None
    ) -> "ValidationReport":
        return cls(valid=not errors, errors=list(errors), error_code=error_code)


class DispatchResult(_CamelModel):
    """Result of one dispatch attempt to one recipient.

    Attributes:
        success: True when the provider accepted the message
        status: SENT or FAILED
        message: Human readable outcome
        error: Failure detail (None on success)
        error_code: One of DispatchErrorCode on failure
        channel: "email" or "sms"
        recipient: Email address or digits-only phone number
        ticket_id: Correlation id (ticket id or trip id)
        message_id: Provider message id when the provider returns one
        retryable: True when a later attempt could succeed

    Example:
        result = DispatchResult.sent(
            channel=Channel.SMS,
            recipient="250788000000",
            ticket_id="T-1",
            message="SMS sent successfully",
        )
    """

    success: bool
    status: DispatchStatus
    message: str
    error: Optional[str] = None
    error_code: Optional[str] = None
    channel: str
    recipient: Optional[str] = None
    ticket_id: Optional[str] = None
    message_id: Optional[str] = None
    retryable: bool = False

    @property
    def is_success(self) -> bool:
        return self.status == DispatchStatus.SENT

    @classmethod
    def sent(
        cls,
        channel: Channel,
        message: str,
        recipient: Optional[str] = None,
        ticket_id: Optional[str] = None,
        message_id: Optional[str] = None,
    ) -> "DispatchResult":
        return cls(
            success=True,
            status=DispatchStatus.SENT,
            message=message,
            channel=channel.value,
            recipient=recipient,
            ticket_id=ticket_id,
            message_id=message_id,
        )

    @classmethod
    def failed(
        cls,
        channel: Channel,
        message: str,
        error_code: DispatchErrorCode | str,
        error: Optional[str] = None,
        recipient: Optional[str] = None,
        ticket_id: Optional[str] = None,
        retryable: bool = False,
    ) -> "DispatchResult":
        code = error_code.value if isinstance(error_code, DispatchErrorCode) else error_code
        return cls(
            success=False,
            status=DispatchStatus.FAILED,
            message=message,
            error=error or message,
            error_code=code,
            channel=channel.value,
            recipient=recipient,
            ticket_id=ticket_id,
            retryable=retryable,
        )

    @classmethod
    def from_operation(
        cls,
        channel: Channel,
        operation: OperationResult,
        recipient: Optional[str] = None,
        ticket_id: Optional[str] = None,
    ) -> "DispatchResult":
        """Map a transport OperationResult onto a dispatch result."""
        if operation.is_success:
            data = operation.data if isinstance(operation.data, dict) else {}
            return cls.sent(
                channel=channel,
                message=operation.message,
                recipient=recipient,
                ticket_id=ticket_id,
                message_id=data.get("message_id"),
            )
        return cls.failed(
            channel=channel,
            message=operation.message,
            error_code=operation.error_code or DispatchErrorCode.DISPATCH_ERROR,
            recipient=recipient,
            ticket_id=ticket_id,
            retryable=operation.retryable,
        )


class TripDispatchResult(_CamelModel):
    """Result of one trip notification across both channels.

    A channel that was not attempted is None. ``errors`` holds trip-level
    validation problems; when set, nothing was sent.
    """

    email: Optional[DispatchResult] = None
    sms: Optional[DispatchResult] = None
    errors: List[str] = Field(default_factory=list)
    trip_id: Optional[str] = None

    @computed_field
    @property
    def success(self) -> bool:
        if self.errors:
            return False
        return all(
            result.success for result in (self.email, self.sms) if result is not None
        )


@dataclass(frozen=True)
class PreparedMessage:
    """A request that passed validation and rendering, ready for transport."""

    channel: Channel
    recipient: str
    notification: IssueNotification | TripNotification
    template: Template
    rendered: RenderedMessage

    @property
    def correlation_id(self) -> Optional[str]:
        return self.notification.correlation_id


class BulkDispatchResult(_CamelModel):
    """Result of a batch: per-item results in request order.

    ``rejection`` is set when the batch as a whole was refused (empty or
    too large); no item was sent in that case and ``results`` is empty.
    """

    results: List[DispatchResult] = Field(default_factory=list)
    rejection: Optional[ValidationReport] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @computed_field
    @property
    def successful(self) -> int:
        return sum(1 for result in self.results if result.success)

    @computed_field
    @property
    def failed(self) -> int:
        return len(self.results) - self.successful
