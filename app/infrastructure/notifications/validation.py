"""Request validation for issue and trip notifications.

Validators work on the raw camelCase payload and return error lists
instead of raising. Payloads are sanitized first: string fields are
trimmed, empty strings and nulls are dropped, and phone numbers are
reduced to their digits.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from infrastructure.notifications.models import ValidationReport
from infrastructure.templates import (
    Channel,
    EventDomain,
    Language,
    is_supported_language,
)
from infrastructure.templates.normalizers import normalize_event_key

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9\-_]{1,50}$")
NAME_PATTERN = re.compile(r"^[A-Za-z\s\-']{1,100}$")
NON_DIGITS = re.compile(r"\D")

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15
MAX_ISSUE_TITLE = 200
MAX_RESPONSE_MESSAGE = 2000
MAX_DESTINATION_NAME = 200
MAX_REMAINING_TIME = 100

NAME_RULE = "must contain only letters, spaces, hyphens, and apostrophes (1-100 characters)"
IDENTIFIER_RULE = (
    "must contain only alphanumeric characters, hyphens, and underscores (1-50 characters)"
)

ISSUE_FIELDS = (
    "email",
    "phoneNumber",
    "ticketId",
    "name",
    "language",
    "subject",
    "assignedTo",
    "escalatedTo",
    "issueTitle",
    "responseMessage",
)
TRIP_FIELDS = (
    "email",
    "phoneNumber",
    "tripId",
    "name",
    "language",
    "notificationType",
    "destinationName",
    "remainingTime",
)

RECIPIENT_FIELD = {Channel.EMAIL: "email", Channel.SMS: "phoneNumber"}

# Issue statuses that name the person now handling the issue
CONDITIONAL_FIELDS = {"assigned": "assignedTo", "escalated": "escalatedTo"}

REMAINING_TIME_EVENT = "trip_remaining_time"


def normalize_phone_number(phone_number: str) -> str:
    return NON_DIGITS.sub("", phone_number)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_phone_number(phone_number: str) -> bool:
    digits = normalize_phone_number(phone_number)
    return MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS


def sanitize_request(data: Any, fields: Iterable[str] = ISSUE_FIELDS) -> Dict[str, Any]:
    """Copy of the payload with trimmed strings and empty values removed.

    Non-mapping payloads sanitize to an empty dict.
    """
    if not isinstance(data, Mapping):
        return {}

    sanitized: Dict[str, Any] = dict(data)
    for field in fields:
        value = sanitized.get(field)
        if isinstance(value, str):
            value = value.strip()
            sanitized[field] = value if value else None

    phone_number = sanitized.get("phoneNumber")
    if isinstance(phone_number, str):
        sanitized["phoneNumber"] = normalize_phone_number(phone_number)

    return {key: value for key, value in sanitized.items() if value is not None}


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


class _FieldChecks:
    """Accumulates errors for one payload."""

    def __init__(self, data: Mapping[str, Any]):
        self.data = data
        self.errors: List[str] = []

    def string(self, field: str, required: bool = False) -> Optional[str]:
        """Return the field when it is a usable string, recording errors."""
        value = self.data.get(field)
        if _is_blank(value):
            if required:
                self.errors.append(f"{field} is required")
            return None
        if not isinstance(value, str):
            self.errors.append(f"{field} must be a string")
            return None
        return value

    def recipient(self, channel: Channel, required: bool = True) -> None:
        field = RECIPIENT_FIELD[channel]
        value = self.string(field, required=required)
        if value is None:
            return
        if channel is Channel.EMAIL and not is_valid_email(value):
            self.errors.append("email must be a valid email address")
        if channel is Channel.SMS and not is_valid_phone_number(value):
            self.errors.append(
                f"phoneNumber must be a valid phone number "
                f"({MIN_PHONE_DIGITS}-{MAX_PHONE_DIGITS} digits)"
            )

    def identifier(self, field: str) -> None:
        value = self.string(field)
        if value is not None and not IDENTIFIER_PATTERN.match(value):
            self.errors.append(f"{field} {IDENTIFIER_RULE}")

    def person_name(self, field: str, required: bool = False) -> None:
        value = self.string(field, required=required)
        if value is not None and not NAME_PATTERN.match(value):
            self.errors.append(f"{field} {NAME_RULE}")

    def language(self) -> None:
        value = self.string("language", required=True)
        if value is not None and not is_supported_language(value):
            supported = ", ".join(language.value for language in Language)
            self.errors.append(f"language must be one of: {supported}")

    def event_key(self, field: str, known_keys: Sequence[str]) -> Optional[str]:
        value = self.string(field, required=True)
        if value is None:
            return None
        key = normalize_event_key(value)
        if key not in known_keys:
            self.errors.append(f"{field} must be one of: {', '.join(known_keys)}")
            return None
        return key

    def max_length(self, field: str, limit: int) -> None:
        value = self.string(field)
        if value is not None and len(value) > limit:
            self.errors.append(f"{field} must be {limit} characters or less")


def validate_issue_request(
    data: Mapping[str, Any], channel: Channel, event_keys: Sequence[str]
) -> List[str]:
    """Validate a sanitized issue notification payload.

    Args:
        data: Sanitized camelCase payload.
        channel: Channel whose recipient field is required.
        event_keys: Known issue statuses.

    Returns:
        Error messages, empty when the payload is valid.
    """
    checks = _FieldChecks(data)
    checks.recipient(channel)
    checks.identifier("ticketId")
    checks.person_name("name", required=True)
    checks.language()
    event_key = checks.event_key("subject", event_keys)
    checks.person_name("assignedTo")
    checks.person_name("escalatedTo")
    checks.max_length("issueTitle", MAX_ISSUE_TITLE)
    checks.max_length("responseMessage", MAX_RESPONSE_MESSAGE)

    conditional_field = CONDITIONAL_FIELDS.get(event_key or "")
    if conditional_field and _is_blank(data.get(conditional_field)):
        checks.errors.append(
            f'{conditional_field} is required when subject is "{event_key}"'
        )

    return checks.errors


def validate_trip_request(
    data: Mapping[str, Any],
    event_keys: Sequence[str],
    channel: Optional[Channel] = None,
    check_contacts: bool = True,
) -> List[str]:
    """Validate a sanitized trip notification payload.

    Args:
        data: Sanitized camelCase payload.
        event_keys: Known trip notification types.
        channel: When given, that channel's recipient field is required.
            Otherwise at least one of email and phoneNumber is required.
        check_contacts: Without a channel, also check the format of every
            contact given. Off when each channel checks its own contact.

    Returns:
        Error messages, empty when the payload is valid.
    """
    checks = _FieldChecks(data)

    if channel is not None:
        checks.recipient(channel)
    elif _is_blank(data.get("email")) and _is_blank(data.get("phoneNumber")):
        checks.errors.append("email or phoneNumber is required")
    elif check_contacts:
        checks.recipient(Channel.EMAIL, required=False)
        checks.recipient(Channel.SMS, required=False)

    checks.identifier("tripId")
    checks.person_name("name", required=True)
    checks.language()
    event_key = checks.event_key("notificationType", event_keys)

    destination = checks.string("destinationName", required=True)
    if destination is not None and len(destination) > MAX_DESTINATION_NAME:
        checks.errors.append(
            f"destinationName must be {MAX_DESTINATION_NAME} characters or less"
        )

    remaining_time = checks.string("remainingTime")
    if remaining_time is not None and len(remaining_time) > MAX_REMAINING_TIME:
        checks.errors.append(
            f"remainingTime must be {MAX_REMAINING_TIME} characters or less"
        )
    if event_key == REMAINING_TIME_EVENT and remaining_time is None:
        if "remainingTime must be a string" not in checks.errors:
            checks.errors.append(
                f'remainingTime is required when notificationType is "{REMAINING_TIME_EVENT}"'
            )

    return checks.errors


BATCH_FIELD = {Channel.EMAIL: "emails", Channel.SMS: "smsList", EventDomain.TRIP: "trips"}
BATCH_NOUN = {
    Channel.EMAIL: "emails",
    Channel.SMS: "SMS messages",
    EventDomain.TRIP: "trip notifications",
}

INVALID_INPUT = "INVALID_INPUT"
BATCH_SIZE_EXCEEDED = "BATCH_SIZE_EXCEEDED"


def validate_batch(
    requests: Any, kind: Channel | EventDomain, max_size: int
) -> ValidationReport:
    """Batch level checks, run before any item is sent.

    Args:
        requests: The batch as received (expected to be a list).
        kind: Channel of an issue batch, or EventDomain.TRIP for a trip
            batch; selects the messages.
        max_size: Largest accepted batch.

    Returns:
        ValidationReport carrying INVALID_INPUT or BATCH_SIZE_EXCEEDED on
        rejection.
    """
    if not isinstance(requests, list) or not requests:
        return ValidationReport.from_errors(
            [f"{BATCH_FIELD[kind]} must be a non-empty array"],
            error_code=INVALID_INPUT,
        )
    if len(requests) > max_size:
        return ValidationReport.from_errors(
            [f"Maximum {max_size} {BATCH_NOUN[kind]} allowed per batch"],
            error_code=BATCH_SIZE_EXCEEDED,
        )
    return ValidationReport.from_errors([])
