"""Unit tests for notification request validation."""

import pytest

from infrastructure.notifications.validation import (
    BATCH_SIZE_EXCEEDED,
    INVALID_INPUT,
    is_valid_email,
    is_valid_phone_number,
    normalize_phone_number,
    sanitize_request,
    validate_batch,
    validate_issue_request,
    validate_trip_request,
)
from infrastructure.templates import Channel, EventDomain

ISSUE_KEYS = ["received", "resolved", "escalated", "assigned", "closed", "in_progress"]
TRIP_KEYS = ["trip_remaining_time", "trip_arrival_notice"]


@pytest.mark.unit
class TestPrimitives:
    def test_normalize_phone_number(self):
        assert normalize_phone_number("+250 (788) 000-001") == "250788000001"

    @pytest.mark.parametrize(
        "phone_number,expected",
        [("123456", False), ("1234567", True), ("123456789012345", True), ("1234567890123456", False)],
    )
    def test_phone_number_length(self, phone_number, expected):
        assert is_valid_phone_number(phone_number) is expected

    @pytest.mark.parametrize(
        "email,expected",
        [
            ("alice@example.com", True),
            ("alice@example", False),
            ("alice example@example.com", False),
            ("@example.com", False),
        ],
    )
    def test_email(self, email, expected):
        assert is_valid_email(email) is expected


@pytest.mark.unit
class TestSanitizeRequest:
    def test_trims_and_drops_empty_values(self):
        data = sanitize_request(
            {"name": "  Alice ", "email": "   ", "ticketId": None, "extra": "kept"}
        )

        assert data == {"name": "Alice", "extra": "kept"}

    def test_phone_number_reduced_to_digits(self):
        data = sanitize_request({"phoneNumber": " +250 788-000-001 "})

        assert data == {"phoneNumber": "250788000001"}

    def test_non_mapping_sanitizes_to_empty(self):
        assert sanitize_request(["not", "a", "dict"]) == {}
        assert sanitize_request(None) == {}

    def test_does_not_mutate_input(self):
        original = {"name": " Alice "}

        sanitize_request(original)

        assert original == {"name": " Alice "}


@pytest.mark.unit
class TestValidateIssueRequest:
    def test_valid_email_request(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory())

        assert validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS) == []

    def test_missing_required_fields(self):
        errors = validate_issue_request({}, Channel.SMS, ISSUE_KEYS)

        assert errors == [
            "phoneNumber is required",
            "name is required",
            "language is required",
            "subject is required",
        ]

    def test_invalid_formats(self, issue_payload_factory):
        data = sanitize_request(
            issue_payload_factory(
                email="not-an-email",
                ticketId="T 1!",
                name="Alice99",
                language="klingon",
                subject="archived",
            )
        )

        errors = validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS)

        assert errors == [
            "email must be a valid email address",
            "ticketId must contain only alphanumeric characters, hyphens, and underscores (1-50 characters)",
            "name must contain only letters, spaces, hyphens, and apostrophes (1-100 characters)",
            "language must be one of: english, french, kinyarwanda",
            "subject must be one of: received, resolved, escalated, assigned, closed, in_progress",
        ]

    def test_short_phone_number(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory(channel="sms", phoneNumber="12345"))

        errors = validate_issue_request(data, Channel.SMS, ISSUE_KEYS)

        assert errors == ["phoneNumber must be a valid phone number (7-15 digits)"]

    def test_language_aliases_are_accepted(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory(language="FR"))

        assert validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS) == []

    def test_subject_is_normalized(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory(subject="In-Progress"))

        assert validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS) == []

    def test_ticket_id_is_optional(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory(ticketId=None))

        assert validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS) == []

    def test_assigned_requires_assigned_to(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory(subject="assigned"))

        errors = validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS)

        assert errors == ['assignedTo is required when subject is "assigned"']

    def test_assigned_with_assignee_is_valid(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory(subject="assigned", assignedTo="Bob"))

        assert validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS) == []

    def test_escalated_requires_escalated_to(self, issue_payload_factory):
        data = sanitize_request(
            issue_payload_factory(subject="escalated", escalatedTo="   ")
        )

        errors = validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS)

        assert errors == ['escalatedTo is required when subject is "escalated"']

    def test_length_limits(self, issue_payload_factory):
        data = sanitize_request(
            issue_payload_factory(issueTitle="x" * 201, responseMessage="y" * 2001)
        )

        errors = validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS)

        assert errors == [
            "issueTitle must be 200 characters or less",
            "responseMessage must be 2000 characters or less",
        ]

    def test_non_string_fields(self, issue_payload_factory):
        data = sanitize_request(issue_payload_factory(name=42))

        errors = validate_issue_request(data, Channel.EMAIL, ISSUE_KEYS)

        assert errors == ["name must be a string"]


@pytest.mark.unit
class TestValidateTripRequest:
    def test_valid_request(self, trip_payload_factory):
        data = sanitize_request(trip_payload_factory())

        assert validate_trip_request(data, TRIP_KEYS) == []

    def test_needs_a_recipient(self, trip_payload_factory):
        data = sanitize_request(trip_payload_factory(email=None, phoneNumber=None))

        assert validate_trip_request(data, TRIP_KEYS) == ["email or phoneNumber is required"]

    def test_remaining_time_required_for_remaining_time_type(self, trip_payload_factory):
        data = sanitize_request(trip_payload_factory(remainingTime=None))

        errors = validate_trip_request(data, TRIP_KEYS)

        assert errors == [
            'remainingTime is required when notificationType is "trip_remaining_time"'
        ]

    def test_arrival_notice_needs_no_remaining_time(self, trip_payload_factory):
        data = sanitize_request(
            trip_payload_factory(notificationType="trip_arrival_notice", remainingTime=None)
        )

        assert validate_trip_request(data, TRIP_KEYS) == []

    def test_destination_required_and_bounded(self, trip_payload_factory):
        missing = sanitize_request(trip_payload_factory(destinationName=None))
        too_long = sanitize_request(trip_payload_factory(destinationName="k" * 201))

        assert validate_trip_request(missing, TRIP_KEYS) == ["destinationName is required"]
        assert validate_trip_request(too_long, TRIP_KEYS) == [
            "destinationName must be 200 characters or less"
        ]

    def test_channel_specific_recipient(self, trip_payload_factory):
        data = sanitize_request(trip_payload_factory(phoneNumber=None))

        assert validate_trip_request(data, TRIP_KEYS, channel=Channel.SMS) == [
            "phoneNumber is required"
        ]

    def test_present_recipients_are_checked(self, trip_payload_factory):
        data = sanitize_request(trip_payload_factory(email="bob@"))

        assert validate_trip_request(data, TRIP_KEYS) == [
            "email must be a valid email address"
        ]

    def test_unknown_notification_type(self, trip_payload_factory):
        data = sanitize_request(trip_payload_factory(notificationType="trip_cancelled"))

        assert validate_trip_request(data, TRIP_KEYS) == [
            "notificationType must be one of: trip_remaining_time, trip_arrival_notice"
        ]


@pytest.mark.unit
class TestValidateBatch:
    @pytest.mark.parametrize("requests", [[], None, {"email": "a@example.com"}])
    def test_not_a_non_empty_list(self, requests):
        report = validate_batch(requests, Channel.EMAIL, 50)

        assert report.valid is False
        assert report.errors == ["emails must be a non-empty array"]
        assert report.error_code == INVALID_INPUT

    def test_sms_batch_too_large(self):
        report = validate_batch([{}] * 31, Channel.SMS, 30)

        assert report.errors == ["Maximum 30 SMS messages allowed per batch"]
        assert report.error_code == BATCH_SIZE_EXCEEDED

    def test_email_batch_too_large(self):
        report = validate_batch([{}] * 51, Channel.EMAIL, 50)

        assert report.errors == ["Maximum 50 emails allowed per batch"]

    def test_trip_batch_messages(self):
        assert validate_batch([], EventDomain.TRIP, 50).errors == [
            "trips must be a non-empty array"
        ]
        report = validate_batch([{}] * 3, EventDomain.TRIP, 2)

        assert report.errors == ["Maximum 2 trip notifications allowed per batch"]
        assert report.error_code == BATCH_SIZE_EXCEEDED

    def test_batch_at_limit_is_accepted(self):
        report = validate_batch([{}] * 30, Channel.SMS, 30)

        assert report.valid is True
        assert report.error_code is None
