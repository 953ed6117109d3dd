"""Unit tests for dispatch models."""

import pytest

from infrastructure.notifications import (
    BulkDispatchResult,
    DispatchErrorCode,
    DispatchResult,
    IssueNotification,
    TripDispatchResult,
    TripNotification,
    ValidationReport,
)
from infrastructure.operations import OperationResult
from infrastructure.templates import Channel


@pytest.mark.unit
class TestIssueNotification:
    def test_parses_camel_case(self):
        notification = IssueNotification.model_validate(
            {
                "phoneNumber": "250788000001",
                "subject": "In-Progress",
                "ticketId": "T-1",
                "assignedTo": "Bob",
            }
        )

        assert notification.phone_number == "250788000001"
        assert notification.event_key == "in_progress"
        assert notification.correlation_id == "T-1"
        assert notification.recipient_for(Channel.SMS) == "250788000001"

    def test_template_data_excludes_routing_fields(self):
        notification = IssueNotification.model_validate(
            {
                "email": "a@example.com",
                "subject": "received",
                "language": "fr",
                "name": "Alice",
                "ticketId": "T-1",
            }
        )

        assert notification.template_data() == {"name": "Alice", "ticketId": "T-1"}


@pytest.mark.unit
class TestTripNotification:
    def test_template_data(self):
        notification = TripNotification.model_validate(
            {
                "email": "b@example.com",
                "notificationType": "trip_remaining_time",
                "destinationName": "Kigali",
                "remainingTime": "2 hours",
                "tripId": "TRIP-7",
            }
        )

        assert notification.correlation_id == "TRIP-7"
        assert notification.template_data() == {
            "destinationName": "Kigali",
            "remainingTime": "2 hours",
            "tripId": "TRIP-7",
        }


@pytest.mark.unit
class TestDispatchResult:
    def test_from_successful_operation(self):
        result = DispatchResult.from_operation(
            Channel.SMS,
            OperationResult.success(data={"message_id": "m-1"}, message="SMS sent successfully"),
            recipient="250788000001",
            ticket_id="T-1",
        )

        assert result.success is True
        assert result.is_success is True
        assert result.message_id == "m-1"
        assert result.error is None

    def test_from_failed_operation(self):
        result = DispatchResult.from_operation(
            Channel.EMAIL,
            OperationResult.transient_error("timeout", error_code="NO_RESPONSE"),
        )

        assert result.success is False
        assert result.error == "timeout"
        assert result.error_code == "NO_RESPONSE"
        assert result.retryable is True

    def test_failed_without_code_is_dispatch_error(self):
        result = DispatchResult.from_operation(
            Channel.EMAIL, OperationResult.permanent_error("odd")
        )

        assert result.error_code == DispatchErrorCode.DISPATCH_ERROR.value

    def test_serializes_with_camel_case(self):
        result = DispatchResult.sent(Channel.SMS, "ok", recipient="1", ticket_id="T-1")

        dumped = result.model_dump(by_alias=True)

        assert dumped["ticketId"] == "T-1"
        assert dumped["status"] == "sent"
        assert "messageId" in dumped


@pytest.mark.unit
class TestAggregates:
    def test_trip_result_success(self):
        sent = DispatchResult.sent(Channel.EMAIL, "ok")
        failed = DispatchResult.failed(Channel.SMS, "no", DispatchErrorCode.NO_RESPONSE)

        assert TripDispatchResult(email=sent).success is True
        assert TripDispatchResult(email=sent, sms=failed).success is False
        assert TripDispatchResult(errors=["name is required"]).success is False

    def test_trip_result_dump_includes_success(self):
        dumped = TripDispatchResult(trip_id="TRIP-7").model_dump(by_alias=True)

        assert dumped["success"] is True
        assert dumped["tripId"] == "TRIP-7"

    def test_bulk_counts(self):
        result = BulkDispatchResult(
            results=[
                DispatchResult.sent(Channel.SMS, "ok"),
                DispatchResult.failed(Channel.SMS, "no", "PROVIDER_REJECTED"),
            ]
        )

        assert result.accepted is True
        assert result.successful == 1
        assert result.failed == 1

    def test_bulk_rejection(self):
        result = BulkDispatchResult(
            rejection=ValidationReport.from_errors(["too many"], error_code="BATCH_SIZE_EXCEEDED")
        )

        assert result.accepted is False
        assert result.successful == 0
