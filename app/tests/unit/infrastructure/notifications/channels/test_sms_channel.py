"""Unit tests for SMSChannel."""

from unittest.mock import patch

import pytest

from infrastructure.notifications.channels.sms import TEST_MESSAGE, SMSChannel
from infrastructure.operations import OperationResult
from infrastructure.templates import EventDomain

FRENCH_RECEIVED = (
    "Bonjour Alice, votre problème T-1 a été reçu. Nous l'examinerons bientôt. "
    "Suivi: https://ces-frontend-zeta.vercel.app/followup?id=T-1"
)
ENGLISH_RECEIVED = (
    "Hi Alice, your issue T-1 has been received. We'll review it soon. "
    "Track: https://ces-frontend-zeta.vercel.app/followup?id=T-1"
)


@pytest.fixture
def sms_channel_factory(template_registry, renderer, mock_mista_client):
    def _factory(**kwargs):
        return SMSChannel(
            templates=template_registry,
            renderer=renderer,
            client=mock_mista_client,
            **kwargs,
        )

    return _factory


@pytest.fixture
def sms_channel(sms_channel_factory):
    return sms_channel_factory()


@pytest.mark.unit
class TestSMSChannelDispatch:
    def test_french_received_is_sent_as_unicode(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        result = sms_channel.dispatch(
            issue_payload_factory(channel="sms", language="fr", phoneNumber="+250 788 000 001")
        )

        assert result.success is True
        assert result.recipient == "250788000001"
        assert result.message_id == "mista-1"
        mock_mista_client.send.assert_called_once_with(
            recipient="250788000001",
            sender_id="E-Notifier",
            segment_kind="unicode",
            message=FRENCH_RECEIVED,
        )

    def test_english_received_is_plain(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        sms_channel.dispatch(issue_payload_factory(channel="sms"))

        kwargs = mock_mista_client.send.call_args.kwargs
        assert kwargs["segment_kind"] == "plain"
        assert kwargs["message"] == ENGLISH_RECEIVED

    def test_kinyarwanda_is_always_unicode(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        sms_channel.dispatch(issue_payload_factory(channel="sms", language="rw"))

        assert mock_mista_client.send.call_args.kwargs["segment_kind"] == "unicode"

    def test_segment_cap_rejects_before_transport(
        self, sms_channel_factory, mock_mista_client, issue_payload_factory
    ):
        channel = sms_channel_factory(max_segments=1)

        result = channel.dispatch(issue_payload_factory(channel="sms", language="fr"))

        assert result.success is False
        assert result.error_code == "VALIDATION_FAILED"
        assert result.message == "Validation failed: Message too long: 2 parts (max 1 allowed)"
        mock_mista_client.send.assert_not_called()

    def test_invalid_phone_number(self, sms_channel, mock_mista_client, issue_payload_factory):
        result = sms_channel.dispatch(issue_payload_factory(channel="sms", phoneNumber="123"))

        assert result.success is False
        assert result.error == (
            "Validation failed: phoneNumber must be a valid phone number (7-15 digits)"
        )
        mock_mista_client.send.assert_not_called()

    def test_trip_sms(self, sms_channel, mock_mista_client, trip_payload_factory):
        result = sms_channel.dispatch(trip_payload_factory(), EventDomain.TRIP)

        assert result.success is True
        assert result.ticket_id == "TRIP-7"
        assert mock_mista_client.send.call_args.kwargs["message"] == (
            "Hi Bob, you are 2 hours away from Kigali. Please get ready for arrival. "
            "Safe travels!"
        )

    def test_email_field_is_ignored(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        payload = issue_payload_factory(channel="sms", email=5)

        assert sms_channel.validate(payload).valid is True
        result = sms_channel.dispatch(payload)

        assert result.success is True
        assert result.recipient == "250788000001"
        mock_mista_client.send.assert_called_once()

    def test_provider_rejection(self, sms_channel, mock_mista_client, issue_payload_factory):
        mock_mista_client.send.return_value = OperationResult.permanent_error(
            "SMS API Error: Invalid recipient (400)", error_code="PROVIDER_REJECTED"
        )

        result = sms_channel.dispatch(issue_payload_factory(channel="sms"))

        assert result.success is False
        assert result.error_code == "PROVIDER_REJECTED"
        assert result.retryable is False


@pytest.mark.unit
class TestSMSChannelBulk:
    def test_identical_messages_share_one_call(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        requests = [
            issue_payload_factory(channel="sms", phoneNumber="250788000001"),
            issue_payload_factory(channel="sms", phoneNumber="250788000002"),
        ]

        results = sms_channel.dispatch_bulk(requests)

        assert [r.success for r in results] == [True, True]
        assert [r.recipient for r in results] == ["250788000001", "250788000002"]
        mock_mista_client.send.assert_called_once_with(
            recipient="250788000001, 250788000002",
            sender_id="E-Notifier",
            segment_kind="plain",
            message=ENGLISH_RECEIVED,
        )

    def test_invalid_item_is_isolated(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        requests = [
            issue_payload_factory(channel="sms", phoneNumber="250788000001"),
            issue_payload_factory(channel="sms", phoneNumber="12"),
            issue_payload_factory(channel="sms", phoneNumber="250788000003"),
        ]

        results = sms_channel.dispatch_bulk(requests)

        assert [r.success for r in results] == [True, False, True]
        assert results[1].error_code == "VALIDATION_FAILED"
        assert mock_mista_client.send.call_count == 1
        assert (
            mock_mista_client.send.call_args.kwargs["recipient"]
            == "250788000001, 250788000003"
        )

    def test_distinct_messages_are_sent_separately(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        requests = [
            issue_payload_factory(channel="sms", ticketId="T-1"),
            issue_payload_factory(channel="sms", ticketId="T-2"),
            issue_payload_factory(channel="sms", ticketId="T-1", phoneNumber="250788000009"),
        ]

        results = sms_channel.dispatch_bulk(requests)

        assert [r.ticket_id for r in results] == ["T-1", "T-2", "T-1"]
        assert mock_mista_client.send.call_count == 2

    def test_group_failure_is_shared(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        mock_mista_client.send.side_effect = RuntimeError("connection reset")
        requests = [
            issue_payload_factory(channel="sms", phoneNumber="250788000001"),
            issue_payload_factory(channel="sms", phoneNumber="250788000002"),
        ]

        results = sms_channel.dispatch_bulk(requests)

        assert [r.success for r in results] == [False, False]
        assert all(r.error_code == "DISPATCH_ERROR" for r in results)
        assert results[0].message == "Failed to send sms: connection reset"

    def test_member_failure_is_isolated(
        self, sms_channel, mock_mista_client, issue_payload_factory
    ):
        finish = sms_channel._finish
        failed_once = []

        def finish_or_fail(member, operation):
            if not failed_once:
                failed_once.append(member)
                raise RuntimeError("formatter down")
            return finish(member, operation)

        requests = [
            issue_payload_factory(channel="sms", phoneNumber="250788000001"),
            issue_payload_factory(channel="sms", phoneNumber="250788000002"),
        ]
        with patch.object(sms_channel, "_finish", side_effect=finish_or_fail):
            results = sms_channel.dispatch_bulk(requests)

        assert results[0].success is False
        assert results[0].error_code == "DISPATCH_ERROR"
        assert results[0].error == "formatter down"
        assert results[0].recipient == "250788000001"
        assert results[1].success is True
        mock_mista_client.send.assert_called_once()

    def test_grouping_disabled_sends_each_item(
        self, sms_channel_factory, mock_mista_client, issue_payload_factory
    ):
        channel = sms_channel_factory(group_identical=False)
        requests = [
            issue_payload_factory(channel="sms", phoneNumber="250788000001"),
            issue_payload_factory(channel="sms", phoneNumber="250788000002"),
        ]

        results = channel.dispatch_bulk(requests)

        assert [r.success for r in results] == [True, True]
        assert mock_mista_client.send.call_count == 2


@pytest.mark.unit
class TestSMSChannelHealthAndTest:
    def test_health_check(self, sms_channel):
        result = sms_channel.health_check()

        assert result.is_success
        assert result.data == {"hasApiToken": True, "hasSenderId": True, "isConfigured": True}

    def test_health_check_missing_token(
        self, sms_channel, mock_mista_client, settings_factory
    ):
        mock_mista_client.settings = settings_factory(SMS_API_TOKEN=None).mista

        result = sms_channel.health_check()

        assert result.is_success is False
        assert result.data["hasApiToken"] is False

    def test_send_test(self, sms_channel, mock_mista_client):
        result = sms_channel.send_test("+250 788 606 765")

        assert result.is_success
        mock_mista_client.send.assert_called_once_with(
            recipient="250788606765",
            sender_id="E-Notifier",
            segment_kind="plain",
            message=TEST_MESSAGE,
        )

    def test_send_test_rejects_short_number(self, sms_channel, mock_mista_client):
        result = sms_channel.send_test("123")

        assert result.is_success is False
        assert result.message == "phoneNumber must be a valid phone number (7-15 digits)"
        mock_mista_client.send.assert_not_called()
