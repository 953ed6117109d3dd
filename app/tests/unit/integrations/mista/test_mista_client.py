"""Unit tests for the Mista SMS client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from infrastructure.operations import (
    NO_RESPONSE,
    PROVIDER_REJECTED,
    REQUEST_ERROR,
    OperationStatus,
)
from integrations.mista import MistaClient, create_authorization_header


@pytest.fixture
def client(settings):
    return MistaClient(settings.mista, timeout=5)


def json_response(body):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = body
    return response


@pytest.mark.unit
class TestCreateAuthorizationHeader:
    def test_bearer_header(self):
        assert create_authorization_header("abc") == ("Authorization", "Bearer abc")

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token_raises(self, token):
        with pytest.raises(ValueError, match="SMS_API_TOKEN is missing"):
            create_authorization_header(token)


@pytest.mark.unit
class TestMistaClientSend:
    @patch("integrations.mista.client.requests.post")
    def test_payload_and_message_id(self, mock_post, client):
        mock_post.return_value = json_response(
            {"status": "success", "data": {"uid": "sms-42"}}
        )

        result = client.send(
            recipient="250788000001, 250788000002",
            sender_id=client.sender_id,
            segment_kind="plain",
            message="Hello",
        )

        assert result.is_success
        assert result.data["message_id"] == "sms-42"
        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.mista.io/sms"
        assert kwargs["json"] == {
            "recipient": "250788000001, 250788000002",
            "sender_id": "E-Notifier",
            "type": "plain",
            "message": "Hello",
        }
        assert kwargs["headers"]["Authorization"] == "Bearer test-token"
        assert kwargs["timeout"] == 5

    @patch("integrations.mista.client.requests.post")
    def test_top_level_id_is_used(self, mock_post, client):
        mock_post.return_value = json_response({"message_id": "m-1"})

        result = client.send("250788000001", "E-Notifier", "unicode", "Muraho")

        assert result.data["message_id"] == "m-1"

    @patch("integrations.mista.client.requests.post")
    def test_non_json_body(self, mock_post, client):
        response = json_response(None)
        response.json.side_effect = ValueError("no json")
        mock_post.return_value = response

        result = client.send("250788000001", "E-Notifier", "plain", "Hi")

        assert result.is_success
        assert result.data == {"message_id": None, "response": None}

    @patch("integrations.mista.client.requests.post")
    def test_missing_token(self, mock_post, settings_factory):
        client = MistaClient(settings_factory(SMS_API_TOKEN=None).mista)

        result = client.send("250788000001", "E-Notifier", "plain", "Hi")

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == REQUEST_ERROR
        assert "SMS_API_TOKEN is missing" in result.message
        mock_post.assert_not_called()

    @patch("integrations.mista.client.requests.post")
    def test_provider_error_status(self, mock_post, client):
        error_response = requests.Response()
        error_response.status_code = 401
        error_response.reason = "Unauthorized"
        error_response._content = b'{"message": "Invalid token"}'
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError(
            response=error_response
        )
        mock_post.return_value = response

        result = client.send("250788000001", "E-Notifier", "plain", "Hi")

        assert result.status == OperationStatus.UNAUTHORIZED
        assert result.error_code == PROVIDER_REJECTED
        assert result.message == "SMS API Error: Invalid token (401)"

    @patch("integrations.mista.client.requests.post")
    def test_connection_error(self, mock_post, client):
        mock_post.side_effect = requests.ConnectionError("refused")

        result = client.send("250788000001", "E-Notifier", "plain", "Hi")

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == NO_RESPONSE
        assert result.message == "SMS API request failed: No response received"
