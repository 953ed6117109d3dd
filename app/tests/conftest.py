"""Shared fixtures for the CES Notifier test suite."""

from datetime import datetime
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.configuration import (
    DispatchSettings,
    MistaSettings,
    SendGridSettings,
    Settings,
)
from infrastructure.operations import OperationResult
from infrastructure.templates import TemplateRenderer, create_template_registry
from integrations.mista import MistaClient
from integrations.sendgrid import SendGridClient

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 0)


@pytest.fixture
def settings_factory():
    """Factory for Settings built from explicit values only.

    Example:
        settings = settings_factory(SMS_SENDER_ID="", MAX_SMS_SEGMENTS=2)
    """

    def _factory(**overrides: Any) -> Settings:
        sendgrid_values = {
            "SENDGRID_API_KEY": "SG.test-key",
            "FROM_EMAIL": "support@example.com",
            "FROM_NAME": "CES Team",
            "TRIP_FROM_NAME": "CES Travel Team",
            "TEST_EMAIL": "test@example.com",
        }
        mista_values = {
            "SMS_API_TOKEN": "test-token",
            "SMS_SENDER_ID": "E-Notifier",
            "TEST_PHONE": "250788606765",
        }
        dispatch_values: Dict[str, Any] = {}
        top_level: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key in sendgrid_values or key == "SENDGRID_API_URL":
                sendgrid_values[key] = value
            elif key in mista_values or key == "SMS_API_URL":
                mista_values[key] = value
            elif key in DispatchSettings.model_fields:
                dispatch_values[key] = value
            else:
                top_level[key] = value

        return Settings(
            sendgrid=SendGridSettings(_env_file=None, **sendgrid_values),
            mista=MistaSettings(_env_file=None, **mista_values),
            dispatch=DispatchSettings(_env_file=None, **dispatch_values),
            _env_file=None,
            **top_level,
        )

    return _factory


@pytest.fixture
def settings(settings_factory) -> Settings:
    return settings_factory()


@pytest.fixture(scope="session")
def template_registry():
    """Registry loaded from the catalogs shipped with the package."""
    return create_template_registry()


@pytest.fixture
def renderer() -> TemplateRenderer:
    """Renderer with a fixed clock (2024-05-17 09:30:00)."""
    return TemplateRenderer(now=lambda: FIXED_NOW)


@pytest.fixture
def mock_sendgrid_client(settings):
    """SendGridClient mock that accepts every message."""
    client = MagicMock(spec=SendGridClient)
    client.settings = settings.sendgrid
    client.from_address = settings.sendgrid.FROM_EMAIL
    client.send.return_value = OperationResult.success(
        data={"message_id": "sg-message-1"}, message="Email sent successfully"
    )
    return client


@pytest.fixture
def mock_mista_client(settings):
    """MistaClient mock that accepts every message."""
    client = MagicMock(spec=MistaClient)
    client.settings = settings.mista
    client.sender_id = settings.mista.SMS_SENDER_ID
    client.send.return_value = OperationResult.success(
        data={"message_id": "mista-1", "response": {"status": "success"}},
        message="SMS sent successfully",
    )
    return client


@pytest.fixture
def issue_payload_factory():
    """Factory for issue notification payloads (camelCase wire format).

    Example:
        payload = issue_payload_factory(subject="assigned", assignedTo="Bob")
        sms_payload = issue_payload_factory(channel="sms", phoneNumber="+250 788 000 001")
    """

    def _factory(channel: str = "email", **overrides: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": "Alice",
            "language": "english",
            "subject": "received",
            "ticketId": "T-1",
            "issueTitle": "Broken streetlight",
        }
        if channel == "email":
            payload["email"] = "alice@example.com"
        else:
            payload["phoneNumber"] = "250788000001"
        payload.update(overrides)
        return {key: value for key, value in payload.items() if value is not None}

    return _factory


@pytest.fixture
def trip_payload_factory():
    """Factory for trip notification payloads.

    Both recipients are set unless overridden with None.
    """

    def _factory(**overrides: Any) -> Dict[str, Any]:
        payload: Dict[str, Optional[Any]] = {
            "email": "bob@example.com",
            "phoneNumber": "250788000002",
            "name": "Bob",
            "language": "english",
            "notificationType": "trip_remaining_time",
            "destinationName": "Kigali",
            "remainingTime": "2 hours",
            "tripId": "TRIP-7",
        }
        payload.update(overrides)
        return {key: value for key, value in payload.items() if value is not None}

    return _factory
