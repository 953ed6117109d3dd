"""Fixtures for the HTTP API tests."""

import pytest
from fastapi.testclient import TestClient

from infrastructure.notifications import EmailChannel, NotificationService, SMSChannel
from infrastructure.services import get_notification_service, get_settings
from server.server import handler


@pytest.fixture
def notification_service(
    settings, template_registry, renderer, mock_sendgrid_client, mock_mista_client
):
    """Service with real channels over mocked provider clients."""
    channels = {
        "email": EmailChannel(
            templates=template_registry,
            renderer=renderer,
            client=mock_sendgrid_client,
            from_name="CES Team",
            trip_from_name="CES Travel Team",
        ),
        "sms": SMSChannel(
            templates=template_registry, renderer=renderer, client=mock_mista_client
        ),
    }
    return NotificationService(
        settings, template_registry, channels=channels, renderer=renderer
    )


@pytest.fixture
def client(settings, notification_service):
    handler.dependency_overrides[get_notification_service] = lambda: notification_service
    handler.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(handler, raise_server_exceptions=False)
    handler.dependency_overrides.clear()
