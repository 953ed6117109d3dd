"""
Unit tests for dependency injection providers.

Tests cover:
- Provider caching behavior
- SettingsDep / NotificationServiceDep with FastAPI dependency injection
- Dependency override pattern for testing
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from infrastructure.services import (
    NotificationServiceDep,
    SettingsDep,
    get_notification_service,
    get_settings,
    get_template_registry,
)
from infrastructure.templates import TemplateRegistry


@pytest.fixture(autouse=True)
def cleanup_provider_cache():
    """Clear provider caches after each test."""
    yield
    get_notification_service.cache_clear()
    get_template_registry.cache_clear()
    get_settings.cache_clear()


@pytest.mark.unit
class TestProviders:
    def test_get_settings_returns_cached_instance(self):
        assert isinstance(get_settings(), Settings)
        assert get_settings() is get_settings()

    def test_get_settings_cache_can_be_cleared(self):
        instance1 = get_settings()
        get_settings.cache_clear()

        assert get_settings() is not instance1

    def test_get_template_registry(self):
        registry = get_template_registry()

        assert isinstance(registry, TemplateRegistry)
        assert registry is get_template_registry()

    def test_get_notification_service_shares_registry(self):
        service = get_notification_service()

        assert isinstance(service, NotificationService)
        assert service.templates is get_template_registry()
        assert service.settings is get_settings()
        assert service.dispatcher.get_available_channels() == ["email", "sms"]


@pytest.mark.unit
class TestDependencyOverridePattern:
    def test_settings_dep_with_dependency_override(self):
        app = FastAPI()

        @app.get("/config")
        def get_config(settings: SettingsDep) -> dict:
            return {"git_sha": settings.GIT_SHA}

        mock_settings = MagicMock(spec=Settings)
        mock_settings.GIT_SHA = "abc123"
        app.dependency_overrides[get_settings] = lambda: mock_settings

        with TestClient(app) as client:
            response = client.get("/config")

        assert response.json() == {"git_sha": "abc123"}
        app.dependency_overrides.clear()

    def test_notification_service_dep_with_dependency_override(self):
        app = FastAPI()

        @app.get("/channels")
        def get_channels(service: NotificationServiceDep) -> dict:
            return {"channels": service.health_check()}

        mock_service = MagicMock(spec=NotificationService)
        mock_service.health_check.return_value = {"email": True, "sms": False}
        app.dependency_overrides[get_notification_service] = lambda: mock_service

        with TestClient(app) as client:
            response = client.get("/channels")

        assert response.json() == {"channels": {"email": True, "sms": False}}
        app.dependency_overrides.clear()
