"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    TemplateRegistryDep,
    NotificationServiceDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_template_registry,
    get_notification_service,
)

__all__ = [
    "SettingsDep",
    "TemplateRegistryDep",
    "NotificationServiceDep",
    "get_settings",
    "get_template_registry",
    "get_notification_service",
]
