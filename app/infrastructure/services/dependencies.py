"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from infrastructure.templates import TemplateRegistry
from infrastructure.services.providers import (
    get_settings,
    get_template_registry,
    get_notification_service,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Template registry dependency
TemplateRegistryDep = Annotated[TemplateRegistry, Depends(get_template_registry)]

# Notification service dependency - email, SMS and trip dispatch
NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]

__all__ = [
    "SettingsDep",
    "TemplateRegistryDep",
    "NotificationServiceDep",
]
