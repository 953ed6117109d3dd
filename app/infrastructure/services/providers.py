"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from infrastructure.templates import TemplateRegistry, create_template_registry


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly to ensure singleton consistency:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/version")
        def get_version(settings: SettingsDep):
            return {"version": settings.GIT_SHA}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_template_registry() -> TemplateRegistry:
    """
    Get application-scoped template registry singleton.

    The YAML catalogs are read once per process.

    Returns:
        TemplateRegistry: Cached registry with every (domain, channel) catalog.
    """
    return create_template_registry()


@lru_cache
def get_notification_service() -> NotificationService:
    """
    Get application-scoped notification service singleton.

    Returns:
        NotificationService: Cached service with SendGrid and Mista channels
        configured from application settings.

    Usage:
        @router.post("/sms/send")
        def send_sms(service: NotificationServiceDep, payload: Dict[str, Any]):
            return service.dispatch_sms(payload)
    """
    return NotificationService(
        settings=get_settings(),
        templates=get_template_registry(),
    )
