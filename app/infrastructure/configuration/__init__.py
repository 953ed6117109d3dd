"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the CES
Notifier using Pydantic BaseSettings with domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    SendGridSettings, MistaSettings: Delivery provider settings
    DispatchSettings: Dispatch behavior settings

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    api_url = settings.sendgrid.SENDGRID_API_URL
    max_parts = settings.dispatch.MAX_SMS_SEGMENTS

    # Check environment
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.features import DispatchSettings
from infrastructure.configuration.integrations import MistaSettings, SendGridSettings
from infrastructure.configuration.settings import Settings

__all__ = ["Settings", "SendGridSettings", "MistaSettings", "DispatchSettings"]
