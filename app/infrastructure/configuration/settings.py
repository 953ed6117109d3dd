"""CES Notifier configuration settings - main aggregator."""

import re
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    MistaSettings,
    SendGridSettings,
)

# Feature settings
from infrastructure.configuration.features import DispatchSettings

_SENDER_ADDRESS = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Settings(BaseSettings):
    """CES Notifier configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: Delivery providers (SendGrid for email, Mista for SMS)
    - **Features**: Dispatch behavior (batch limits, SMS segments, date formats)

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        sender = settings.sendgrid.FROM_EMAIL
        sender_id = settings.mista.SMS_SENDER_ID

        if settings.dispatch.SMS_GROUP_IDENTICAL_MESSAGES:
            # Bulk SMS with the same text share one provider call...

        problems = settings.delivery_config_errors()
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    sendgrid: SendGridSettings
    mista: MistaSettings

    # Feature settings
    dispatch: DispatchSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def delivery_config_errors(self) -> List[str]:
        """List problems with the delivery provider configuration.

        An empty list means both channels are configured well enough to
        attempt a send.
        """
        errors: List[str] = []
        api_key = self.sendgrid.SENDGRID_API_KEY
        if not api_key:
            errors.append("SENDGRID_API_KEY environment variable is required")
        elif not api_key.startswith("SG."):
            errors.append('SENDGRID_API_KEY must start with "SG."')

        if not self.sendgrid.FROM_EMAIL:
            errors.append("FROM_EMAIL environment variable is required")
        elif not _SENDER_ADDRESS.match(self.sendgrid.FROM_EMAIL):
            errors.append("FROM_EMAIL must be a valid email address")

        if not self.mista.SMS_API_TOKEN:
            errors.append(
                "SMS_API_TOKEN environment variable is required for SMS functionality"
            )
        if not self.mista.SMS_SENDER_ID:
            errors.append(
                "SMS_SENDER_ID environment variable is required for SMS functionality"
            )
        return errors

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "sendgrid": SendGridSettings,
            "mista": MistaSettings,
            # Features
            "dispatch": DispatchSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
