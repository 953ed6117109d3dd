"""External integration settings."""

from infrastructure.configuration.integrations.mista import MistaSettings
from infrastructure.configuration.integrations.sendgrid import SendGridSettings

__all__ = [
    "MistaSettings",
    "SendGridSettings",
]
