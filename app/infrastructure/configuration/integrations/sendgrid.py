"""SendGrid email integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SendGridSettings(IntegrationSettings):
    """SendGrid mail API configuration.

    Environment Variables:
        SENDGRID_API_KEY: SendGrid API key (starts with "SG.")
        SENDGRID_API_URL: Mail send endpoint
        FROM_EMAIL: Sender address for every outgoing email
        FROM_NAME: Sender display name for issue notifications
        TRIP_FROM_NAME: Sender display name for trip notifications
        TEST_EMAIL: Recipient used by the configuration test send

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        api_key = settings.sendgrid.SENDGRID_API_KEY
        sender = settings.sendgrid.FROM_EMAIL
        ```
    """

    SENDGRID_API_KEY: str | None = Field(default=None, alias="SENDGRID_API_KEY")
    SENDGRID_API_URL: str = Field(
        default="https://api.sendgrid.com/v3/mail/send", alias="SENDGRID_API_URL"
    )
    FROM_EMAIL: str = Field(default="", alias="FROM_EMAIL")
    FROM_NAME: str = Field(default="CES Team", alias="FROM_NAME")
    TRIP_FROM_NAME: str = Field(default="CES Travel Team", alias="TRIP_FROM_NAME")
    TEST_EMAIL: str = Field(default="test@example.com", alias="TEST_EMAIL")
