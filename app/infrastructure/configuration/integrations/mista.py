"""Mista SMS integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class MistaSettings(IntegrationSettings):
    """Mista.io SMS API configuration.

    Environment Variables:
        SMS_API_TOKEN: Bearer token for the Mista API
        SMS_API_URL: SMS send endpoint
        SMS_SENDER_ID: Sender id shown on the handset
        TEST_PHONE: Recipient used by the configuration test send
    """

    SMS_API_TOKEN: str | None = Field(default=None, alias="SMS_API_TOKEN")
    SMS_API_URL: str = Field(default="https://api.mista.io/sms", alias="SMS_API_URL")
    SMS_SENDER_ID: str = Field(default="E-Notifier", alias="SMS_SENDER_ID")
    TEST_PHONE: str = Field(default="250788606765", alias="TEST_PHONE")
