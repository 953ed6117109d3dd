"""Unit tests for Settings."""

import pytest


@pytest.mark.unit
class TestSettings:
    def test_dispatch_defaults(self, settings):
        assert settings.dispatch.MAX_EMAIL_BATCH_SIZE == 50
        assert settings.dispatch.MAX_TRIP_BATCH_SIZE == 50
        assert settings.dispatch.MAX_SMS_BATCH_SIZE == 30
        assert settings.dispatch.MAX_SMS_SEGMENTS == 5
        assert settings.dispatch.SMS_GROUP_IDENTICAL_MESSAGES is True

    def test_is_production_follows_prefix(self, settings_factory):
        assert settings_factory().is_production is True
        assert settings_factory(PREFIX="dev-").is_production is False


@pytest.mark.unit
class TestDeliveryConfigErrors:
    def test_complete_configuration(self, settings):
        assert settings.delivery_config_errors() == []

    def test_missing_values(self, settings_factory):
        settings = settings_factory(
            SENDGRID_API_KEY=None, FROM_EMAIL="", SMS_API_TOKEN=None, SMS_SENDER_ID=""
        )

        assert settings.delivery_config_errors() == [
            "SENDGRID_API_KEY environment variable is required",
            "FROM_EMAIL environment variable is required",
            "SMS_API_TOKEN environment variable is required for SMS functionality",
            "SMS_SENDER_ID environment variable is required for SMS functionality",
        ]

    def test_malformed_values(self, settings_factory):
        settings = settings_factory(SENDGRID_API_KEY="key", FROM_EMAIL="not-an-address")

        assert settings.delivery_config_errors() == [
            'SENDGRID_API_KEY must start with "SG."',
            "FROM_EMAIL must be a valid email address",
        ]
