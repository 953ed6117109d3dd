"""Dispatch feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class DispatchSettings(FeatureSettings):
    """Notification dispatch behavior.

    Environment Variables:
        MAX_EMAIL_BATCH_SIZE: Maximum emails accepted in one bulk request
        MAX_SMS_BATCH_SIZE: Maximum SMS accepted in one bulk request
        MAX_TRIP_BATCH_SIZE: Maximum trip notifications accepted in one bulk request
        MAX_SMS_SEGMENTS: Reject SMS that would need more segments than this
        SMS_GROUP_IDENTICAL_MESSAGES: Send identical bulk SMS in one provider call
        SMS_DATE_FORMAT: strftime format for {currentDate} in SMS
        EMAIL_DATETIME_FORMAT: strftime format for {currentDate} in email
        TRANSPORT_TIMEOUT_SECONDS: HTTP timeout for provider calls
    """

    MAX_EMAIL_BATCH_SIZE: int = Field(default=50, alias="MAX_EMAIL_BATCH_SIZE")
    MAX_SMS_BATCH_SIZE: int = Field(default=30, alias="MAX_SMS_BATCH_SIZE")
    MAX_TRIP_BATCH_SIZE: int = Field(default=50, alias="MAX_TRIP_BATCH_SIZE")
    MAX_SMS_SEGMENTS: int = Field(default=5, alias="MAX_SMS_SEGMENTS")
    SMS_GROUP_IDENTICAL_MESSAGES: bool = Field(
        default=True, alias="SMS_GROUP_IDENTICAL_MESSAGES"
    )
    SMS_DATE_FORMAT: str = Field(default="%Y-%m-%d", alias="SMS_DATE_FORMAT")
    EMAIL_DATETIME_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S", alias="EMAIL_DATETIME_FORMAT"
    )
    TRANSPORT_TIMEOUT_SECONDS: int = Field(
        default=60, alias="TRANSPORT_TIMEOUT_SECONDS"
    )
