"""Mista.io SMS client."""

from typing import Any, Optional

import requests

from infrastructure.configuration import MistaSettings
from infrastructure.logging import get_module_logger
from infrastructure.operations import (
    OperationResult,
    REQUEST_ERROR,
    classify_request_error,
)

logger = get_module_logger()

PROVIDER = "SMS"


def create_authorization_header(token: Optional[str]):
    """Build the bearer authorization header for the Mista API."""
    if not token:
        error = "SMS_API_TOKEN is missing"
        logger.error("authorization_header_creation_failed", error=error)
        raise ValueError(error)
    return "Authorization", "Bearer {}".format(token)


def _message_id(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for container in (body, body.get("data")):
        if isinstance(container, dict):
            for key in ("uid", "message_id", "id"):
                if container.get(key):
                    return str(container[key])
    return None


class MistaClient:
    """Sends SMS through the Mista.io HTTP API.

    One call can carry several recipients as a comma separated list; the
    provider accepts or rejects the call as a whole.

    Args:
        settings: Mista settings (token, URL, sender id).
        timeout: HTTP timeout in seconds.
    """

    def __init__(self, settings: MistaSettings, timeout: int = 60):
        self.settings = settings
        self.timeout = timeout

    @property
    def sender_id(self) -> str:
        return self.settings.SMS_SENDER_ID

    def send(
        self,
        recipient: str,
        sender_id: str,
        segment_kind: str,
        message: str,
    ) -> OperationResult:
        """Send one SMS.

        Args:
            recipient: Digits-only phone number, or several joined with ", ".
            sender_id: Sender id shown on the handset.
            segment_kind: "plain" or "unicode".
            message: Rendered message text.

        Returns:
            OperationResult, SUCCESS carrying ``{"message_id", "response"}``.
        """
        try:
            header_key, header_value = create_authorization_header(
                self.settings.SMS_API_TOKEN
            )
        except ValueError as e:
            return OperationResult.permanent_error(
                f"{PROVIDER} API request failed: {e}", error_code=REQUEST_ERROR
            )

        payload = {
            "recipient": recipient,
            "sender_id": sender_id,
            "type": segment_kind,
            "message": message,
        }
        headers = {header_key: header_value, "Content-Type": "application/json"}

        try:
            response = requests.post(
                self.settings.SMS_API_URL,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            result = classify_request_error(e, PROVIDER)
            logger.warning(
                "sms_provider_call_failed",
                recipient=recipient,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        try:
            body = response.json()
        except ValueError:
            body = None

        return OperationResult.success(
            data={"message_id": _message_id(body), "response": body},
            message="SMS sent successfully",
        )
