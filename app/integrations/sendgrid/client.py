"""SendGrid v3 mail client."""

from typing import Any, Dict, Optional

import requests

from infrastructure.configuration import SendGridSettings
from infrastructure.logging import get_module_logger
from infrastructure.operations import (
    OperationResult,
    REQUEST_ERROR,
    classify_request_error,
)

logger = get_module_logger()

PROVIDER = "SendGrid"


def build_mail_payload(
    to: str,
    from_address: str,
    subject: str,
    text: str,
    html: Optional[str] = None,
    from_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a v3 mail/send request body for a single recipient."""
    sender: Dict[str, str] = {"email": from_address}
    if from_name:
        sender["name"] = from_name

    content = [{"type": "text/plain", "value": text}]
    if html:
        content.append({"type": "text/html", "value": html})

    return {
        "personalizations": [{"to": [{"email": to}]}],
        "from": sender,
        "subject": subject,
        "content": content,
    }


class SendGridClient:
    """Sends email through the SendGrid v3 mail API.

    Args:
        settings: SendGrid settings (API key, URL, sender).
        timeout: HTTP timeout in seconds.
    """

    def __init__(self, settings: SendGridSettings, timeout: int = 60):
        self.settings = settings
        self.timeout = timeout

    @property
    def from_address(self) -> str:
        return self.settings.FROM_EMAIL

    def send(
        self,
        to: str,
        from_address: str,
        subject: str,
        text: str,
        html: Optional[str] = None,
        from_name: Optional[str] = None,
    ) -> OperationResult:
        """Send one email.

        Returns:
            OperationResult, SUCCESS carrying ``{"message_id"}`` taken from
            the X-Message-Id response header.
        """
        api_key = self.settings.SENDGRID_API_KEY
        if not api_key:
            return OperationResult.permanent_error(
                f"{PROVIDER} API request failed: SENDGRID_API_KEY is missing",
                error_code=REQUEST_ERROR,
            )

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = build_mail_payload(to, from_address, subject, text, html, from_name)

        try:
            response = requests.post(
                self.settings.SENDGRID_API_URL,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            result = classify_request_error(e, PROVIDER)
            logger.warning(
                "email_provider_call_failed",
                recipient=to,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        return OperationResult.success(
            data={"message_id": response.headers.get("X-Message-Id")},
            message="Email sent successfully",
        )
