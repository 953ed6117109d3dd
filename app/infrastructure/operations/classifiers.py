"""Error classifiers for provider exceptions.

Converts ``requests`` exceptions raised while talking to a delivery
provider (SendGrid, Mista) into standardized OperationResult objects, so
every transport reports failures the same way.

Error codes:
- PROVIDER_REJECTED: the provider answered with an HTTP error status
- NO_RESPONSE: the request was sent but nothing came back (connection
  failure, timeout)
- REQUEST_ERROR: the request could not be built or sent

Usage:
    from infrastructure.operations.classifiers import classify_request_error

    try:
        response = requests.post(url, json=payload, timeout=60)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_request_error(exc, provider="SMS")
"""

from typing import Any, Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

PROVIDER_REJECTED = "PROVIDER_REJECTED"
NO_RESPONSE = "NO_RESPONSE"
REQUEST_ERROR = "REQUEST_ERROR"


def _response_detail(response: requests.Response) -> str:
    """Best-effort human readable reason from a provider error response."""
    try:
        body: Any = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if body.get("message"):
            return str(body["message"])
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            if errors[0].get("message"):
                return str(errors[0]["message"])
    return response.reason or "Unknown error"


def classify_http_status(
    status_code: int, detail: str, provider: str, retry_after: Optional[int] = None
) -> OperationResult:
    """Classify a provider HTTP error status into OperationResult.

    Status Code Mapping:
    - 429: Rate limiting -> TRANSIENT_ERROR with retry_after
    - 401/403: Credentials rejected -> UNAUTHORIZED
    - 5xx: Server error -> TRANSIENT_ERROR
    - Other: PERMANENT_ERROR

    All outcomes carry the PROVIDER_REJECTED error code.
    """
    message = f"{provider} API Error: {detail} ({status_code})"

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            message,
            error_code=PROVIDER_REJECTED,
            retry_after=retry_after or 60,
        )

    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            message,
            error_code=PROVIDER_REJECTED,
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(message, error_code=PROVIDER_REJECTED)

    return OperationResult.permanent_error(message, error_code=PROVIDER_REJECTED)


def classify_request_error(exc: Exception, provider: str) -> OperationResult:
    """Classify an exception raised during a provider call.

    Args:
        exc: Exception raised by ``requests`` (or while preparing the call)
        provider: Label used in the message, e.g. "SMS" or "SendGrid"

    Returns:
        OperationResult with the error code set to PROVIDER_REJECTED,
        NO_RESPONSE or REQUEST_ERROR

    Example:
        >>> classify_request_error(requests.ConnectionError("refused"), "SMS").message
        'SMS API request failed: No response received'
    """
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        response = exc.response
        retry_after: Optional[int] = None
        header_value = response.headers.get("Retry-After")
        if header_value and header_value.isdigit():
            retry_after = int(header_value)
        return classify_http_status(
            response.status_code,
            _response_detail(response),
            provider,
            retry_after=retry_after,
        )

    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return OperationResult.transient_error(
            f"{provider} API request failed: No response received",
            error_code=NO_RESPONSE,
        )

    return OperationResult.permanent_error(
        f"{provider} API request failed: {exc}",
        error_code=REQUEST_ERROR,
    )
