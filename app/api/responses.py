"""JSON envelopes shared by the notification routes.

Every route answers ``{"success": true, "data": ...}`` or
``{"success": false, "error": {"message", "code", "details"?}}``.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.responses import JSONResponse

from infrastructure.notifications import (
    BulkDispatchResult,
    DispatchResult,
    ValidationReport,
)
from infrastructure.operations import OperationResult

INTERNAL_ERROR = "INTERNAL_ERROR"
VALIDATION_FAILED = "VALIDATION_FAILED"
TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
CONFIG_TEST_FAILED = "CONFIG_TEST_FAILED"


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": True, "data": data})


def error_response(
    message: str,
    code: str,
    status_code: int = 400,
    details: Optional[Any] = None,
) -> JSONResponse:
    error: dict = {"message": message, "code": code}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def dispatch_response(result: DispatchResult, failure_code: str) -> JSONResponse:
    """200 with the send outcome, or 400 carrying ``failure_code``."""
    if result.success:
        return success_response(
            {
                "messageId": result.message_id,
                "status": result.status.value,
                "message": result.message,
                "ticketId": result.ticket_id,
                "recipient": result.recipient,
            }
        )
    return error_response(
        result.message,
        failure_code,
        details=result.error,
    )


def bulk_response(result: BulkDispatchResult, recipient_key: str) -> JSONResponse:
    """Per-item results with a summary; a rejected batch is a 400."""
    if result.rejection is not None:
        return rejection_response(result.rejection)
    return success_response(
        {
            "summary": {"successful": result.successful, "failed": result.failed},
            "results": [
                {
                    recipient_key: item.recipient,
                    "ticketId": item.ticket_id,
                    "success": item.success,
                    "messageId": item.message_id,
                    "message": item.message,
                    "error": None if item.success else item.error,
                    "errorCode": item.error_code,
                }
                for item in result.results
            ],
        }
    )


def rejection_response(report: ValidationReport) -> JSONResponse:
    return error_response(
        "; ".join(report.errors), report.error_code or VALIDATION_FAILED
    )


def validation_response(report: ValidationReport, valid_message: str) -> JSONResponse:
    if report.valid:
        return success_response({"isValid": True, "message": valid_message})
    return error_response("Validation failed", VALIDATION_FAILED, details=report.errors)


def config_test_response(
    result: OperationResult, service_label: str, recipient_key: str, recipient: str
) -> JSONResponse:
    if result.is_success:
        return success_response(
            {
                "message": f"{service_label} service configuration is working correctly",
                recipient_key: recipient,
            }
        )
    return error_response(
        f"{service_label} service configuration failed",
        CONFIG_TEST_FAILED,
        details=result.message,
    )


def health_response(result: OperationResult) -> JSONResponse:
    return success_response(
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "configuration": result.data,
        }
    )
