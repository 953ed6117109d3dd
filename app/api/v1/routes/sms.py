from typing import Any, Dict, Optional

from fastapi import APIRouter, Body

from api.responses import (
    TEMPLATE_NOT_FOUND,
    bulk_response,
    config_test_response,
    dispatch_response,
    error_response,
    health_response,
    success_response,
    validation_response,
)
from infrastructure.logging import get_module_logger
from infrastructure.services import NotificationServiceDep
from infrastructure.templates import Channel

logger = get_module_logger()
router = APIRouter(prefix="/sms", tags=["SMS"])


@router.post("/send")
def send_sms(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Send one issue notification SMS.

    Body: phoneNumber, name, language, subject (issue status), and
    optionally ticketId, issueTitle, assignedTo, escalatedTo,
    responseMessage.
    """
    logger.info(
        "sms_request_received",
        ticket_id=payload.get("ticketId"),
        subject=payload.get("subject"),
    )
    result = service.dispatch_sms(payload)
    return dispatch_response(result, "SMS_SEND_FAILED")


@router.post("/send-bulk")
def send_bulk_sms(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Send a batch of issue notification SMS (body key ``smsList``)."""
    sms_list = payload.get("smsList")
    logger.info(
        "bulk_sms_request_received",
        count=len(sms_list) if isinstance(sms_list, list) else None,
    )
    return bulk_response(service.dispatch_bulk_sms(sms_list), "phoneNumber")


@router.get("/templates")
def list_sms_templates(
    service: NotificationServiceDep,
):
    return success_response(
        {
            "availableStatuses": service.list_event_types(Channel.SMS),
            "availableLanguages": service.list_languages(),
            "templates": [
                {"status": status, "languages": languages}
                for status, languages in service.template_languages(Channel.SMS).items()
            ],
        }
    )


@router.get("/template/{status}/{language}")
def get_sms_template(
    status: str,
    language: str,
    service: NotificationServiceDep,
):
    """SMS template with its size measured on sample values."""
    template = service.get_template(Channel.SMS, status, language)
    info = service.template_info(status, language)
    if template is None or info is None:
        return error_response(
            f"SMS template not found for status '{status}' and language '{language}'",
            TEMPLATE_NOT_FOUND,
            status_code=404,
        )
    return success_response(
        {
            "status": status,
            "language": language,
            "template": {
                "message": template.message,
                "characterCount": info.segment_info.total_chars,
                "parts": info.segment_info.segments,
                "isMultiPart": info.segment_info.multi_part,
                "encoding": info.encoding.value,
            },
        }
    )


@router.post("/validate")
def validate_sms(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Validate an SMS request without sending it, including its length."""
    report = service.validate(Channel.SMS, payload)
    return validation_response(report, "SMS request is valid")


@router.post("/test")
def test_sms_configuration(
    service: NotificationServiceDep,
    payload: Optional[Dict[str, Any]] = Body(default=None),
):
    """Send the configuration test SMS to ``testPhone`` or TEST_PHONE."""
    recipient = (payload or {}).get("testPhone") or service.settings.mista.TEST_PHONE
    result = service.send_test(Channel.SMS, recipient)
    return config_test_response(result, "SMS", "testPhone", recipient)


@router.get("/health")
def sms_health(
    service: NotificationServiceDep,
):
    return health_response(service.channel_health(Channel.SMS))
