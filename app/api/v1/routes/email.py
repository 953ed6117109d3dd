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
from infrastructure.templates import Channel, EmailTemplate

logger = get_module_logger()
router = APIRouter(prefix="/email", tags=["Email"])


@router.post("/send")
def send_email(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Send one issue notification email.

    Body: email, name, language, subject (issue status), and optionally
    ticketId, issueTitle, assignedTo, escalatedTo, responseMessage.
    """
    logger.info(
        "email_request_received",
        ticket_id=payload.get("ticketId"),
        subject=payload.get("subject"),
    )
    result = service.dispatch_email(payload)
    return dispatch_response(result, "EMAIL_SEND_FAILED")


@router.post("/send-bulk")
def send_bulk_email(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Send a batch of issue notification emails (body key ``emails``)."""
    emails = payload.get("emails")
    logger.info(
        "bulk_email_request_received",
        count=len(emails) if isinstance(emails, list) else None,
    )
    return bulk_response(service.dispatch_bulk_email(emails), "email")


@router.get("/templates")
def list_email_templates(
    service: NotificationServiceDep,
):
    return success_response(
        {
            "availableStatuses": service.list_event_types(Channel.EMAIL),
            "availableLanguages": service.list_languages(),
            "templates": [
                {"status": status, "languages": languages}
                for status, languages in service.template_languages(
                    Channel.EMAIL
                ).items()
            ],
        }
    )


@router.get("/template/{status}/{language}")
def get_email_template(
    status: str,
    language: str,
    service: NotificationServiceDep,
):
    template = service.get_template(Channel.EMAIL, status, language)
    if not isinstance(template, EmailTemplate):
        return error_response(
            f"Template not found for status '{status}' and language '{language}'",
            TEMPLATE_NOT_FOUND,
            status_code=404,
        )
    return success_response(
        {
            "status": status,
            "language": language,
            "template": {
                "subject": template.subject,
                "body": template.body,
                "hasHtml": template.html_body is not None,
            },
        }
    )


@router.post("/validate")
def validate_email(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Validate an email request without sending it."""
    report = service.validate(Channel.EMAIL, payload)
    return validation_response(report, "Email request is valid")


@router.post("/test")
def test_email_configuration(
    service: NotificationServiceDep,
    payload: Optional[Dict[str, Any]] = Body(default=None),
):
    """Send the configuration test email to ``testEmail`` or TEST_EMAIL."""
    recipient = (payload or {}).get("testEmail") or service.settings.sendgrid.TEST_EMAIL
    result = service.send_test(Channel.EMAIL, recipient)
    return config_test_response(result, "Email", "testEmail", recipient)


@router.get("/health")
def email_health(
    service: NotificationServiceDep,
):
    return health_response(service.channel_health(Channel.EMAIL))
