from typing import Any, Dict

from fastapi import APIRouter, Body

from api.responses import (
    VALIDATION_FAILED,
    error_response,
    rejection_response,
    success_response,
    validation_response,
)
from infrastructure.logging import get_module_logger
from infrastructure.services import NotificationServiceDep

logger = get_module_logger()
router = APIRouter(prefix="/trips", tags=["Trips"])

TRIP_SEND_FAILED = "TRIP_SEND_FAILED"


@router.post("/send")
def send_trip_notification(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Notify a traveler by email and/or SMS.

    Body: name, language, notificationType, destinationName, at least one
    of email and phoneNumber, remainingTime for trip_remaining_time, and
    optionally tripId.
    """
    logger.info(
        "trip_request_received",
        trip_id=payload.get("tripId"),
        notification_type=payload.get("notificationType"),
    )
    result = service.dispatch_trip(payload)
    if result.success:
        return success_response(result.model_dump(mode="json", by_alias=True))
    if result.errors:
        return error_response(
            "Validation failed", VALIDATION_FAILED, details=result.errors
        )
    return error_response(
        "Trip notification failed",
        TRIP_SEND_FAILED,
        details=result.model_dump(mode="json", by_alias=True),
    )


@router.post("/send-bulk")
def send_bulk_trip_notifications(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    """Send a batch of trip notifications (body key ``trips``)."""
    trips = payload.get("trips")
    report = service.validate_trip_batch(trips)
    if not report.valid:
        return rejection_response(report)

    results = service.dispatch_bulk_trips(trips)
    successful = sum(1 for result in results if result.success)
    return success_response(
        {
            "summary": {"successful": successful, "failed": len(results) - successful},
            "results": [
                result.model_dump(mode="json", by_alias=True) for result in results
            ],
        }
    )


@router.post("/validate")
def validate_trip(
    service: NotificationServiceDep,
    payload: Dict[str, Any] = Body(...),
):
    report = service.validate_trip(payload)
    return validation_response(report, "Trip request is valid")
