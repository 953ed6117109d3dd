"""Notification dispatcher with per-channel routing.

Routes issue notifications to a single channel and fans trip
notifications out to every channel the request carries a recipient for.

Usage Example:
    from infrastructure.notifications import (
        EmailChannel,
        NotificationDispatcher,
        SMSChannel,
    )

    dispatcher = NotificationDispatcher(
        channels={"email": email_channel, "sms": sms_channel},
    )

    result = dispatcher.dispatch_trip(
        {
            "phoneNumber": "250788000000",
            "name": "Bob",
            "language": "english",
            "notificationType": "trip_remaining_time",
            "destinationName": "Kigali",
            "remainingTime": "2 hours",
        }
    )
    logger.info("trip_dispatched", success=result.success)
"""

from typing import Any, Dict, List, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel, as_text
from infrastructure.notifications.models import (
    DispatchErrorCode,
    DispatchResult,
    TripDispatchResult,
    ValidationReport,
)
from infrastructure.notifications.validation import (
    TRIP_FIELDS,
    sanitize_request,
    validate_trip_request,
)
from infrastructure.templates import Channel, EventDomain

logger = get_module_logger()


class NotificationDispatcher:
    """Multi-channel notification dispatcher.

    Attributes:
        channels: Dict mapping channel name to NotificationChannel instance

    Example:
        dispatcher = NotificationDispatcher(
            channels={"email": EmailChannel(...), "sms": SMSChannel(...)},
        )

        result = dispatcher.dispatch("sms", request)
    """

    def __init__(
        self,
        channels: Dict[str, NotificationChannel],
    ):
        self.channels = channels

        logger.info(
            "initialized_notification_dispatcher",
            channels=list(channels.keys()),
        )

    def dispatch(
        self,
        channel_name: str,
        request: Any,
        domain: EventDomain = EventDomain.ISSUE,
    ) -> DispatchResult:
        """Send one notification through the named channel.

        An unknown channel or an exception raised by the channel is returned
        as a failed result.
        """
        channel = self.channels.get(channel_name)
        if channel is None:
            return self._channel_missing(channel_name)

        try:
            return channel.dispatch(request, domain)
        except Exception as e:
            logger.error(
                "channel_dispatch_failed",
                channel_name=channel_name,
                error=str(e),
                exc_info=True,
            )
            return DispatchResult.failed(
                channel=channel.channel_name,
                message=f"Channel exception: {e}",
                error_code=DispatchErrorCode.DISPATCH_ERROR,
            )

    def dispatch_bulk(
        self,
        channel_name: str,
        requests: Sequence[Any],
        domain: EventDomain = EventDomain.ISSUE,
    ) -> List[DispatchResult]:
        """Send a batch through the named channel, one result per request."""
        channel = self.channels.get(channel_name)
        if channel is None:
            return [self._channel_missing(channel_name) for _ in requests]

        try:
            results = channel.dispatch_bulk(requests, domain)
        except Exception as e:
            logger.error(
                "channel_bulk_dispatch_failed",
                channel_name=channel_name,
                error=str(e),
                exc_info=True,
            )
            return [
                DispatchResult.failed(
                    channel=channel.channel_name,
                    message=f"Channel exception: {e}",
                    error_code=DispatchErrorCode.DISPATCH_ERROR,
                )
                for _ in requests
            ]

        success_count = sum(1 for r in results if r.success)
        logger.info(
            "bulk_dispatch_completed",
            channel_name=channel_name,
            total=len(results),
            success_count=success_count,
        )
        return results

    def validate_trip(self, request: Any) -> ValidationReport:
        """Validate a trip request across channels (at least one recipient)."""
        data = sanitize_request(request, TRIP_FIELDS)
        return ValidationReport.from_errors(
            validate_trip_request(data, self._trip_event_keys())
        )

    def dispatch_trip(self, request: Any) -> TripDispatchResult:
        """Send one trip notification by email and/or SMS.

        Email is attempted when the request has ``email``, SMS when it has
        ``phoneNumber``. Checks shared by both channels run first and a
        request failing them sends nothing and carries the errors. Contact
        formats are left to each channel, so a bad phone number fails the
        SMS result without stopping the email.
        """
        data = sanitize_request(request, TRIP_FIELDS)
        trip_id = as_text(data.get("tripId"))

        errors = validate_trip_request(
            data, self._trip_event_keys(), check_contacts=False
        )
        if errors:
            logger.warning("trip_rejected", trip_id=trip_id, errors=errors)
            return TripDispatchResult(errors=errors, trip_id=trip_id)

        result = TripDispatchResult(trip_id=trip_id)
        if data.get("email"):
            result.email = self.dispatch(Channel.EMAIL.value, data, EventDomain.TRIP)
        if data.get("phoneNumber"):
            result.sms = self.dispatch(Channel.SMS.value, data, EventDomain.TRIP)

        logger.info(
            "trip_dispatched",
            trip_id=trip_id,
            success=result.success,
            email_attempted=result.email is not None,
            sms_attempted=result.sms is not None,
        )
        return result

    def dispatch_bulk_trips(self, requests: Sequence[Any]) -> List[TripDispatchResult]:
        return [self.dispatch_trip(request) for request in requests]

    def health_check(self) -> Dict[str, bool]:
        """Check health of all channels.

        Returns:
            Dict mapping channel name to health status (True = healthy)

        Example:
            health = dispatcher.health_check()
            if not health.get("sms"):
                logger.warning("sms_channel_unhealthy")
        """
        health = {}
        for channel_name, channel in self.channels.items():
            try:
                result = channel.health_check()
                health[channel_name] = result.is_success
            except Exception as e:
                logger.error(
                    "channel_health_check_failed",
                    channel_name=channel_name,
                    error=str(e),
                    exc_info=True,
                )
                health[channel_name] = False

        return health

    def get_available_channels(self) -> List[str]:
        """Get list of configured channel names."""
        return list(self.channels.keys())

    def _trip_event_keys(self) -> List[str]:
        """Trip types known to any channel, in catalog order."""
        keys: List[str] = []
        for channel in self.channels.values():
            for key in channel.store(EventDomain.TRIP).event_keys():
                if key not in keys:
                    keys.append(key)
        return keys

    def _channel_missing(self, channel_name: str) -> DispatchResult:
        logger.warning(
            "channel_not_found",
            channel_name=channel_name,
            available_channels=list(self.channels.keys()),
        )
        return DispatchResult(
            success=False,
            status="failed",
            message=f"Channel not available: {channel_name}",
            error=f"Channel not available: {channel_name}",
            error_code=DispatchErrorCode.DISPATCH_ERROR.value,
            channel=channel_name,
        )
