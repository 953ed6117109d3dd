"""Placeholder substitution for email and SMS templates.

Templates use ``{field}`` placeholders. Every occurrence of a known field is
replaced; unknown ``{tokens}`` are left as they are. Missing or empty fields
take the per-channel defaults below.
"""

import html
import re
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from infrastructure.templates.models import (
    Channel,
    EmailTemplate,
    EventDomain,
    RenderedEmail,
    RenderedMessage,
    RenderedSms,
    SmsTemplate,
    Template,
)
from infrastructure.templates.segments import measure

PLACEHOLDER = re.compile(r"\{(\w+)\}")

CURRENT_DATE = "currentDate"

FIELD_DEFAULTS: Dict[tuple, Dict[str, str]] = {
    (EventDomain.ISSUE, Channel.SMS): {
        "name": "Customer",
        "ticketId": "N/A",
        "issueTitle": "Your Issue",
        "assignedTo": "",
        "escalatedTo": "",
        "responseMessage": "",
    },
    (EventDomain.ISSUE, Channel.EMAIL): {
        "name": "Valued Customer",
        "ticketId": "N/A",
        "issueTitle": "Your Issue",
        "assignedTo": "",
        "escalatedTo": "",
        "responseMessage": "",
    },
    (EventDomain.TRIP, Channel.SMS): {
        "name": "Traveler",
        "destinationName": "Your Destination",
        "remainingTime": "",
        "tripId": "",
    },
    (EventDomain.TRIP, Channel.EMAIL): {
        "name": "Valued Traveler",
        "destinationName": "Your Destination",
        "remainingTime": "",
        "tripId": "",
    },
}

# Issue events whose subject may name a person
ASSIGNEE_EVENTS = frozenset({"assigned", "escalated"})
ESCALATION_EVENTS = frozenset({"escalated"})


def substitute(text: str, values: Mapping[str, str]) -> str:
    """Replace every ``{key}`` found in values; leave other tokens intact."""

    def replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        return values[key] if key in values else match.group(0)

    return PLACEHOLDER.sub(replace, text)


def text_to_html(text: str) -> str:
    """Basic HTML for a plain text body: blank lines split paragraphs,
    single newlines become ``<br>``."""
    body = text.replace("\n\n", "</p><p>").replace("\n", "<br>")
    return f"<p>{body}</p>".replace("<p></p>", "")


class TemplateRenderer:
    """Renders templates against request data.

    Args:
        sms_date_format: strftime format of ``{currentDate}`` in SMS.
        email_datetime_format: strftime format of ``{currentDate}`` in email.
        now: Clock, injectable for tests.
    """

    def __init__(
        self,
        sms_date_format: str = "%Y-%m-%d",
        email_datetime_format: str = "%Y-%m-%d %H:%M:%S",
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.sms_date_format = sms_date_format
        self.email_datetime_format = email_datetime_format
        self.now = now or datetime.now

    def field_values(self, template: Template, data: Mapping[str, Any]) -> Dict[str, str]:
        """Placeholder values for a template: request data over defaults."""
        defaults = FIELD_DEFAULTS[(template.domain, template.channel)]
        values = dict(defaults)
        for key in defaults:
            value = data.get(key)
            if value is not None and value != "":
                values[key] = str(value)

        date_format = (
            self.sms_date_format
            if template.channel is Channel.SMS
            else self.email_datetime_format
        )
        values[CURRENT_DATE] = self.now().strftime(date_format)
        return values

    def render(self, template: Template, data: Mapping[str, Any]) -> RenderedMessage:
        if isinstance(template, SmsTemplate):
            return self.render_sms(template, data)
        return self.render_email(template, data)

    def render_sms(self, template: SmsTemplate, data: Mapping[str, Any]) -> RenderedSms:
        message = substitute(template.message, self.field_values(template, data))
        return RenderedSms(message=message, segment_info=measure(message, template.language))

    def render_email(
        self, template: EmailTemplate, data: Mapping[str, Any]
    ) -> RenderedEmail:
        values = self.field_values(template, data)
        html_values = {key: html.escape(value) for key, value in values.items()}
        html_skeleton = template.html_body or text_to_html(template.body)
        return RenderedEmail(
            subject=self.render_subject(template, data),
            text=substitute(template.body, values),
            html=substitute(html_skeleton, html_values),
        )

    def render_subject(self, template: EmailTemplate, data: Mapping[str, Any]) -> str:
        """Subject lines only fill the fields that identify the event.

        Issue subjects always get ``{ticketId}``; ``{assignedTo}`` only for
        assigned/escalated events and ``{escalatedTo}`` only for escalated
        events, each only when a value is given. Trip subjects only get
        ``{destinationName}``.
        """
        defaults = FIELD_DEFAULTS[(template.domain, template.channel)]

        if template.domain is EventDomain.TRIP:
            destination = data.get("destinationName") or defaults["destinationName"]
            return substitute(template.subject, {"destinationName": str(destination)})

        values = {"ticketId": str(data.get("ticketId") or defaults["ticketId"])}
        if template.event_key in ASSIGNEE_EVENTS and data.get("assignedTo"):
            values["assignedTo"] = str(data["assignedTo"])
        if template.event_key in ESCALATION_EVENTS and data.get("escalatedTo"):
            values["escalatedTo"] = str(data["escalatedTo"])
        return substitute(template.subject, values)
