"""Template models for localized notifications.

Defines the languages, channels and event domains the notifier knows
about, the immutable template records loaded from the YAML catalogs, and
the rendered message types produced from them.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union


class Language(str, Enum):
    """Supported template languages.

    Values are the canonical language keys used in catalog file names and
    API payloads.
    """

    ENGLISH = "english"
    FRENCH = "french"
    KINYARWANDA = "kinyarwanda"

    @property
    def extended_charset(self) -> bool:
        """Whether SMS in this language is always sent with the unicode segment kind."""
        return self is Language.KINYARWANDA


BASE_LANGUAGE = Language.ENGLISH


class Channel(str, Enum):
    """Delivery channels."""

    EMAIL = "email"
    SMS = "sms"


class EventDomain(str, Enum):
    """Families of events with their own template key sets.

    ISSUE covers issue status changes (received, resolved, ...); TRIP covers
    trip milestones (trip_remaining_time, trip_arrival_notice).
    """

    ISSUE = "issue"
    TRIP = "trip"


@dataclass(frozen=True)
class EmailTemplate:
    """Email skeleton for one (event key, language) pair.

    Attributes:
        domain: Event domain the template belongs to.
        event_key: Canonical event key (e.g. "received").
        language: Template language.
        subject: Subject line with placeholders.
        body: Plain text body with placeholders.
        html_body: Optional hand-written HTML. Derived from body when absent.
    """

    domain: EventDomain
    event_key: str
    language: Language
    subject: str
    body: str
    html_body: Optional[str] = None

    @property
    def channel(self) -> Channel:
        return Channel.EMAIL


@dataclass(frozen=True)
class SmsTemplate:
    """SMS skeleton for one (event key, language) pair."""

    domain: EventDomain
    event_key: str
    language: Language
    message: str

    @property
    def channel(self) -> Channel:
        return Channel.SMS


Template = Union[EmailTemplate, SmsTemplate]


class SegmentEncoding(str, Enum):
    """SMS segment kind, also sent to the SMS provider as the message type."""

    PLAIN = "plain"
    UNICODE = "unicode"


@dataclass(frozen=True)
class SegmentInfo:
    """Measurement of an SMS against the segment limits.

    Attributes:
        total_chars: Length of the rendered message.
        max_per_segment: 153 for plain text, 67 for unicode.
        segments: Number of segments the message needs.
        encoding: Segment kind used for the measurement.
    """

    total_chars: int
    max_per_segment: int
    segments: int
    encoding: SegmentEncoding

    @property
    def multi_part(self) -> bool:
        return self.segments > 1

    @property
    def remaining_chars(self) -> int:
        """Characters left in the last segment."""
        return self.max_per_segment - (self.total_chars % self.max_per_segment)

    def to_dict(self) -> dict:
        return {
            "total_chars": self.total_chars,
            "max_per_segment": self.max_per_segment,
            "segments": self.segments,
            "multi_part": self.multi_part,
            "remaining_chars": self.remaining_chars,
            "encoding": self.encoding.value,
        }


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    text: str
    html: str


@dataclass(frozen=True)
class RenderedSms:
    message: str
    segment_info: SegmentInfo

    @property
    def encoding(self) -> SegmentEncoding:
        return self.segment_info.encoding


RenderedMessage = Union[RenderedEmail, RenderedSms]


@dataclass(frozen=True)
class TemplateCatalog:
    """All templates of one (domain, channel) pair.

    Attributes:
        domain: Event domain of every template in the catalog.
        channel: Channel of every template in the catalog.
        templates: Read-only mapping {event_key: {Language: Template}}.
        source_files: Number of YAML files the catalog was built from.
    """

    domain: EventDomain
    channel: Channel
    templates: Mapping[str, Mapping[Language, Template]]
    source_files: int = 0

    def __post_init__(self):
        frozen = {
            key: MappingProxyType(dict(by_language))
            for key, by_language in self.templates.items()
        }
        object.__setattr__(self, "templates", MappingProxyType(frozen))
