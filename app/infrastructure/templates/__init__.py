"""Localized notification templates.

Public API:
    - create_template_registry(): Load the YAML catalogs shipped with the package
    - TemplateStore / TemplateRegistry: Template lookup with language fallback
    - TemplateRenderer: Placeholder substitution for email and SMS
    - measure() / check_segment_limit(): SMS segment accounting
    - normalize_language() / normalize_event_key(): Input normalization

Example:
    from infrastructure.templates import (
        Channel,
        EventDomain,
        TemplateRenderer,
        create_template_registry,
    )

    registry = create_template_registry()
    template = registry.store(EventDomain.ISSUE, Channel.SMS).resolve("received", "fr")
    rendered = TemplateRenderer().render(template, {"name": "Alice", "ticketId": "T-1"})
"""

from infrastructure.templates.factory import create_template_registry
from infrastructure.templates.loader import TemplateLoader, YAMLTemplateLoader
from infrastructure.templates.models import (
    BASE_LANGUAGE,
    Channel,
    EmailTemplate,
    EventDomain,
    Language,
    RenderedEmail,
    RenderedMessage,
    RenderedSms,
    SegmentEncoding,
    SegmentInfo,
    SmsTemplate,
    Template,
    TemplateCatalog,
)
from infrastructure.templates.normalizers import (
    is_supported_language,
    normalize_event_key,
    normalize_language,
)
from infrastructure.templates.renderer import TemplateRenderer, substitute, text_to_html
from infrastructure.templates.segments import (
    DEFAULT_MAX_SEGMENTS,
    PLAIN_SEGMENT_CHARS,
    UNICODE_SEGMENT_CHARS,
    check_segment_limit,
    measure,
)
from infrastructure.templates.store import TemplateRegistry, TemplateStore

__all__ = [
    "create_template_registry",
    "TemplateLoader",
    "YAMLTemplateLoader",
    "BASE_LANGUAGE",
    "Channel",
    "EmailTemplate",
    "EventDomain",
    "Language",
    "RenderedEmail",
    "RenderedMessage",
    "RenderedSms",
    "SegmentEncoding",
    "SegmentInfo",
    "SmsTemplate",
    "Template",
    "TemplateCatalog",
    "is_supported_language",
    "normalize_event_key",
    "normalize_language",
    "TemplateRenderer",
    "substitute",
    "text_to_html",
    "DEFAULT_MAX_SEGMENTS",
    "PLAIN_SEGMENT_CHARS",
    "UNICODE_SEGMENT_CHARS",
    "check_segment_limit",
    "measure",
    "TemplateRegistry",
    "TemplateStore",
]
