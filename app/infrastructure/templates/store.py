"""Template lookup with language fallback."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from infrastructure.logging import get_module_logger
from infrastructure.templates.models import (
    BASE_LANGUAGE,
    Channel,
    EventDomain,
    Language,
    Template,
    TemplateCatalog,
)
from infrastructure.templates.normalizers import (
    normalize_event_key,
    normalize_language,
)

logger = get_module_logger()


class TemplateStore:
    """Read-only view over one catalog.

    Lookups normalize the event key and the language hint, try the exact
    language first and fall back to the base language.

    Attributes:
        catalog: The immutable TemplateCatalog backing the store.
    """

    def __init__(self, catalog: TemplateCatalog):
        self.catalog = catalog

    @property
    def domain(self) -> EventDomain:
        return self.catalog.domain

    @property
    def channel(self) -> Channel:
        return self.catalog.channel

    def resolve(self, event_type: Any, language: Any) -> Optional[Template]:
        """Find the template for an event type and language hint.

        Args:
            event_type: Free-form event type (normalized before lookup).
            language: Free-form language hint (normalized before lookup).

        Returns:
            The exact template, the base language template when the language
            has none, or None when the event type is unknown.
        """
        by_language = self.catalog.templates.get(normalize_event_key(event_type))
        if by_language is None:
            return None

        requested = normalize_language(language)
        template = by_language.get(requested)
        if template is not None:
            return template

        template = by_language.get(BASE_LANGUAGE)
        if template is not None:
            logger.info(
                "template_language_fallback",
                channel=self.channel.value,
                event_key=template.event_key,
                requested_language=requested.value,
                fallback_language=BASE_LANGUAGE.value,
            )
        return template

    def event_keys(self) -> List[str]:
        """Event keys in catalog order."""
        return list(self.catalog.templates.keys())

    def languages(self) -> List[Language]:
        """Languages with at least one template, in declaration order."""
        present = {
            language
            for by_language in self.catalog.templates.values()
            for language in by_language
        }
        return [language for language in Language if language in present]

    def has_event(self, event_type: Any) -> bool:
        return normalize_event_key(event_type) in self.catalog.templates


class TemplateRegistry:
    """All template stores of the process, keyed by (domain, channel)."""

    def __init__(self, stores: Mapping[Tuple[EventDomain, Channel], TemplateStore]):
        self._stores: Dict[Tuple[EventDomain, Channel], TemplateStore] = dict(stores)

    @classmethod
    def from_catalogs(
        cls, catalogs: Mapping[Tuple[EventDomain, Channel], TemplateCatalog]
    ) -> "TemplateRegistry":
        return cls({key: TemplateStore(catalog) for key, catalog in catalogs.items()})

    def store(self, domain: EventDomain, channel: Channel) -> TemplateStore:
        """Get the store for a (domain, channel) pair.

        Raises:
            KeyError: If no catalog was loaded for the pair.
        """
        try:
            return self._stores[(domain, channel)]
        except KeyError as e:
            raise KeyError(
                f"No templates loaded for {domain.value} {channel.value}"
            ) from e

    def languages(self) -> List[Language]:
        present = {
            language for store in self._stores.values() for language in store.languages()
        }
        return [language for language in Language if language in present]
