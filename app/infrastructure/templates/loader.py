"""Template loading interface and implementations.

Defines the contract for loading template catalogs and provides the
YAML-based loader used at process start.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from infrastructure.logging import get_module_logger
from infrastructure.templates.models import (
    BASE_LANGUAGE,
    Channel,
    EmailTemplate,
    EventDomain,
    Language,
    SmsTemplate,
    Template,
    TemplateCatalog,
)
from infrastructure.templates.normalizers import normalize_event_key

logger = get_module_logger()


class TemplateLoader(ABC):
    """Abstract base for template loaders."""

    @abstractmethod
    def load(self, domain: EventDomain, channel: Channel) -> TemplateCatalog:
        """Load the catalog for one (domain, channel) pair.

        Raises:
            FileNotFoundError: If no template files exist for the pair.
            ValueError: If the templates are malformed or the base language
                is missing for an event.
        """

    @abstractmethod
    def load_all(self) -> Dict[Tuple[EventDomain, Channel], TemplateCatalog]:
        """Load the catalogs of every (domain, channel) pair."""


class YAMLTemplateLoader(TemplateLoader):
    """Loader for YAML template catalogs.

    Expects files named ``<domain>_<channel>.<language>.yml`` (for example
    ``issue_sms.french.yml``) in the catalogs directory. Each file maps an
    event key to its template fields::

        received:
          subject: "Issue {ticketId} Received - CES Support"
          body: |-
            Hello {name},
            ...

    Email entries need ``subject`` and ``body`` and may carry ``html_body``;
    SMS entries need ``message``.

    Attributes:
        catalogs_dir: Path to directory containing YAML files.
    """

    def __init__(self, catalogs_dir: Path):
        self.catalogs_dir = Path(catalogs_dir)

        if not self.catalogs_dir.exists():
            raise ValueError(f"Template directory not found: {self.catalogs_dir}")

    def load(self, domain: EventDomain, channel: Channel) -> TemplateCatalog:
        prefix = f"{domain.value}_{channel.value}"
        yaml_files = sorted(self.catalogs_dir.glob(f"{prefix}.*.yml"))

        if not yaml_files:
            raise FileNotFoundError(
                f"No template files found for {prefix} in {self.catalogs_dir}"
            )

        templates: Dict[str, Dict[Language, Template]] = {}
        for yaml_file in yaml_files:
            language_str = yaml_file.stem.split(".")[-1]
            try:
                language = Language(language_str)
            except ValueError:
                logger.warning(
                    "skipped_template_file",
                    file=str(yaml_file),
                    reason="unsupported language",
                )
                continue

            try:
                with open(yaml_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.error("yaml_parse_error", file=str(yaml_file), error=str(e))
                raise ValueError(f"Failed to parse {yaml_file}: {e}") from e

            if not isinstance(data, dict):
                raise ValueError(f"Expected a mapping of event keys in {yaml_file}")

            for raw_key, entry in data.items():
                event_key = normalize_event_key(str(raw_key))
                templates.setdefault(event_key, {})[language] = self._build(
                    domain, channel, event_key, language, entry, yaml_file
                )

        missing = [key for key, found in templates.items() if BASE_LANGUAGE not in found]
        if missing:
            raise ValueError(
                f"Missing {BASE_LANGUAGE.value} templates for {prefix}: "
                f"{', '.join(sorted(missing))}"
            )

        logger.info(
            "loaded_templates",
            catalog=prefix,
            file_count=len(yaml_files),
            event_count=len(templates),
        )
        return TemplateCatalog(
            domain=domain,
            channel=channel,
            templates=templates,
            source_files=len(yaml_files),
        )

    def load_all(self) -> Dict[Tuple[EventDomain, Channel], TemplateCatalog]:
        return {
            (domain, channel): self.load(domain, channel)
            for domain in EventDomain
            for channel in Channel
        }

    def _build(
        self,
        domain: EventDomain,
        channel: Channel,
        event_key: str,
        language: Language,
        entry: Any,
        source_file: Path,
    ) -> Template:
        if not isinstance(entry, dict):
            raise ValueError(f"Template {event_key} in {source_file} must be a mapping")

        if channel is Channel.SMS:
            message = entry.get("message")
            if not isinstance(message, str) or not message:
                raise ValueError(
                    f"SMS template {event_key} in {source_file} needs a message"
                )
            return SmsTemplate(
                domain=domain, event_key=event_key, language=language, message=message
            )

        subject = entry.get("subject")
        body = entry.get("body")
        if not isinstance(subject, str) or not isinstance(body, str):
            raise ValueError(
                f"Email template {event_key} in {source_file} needs a subject and a body"
            )
        html_body = entry.get("html_body")
        return EmailTemplate(
            domain=domain,
            event_key=event_key,
            language=language,
            subject=subject,
            body=body,
            html_body=html_body if isinstance(html_body, str) and html_body else None,
        )
