"""Factory functions for creating template components."""

from pathlib import Path

from infrastructure.logging import get_module_logger
from infrastructure.templates.loader import YAMLTemplateLoader
from infrastructure.templates.store import TemplateRegistry

logger = get_module_logger()

DEFAULT_CATALOGS_DIR = Path(__file__).resolve().parent / "catalogs"


def create_template_registry(catalogs_dir: Path | None = None) -> TemplateRegistry:
    """Load every template catalog and wrap them in a registry.

    Args:
        catalogs_dir: Path to YAML catalog files (default: the catalogs
            shipped with this package)

    Returns:
        TemplateRegistry with one store per (domain, channel) pair

    Raises:
        ValueError: If the directory does not exist or a catalog is invalid
        FileNotFoundError: If a (domain, channel) pair has no catalog files

    Usage:
        registry = create_template_registry()
        sms_store = registry.store(EventDomain.ISSUE, Channel.SMS)
    """
    if catalogs_dir is None:
        catalogs_dir = DEFAULT_CATALOGS_DIR

    loader = YAMLTemplateLoader(catalogs_dir=catalogs_dir)
    registry = TemplateRegistry.from_catalogs(loader.load_all())
    logger.info(
        "template_registry_created",
        catalogs_dir=str(catalogs_dir),
        languages=[language.value for language in registry.languages()],
    )
    return registry
