from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.services import (
    get_notification_service,
    get_settings,
    get_template_registry,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(settings=settings)


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _check_delivery_config(settings: "Settings", logger: BoundLogger) -> None:
    """Log provider configuration problems; the server still starts."""
    errors = settings.delivery_config_errors()
    if errors:
        logger.warning("delivery_configuration_incomplete", errors=errors)
    else:
        logger.info("delivery_configuration_valid")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)
    _check_delivery_config(settings, logger)

    # Load the catalogs before the first request
    registry = get_template_registry()
    app.state.notification_service = get_notification_service()
    logger.info(
        "notification_service_ready",
        languages=[language.value for language in registry.languages()],
        channels=app.state.notification_service.dispatcher.get_available_channels(),
    )

    yield

    logger.info("application_shutdown")
