"""Infrastructure modules for the CES Notifier.

Centralized infrastructure components:
- configuration: Settings management (Settings, SendGridSettings, MistaSettings)
- logging: Structured logging (get_module_logger, bind_request_context)
- templates: Localized template catalogs, rendering and SMS segments
- notifications: Email/SMS channels, dispatcher and NotificationService
- operations: Operation results and provider error classification
- services: Dependency injection services (SettingsDep, NotificationServiceDep)
"""

# Observability
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    # Observability
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
]
