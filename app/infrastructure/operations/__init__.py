"""Operation result types and status enums.

This module contains standardized result types for operations across
the application, including status enums, result dataclasses, and error
classifiers for provider exceptions.
"""

from infrastructure.operations.classifiers import (
    NO_RESPONSE,
    PROVIDER_REJECTED,
    REQUEST_ERROR,
    classify_http_status,
    classify_request_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_status",
    "classify_request_error",
    "PROVIDER_REJECTED",
    "NO_RESPONSE",
    "REQUEST_ERROR",
]
