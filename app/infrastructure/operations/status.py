"""Operation status enumeration.

Status codes for operation results, used to classify outcomes of template
resolution and provider calls before they are mapped to dispatch results.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Error that may clear on a later attempt (network, timeout, rate limit)
        PERMANENT_ERROR: Error that will not clear by itself (validation, bad request)
        UNAUTHORIZED: Provider rejected the configured credentials
        NOT_FOUND: Resource (template, event type) not found
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
