"""Operation result dataclass.

Uniform result type returned by transports and dispatch steps, carrying
status, payload, and error information without raising.
"""

from typing import Optional, Any
from dataclasses import dataclass

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from operations.

    Attributes:
        status: OperationStatus -- high-level outcome
        message: str -- human-friendly message for logs and API responses
        data: Optional[Any] -- optional payload (provider response, rendered message)
        error_code: Optional[str] -- optional machine error code
        retry_after: Optional[int] -- seconds the provider asked us to wait
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        """True if status is SUCCESS."""
        return self.status == OperationStatus.SUCCESS

    @property
    def retryable(self) -> bool:
        """True if a later attempt could succeed.

        Nothing in the dispatch path retries; the flag is reported so callers
        can decide.
        """
        return self.status == OperationStatus.TRANSIENT_ERROR

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        """Create a SUCCESS OperationResult with optional data.

        Args:
            data: Optional payload to include with the result
            message: Human-friendly success message

        Returns:
            OperationResult with SUCCESS status
        """
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Create an error OperationResult.

        Args:
            status: OperationStatus indicating error type
            message: Human-friendly error message
            error_code: Optional machine error code
            retry_after: Optional seconds until retry (for rate limiting)
            data: Optional payload to include with the error

        Returns:
            OperationResult with specified error status
        """
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Create a transient error result.

        Use for provider failures that may clear on their own:
        - Connection failures and timeouts
        - Rate limiting
        - Provider 5xx responses

        Returns:
            OperationResult with TRANSIENT_ERROR status
        """
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Create a permanent error result.

        Use for failures that will repeat on every attempt:
        - Validation errors
        - Provider rejecting the request (4xx)
        - Requests that could not be built

        Returns:
            OperationResult with PERMANENT_ERROR status
        """
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)

    @classmethod
    def not_found(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Create a NOT_FOUND result (e.g. no template for an event type)."""
        return cls.error(OperationStatus.NOT_FOUND, message, error_code)
