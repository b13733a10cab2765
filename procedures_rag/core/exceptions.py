"""
Exception hierarchy for the procedures retrieval engine.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ProcedureSearchException(Exception):
    """Base exception for all retrieval engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ProcedureSearchException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ProviderError(ProcedureSearchException):
    """Raised when the embedding provider fails (network, quota, bad payload)."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider error.

        Args:
            message: Error message
            provider: Provider or model that failed
            details: Additional context
        """
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, details)


class ProviderTimeoutError(ProcedureSearchException, TimeoutError):
    """Raised when a provider call exceeds its deadline. Not a ProviderError."""

    def __init__(
        self,
        message: str,
        timeout_seconds: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize timeout error.

        Args:
            message: Error message
            timeout_seconds: Deadline that was exceeded
            details: Additional context
        """
        details = details or {}
        if timeout_seconds is not None:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details)


class CacheBackendError(ProcedureSearchException):
    """Raised by a cache backend that cannot serve a read or write."""

    def __init__(
        self,
        message: str,
        tier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize cache backend error.

        Args:
            message: Error message
            tier: Cache tier name (search, response, embedding, document)
            details: Additional context
        """
        details = details or {}
        if tier:
            details["tier"] = tier
        super().__init__(message, details)


class RetrievalError(ProcedureSearchException):
    """Raised when a corpus query fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize retrieval error.

        Args:
            message: Error message
            operation: Operation that failed (vector, lexical, related, metadata)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class DocumentProcessingError(ProcedureSearchException):
    """Raised when a knowledge document cannot be analyzed or chunked."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)
