"""Custom exceptions for cwtail."""

from typing import Any


class CwTailError(Exception):
    """Base exception for all cwtail errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigurationError(CwTailError):
    """Invalid options or configuration, raised before any retrieval starts."""

    pass


class BackendError(CwTailError):
    """Failure reported by the log storage backend.

    Network, authentication, throttling and malformed responses all end up
    here; callers do not distinguish between them.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        service: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.cause = cause
        self.service = service
        self.operation = operation
