"""Custom exceptions for realty_backoffice.

Domain-specific exception types carrying an error code and HTTP status so
that the caller's API layer can translate them into responses.

None of these derive from ``ValueError``: pydantic validators raising them
let them propagate unchanged instead of wrapping them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


class BackofficeError(Exception):
    """Base exception for all realty_backoffice errors."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for API responses."""
        return {
            "name": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "timestamp": self.timestamp.isoformat(),
        }


# --- Input Errors ---

class ValidationError(BackofficeError):
    """Input or invariant validation failed."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, details: list[dict[str, str]] | None = None):
        super().__init__(message)
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "details": self.details}


class CurrencyMismatchError(ValidationError):
    """Arithmetic or comparison between two different currencies."""

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Currency mismatch: {left} != {right}")


# --- Rule Errors ---

class BusinessRuleError(BackofficeError):
    """A business rule was violated."""

    code = "BUSINESS_RULE_VIOLATION"
    status_code = 422

    def __init__(self, message: str, rule: str = "unknown", value: Any = None):
        super().__init__(message)
        self.rule = rule
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "rule": self.rule}


# --- Persistence Errors ---

class NotFoundError(BackofficeError):
    """Requested resource does not exist (or is not visible to the caller)."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, identifier: str | None = None):
        self.resource = resource
        self.identifier = identifier
        msg = f"{resource} with ID '{identifier}' not found" if identifier else f"{resource} not found"
        super().__init__(msg)

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "resource": self.resource, "identifier": self.identifier}


class RepositoryError(BackofficeError):
    """Storage backend failed to complete an operation."""

    code = "DATABASE_ERROR"

    def __init__(self, message: str, operation: str = ""):
        self.operation = operation
        super().__init__(message)


# --- Configuration Errors ---

class ConfigurationError(BackofficeError):
    """Error in application configuration."""
    pass
