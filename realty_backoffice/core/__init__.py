"""Core infrastructure: errors, logging and settings."""

from .exceptions import (
    BackofficeError,
    BusinessRuleError,
    ConfigurationError,
    CurrencyMismatchError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)
from .logging import configure_logging, get_logger
from .settings import AppSettings, get_settings

__all__ = [
    "configure_logging",
    "get_logger",
    "AppSettings",
    "get_settings",
    # Exceptions
    "BackofficeError",
    "BusinessRuleError",
    "ConfigurationError",
    "CurrencyMismatchError",
    "NotFoundError",
    "RepositoryError",
    "ValidationError",
]
