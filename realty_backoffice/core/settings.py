"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")
    log_file: str | None = Field(default=None, description="Rotating log file written by configure_logging")

    # Money
    default_currency: str = Field(default="BRL", min_length=3, max_length=3)

    # Valuation defaults
    homogenization_factor: float = Field(
        default=0.10, gt=0, lt=1, description="Per-factor adjustment applied during homogenization"
    )
    max_samples_per_study: int = Field(default=50, ge=3, le=500)

    # Export
    results_dir: str = Field(default="results", description="Directory for exported studies")

    model_config = {
        "env_prefix": "REALTY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings.

    Raises:
        ConfigurationError: if an environment override fails validation.
    """
    try:
        return AppSettings()
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e.error_count()} error(s)") from e
