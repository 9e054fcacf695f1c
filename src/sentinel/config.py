"""
Sentinel configuration management using pydantic-settings.

Only the application shell reads these settings. The risk core takes
its reference data and timezone as explicit arguments.
"""

import logging
import warnings
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SENTINEL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )

    # Application Settings
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Risk core inputs
    timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA timezone used to derive the hour of a transaction",
    )
    reference_data_path: Optional[Path] = Field(
        default=None,
        description="JSON file with blacklist, trusted merchants, keywords and patterns",
    )
    max_prior_transactions: int = Field(
        default=500,
        ge=0,
        description="Maximum prior transactions accepted in one request",
    )

    # Security - CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Request body limit in bytes
    max_body_size: int = Field(
        default=1024 * 1024,
        description="Maximum request body size in bytes",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only levels the logging module knows about."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Fail at startup rather than on the first timed evaluation."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Ensure critical settings are configured in production."""
        if self.environment == "production":
            if self.debug:
                raise ValueError("DEBUG must be False in production")
            if "*" in self.cors_origins:
                warnings.warn(
                    "CORS_ORIGINS allows any origin in production",
                    UserWarning,
                    stacklevel=2,
                )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Global settings instance
settings = Settings()
