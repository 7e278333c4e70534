"""Centralized configuration management with environment-aware defaults.

This module implements the configuration system using Pydantic Settings,
providing type-safe configuration with validation and environment variable
support.

Configuration sources (in order of precedence):
1. Environment variables (nested values use ``__``, e.g. ``API_CONFIG__TIMEOUT``)
2. .env file in project root
3. Default values in model definitions
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jambojet.core.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
    MASK_MIN_KEY_LENGTH,
    REDACTED,
)


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    log_payloads: bool = Field(
        default=False,
        description="Log a redacted copy of every outbound payload at DEBUG level",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "subscription_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class ApiConfig(BaseModel):
    """Connection settings for the NSK API."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the NSK dotREZ API",
    )
    subscription_key: str | None = Field(
        default=None,
        description="API management subscription key sent with every call",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="Request timeout in seconds",
    )
    retry_attempts: int = Field(
        default=DEFAULT_RETRY_ATTEMPTS,
        ge=0,
        le=10,
        description="Retry attempts the transport may make on failure",
    )
    environment: Literal["test", "production"] = Field(
        default="test",
        description="Upstream environment the base URL points at",
    )

    @field_validator("subscription_key", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v

    @field_validator("base_url", mode="after")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Relative endpoint paths are joined onto the base URL."""
        if not v.startswith(("http://", "https://")):
            msg = "Base URL must start with http:// or https://"
            raise ValueError(msg)
        return v if v.endswith("/") else f"{v}/"

    @property
    def masked_subscription_key(self) -> str | None:
        """Subscription key with all but the first 8 and last 4 characters hidden.

        Keys too short to keep a hidden middle are redacted entirely.
        """
        if not self.subscription_key:
            return None
        if len(self.subscription_key) < MASK_MIN_KEY_LENGTH:
            return REDACTED
        return f"{self.subscription_key[:8]}...{self.subscription_key[-4:]}"


class Settings(BaseSettings):
    """Main settings class for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = Field(default="jambojet", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )
    api_config: ApiConfig = Field(
        default_factory=ApiConfig, description="NSK API configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"
        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
