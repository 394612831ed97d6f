"""Configuration management service with Pydantic Settings.

This module provides centralized configuration management for the
Balance Alerts application, loading and validating environment
variables at startup.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from balance_alerts.profile.models import ChannelKind

class RedisSettings(BaseSettings):
    """Redis connection settings."""

    model_config = SettingsConfigDict(env_prefix="")

    url: str = Field(
        default="redis://localhost:6379",
        alias="REDIS_URL",
        description="Redis connection string",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate Redis URL format."""
        if not v.startswith("redis://"):
            raise ValueError("REDIS_URL must start with redis://")
        return v

class StreamSettings(BaseSettings):
    """Output stream names, one per delivery channel."""

    model_config = SettingsConfigDict(env_prefix="ALERT_STREAM_")

    email: str = Field(
        default="outboundemailmessage",
        alias="ALERT_STREAM_EMAIL",
        description="Stream receiving email messages",
    )
    sms: str = Field(
        default="outboundsmsmessage",
        alias="ALERT_STREAM_SMS",
        description="Stream receiving SMS messages",
    )
    push: str = Field(
        default="outboundcustomerpushmessage",
        alias="ALERT_STREAM_PUSH",
        description="Stream receiving push messages",
    )
    max_len: int = Field(
        default=100_000,
        alias="ALERT_STREAM_MAX_LEN",
        description="Maximum entries kept per stream",
        ge=1,
    )

    @field_validator("email", "sms", "push")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate stream names are not blank."""
        if not v.strip():
            raise ValueError("Stream name must not be empty")
        return v

    @model_validator(mode="after")
    def validate_distinct(self) -> StreamSettings:
        """Each channel must have its own stream."""
        names = [self.email, self.sms, self.push]
        if len(set(names)) != len(names):
            raise ValueError("Email, SMS and push streams must be distinct")
        return self

    def as_mapping(self) -> dict[ChannelKind, str]:
        """Return the stream name for every channel."""
        return {
            ChannelKind.EMAIL: self.email,
            ChannelKind.SMS: self.sms,
            ChannelKind.PUSH: self.push,
        }

class Settings(BaseSettings):
    """Main application settings.

    Loads configuration from environment variables with support for
    .env files via python-dotenv.

    Example:
        ```python
        from balance_alerts.config import get_settings

        settings = get_settings()
        print(settings.redis.url)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nested configuration groups
    redis: RedisSettings = Field(default_factory=RedisSettings)
    streams: StreamSettings = Field(default_factory=StreamSettings)

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    dry_run: bool = Field(
        default=False,
        alias="DRY_RUN",
        description="Generate alerts without publishing them",
    )

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level

    def redacted_summary(self) -> dict[str, str | dict[str, str]]:
        """Get a summary of settings with secrets redacted.

        Returns:
            Dictionary of settings with sensitive values masked.
        """
        return {
            "redis_url": self._redact_url(self.redis.url),
            "streams": {
                "email": self.streams.email,
                "sms": self.streams.sms,
                "push": self.streams.push,
                "max_len": str(self.streams.max_len),
            },
            "log_level": self.log_level,
            "dry_run": str(self.dry_run),
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact password from URL if present."""
        if "@" in url and "://" in url:
            protocol_end = url.index("://") + 3
            at_pos = url.index("@")
            creds_part = url[protocol_end:at_pos]
            if ":" in creds_part:
                username = creds_part.split(":")[0]
                return f"{url[:protocol_end]}{username}:***@{url[at_pos + 1 :]}"
        return url

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()

def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
