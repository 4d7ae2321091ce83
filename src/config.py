"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import (
    DEFAULT_AUTO_REPLY_TEXT,
    DEFAULT_HOST,
    DEFAULT_NOTIFY_MAX_CONCURRENCY,
    DEFAULT_PORT,
    FACEBOOK_API_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Facebook Configuration
    # Both are optional at load time: /status reports whether they are present
    # and the lifespan warns about missing ones.
    page_access_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "page_access_token", "facebook_page_access_token"
        ),
        description="Facebook Page access token used for the Send API",
    )
    verify_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("verify_token", "facebook_verify_token"),
        description="Webhook verification token (must match Meta webhook config)",
    )

    # Server
    host: str = Field(default=DEFAULT_HOST, description="Bind address")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Listen port")

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Relay behaviour
    auto_reply_enabled: bool = Field(
        default=True,
        description="Reply to every captured sender with auto_reply_text",
    )
    auto_reply_text: str = Field(
        default=DEFAULT_AUTO_REPLY_TEXT,
        min_length=1,
        description="Acknowledgment text sent to newly seen senders",
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for Facebook Graph API calls (seconds)",
    )
    notify_max_concurrency: int = Field(
        default=DEFAULT_NOTIFY_MAX_CONCURRENCY,
        ge=1,
        description="Max in-flight sends during /notify fan-out (1 = sequential)",
    )

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Sentry traces sample rate"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    @property
    def has_access_token(self) -> bool:
        return bool(self.page_access_token)

    @property
    def has_verify_token(self) -> bool:
        return bool(self.verify_token)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
