"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_WEBHOOK_PATH,
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_BASE_URL,
    FACEBOOK_GRAPH_API_VERSION,
)


class Settings(BaseSettings):
    """Application settings loaded from CHATBOT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHATBOT_",
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Facebook Configuration
    token: str = Field(..., description="Webhook verification token")
    access_token: str = Field(..., description="Facebook Page access token")
    graph_api_base_url: str = Field(
        default=FACEBOOK_GRAPH_API_BASE_URL,
        description="Base URL of the Facebook Graph API",
    )
    graph_api_version: str = Field(
        default=FACEBOOK_GRAPH_API_VERSION,
        description="Graph API version used for the Send API",
    )

    # Server
    host: str = Field(default=DEFAULT_HOST, description="Interface to bind")
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535, description="Port to bind")
    webhook_path: str = Field(
        default=DEFAULT_WEBHOOK_PATH,
        description="Path serving both the handshake (GET) and events (POST)",
    )

    # Environment
    env: Literal["local", "staging", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for cloud logging"
    )

    # Timeouts
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    @field_validator("webhook_path")
    @classmethod
    def _check_webhook_path(cls, value: str) -> str:
        value = value.rstrip("/")
        if not value.startswith("/"):
            raise ValueError("webhook_path must start with '/' and not be the root path")
        return value

    @property
    def send_message_url(self) -> str:
        """Send API endpoint for the configured Graph API version."""
        base = self.graph_api_base_url.rstrip("/")
        return f"{base}/{self.graph_api_version}/me/messages"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
