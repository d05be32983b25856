"""
Application configuration using Pydantic Settings.

Loads environment variables for the shared webhook secret, the
freshness window, and outbound delivery.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Name of the application.
        debug: Enable debug mode.
        webhook_secret: Shared secret for signing and verifying webhooks.
        webhook_max_age_ms: Oldest accepted webhook timestamp, in milliseconds.
        outbound_webhook_url: Endpoint that receives signed outbound webhooks.
        outbound_timeout_s: HTTP timeout for outbound deliveries.
        api_host: Host to bind the API server.
        api_port: Port to bind the API server.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = Field(default="hookseal", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Webhook Verification
    webhook_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Shared secret for webhook signatures",
        json_schema_extra={"env": "WEBHOOK_SECRET"},
    )
    webhook_max_age_ms: int = Field(
        default=5 * 60 * 1000,
        gt=0,
        description="Maximum accepted webhook age in milliseconds",
    )

    # Outbound Delivery
    outbound_webhook_url: Optional[str] = Field(
        default=None,
        description="URL that receives signed outbound webhooks",
        json_schema_extra={"env": "OUTBOUND_WEBHOOK_URL"},
    )
    outbound_timeout_s: float = Field(default=30.0, gt=0, description="Outbound HTTP timeout")

    # Server Configuration
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    @field_validator("webhook_secret", mode="before")
    @classmethod
    def strip_secret(cls, v: str) -> str:
        """Drop stray whitespace picked up from .env files."""
        if isinstance(v, str):
            v = v.strip()
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()


# Global settings instance for convenience
settings = get_settings()
