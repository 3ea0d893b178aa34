"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Configures the Postmates API credentials, the HTTP client timeout and
the webhook ingestion limits from environment variables, with
validation and defaults. Supports .env files for local development.
"""

import re
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Postmates Delivery Tracker", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")
    stage: str = Field(default="dev", description="Deployment stage")

    # Postmates API settings
    postmates_api_key: Optional[str] = Field(
        default=None,
        description="Postmates API key, sent as the basic auth username"
    )
    postmates_customer_id: Optional[str] = Field(
        default=None,
        description="Postmates customer identifier"
    )
    postmates_api_host: str = Field(
        default="api.postmates.com",
        description="Host every API request is rewritten to"
    )
    postmates_timeout: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="HTTP timeout in seconds for API calls"
    )

    # Webhook settings
    webhook_path: str = Field(
        default="/webhooks/postmates",
        description="Path the webhook endpoint is mounted on"
    )
    webhook_queue_size: int = Field(
        default=512,
        ge=1,
        description="Capacity of each per-kind event queue"
    )
    webhook_max_body_bytes: int = Field(
        default=64 << 10,
        ge=1,
        description="Inbound webhook bodies are truncated to this many bytes"
    )
    log_webhook_events: bool = Field(
        default=True,
        description="Start background consumers that log every received event"
    )

    @field_validator('postmates_api_host')
    @classmethod
    def validate_api_host(cls, v: str) -> str:
        """Validate the API host is a bare hostname."""
        if not re.match(r'^[a-zA-Z0-9.-]+(:[0-9]+)?$', v):
            raise ValueError("postmates_api_host must be a hostname without scheme or path")
        return v

    @field_validator('webhook_path')
    @classmethod
    def validate_webhook_path(cls, v: str) -> str:
        """Validate the webhook path is absolute and not the root."""
        if not v.startswith('/') or v == '/':
            raise ValueError("webhook_path must start with '/' and not be the root path")
        return v.rstrip('/')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


# Global settings instance
settings = Settings()
