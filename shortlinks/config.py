"""Configuration management for shortlinks."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    storage_backend: Literal["memory", "file", "redis"] = Field(
        default="file",
        description="Where records and logs are persisted"
    )

    storage_path: str = Field(
        default=".shortlinks",
        description="Directory for the file storage backend"
    )

    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for the redis storage backend"
    )

    redis_key_prefix: str = Field(
        default="shortlinks:",
        description="Prefix for keys written to Redis"
    )

    records_key: str = Field(
        default="shortened_urls",
        description="Storage key holding the record collection"
    )

    logs_key: str = Field(
        default="app_logs",
        description="Storage key holding the persisted event log"
    )

    # Short link settings
    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL for generating short URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    short_code_length: int = Field(
        default=6,
        ge=1,
        le=20,
        description="Length of generated short codes"
    )

    default_validity_minutes: int = Field(
        default=30,
        gt=0,
        description="Validity used when a request does not give one"
    )

    max_generation_attempts: int = Field(
        default=100,
        ge=1,
        description="Maximum random draws when generating a short code"
    )

    user_agent: str = Field(
        default="",
        description="User agent recorded on clicks that do not supply one"
    )

    # Location settings
    location_backend: Literal["mock", "static", "http"] = Field(
        default="mock",
        description="Click location resolver"
    )

    location_label: str = Field(
        default="Unknown Location",
        description="Label returned by the static resolver"
    )

    location_api_url: str = Field(
        default="http://ip-api.com/json",
        description="Geolocation API used by the http resolver"
    )

    location_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Timeout for geolocation requests"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stderr if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    max_log_entries: int = Field(
        default=1000,
        ge=1,
        description="Event log entries kept in memory"
    )

    persisted_log_entries: int = Field(
        default=100,
        ge=0,
        description="Newest event log entries written to storage"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config(**overrides) -> Config:
    """Load configuration from environment, with explicit overrides."""
    return Config(**overrides)
