"""Configuration settings for pullcaps."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HttpConfig(BaseModel):
    """Configuration for the HTTP transport.

    Timeouts and connection retries are owned by httpx; a timeout
    surfaces to stream consumers as a TransportError.
    """

    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout in seconds",
    )
    connect_retries: int = Field(
        default=0,
        ge=0,
        le=10,
        description="Connection-level retries performed by the httpx transport",
    )
    user_agent: str = Field(
        default="pullcaps (+https://github.com/pullcaps/pullcaps)",
        description="User-Agent header sent with every request",
    )


class PacingConfig(BaseModel):
    """Configuration for per-stream request pacing and page sizing."""

    min_request_interval_ms: int = Field(
        default=1000,
        ge=0,
        description="Minimum milliseconds between requests of the same stream",
    )
    default_page_size: int = Field(
        default=25,
        ge=1,
        description="Page size used when a filter does not set one",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        description="Largest page size a filter may request",
    )


class RateLimitConfig(BaseModel):
    """Configuration for the process-wide rate limiter.

    The limiter is shared by every client in the process. Its quota is
    read once from GET /meta when discovery is enabled.
    """

    enabled: bool = Field(
        default=True,
        description="Gate every request behind the shared rate limiter",
    )
    default_requests_per_minute: int = Field(
        default=120,
        ge=1,
        description="Quota used when /meta is unavailable or discovery is off",
    )
    discover_from_meta: bool = Field(
        default=True,
        description="Read server_ratelimit_per_minute from GET /meta on first use",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # PushShift API
    # --------------------------------------------------------------------------
    pushshift_base_url: str = Field(
        default="https://api.pushshift.io",
        description="Root URL of the PushShift API",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Transport, Pacing & Rate Limiting
    # --------------------------------------------------------------------------
    http: HttpConfig = Field(
        default_factory=HttpConfig,
        description="HTTP transport configuration",
    )
    pacing: PacingConfig = Field(
        default_factory=PacingConfig,
        description="Per-stream pacing configuration",
    )
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Shared rate limiter configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
