"""
Shared configuration management for the Request Gatekeeper.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GATEKEEPER_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Gating pipeline
    api_path_prefix: str = Field(default="/api")
    forwarded_for_header: str = Field(default="X-Forwarded-For")

    # Rate limiting (fixed window)
    rate_limit_capacity: int = Field(default=100)
    rate_limit_interval_seconds: float = Field(default=60.0)

    # Stage ordering; lower runs first
    rate_limiter_order: int = Field(default=1)
    sanitizer_order: int = Field(default=2)

    @model_validator(mode="after")
    def _check_gating(self) -> "BaseConfig":
        if self.rate_limit_capacity < 1:
            raise ValueError("rate_limit_capacity must be at least 1")
        if self.rate_limit_interval_seconds <= 0:
            raise ValueError("rate_limit_interval_seconds must be positive")
        if self.rate_limiter_order >= self.sanitizer_order:
            raise ValueError(
                "rate_limiter_order must be strictly lower than sanitizer_order"
            )
        if not self.api_path_prefix.startswith("/"):
            raise ValueError("api_path_prefix must start with '/'")
        return self


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
