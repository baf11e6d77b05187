"""
Shared configuration management for the Token Gateway.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Listings/quotes provider
    cmc_api_url: str = Field(default="https://pro-api.coinmarketcap.com")
    cmc_api_key: str = Field(default="")

    # Historical ticker provider
    cp_api_url: str = Field(default="https://api.coinpaprika.com")

    # Response cache (one policy shared by every query field)
    cache_max_entries: int = Field(default=100, gt=0)
    cache_ttl_seconds: float = Field(default=15 * 60, gt=0)


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
