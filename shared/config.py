"""
Shared configuration management for the session service layer.
"""

from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="SESSION_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Session tokens
    session_lifetime_seconds: int = Field(default=7200)

    # Secrets: either a JSON file of "<src_id>:<manager_id>" -> secret,
    # optionally Fernet-encrypted under master_key, or an inline mapping.
    secrets_file: Optional[str] = Field(default=None)
    master_key: Optional[str] = Field(default=None)
    secrets: Dict[str, str] = Field(default_factory=dict)


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
