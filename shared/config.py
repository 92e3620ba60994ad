"""
Shared configuration management for the Recipe Access Layer.
"""

from typing import List, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ACCESS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = "local"
    log_level: str = "info"
    host: str = "0.0.0.0"
    cors_origins: List[str] = Field(default_factory=list)

    # Security
    jwt_signing_key: Optional[SecretStr] = None

    # User store (auth service)
    user_store: str = "sqlite"
    database_path: str = "auth.db"
    seed_username: Optional[str] = None
    seed_password: Optional[SecretStr] = None

    # Password policy (auth service)
    password_min_length: int = 6
    password_require_digit: bool = True
    password_require_lowercase: bool = True
    password_require_uppercase: bool = True
    password_require_non_alphanumeric: bool = True


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service.

    Keyword overrides take precedence over the environment, which is how tests
    build services without touching ``os.environ``.
    """
    return ServiceConfig(service_name=service_name, port=port, **overrides)
