"""Configuration for the todo service.

Settings are read from environment variables with the ``TODOAPI__`` prefix
(e.g. ``TODOAPI__MONGO_URI=mongodb://mongo:27017``) and cached after the first load.
"""

from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TodoApiSettings(BaseSettings):
    """Todo service configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="TODOAPI__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Service URL
    URL: str = "http://localhost:3000"

    # Database
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "todoapi"

    # Auth / JWT
    JWT_SECRET: SecretStr = SecretStr("dev-secret-key-change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: int = 0  # seconds, 0 disables the exp claim
    AUTH_HEADER: str = "x-auth"
    MIN_PASSWORD_LENGTH: int = 6

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "~/.cache/todoapi/logs"
    LOG_TO_FILE: bool = True
    USE_STRUCTLOG: bool = True
    DEBUG: bool = False


_config: Optional[TodoApiSettings] = None


def get_todoapi_config() -> TodoApiSettings:
    """Load cached settings with TODOAPI__ env override support."""
    global _config
    if _config is None:
        _config = TodoApiSettings()
    return _config


def reset_todoapi_config() -> None:
    """Reset config cache (useful in tests)."""
    global _config
    _config = None
