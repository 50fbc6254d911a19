from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .base import DriverBaseSettings
from .query import QuerySettings
from .retry import RetrySettings


class _Settings(DriverBaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Base log level passed to setup_logging()"
    )
    query: QuerySettings = Field(
        default_factory=QuerySettings,
        description="Query compilation limits and conventions"
    )
    retry: RetrySettings = Field(
        default_factory=RetrySettings,
        description="Backoff policy for warehouse calls"
    )


# Singleton instance
_settings: Optional[_Settings] = None


def get_settings(force_reload: bool = False) -> _Settings:
    """Get the singleton settings instance for the application.

    Settings are loaded from environment variables on first access and then
    shared by every component. The core never mutates them, so concurrent
    readers need no locking.

    Args:
        force_reload: If True, creates a new Settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        Settings: The singleton Settings instance

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()
        limit = settings.query.default_limit
        ```
    """
    global _settings

    if _settings is None or force_reload:
        _settings = _Settings()

    return _settings


def _reload_settings() -> _Settings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.

    Returns:
        A fresh _Settings instance
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
