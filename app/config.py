"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to sign and verify JWT access tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=1440,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the API from a browser",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis URL; when set realtime events are shared across instances",
    )
    vapid_public_key: str | None = Field(
        default=None,
        description="Public key handed to browsers that register for push",
    )
    push_enabled: bool = Field(
        default=True,
        description="Whether domain events also attempt push delivery",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    notifications_page_size: int = Field(default=50, gt=0)
    views_page_size: int = Field(default=100, gt=0)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
