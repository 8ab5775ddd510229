"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Payment Instructions API"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"

    log_level: str = Field(default="INFO", description="Level name or number for the package logger")
    log_format: Optional[str] = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance for dependency injection."""

    return Settings()
