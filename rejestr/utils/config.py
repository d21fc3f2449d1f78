"""
Configuration Utility - Settings Management

Centralized configuration loading using pydantic-settings. Values come from the
defaults below, optionally overridden by REJESTR_* environment variables or a
local .env file.

Usage:
    from rejestr.utils.config import get_settings

    settings = get_settings()
    client = RegistryClient(settings)
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Fetcher settings.

    A single instance is passed explicitly to the API client, the fetch job
    and the CLI; no component reads module-level state.
    """

    model_config = SettingsConfigDict(
        env_prefix="REJESTR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Registry API
    API_URL: str = Field(default="https://rejestrzlobkow.mrips.gov.pl/instytucja/getListaRejestr")
    PAGE_SIZE: int = Field(default=10, gt=0)
    REQUEST_TIMEOUT: float = Field(default=20.0, gt=0)

    # Retry and throttling
    MAX_RETRIES: int = Field(default=3, ge=0)
    RETRY_DELAY: float = Field(default=2.0, ge=0)
    PAGE_DELAY: float = Field(default=2.0, ge=0)

    # Persistence
    FLUSH_EVERY_PAGES: int = Field(default=10, gt=0)
    OUTPUT_DIR: str = Field(default=".")

    # Terminal output
    SHOW_PROGRESS: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return Settings()
