"""Configuration management for apirings."""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from apirings.models.base import PlatformPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1

    # Registry settings
    dataset_path: str = ""  # If empty, uses the built-in dataset
    platform_policy: PlatformPolicy = PlatformPolicy.EXCEPTION
    mediated_members: List[str] = ["os", "importlib"]

    # API settings
    enable_docs: bool = True
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="APIRINGS_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
