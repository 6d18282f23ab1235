"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    archmerge_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    archmerge_debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    archmerge_log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )
    archmerge_scratch_dir: str | None = Field(
        default=None,
        description="Parent directory for archive extraction (system temp if unset)",
    )
    archmerge_max_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Number of threads resolving groups",
    )
    archmerge_hash_algorithm: Literal["sha256", "sha1", "md5", "blake2b"] = Field(
        default="sha256",
        description="Digest used to compare duplicate files",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> settings.archmerge_max_workers
        1
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
