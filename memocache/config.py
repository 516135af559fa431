from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from memocache.models.cache import CacheConfig
from memocache.models.enums import EvictionStrategy


class Settings(BaseSettings):
    """Application configuration loaded from ``MEMOCACHE_*`` env vars and .env file.

    Only the composition root reads these; a ``CacheService`` is always
    configured explicitly through ``CacheConfig``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMOCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging; log_dir enables the rotating file handler
    log_level: str = "INFO"
    log_dir: Path | None = None

    # General-purpose cache
    default_ttl_seconds: float = 300.0
    max_entries: int = 500
    strategy: EvictionStrategy = EvictionStrategy.LRU
    enable_metrics: bool = True
    cleanup_interval_seconds: float = 300.0

    # Dashboard widget cache: shorter TTL, smaller working set
    widget_ttl_seconds: float = 120.0
    widget_max_entries: int = 200

    def default_cache_config(self) -> CacheConfig:
        return CacheConfig(
            default_ttl_seconds=self.default_ttl_seconds,
            max_entries=self.max_entries,
            strategy=self.strategy,
            enable_metrics=self.enable_metrics,
            cleanup_interval_seconds=self.cleanup_interval_seconds,
        )

    def widget_cache_config(self) -> CacheConfig:
        return CacheConfig(
            default_ttl_seconds=self.widget_ttl_seconds,
            max_entries=self.widget_max_entries,
            strategy=self.strategy,
            enable_metrics=self.enable_metrics,
            cleanup_interval_seconds=self.cleanup_interval_seconds,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the cached Settings singleton. Created on first call."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Clear the cached settings. Used in tests."""
    global _settings  # noqa: PLW0603
    _settings = None
