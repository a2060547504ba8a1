from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from chartcache.define_cache_config__config import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_S,
    CacheConfig,
)

DEFAULT_PRELOAD_COOLDOWN_S = 2.0
DEFAULT_FETCH_TIMEOUT_S = 30.0
DEFAULT_COMPUTE_MAX_RETRIES = 0
DEFAULT_COMPUTE_RETRY_BACKOFF_MS = 500
DEFAULT_SAMPLE_LATENCY_MS = 800
DEFAULT_LOG_LEVEL = "INFO"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    return float(value)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    return int(value)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the chart cache and its preloader."""

    cache_ttl_s: float = field(
        default_factory=lambda: _env_float("CHARTCACHE_TTL_S", DEFAULT_CACHE_TTL_S)
    )
    cache_max_entries: int = field(
        default_factory=lambda: _env_int("CHARTCACHE_MAX_ENTRIES", DEFAULT_CACHE_MAX_ENTRIES)
    )
    preload_enabled: bool = field(
        default_factory=lambda: _env_flag("CHARTCACHE_PRELOAD_ENABLED", True)
    )
    preload_cooldown_s: float = field(
        default_factory=lambda: _env_float(
            "CHARTCACHE_PRELOAD_COOLDOWN_S", DEFAULT_PRELOAD_COOLDOWN_S
        )
    )
    fetch_timeout_s: float = field(
        default_factory=lambda: _env_float("CHARTCACHE_FETCH_TIMEOUT_S", DEFAULT_FETCH_TIMEOUT_S)
    )
    compute_max_retries: int = field(
        default_factory=lambda: _env_int(
            "CHARTCACHE_COMPUTE_MAX_RETRIES", DEFAULT_COMPUTE_MAX_RETRIES
        )
    )
    compute_retry_backoff_ms: int = field(
        default_factory=lambda: _env_int(
            "CHARTCACHE_COMPUTE_RETRY_BACKOFF_MS", DEFAULT_COMPUTE_RETRY_BACKOFF_MS
        )
    )
    sample_latency_ms: int = field(
        default_factory=lambda: _env_int("CHARTCACHE_SAMPLE_LATENCY_MS", DEFAULT_SAMPLE_LATENCY_MS)
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("CHARTCACHE_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    )

    def cache_config(self) -> CacheConfig:
        return CacheConfig(ttl_s=self.cache_ttl_s, max_size=self.cache_max_entries)

    def fetch_timeout(self) -> float | None:
        """Return the collaborator timeout in seconds, or None when disabled."""
        return self.fetch_timeout_s if self.fetch_timeout_s > 0 else None

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level.strip().upper())
        return level if isinstance(level, int) else logging.INFO


def get_settings() -> Settings:
    """Return a Settings instance with environment overrides applied."""
    load_dotenv()
    return Settings()
