"""Cache sizing and expiry configuration."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CACHE_TTL_S = 300.0
DEFAULT_CACHE_MAX_ENTRIES = 20


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Immutable TTL and capacity settings for one CacheStore."""

    ttl_s: float = DEFAULT_CACHE_TTL_S
    max_size: int = DEFAULT_CACHE_MAX_ENTRIES

    def __post_init__(self) -> None:
        if self.ttl_s <= 0:
            raise ValueError(f"ttl_s must be positive, got {self.ttl_s}")
        if self.max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {self.max_size}")
