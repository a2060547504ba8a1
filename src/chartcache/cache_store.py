"""In-memory cache with per-entry TTL and a bounded number of entries."""

from __future__ import annotations

import time as time_module
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock
from typing import Generic, TypeVar

from chartcache.build_chart_cache_key__query_key import _key_has_kind
from chartcache.cache_entry import CacheEntry
from chartcache.define_cache_config__config import CacheConfig
from chartcache.utils import get_logger

logger = get_logger(__name__)

ValueT = TypeVar("ValueT")


def _now() -> float:
    return time_module.time()


class CacheStore(Generic[ValueT]):
    """
    Key/value store with lazy TTL expiry and first-in-first-out eviction.

    Expired entries are only dropped when they are read, so an expired entry
    that is never read still counts toward ``len(store)`` until it is
    overwritten or evicted. When the store is full, writing a new key evicts
    the entry with the oldest write time. Reads never refresh an entry, so
    eviction follows write order rather than access order.

    Parameters
    ----------
    config : CacheConfig, optional
        TTL and capacity for this store. Defaults to ``CacheConfig()``.
    clock : Callable[[], float], optional
        Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = _now,
    ) -> None:
        self.config = config or CacheConfig()
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[ValueT]] = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get_entry(self, key: str) -> CacheEntry[ValueT] | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                self._entries.pop(key, None)
                logger.debug("Dropped expired cache entry %s", key)
                return None
            return entry

    def get(self, key: str) -> ValueT | None:
        """Return the live value for ``key`` or None when absent or expired."""
        entry = self.get_entry(key)
        return None if entry is None else entry.value

    def contains(self, key: str) -> bool:
        return self.get_entry(key) is not None

    def set(self, key: str, value: ValueT) -> CacheEntry[ValueT]:
        """Insert or overwrite ``key``, evicting the oldest write when full."""
        now = self._clock()
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.config.max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted_key)
            entry = CacheEntry(
                key=key,
                value=value,
                stored_at=now,
                expires_at=now + self.config.ttl_s,
            )
            self._entries[key] = entry
            return entry

    def clear_matching(self, predicate: Callable[[str], bool]) -> int:
        """Remove every entry whose key satisfies ``predicate``."""
        with self._lock:
            doomed = [key for key in self._entries if predicate(key)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear_type(self, kind: str) -> int:
        """Remove every entry whose key belongs to the logical type ``kind``."""
        return self.clear_matching(lambda key: _key_has_kind(key, kind))

    def clear_all(self) -> int:
        with self._lock:
            cleared = len(self._entries)
            self._entries.clear()
        return cleared

    def stats(self) -> dict[str, object]:
        with self._lock:
            size = len(self._entries)
        return {
            "size": size,
            "max_size": self.config.max_size,
            "ttl_s": self.config.ttl_s,
        }
