from __future__ import annotations

from datetime import datetime
from enum import Enum

from chartcache.utils import Now


def _cache_value(value: object) -> object:
    """Return the stable name for enum members and the value itself otherwise."""
    if isinstance(value, Enum):
        return value.value
    return value


def _date_cache_value(value: datetime | None) -> str | None:
    normalized = Now.to_utc(value)
    return normalized.isoformat() if normalized else None
