from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

ValueT = TypeVar("ValueT")


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[ValueT]):
    """A cached value with its write and expiry timestamps (epoch seconds)."""

    key: str
    value: ValueT
    stored_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
