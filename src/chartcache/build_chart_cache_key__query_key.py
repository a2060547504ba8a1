"""Canonical cache keys for chart queries."""

from __future__ import annotations

import json

from chartcache.chart_query import ChartQuery
from chartcache.coerce_cache_value__query_key import _cache_value, _date_cache_value

CHART_DATA_KIND = "chart_data"
_KIND_SEPARATOR = ":"


def _chart_cache_key(query: ChartQuery, kind: str = CHART_DATA_KIND) -> str:
    """Encode ``query`` as ``"<kind>:<canonical json>"``.

    Filter names are sorted, absent date bounds are written as ``null`` and
    enums are written by value, so logically equal queries share one key.
    """
    payload = {
        "granularity": _cache_value(query.granularity),
        "comparison": _cache_value(query.comparison),
        "start_date": _date_cache_value(query.start_date),
        "end_date": _date_cache_value(query.end_date),
        "filters": {name: _cache_value(value) for name, value in query.filters.items()},
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), allow_nan=False)
    return f"{kind}{_KIND_SEPARATOR}{encoded}"


def _key_has_kind(key: str, kind: str) -> bool:
    """Return True when ``key`` was encoded under the logical type ``kind``."""
    return key.startswith(f"{kind}{_KIND_SEPARATOR}")
