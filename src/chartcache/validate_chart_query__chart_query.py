"""Reject malformed chart queries before they reach the cache."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from enum import StrEnum

from chartcache.chart_query import ChartQuery, Comparison, Granularity
from chartcache.errors import InvalidQuery

_SCALAR_TYPES = (str, int, float, bool)


def _validate_member(enum_type: type[StrEnum], value: object, field_name: str) -> None:
    try:
        enum_type(value)
    except (TypeError, ValueError) as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidQuery(f"{field_name} must be one of {allowed}; got {value!r}") from exc


def _validate_filters(filters: object) -> None:
    if not isinstance(filters, Mapping):
        raise InvalidQuery(f"filters must be a mapping; got {type(filters).__name__}")
    for name, value in filters.items():
        if not isinstance(name, str) or not name:
            raise InvalidQuery(f"filter names must be non-empty strings; got {name!r}")
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise InvalidQuery(
                f"filter {name!r} must be a scalar; got {type(value).__name__}"
            )
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidQuery(f"filter {name!r} must be finite; got {value!r}")


def _validate_date_range(start: object, end: object) -> None:
    for label, value in (("start_date", start), ("end_date", end)):
        if value is not None and not isinstance(value, datetime):
            raise InvalidQuery(f"{label} must be a datetime; got {type(value).__name__}")
    if not isinstance(start, datetime) or not isinstance(end, datetime):
        return
    if (start.tzinfo is None) != (end.tzinfo is None):
        raise InvalidQuery("start_date and end_date must both be naive or both be aware")
    if start > end:
        raise InvalidQuery(
            f"start_date {start.isoformat()} is after end_date {end.isoformat()}"
        )


def validate_chart_query(query: ChartQuery) -> ChartQuery:
    """Return ``query`` unchanged or raise InvalidQuery describing the first problem."""
    _validate_member(Granularity, query.granularity, "granularity")
    _validate_member(Comparison, query.comparison, "comparison")
    _validate_filters(query.filters)
    _validate_date_range(query.start_date, query.end_date)
    return query
