"""Chart query models and helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, TypeAlias, cast

FilterValue: TypeAlias = str | int | float | bool | None
ChartDataset: TypeAlias = dict[str, object]


class Granularity(StrEnum):
    """Time-bucket sizes a chart dataset can be aggregated by."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class Comparison(StrEnum):
    """
    Comparison modes a chart dataset can be shown with.

    Attributes:
        NONE: The dataset is shown alone.
        PREVIOUS_PERIOD: Compared against the previous window of equal length.
        YEAR_OVER_YEAR: Compared against the same window one year earlier.
    """

    NONE = "none"
    PREVIOUS_PERIOD = "previous_period"
    YEAR_OVER_YEAR = "year_over_year"


@dataclass(frozen=True)
class ChartQuery:
    """Time window, granularity, comparison mode and filters for one dataset."""

    granularity: Granularity
    comparison: Comparison = Comparison.NONE
    start_date: datetime | None = None
    end_date: datetime | None = None
    filters: Mapping[str, FilterValue] = field(default_factory=dict)

    # Unhashable while filters is a mutable mapping.
    __hash__ = None  # type: ignore[assignment]


def clone_chart_query(
    query: ChartQuery,
    **overrides: Any,
) -> ChartQuery:
    """Clone a chart query with optional overrides."""
    return ChartQuery(
        granularity=cast(Granularity, overrides.get("granularity", query.granularity)),
        comparison=cast(Comparison, overrides.get("comparison", query.comparison)),
        start_date=cast(datetime | None, overrides.get("start_date", query.start_date)),
        end_date=cast(datetime | None, overrides.get("end_date", query.end_date)),
        filters=dict(cast(Mapping[str, FilterValue], overrides.get("filters", query.filters))),
    )
