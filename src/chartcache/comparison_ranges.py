"""Date windows for comparison modes."""

from __future__ import annotations

import calendar
from datetime import datetime

from chartcache.chart_query import ChartQuery, Comparison
from chartcache.utils import Now

DateWindow = tuple[datetime | None, datetime | None]


def shift_months(value: datetime, months: int) -> datetime:
    """Move ``value`` by whole months, clamping the day to the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def previous_period_range(start: datetime | None, end: datetime | None = None) -> DateWindow:
    """Return the window of equal length that ends where ``start`` begins."""
    if start is None:
        return None, None
    end = end or Now.matching(start)
    duration = end - start
    return start - duration, end - duration


def year_over_year_range(start: datetime | None, end: datetime | None = None) -> DateWindow:
    """Return the same window one calendar year earlier."""
    if start is None:
        return None, None
    end = end or Now.matching(start)
    return shift_months(start, -12), shift_months(end, -12)


def comparison_range(query: ChartQuery) -> DateWindow:
    comparison = Comparison(query.comparison)
    if comparison is Comparison.PREVIOUS_PERIOD:
        return previous_period_range(query.start_date, query.end_date)
    if comparison is Comparison.YEAR_OVER_YEAR:
        return year_over_year_range(query.start_date, query.end_date)
    return None, None
