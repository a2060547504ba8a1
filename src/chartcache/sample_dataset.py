"""Reference dataset collaborator producing deterministic synthetic chart data."""

from __future__ import annotations

import asyncio
import math
import random
from collections.abc import Iterator
from datetime import datetime, timedelta

from chartcache.build_chart_cache_key__query_key import _chart_cache_key
from chartcache.chart_query import ChartDataset, ChartQuery, Comparison, Granularity
from chartcache.comparison_ranges import comparison_range, shift_months
from chartcache.utils import Hasher, Now

MAX_TIME_POINTS = 12
_HOURS_PER_DAY = 24
_DEFAULT_WINDOW_DAYS = {
    Granularity.HOUR: 1,
    Granularity.DAY: 30,
}
_DEFAULT_WINDOW_MONTHS = {
    Granularity.WEEK: 3,
    Granularity.MONTH: 12,
    Granularity.QUARTER: 24,
    Granularity.YEAR: 60,
}
_BAR_CATEGORIES = (
    "sentiment",
    "topic",
    "keywords",
    "entities",
    "similarity",
    "summary",
    "intent",
)
_PIE_CATEGORIES = ("positive", "neutral", "negative", "mixed", "undetermined")
_AREA_LABELS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
_TABLE_CATEGORIES = (
    "news",
    "social",
    "reviews",
    "feedback",
    "email",
    "chat",
    "papers",
)


def _default_window(granularity: Granularity, end: datetime) -> tuple[datetime, datetime]:
    if granularity in _DEFAULT_WINDOW_DAYS:
        return end - timedelta(days=_DEFAULT_WINDOW_DAYS[granularity]), end
    return shift_months(end, -_DEFAULT_WINDOW_MONTHS[granularity]), end


def _resolve_window(query: ChartQuery, granularity: Granularity) -> tuple[datetime, datetime]:
    if query.start_date is None and query.end_date is None:
        return _default_window(granularity, Now.as_datetime())
    end = query.end_date or Now.matching(query.start_date)
    start = query.start_date or end - timedelta(days=_DEFAULT_WINDOW_DAYS[Granularity.DAY])
    return start, end


def _bucket_start(value: datetime, granularity: Granularity) -> datetime:
    day_start = value.replace(hour=0, minute=0, second=0, microsecond=0)
    if granularity is Granularity.DAY:
        return day_start
    if granularity is Granularity.WEEK:
        return day_start - timedelta(days=day_start.weekday())
    month_start = day_start.replace(day=1)
    if granularity is Granularity.MONTH:
        return month_start
    if granularity is Granularity.QUARTER:
        return month_start.replace(month=(month_start.month - 1) // 3 * 3 + 1)
    return month_start.replace(month=1)


def _next_bucket(value: datetime, granularity: Granularity) -> datetime:
    if granularity is Granularity.DAY:
        return value + timedelta(days=1)
    if granularity is Granularity.WEEK:
        return value + timedelta(weeks=1)
    if granularity is Granularity.MONTH:
        return shift_months(value, 1)
    if granularity is Granularity.QUARTER:
        return shift_months(value, 3)
    return shift_months(value, 12)


def _iter_time_points(start: datetime, end: datetime, granularity: Granularity) -> Iterator[datetime]:
    if granularity is Granularity.HOUR:
        for offset in range(_HOURS_PER_DAY - 1, -1, -1):
            yield end - timedelta(hours=offset)
        return
    point = _bucket_start(start, granularity)
    while point <= end:
        yield point
        point = _next_bucket(point, granularity)


def _downsample(points: list[datetime]) -> list[datetime]:
    if len(points) <= MAX_TIME_POINTS:
        return points
    step = math.ceil(len(points) / MAX_TIME_POINTS)
    return points[::step][:MAX_TIME_POINTS]


def format_time_label(value: datetime, granularity: Granularity) -> str:
    if granularity is Granularity.HOUR:
        return value.strftime("%H:00")
    if granularity is Granularity.DAY:
        return value.strftime("%m-%d")
    if granularity is Granularity.WEEK:
        return f"{value.strftime('%m-%d')} wk"
    if granularity is Granularity.MONTH:
        return value.strftime("%Y-%m")
    if granularity is Granularity.QUARTER:
        return f"{value.year}Q{(value.month - 1) // 3 + 1}"
    return value.strftime("%Y")


def build_time_labels(query: ChartQuery) -> list[str]:
    """Return at most MAX_TIME_POINTS labels covering the query window."""
    granularity = Granularity(query.granularity)
    start, end = _resolve_window(query, granularity)
    points = _downsample(list(_iter_time_points(start, end, granularity)))
    return [format_time_label(point, granularity) for point in points]


def _scaled(rng: random.Random, low: int, high: int, factor: float) -> int:
    return math.floor(rng.randint(low, high) * factor)


def _labelled(labels: list[str], values: list[int]) -> list[dict[str, object]]:
    return [{"label": label, "value": value} for label, value in zip(labels, values, strict=True)]


def _comparison_block(
    query: ChartQuery,
    labels: list[str],
    rng: random.Random,
    factor: float,
) -> dict[str, object]:
    current = [_scaled(rng, 70, 95, factor) for _ in labels]
    previous = [_scaled(rng, 65, 90, factor) for _ in labels]
    change = []
    for label, now_value, then_value in zip(labels, current, previous, strict=True):
        diff = now_value - then_value
        percentage = diff / then_value * 100 if then_value else 0.0
        change.append({"label": label, "value": diff, "percentage": round(percentage, 2)})
    previous_start, previous_end = comparison_range(query)
    return {
        "current": _labelled(labels, current),
        "previous": _labelled(labels, previous),
        "change": change,
        "previous_range": {
            "start_date": previous_start.isoformat() if previous_start else None,
            "end_date": previous_end.isoformat() if previous_end else None,
        },
    }


def build_sample_dataset(query: ChartQuery) -> ChartDataset:
    """Build the bar/line/pie/area/table payload for ``query`` without delay."""
    rng = random.Random(Hasher.seed_from_string(_chart_cache_key(query)))
    factor = rng.uniform(0.8, 1.2)
    labels = build_time_labels(query)
    table = []
    for index, category in enumerate(_TABLE_CATEGORIES):
        table.append(
            {
                "id": index,
                "category": category,
                "positive": _scaled(rng, 100, 500, factor),
                "negative": _scaled(rng, 50, 300, factor),
                "neutral": _scaled(rng, 50, 200, factor),
                "accuracy": _scaled(rng, 80, 98, factor),
            }
        )
    comparison = Comparison(query.comparison)
    return {
        "granularity": Granularity(query.granularity).value,
        "comparison": comparison.value,
        "bar_chart": {
            "categories": list(_BAR_CATEGORIES),
            "values": [_scaled(rng, 60, 95, factor) for _ in _BAR_CATEGORIES],
        },
        "line_chart": {
            "labels": labels,
            "values": [_scaled(rng, 70, 95, factor) for _ in labels],
        },
        "pie_chart": {
            "categories": list(_PIE_CATEGORIES),
            "values": [_scaled(rng, 10, 100, factor) for _ in _PIE_CATEGORIES],
        },
        "area_chart": {
            "labels": list(_AREA_LABELS),
            "series": [
                {
                    "name": "positive reviews",
                    "color": "#3b82f6",
                    "values": [_scaled(rng, 30, 80, factor) for _ in _AREA_LABELS],
                },
                {
                    "name": "negative reviews",
                    "color": "#ef4444",
                    "values": [_scaled(rng, 10, 40, factor) for _ in _AREA_LABELS],
                },
            ],
        },
        "table": table,
        "comparison_data": (
            None
            if comparison is Comparison.NONE
            else _comparison_block(query, labels, rng, factor)
        ),
    }


async def compute_sample_dataset(query: ChartQuery, *, latency_s: float = 0.0) -> ChartDataset:
    """Async ``computeDataset`` collaborator with simulated backend latency."""
    if latency_s > 0:
        await asyncio.sleep(latency_s)
    return build_sample_dataset(query)
