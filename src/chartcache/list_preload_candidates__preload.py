"""Derive the related queries worth warming after a fetch."""

from __future__ import annotations

from chartcache.chart_query import ChartQuery, Comparison, Granularity, clone_chart_query

_ADJACENT_GRANULARITIES: dict[Granularity, tuple[Granularity, ...]] = {
    Granularity.HOUR: (Granularity.DAY,),
    Granularity.DAY: (Granularity.WEEK, Granularity.MONTH),
    Granularity.WEEK: (Granularity.DAY, Granularity.MONTH),
    Granularity.MONTH: (Granularity.WEEK, Granularity.QUARTER),
    Granularity.QUARTER: (Granularity.MONTH, Granularity.YEAR),
    Granularity.YEAR: (Granularity.QUARTER,),
}
_NEXT_COMPARISON: dict[Comparison, Comparison] = {
    Comparison.NONE: Comparison.PREVIOUS_PERIOD,
    Comparison.PREVIOUS_PERIOD: Comparison.YEAR_OVER_YEAR,
    Comparison.YEAR_OVER_YEAR: Comparison.PREVIOUS_PERIOD,
}


def _preload_candidates(query: ChartQuery) -> list[ChartQuery]:
    """Return granularity neighbours first, then the next comparison mode.

    Each candidate keeps the query's date range and filters and varies one
    dimension only.
    """
    granularity = Granularity(query.granularity)
    candidates = [
        clone_chart_query(query, granularity=neighbour)
        for neighbour in _ADJACENT_GRANULARITIES[granularity]
    ]
    candidates.append(
        clone_chart_query(query, comparison=_NEXT_COMPARISON[Comparison(query.comparison)])
    )
    return candidates
