"""Test doubles for the dataset collaborator and the cache clock."""

from __future__ import annotations

import asyncio

from chartcache.chart_query import ChartDataset, ChartQuery
from chartcache.build_chart_cache_key__query_key import _chart_cache_key


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingCompute:
    """Async collaborator that records calls and tracks concurrency."""

    def __init__(self, delay_s: float = 0.0, fail_for: set[str] | None = None) -> None:
        self.delay_s = delay_s
        self.fail_for = fail_for or set()
        self.calls: list[ChartQuery] = []
        self.active = 0
        self.max_active = 0

    async def __call__(self, query: ChartQuery) -> ChartDataset:
        self.calls.append(query)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay_s:
                await asyncio.sleep(self.delay_s)
            key = _chart_cache_key(query)
            if key in self.fail_for:
                raise ConnectionError(f"backend unavailable for {query.granularity}")
            return {
                "granularity": str(query.granularity),
                "comparison": str(query.comparison),
                "call": len(self.calls),
            }
        finally:
            self.active -= 1

    def keys(self) -> list[str]:
        return [_chart_cache_key(query) for query in self.calls]
