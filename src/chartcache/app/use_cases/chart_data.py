"""Use cases for chart data API endpoints."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from chartcache.app.wiring import ChartCacheServices
from chartcache.chart_query import ChartDataset
from chartcache.chart_query_filters import ChartQueryFilters


@dataclass
class ChartDataUseCase:
    services: ChartCacheServices

    async def get_chart_data(self, filters: ChartQueryFilters) -> ChartDataset:
        return await self.services.fetcher.fetch(filters.to_query())

    def get_cache_stats(self) -> dict[str, object]:
        return self.services.fetcher.stats()

    def get_preload_status(self) -> dict[str, object]:
        return self.services.scheduler.status()

    def invalidate(self, kind: str) -> dict[str, object]:
        return {"kind": kind, "cleared": self.services.fetcher.invalidate(kind)}

    def invalidate_all(self) -> dict[str, object]:
        return {"cleared": self.services.fetcher.invalidate_all()}


def get_chart_data_use_case(request: Request) -> ChartDataUseCase:
    return ChartDataUseCase(request.app.state.chart_cache)


__all__ = ["ChartDataUseCase", "get_chart_data_use_case"]
