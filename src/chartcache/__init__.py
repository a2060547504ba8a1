"""CHARTCACHE package entrypoints."""

from chartcache.build_chart_cache_key__query_key import CHART_DATA_KIND
from chartcache.cache_entry import CacheEntry
from chartcache.cache_store import CacheStore
from chartcache.chart_query import ChartDataset, ChartQuery, Comparison, Granularity
from chartcache.config import Settings, get_settings
from chartcache.dataset_fetcher import DatasetFetcher
from chartcache.define_cache_config__config import CacheConfig
from chartcache.errors import ChartCacheError, FetchFailed, InvalidQuery
from chartcache.preload_scheduler import PreloadScheduler, PreloadState


def main() -> None:
    """Serve the chart data API with uvicorn."""
    import uvicorn

    uvicorn.run("chartcache.api:app", host="127.0.0.1", port=8000)


__all__ = [
    "CHART_DATA_KIND",
    "CacheConfig",
    "CacheEntry",
    "CacheStore",
    "ChartCacheError",
    "ChartDataset",
    "ChartQuery",
    "Comparison",
    "DatasetFetcher",
    "FetchFailed",
    "Granularity",
    "InvalidQuery",
    "PreloadScheduler",
    "PreloadState",
    "Settings",
    "get_settings",
    "main",
]
