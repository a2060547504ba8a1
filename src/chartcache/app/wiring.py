"""Default dependency wiring for the chart cache services."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from chartcache.cache_store import CacheStore
from chartcache.chart_query import ChartDataset
from chartcache.config import Settings, get_settings
from chartcache.dataset_fetcher import ComputeDataset, DatasetFetcher
from chartcache.preload_scheduler import PreloadScheduler
from chartcache.sample_dataset import compute_sample_dataset
from chartcache.with_compute_retries__dataset_fetcher import with_compute_retries


@dataclass(frozen=True)
class ChartCacheServices:
    """The cache, fetcher and preloader owned by one application session."""

    store: CacheStore[ChartDataset]
    fetcher: DatasetFetcher
    scheduler: PreloadScheduler

    async def aclose(self) -> None:
        await self.scheduler.aclose()


def build_chart_cache_services(
    settings: Settings | None = None,
    compute_dataset: ComputeDataset | None = None,
) -> ChartCacheServices:
    """Construct one CacheStore, DatasetFetcher and PreloadScheduler wired together."""
    settings = settings or get_settings()
    compute = compute_dataset or partial(
        compute_sample_dataset,
        latency_s=max(settings.sample_latency_ms, 0) / 1000.0,
    )
    store: CacheStore[ChartDataset] = CacheStore(settings.cache_config())
    fetcher = DatasetFetcher(
        store,
        with_compute_retries(compute, settings),
        fetch_timeout_s=settings.fetch_timeout(),
    )
    scheduler = PreloadScheduler(
        fetcher,
        cooldown_s=max(settings.preload_cooldown_s, 0.0),
        enabled=settings.preload_enabled,
    )
    fetcher.attach_scheduler(scheduler)
    return ChartCacheServices(store=store, fetcher=fetcher, scheduler=scheduler)
