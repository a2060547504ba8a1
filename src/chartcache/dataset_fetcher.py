"""Serve chart datasets from the cache, computing and storing them on a miss."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from functools import partial
from typing import TYPE_CHECKING

from chartcache.build_chart_cache_key__query_key import (
    CHART_DATA_KIND,
    _chart_cache_key,
    _key_has_kind,
)
from chartcache.cache_store import CacheStore
from chartcache.chart_query import ChartDataset, ChartQuery
from chartcache.errors import FetchFailed
from chartcache.utils import get_logger
from chartcache.validate_chart_query__chart_query import validate_chart_query

if TYPE_CHECKING:
    from chartcache.preload_scheduler import PreloadScheduler

logger = get_logger(__name__)

ComputeDataset = Callable[[ChartQuery], Awaitable[ChartDataset]]


class DatasetFetcher:
    """
    Get-from-cache-or-compute orchestration for chart datasets.

    A cache hit returns without suspending. A miss awaits ``compute_dataset``
    once per key, and concurrent callers for the same key share that call.
    Successful results are stored before any caller resumes. Failures are
    raised as FetchFailed and never cached. After every successful fetch the
    attached PreloadScheduler is told about the query.

    Parameters
    ----------
    store : CacheStore
        Cache shared with the preload scheduler.
    compute_dataset : ComputeDataset
        Async collaborator that builds a dataset for a query.
    fetch_timeout_s : float, optional
        Upper bound for one collaborator call. None disables the bound.
    kind : str, optional
        Logical key type used for every key this fetcher writes.
    """

    def __init__(
        self,
        store: CacheStore[ChartDataset],
        compute_dataset: ComputeDataset,
        *,
        fetch_timeout_s: float | None = None,
        kind: str = CHART_DATA_KIND,
    ) -> None:
        self.store = store
        self.compute_dataset = compute_dataset
        self.fetch_timeout_s = fetch_timeout_s
        self.kind = kind
        self.scheduler: PreloadScheduler | None = None
        self._in_flight: dict[str, asyncio.Future[ChartDataset]] = {}

    def attach_scheduler(self, scheduler: PreloadScheduler) -> None:
        self.scheduler = scheduler

    def key_for(self, query: ChartQuery) -> str:
        return _chart_cache_key(query, self.kind)

    def is_cached(self, query: ChartQuery) -> bool:
        return self.store.contains(self.key_for(query))

    async def fetch(self, query: ChartQuery, *, schedule_preload: bool = True) -> ChartDataset:
        """Return the dataset for ``query``.

        Raises InvalidQuery before touching the cache when the query is
        malformed, and FetchFailed when the collaborator fails or times out.
        """
        key = self.key_for(validate_chart_query(query))
        entry = self.store.get_entry(key)
        if entry is not None:
            logger.debug("Cache hit for %s", key)
            self._after_fetch(query, schedule_preload)
            return entry.value
        logger.debug("Cache miss for %s", key)
        dataset = await self._compute_shared(key, query)
        self._after_fetch(query, schedule_preload)
        return dataset

    def _after_fetch(self, query: ChartQuery, schedule_preload: bool) -> None:
        if schedule_preload and self.scheduler is not None:
            self.scheduler.on_fetched(query)

    async def _compute_shared(self, key: str, query: ChartQuery) -> ChartDataset:
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._compute_and_store(key, query))
            self._in_flight[key] = task
            task.add_done_callback(partial(self._forget_in_flight, key))
        else:
            logger.debug("Joining in-flight computation for %s", key)
        return await asyncio.shield(task)

    def _forget_in_flight(self, key: str, task: asyncio.Future[ChartDataset]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if not task.cancelled():
            # Mark the exception retrieved when every waiter has gone away.
            task.exception()

    async def _compute_and_store(self, key: str, query: ChartQuery) -> ChartDataset:
        try:
            dataset = await self._call_compute(query)
        except TimeoutError as exc:
            if self.fetch_timeout_s is None:
                raise self._failed(key, exc) from exc
            logger.warning("Dataset computation timed out for %s", key)
            raise FetchFailed(
                key, f"Timed out after {self.fetch_timeout_s}s computing {key}"
            ) from exc
        except FetchFailed:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._failed(key, exc) from exc
        if self._in_flight.get(key) is asyncio.current_task():
            self.store.set(key, dataset)
        else:
            logger.debug("Discarding result for %s invalidated while computing", key)
        return dataset

    def _failed(self, key: str, exc: Exception) -> FetchFailed:
        logger.warning("Dataset computation failed for %s: %s", key, exc)
        return FetchFailed(key, f"Failed to compute {key}: {exc}")

    async def _call_compute(self, query: ChartQuery) -> ChartDataset:
        if self.fetch_timeout_s is None:
            return await self.compute_dataset(query)
        return await asyncio.wait_for(self.compute_dataset(query), timeout=self.fetch_timeout_s)

    def update_cached(
        self,
        query: ChartQuery,
        partial_dataset: Mapping[str, object],
    ) -> ChartDataset | None:
        """Merge ``partial_dataset`` into a live cached dataset and store it again."""
        key = self.key_for(validate_chart_query(query))
        cached = self.store.get(key)
        if cached is None:
            return None
        merged = {**cached, **partial_dataset}
        self.store.set(key, merged)
        return merged

    def invalidate(self, kind: str | None = None) -> int:
        """Clear cached entries of ``kind`` and detach computations still running for it.

        Detached computations still answer the callers already waiting on them,
        but their results are not stored and later fetches compute afresh.
        """
        kind = kind or self.kind
        for key in [key for key in self._in_flight if _key_has_kind(key, kind)]:
            del self._in_flight[key]
        cleared = self.store.clear_type(kind)
        logger.info("Invalidated %d cached %s entries", cleared, kind)
        return cleared

    def invalidate_all(self) -> int:
        self._in_flight.clear()
        cleared = self.store.clear_all()
        logger.info("Invalidated all %d cached entries", cleared)
        return cleared

    def stats(self) -> dict[str, object]:
        return self.store.stats()
