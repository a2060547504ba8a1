"""Background single-flight preloading of related chart queries."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from enum import StrEnum

from chartcache.chart_query import ChartQuery
from chartcache.dataset_fetcher import DatasetFetcher
from chartcache.errors import FetchFailed
from chartcache.list_preload_candidates__preload import _preload_candidates
from chartcache.utils import get_logger

logger = get_logger(__name__)


class PreloadState(StrEnum):
    IDLE = "idle"
    DRAINING = "draining"


class PreloadScheduler:
    """
    Queue of speculative fetches drained by one background task.

    ``on_fetched`` never suspends: it appends the uncached candidates of a
    query to a FIFO queue and starts the drain task when idle. The drain task
    pops one candidate at a time, waits ``cooldown_s`` and then fetches it
    through the DatasetFetcher, so at most one preload fetch is in flight.
    Foreground fetches never pass through this queue.

    Parameters
    ----------
    fetcher : DatasetFetcher
        Fetcher whose cache the preloads warm.
    cooldown_s : float, optional
        Delay before each preload fetch.
    enabled : bool, optional
        When False, ``on_fetched`` does nothing.
    candidates : Callable[[ChartQuery], list[ChartQuery]], optional
        Derives related queries from a fetched query.
    """

    def __init__(
        self,
        fetcher: DatasetFetcher,
        *,
        cooldown_s: float = 2.0,
        enabled: bool = True,
        candidates: Callable[[ChartQuery], list[ChartQuery]] = _preload_candidates,
    ) -> None:
        self._fetcher = fetcher
        self.cooldown_s = cooldown_s
        self.enabled = enabled
        self._candidates = candidates
        self._queue: deque[tuple[str, ChartQuery]] = deque()
        self._queued_keys: set[str] = set()
        self._busy = False
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def state(self) -> PreloadState:
        return PreloadState.DRAINING if self._busy else PreloadState.IDLE

    @property
    def pending(self) -> int:
        return len(self._queue)

    def status(self) -> dict[str, object]:
        return {"state": self.state.value, "pending": self.pending, "enabled": self.enabled}

    def on_fetched(self, query: ChartQuery) -> int:
        """Enqueue uncached related queries; return how many were added."""
        if not self.enabled or self._closed:
            return 0
        added = 0
        for candidate in self._candidates(query):
            key = self._fetcher.key_for(candidate)
            if key in self._queued_keys or self._fetcher.store.contains(key):
                continue
            self._queue.append((key, candidate))
            self._queued_keys.add(key)
            added += 1
        if added:
            logger.debug("Queued %d preload candidate(s); %d pending", added, len(self._queue))
        if self._queue and not self._busy:
            self._busy = True
            self._task = asyncio.get_running_loop().create_task(
                self._drain(), name="chartcache-preload"
            )
        return added

    async def _drain(self) -> None:
        logger.info("Preload drain started with %d candidate(s)", len(self._queue))
        try:
            while self._queue:
                key, candidate = self._queue.popleft()
                self._queued_keys.discard(key)
                await asyncio.sleep(self.cooldown_s)
                await self._preload(key, candidate)
        finally:
            self._busy = False
            self._task = None
            logger.info("Preload drain finished")

    async def _preload(self, key: str, candidate: ChartQuery) -> None:
        if self._fetcher.store.contains(key):
            logger.debug("Skipping preload of %s; already cached", key)
            return
        try:
            await self._fetcher.fetch(candidate, schedule_preload=False)
        except FetchFailed as exc:
            logger.warning("Preload failed for %s: %s", key, exc)
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected error while preloading %s", key)
        else:
            logger.debug("Preloaded %s", key)

    async def wait_idle(self) -> None:
        """Wait until the queue is drained and no preload is in flight."""
        while self._task is not None:
            await self._task

    async def aclose(self) -> None:
        """Drop queued candidates and wait for the in-flight preload to finish."""
        self._closed = True
        dropped = len(self._queue)
        self._queue.clear()
        self._queued_keys.clear()
        if dropped:
            logger.info("Dropped %d pending preload candidate(s)", dropped)
        await self.wait_idle()
