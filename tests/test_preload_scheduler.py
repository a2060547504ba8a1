import asyncio
import unittest
from datetime import datetime

from chartcache.build_chart_cache_key__query_key import _chart_cache_key
from chartcache.cache_store import CacheStore
from chartcache.chart_query import ChartQuery, Comparison, Granularity, clone_chart_query
from chartcache.dataset_fetcher import DatasetFetcher
from chartcache.define_cache_config__config import CacheConfig
from chartcache.list_preload_candidates__preload import _preload_candidates
from chartcache.preload_scheduler import PreloadScheduler, PreloadState
from tests.chart_cache_fakes import RecordingCompute

DAY_QUERY = ChartQuery(
    Granularity.DAY,
    start_date=datetime(2024, 1, 1),
    end_date=datetime(2024, 1, 31, 23, 59, 59),
    filters={"region": "eu"},
)


class PreloadCandidateTests(unittest.TestCase):
    def test_day_candidates_vary_one_dimension(self) -> None:
        candidates = _preload_candidates(DAY_QUERY)

        self.assertEqual(
            [(c.granularity, c.comparison) for c in candidates],
            [
                (Granularity.WEEK, Comparison.NONE),
                (Granularity.MONTH, Comparison.NONE),
                (Granularity.DAY, Comparison.PREVIOUS_PERIOD),
            ],
        )
        for candidate in candidates:
            self.assertEqual(candidate.start_date, DAY_QUERY.start_date)
            self.assertEqual(candidate.end_date, DAY_QUERY.end_date)
            self.assertEqual(candidate.filters, {"region": "eu"})

    def test_edge_granularities_have_one_neighbour(self) -> None:
        hour = _preload_candidates(ChartQuery(Granularity.HOUR))
        year = _preload_candidates(ChartQuery(Granularity.YEAR, Comparison.YEAR_OVER_YEAR))

        self.assertEqual([c.granularity for c in hour[:-1]], [Granularity.DAY])
        self.assertEqual([c.granularity for c in year[:-1]], [Granularity.QUARTER])
        self.assertEqual(year[-1].comparison, Comparison.PREVIOUS_PERIOD)

    def test_comparison_moves_to_next_mode(self) -> None:
        query = ChartQuery(Granularity.MONTH, Comparison.PREVIOUS_PERIOD)

        self.assertEqual(_preload_candidates(query)[-1].comparison, Comparison.YEAR_OVER_YEAR)


class PreloadSchedulerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = CacheStore(CacheConfig(ttl_s=60, max_size=50))
        self.compute = RecordingCompute()
        self.fetcher = DatasetFetcher(self.store, self.compute)
        self.scheduler = PreloadScheduler(self.fetcher, cooldown_s=0)
        self.fetcher.attach_scheduler(self.scheduler)

    async def asyncTearDown(self) -> None:
        await self.scheduler.aclose()

    async def test_fetch_warms_adjacent_granularities_in_background(self) -> None:
        await self.fetcher.fetch(DAY_QUERY)

        self.assertIs(self.scheduler.state, PreloadState.DRAINING)
        self.assertEqual(self.scheduler.pending, 3)
        await self.scheduler.wait_idle()

        for granularity in (Granularity.WEEK, Granularity.MONTH):
            self.assertTrue(
                self.fetcher.is_cached(clone_chart_query(DAY_QUERY, granularity=granularity))
            )
        self.assertTrue(
            self.fetcher.is_cached(
                clone_chart_query(DAY_QUERY, comparison=Comparison.PREVIOUS_PERIOD)
            )
        )
        self.assertIs(self.scheduler.state, PreloadState.IDLE)

    async def test_preloads_do_not_cascade(self) -> None:
        await self.fetcher.fetch(DAY_QUERY)
        await self.scheduler.wait_idle()

        self.assertEqual(len(self.compute.calls), 4)
        self.assertEqual(self.store.stats()["size"], 4)

    async def test_preload_fetches_never_overlap(self) -> None:
        self.compute.delay_s = 0.005
        queries = [
            clone_chart_query(DAY_QUERY, granularity=granularity)
            for granularity in (Granularity.DAY, Granularity.WEEK, Granularity.MONTH)
        ]
        queries.append(clone_chart_query(DAY_QUERY, comparison=Comparison.PREVIOUS_PERIOD))

        for query in queries:
            self.scheduler.on_fetched(query)
        await self.scheduler.wait_idle()

        self.assertEqual(self.compute.max_active, 1)
        keys = self.compute.keys()
        self.assertEqual(len(keys), len(set(keys)))

    async def test_cached_and_queued_candidates_are_dropped(self) -> None:
        week = clone_chart_query(DAY_QUERY, granularity=Granularity.WEEK)
        self.store.set(_chart_cache_key(week), {"cached": True})

        self.assertEqual(self.scheduler.on_fetched(DAY_QUERY), 2)
        self.assertEqual(self.scheduler.on_fetched(DAY_QUERY), 0)
        await self.scheduler.wait_idle()

        self.assertNotIn(_chart_cache_key(week), self.compute.keys())

    async def test_candidate_warmed_by_foreground_is_skipped(self) -> None:
        self.scheduler.cooldown_s = 0.02
        self.scheduler.on_fetched(DAY_QUERY)
        week = clone_chart_query(DAY_QUERY, granularity=Granularity.WEEK)

        await self.fetcher.fetch(week, schedule_preload=False)
        await self.scheduler.wait_idle()

        self.assertEqual(self.compute.keys().count(_chart_cache_key(week)), 1)

    async def test_preload_failures_are_swallowed(self) -> None:
        week = clone_chart_query(DAY_QUERY, granularity=Granularity.WEEK)
        month = clone_chart_query(DAY_QUERY, granularity=Granularity.MONTH)
        self.compute.fail_for = {_chart_cache_key(week)}

        with self.assertLogs("chartcache.preload_scheduler", level="WARNING") as logs:
            self.scheduler.on_fetched(DAY_QUERY)
            await self.scheduler.wait_idle()

        self.assertFalse(self.fetcher.is_cached(week))
        self.assertTrue(self.fetcher.is_cached(month))
        self.assertIn("Preload failed", "\n".join(logs.output))
        self.assertIs(self.scheduler.state, PreloadState.IDLE)

    async def test_foreground_fetch_is_not_queued_behind_preload(self) -> None:
        self.compute.delay_s = 0.05
        await self.fetcher.fetch(DAY_QUERY)

        await self.fetcher.fetch(ChartQuery(Granularity.QUARTER, filters={"region": "us"}))

        self.assertEqual(self.compute.max_active, 2)
        self.assertIs(self.scheduler.state, PreloadState.DRAINING)
        await self.scheduler.wait_idle()

    async def test_disabled_scheduler_queues_nothing(self) -> None:
        self.scheduler.enabled = False

        await self.fetcher.fetch(DAY_QUERY)

        self.assertEqual(self.scheduler.pending, 0)
        self.assertIs(self.scheduler.state, PreloadState.IDLE)
        self.assertEqual(self.scheduler.status(), {"state": "idle", "pending": 0, "enabled": False})

    async def test_aclose_drops_pending_and_finishes_in_flight(self) -> None:
        self.scheduler.cooldown_s = 0.02
        self.scheduler.on_fetched(DAY_QUERY)
        await asyncio.sleep(0)
        self.assertEqual(self.scheduler.pending, 2)

        await self.scheduler.aclose()

        self.assertEqual(len(self.compute.calls), 1)
        self.assertIs(self.scheduler.state, PreloadState.IDLE)
        self.assertEqual(self.scheduler.on_fetched(DAY_QUERY), 0)


if __name__ == "__main__":
    unittest.main()
