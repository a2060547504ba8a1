import unittest

from chartcache.chart_query import ChartQuery, Granularity
from chartcache.config import Settings
from chartcache.with_compute_retries__dataset_fetcher import with_compute_retries


class FlakyCompute:
    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.attempts = 0

    async def __call__(self, query: ChartQuery) -> dict[str, object]:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConnectionError("transient")
        return {"granularity": str(query.granularity)}


class ComputeRetryTests(unittest.IsolatedAsyncioTestCase):
    async def test_zero_retries_returns_collaborator_unchanged(self) -> None:
        compute = FlakyCompute(failures=0)

        self.assertIs(with_compute_retries(compute, Settings(compute_max_retries=0)), compute)

    async def test_transient_failures_are_retried(self) -> None:
        compute = FlakyCompute(failures=2)
        wrapped = with_compute_retries(
            compute,
            Settings(compute_max_retries=2, compute_retry_backoff_ms=0),
        )

        result = await wrapped(ChartQuery(Granularity.DAY))

        self.assertEqual(result, {"granularity": "day"})
        self.assertEqual(compute.attempts, 3)

    async def test_last_error_is_reraised_when_retries_run_out(self) -> None:
        compute = FlakyCompute(failures=5)
        wrapped = with_compute_retries(
            compute,
            Settings(compute_max_retries=1, compute_retry_backoff_ms=0),
        )

        with self.assertRaises(ConnectionError):
            await wrapped(ChartQuery(Granularity.DAY))
        self.assertEqual(compute.attempts, 2)


if __name__ == "__main__":
    unittest.main()
