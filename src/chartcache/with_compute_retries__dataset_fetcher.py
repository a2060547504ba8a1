"""Opt-in retry policy for a dataset collaborator."""

from __future__ import annotations

import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from chartcache.chart_query import ChartDataset, ChartQuery
from chartcache.config import Settings
from chartcache.dataset_fetcher import ComputeDataset
from chartcache.utils import get_logger

logger = get_logger(__name__)

_MAX_RETRY_WAIT_S = 10


def with_compute_retries(compute_dataset: ComputeDataset, settings: Settings) -> ComputeDataset:
    """Wrap ``compute_dataset`` so transient failures are retried with backoff.

    Returns the collaborator unchanged when ``settings.compute_max_retries``
    is zero. The fetch timeout still bounds each attempt chain as a whole.
    """
    max_retries = max(settings.compute_max_retries, 0)
    if max_retries == 0:
        return compute_dataset
    backoff_s = max(settings.compute_retry_backoff_ms, 0) / 1000.0

    @retry(
        retry=retry_if_exception_type(Exception),
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=backoff_s, min=backoff_s, max=_MAX_RETRY_WAIT_S),
        reraise=True,
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    async def _compute_with_retries(query: ChartQuery) -> ChartDataset:
        return await compute_dataset(query)

    return _compute_with_retries
