"""FastAPI lifespan hook owning the chart cache services."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from chartcache.app.wiring import build_chart_cache_services
from chartcache.config import get_settings
from chartcache.utils import get_logger, set_level

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the cache services for this app and close the preloader on shutdown."""
    settings = get_settings()
    set_level(settings.log_level_value)
    app.state.chart_cache = build_chart_cache_services(settings)
    logger.info("Chart cache ready: %s", app.state.chart_cache.store.stats())
    try:
        yield
    finally:
        await app.state.chart_cache.aclose()
