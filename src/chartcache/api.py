from __future__ import annotations

from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from chartcache.app.use_cases.chart_data import ChartDataUseCase, get_chart_data_use_case
from chartcache.chart_query_filters import ChartQueryFilters
from chartcache.errors import FetchFailed, InvalidQuery
from chartcache.manage_lifespan__fastapi import lifespan
from chartcache.utils import get_logger

logger = get_logger(__name__)

app = FastAPI(title="CHARTCACHE", version="0.1.0", lifespan=lifespan)

ChartDataDep = Annotated[ChartDataUseCase, Depends(get_chart_data_use_case)]


@app.exception_handler(InvalidQuery)
async def _invalid_query_handler(_: Request, exc: InvalidQuery) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.exception_handler(FetchFailed)
async def _fetch_failed_handler(_: Request, exc: FetchFailed) -> JSONResponse:
    logger.warning("Chart data fetch failed for %s", exc.key)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


@app.get("/api/health")
def health() -> dict[str, object]:
    return {"status": "ok"}


@app.post("/api/chart-data")
async def chart_data(filters: ChartQueryFilters, use_case: ChartDataDep) -> dict[str, object]:
    return await use_case.get_chart_data(filters)


@app.get("/api/cache/stats")
async def cache_stats(use_case: ChartDataDep) -> dict[str, object]:
    return use_case.get_cache_stats()


@app.get("/api/preload")
async def preload_status(use_case: ChartDataDep) -> dict[str, object]:
    return use_case.get_preload_status()


@app.delete("/api/cache/{kind}")
async def invalidate_cache(kind: str, use_case: ChartDataDep) -> dict[str, object]:
    return use_case.invalidate(kind)


@app.delete("/api/cache")
async def invalidate_all_cache(use_case: ChartDataDep) -> dict[str, object]:
    return use_case.invalidate_all()
