"""Application use-case entrypoints."""

from chartcache.app.use_cases.chart_data import ChartDataUseCase, get_chart_data_use_case

__all__ = [
    "ChartDataUseCase",
    "get_chart_data_use_case",
]
