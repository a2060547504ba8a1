"""Chart query filters accepted from outer callers."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date

from pydantic import BaseModel, Field, ValidationError

from chartcache.chart_query import ChartQuery, Comparison, Granularity
from chartcache.coerce_date_to_datetime__datetime import _coerce_date_to_datetime
from chartcache.errors import InvalidQuery
from chartcache.validate_chart_query__chart_query import validate_chart_query


class ChartQueryFilters(BaseModel):
    """Filters accepted by the chart data endpoint."""

    granularity: Granularity = Granularity.DAY
    comparison: Comparison = Comparison.NONE
    start_date: date | None = None
    end_date: date | None = None
    filters: dict[str, str | int | float | bool | None] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> ChartQueryFilters:
        """Validate a raw mapping, raising InvalidQuery instead of ValidationError."""
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise InvalidQuery(str(exc)) from exc

    def to_query(self) -> ChartQuery:
        """Return a validated ChartQuery spanning whole days."""
        query = ChartQuery(
            granularity=self.granularity,
            comparison=self.comparison,
            start_date=_coerce_date_to_datetime(self.start_date),
            end_date=_coerce_date_to_datetime(self.end_date, end_of_day=True),
            filters=dict(self.filters),
        )
        return validate_chart_query(query)
