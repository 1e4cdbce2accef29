"""
Google Analytics 4 Data API boundary.

Builds RunReport requests from a small ``ReportQuery`` description and turns
responses into plain string rows. Transport, auth and quota handling belong
to the Google client library; any failure it raises is wrapped in
``AnalyticsQueryError``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Filter,
    FilterExpression,
    Metric,
    OrderBy,
    RunReportRequest,
)
from google.oauth2 import service_account

from purchaseops.config import MissingConfigError, credentials_file, inline_credentials

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10000


class AnalyticsQueryError(RuntimeError):
    """Raised when a report query against the analytics API fails."""


@dataclass(frozen=True)
class ReportQuery:
    dimensions: tuple[str, ...]
    metrics: tuple[str, ...]
    required_dimension: str | None = None
    order_by_dimension: str | None = None
    order_desc: bool = False
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class ReportRow:
    dimensions: list[str]
    metrics: list[str]


@dataclass(frozen=True)
class ReportResult:
    dimension_names: list[str]
    metric_names: list[str]
    rows: list[ReportRow] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def load_credentials() -> service_account.Credentials:
    info = inline_credentials()
    if info is not None:
        return service_account.Credentials.from_service_account_info(info)
    path = credentials_file()
    if not path.is_file():
        raise MissingConfigError(f"GOOGLE_CREDENTIALS not set and {path} does not exist")
    return service_account.Credentials.from_service_account_file(str(path))


@lru_cache(maxsize=1)
def init_ga4_client() -> BetaAnalyticsDataClient:
    """Process-wide client handle, created on first use."""
    credentials = load_credentials()
    logger.info("GA4 Data API client initialized")
    return BetaAnalyticsDataClient(credentials=credentials)


def non_empty_filter(field_name: str) -> FilterExpression:
    """Filter keeping only rows where ``field_name`` matches the full regexp ``.+``."""
    return FilterExpression(
        filter=Filter(
            field_name=field_name,
            string_filter=Filter.StringFilter(
                match_type=Filter.StringFilter.MatchType.FULL_REGEXP,
                value=".+",
            ),
        )
    )


def build_request(property_path: str, start_date: str, end_date: str, spec: ReportQuery) -> RunReportRequest:
    request = RunReportRequest(
        property=property_path,
        date_ranges=[DateRange(start_date=start_date, end_date=end_date)],
        dimensions=[Dimension(name=d) for d in spec.dimensions],
        metrics=[Metric(name=m) for m in spec.metrics],
        limit=spec.limit,
    )
    if spec.required_dimension:
        request.dimension_filter = non_empty_filter(spec.required_dimension)
    if spec.order_by_dimension:
        request.order_bys = [
            OrderBy(
                dimension=OrderBy.DimensionOrderBy(dimension_name=spec.order_by_dimension),
                desc=spec.order_desc,
            )
        ]
    return request


def _values(items: Any) -> list[str]:
    return [str(v.value) for v in (items or [])]


def run_report(client: Any, property_path: str, start_date: str, end_date: str, spec: ReportQuery) -> ReportResult:
    request = build_request(property_path, start_date, end_date, spec)
    try:
        response = client.run_report(request=request)
    except Exception as exc:
        logger.error("GA4 query %s failed: %s", ",".join(spec.dimensions), exc)
        raise AnalyticsQueryError(str(exc)) from exc

    rows = [ReportRow(dimensions=_values(r.dimension_values), metrics=_values(r.metric_values)) for r in (response.rows or [])]
    logger.debug("GA4 query %s returned %d rows", ",".join(spec.dimensions), len(rows))
    return ReportResult(
        dimension_names=list(spec.dimensions),
        metric_names=list(spec.metrics),
        rows=rows,
    )
