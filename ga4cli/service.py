"""
Analytics Service - runs the reports behind every CLI command and dashboard view
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from google.analytics.data_v1beta.types import MetricAggregation

from .clients.api import ReportingClient
from .clients.filters import begins_with_filter, in_list_filter, order_by_metric
from .config import Settings, StoredConfig
from .constants import (
    PAGE_PATH_DIMENSION,
    PAGEVIEWS_INDEX,
    REALTIME_METRICS,
    REPORT_METRIC_FIELDS,
    REPORT_METRIC_NAMES,
    TOP_PAGES_METRICS,
)
from .dates import DATE_FORMAT, DateRange
from .domain import PathQuery, aggregate, resolve_variants, to_number
from .errors import ConfigError, Ga4CliError, InvalidInputError, UpstreamError
from .models import (
    AggregatedReport,
    MetricRow,
    PropertySummary,
    RealtimeSummary,
    ReportResponse,
    ReportSummary,
    ResponseRow,
    SummaryMetrics,
    TopPage,
    TopPagesReport,
)

logger = logging.getLogger(__name__)

QueryFn = Callable[..., Awaitable[ReportResponse]]


def normalize_property_id(property_id: Any) -> Optional[str]:
    if property_id is None:
        return None
    value = str(property_id).strip().removeprefix("properties/")
    return value or None


def _row_metrics(row: ResponseRow, fields: List[str]) -> dict:
    return {field: row.metric(index) for index, field in enumerate(fields)}


def to_metric_rows(response: ReportResponse) -> List[MetricRow]:
    """Turn pagePath rows into MetricRow records"""
    return [
        MetricRow(path=row.dimension(0), **_row_metrics(row, REPORT_METRIC_FIELDS))
        for row in response.rows
    ]


def has_data(response: ReportResponse) -> bool:
    """Rows came back, or the totals row reports pageviews."""
    if response.rows:
        return True
    return to_number(response.totals_row().metric(PAGEVIEWS_INDEX)) != 0


async def _run_query(query_fn: QueryFn, **kwargs) -> ReportResponse:
    try:
        return await query_fn(**kwargs)
    except Ga4CliError:
        raise
    except Exception as e:
        raise UpstreamError(f"Report query failed: {e}") from e


async def resolve_path_report(
    path_query: PathQuery,
    query_fn: QueryFn,
    property_id: Optional[str]
) -> AggregatedReport:
    """
    Look up metrics for one URL path.

    Phase 1 asks for the exact trailing-slash variants of the path
    (case-insensitive). Only when that comes back empty, with no rows and
    no pageviews in the totals, phase 2 repeats the query with a
    case-insensitive prefix match on the path without its trailing slash.
    The results of the two phases are never combined.

    Args:
        path_query: Path and date range
        query_fn: Report query callable (ReportingClient.query signature)
        property_id: GA4 property id

    Returns:
        AggregatedReport over every matching page path

    Raises:
        InvalidInputError: If the path is empty
        ConfigError: If no property id is configured
        UpstreamError: If a query fails
    """
    resolved = resolve_variants(path_query.raw_path)

    property_id = normalize_property_id(property_id)
    if not property_id:
        raise ConfigError("No property selected. Provide --property <id> or add \"propertyId\" to the config file")

    query_kwargs = dict(
        property_id=property_id,
        date_range=path_query.date_range,
        dimensions=[PAGE_PATH_DIMENSION],
        metrics=REPORT_METRIC_NAMES,
        metric_aggregations=[MetricAggregation.TOTAL],
    )

    logger.info(f"Looking up {list(resolved.variants)} for property {property_id}")
    response = await _run_query(
        query_fn,
        dimension_filter=in_list_filter(PAGE_PATH_DIMENSION, resolved.variants),
        **query_kwargs
    )
    match_type = "exact"

    if not has_data(response):
        logger.info(f"No exact match, retrying with prefix {resolved.base_path}")
        response = await _run_query(
            query_fn,
            dimension_filter=begins_with_filter(PAGE_PATH_DIMENSION, resolved.base_path),
            **query_kwargs
        )
        match_type = "prefix"

    rows = to_metric_rows(response)
    if rows:
        summary = aggregate(rows)
    else:
        summary = SummaryMetrics(**_row_metrics(response.totals_row(), REPORT_METRIC_FIELDS))

    return AggregatedReport(
        property_id=property_id,
        path=path_query.raw_path,
        path_variants=list(resolved.variants),
        start_date=path_query.date_range.start_date.strftime(DATE_FORMAT),
        end_date=path_query.date_range.end_date.strftime(DATE_FORMAT),
        match_type=match_type,
        by_path=rows,
        **summary.model_dump()
    )


class AnalyticsService:
    """
    Runs the GA4 reports for one property:
    1. Realtime activity
    2. Property-wide summary for a date range
    3. Top pages
    4. Per-path lookup with prefix fallback
    """

    def __init__(self, client: ReportingClient, property_id: Optional[str] = None):
        """
        Args:
            client: Authenticated reporting client
            property_id: Default GA4 property id
        """
        self.client = client
        self.property_id = normalize_property_id(property_id)

    @classmethod
    def from_config(cls, settings: Settings, stored: StoredConfig) -> "AnalyticsService":
        client = ReportingClient.from_service_account_info(
            stored.credentials,
            data_api_endpoint=settings.data_api_endpoint,
            admin_api_endpoint=settings.admin_api_endpoint,
            timeout=settings.request_timeout
        )
        return cls(client, property_id=stored.property_id)

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def close(self):
        await self.client.close()

    def set_property_id(self, property_id: Any) -> None:
        self.property_id = normalize_property_id(property_id)

    def require_property_id(self) -> str:
        if not self.property_id:
            raise ConfigError("No property selected. Provide --property <id> or add \"propertyId\" to the config file")
        return self.property_id

    async def get_realtime_summary(self) -> RealtimeSummary:
        property_id = self.require_property_id()
        response = await _run_query(
            self.client.run_realtime_report,
            property_id=property_id,
            metrics=[name for name, _ in REALTIME_METRICS]
        )
        row = response.first_row()
        return RealtimeSummary(
            property_id=property_id,
            **_row_metrics(row, [field for _, field in REALTIME_METRICS])
        )

    async def get_report_summary(self, date_range: DateRange) -> ReportSummary:
        property_id = self.require_property_id()
        response = await _run_query(
            self.client.query,
            property_id=property_id,
            date_range=date_range,
            dimensions=[],
            metrics=REPORT_METRIC_NAMES
        )
        return ReportSummary(
            property_id=property_id,
            start_date=date_range.start_date.strftime(DATE_FORMAT),
            end_date=date_range.end_date.strftime(DATE_FORMAT),
            **_row_metrics(response.first_row(), REPORT_METRIC_FIELDS)
        )

    async def get_top_pages(self, date_range: DateRange, limit: int = 10) -> TopPagesReport:
        if limit is None or limit < 1:
            raise InvalidInputError(f"Limit must be a positive integer, got {limit}")
        property_id = self.require_property_id()

        response = await _run_query(
            self.client.query,
            property_id=property_id,
            date_range=date_range,
            dimensions=[PAGE_PATH_DIMENSION],
            metrics=[name for name, _ in TOP_PAGES_METRICS],
            order_bys=[order_by_metric("screenPageViews")],
            limit=limit
        )
        fields = [field for _, field in TOP_PAGES_METRICS]
        pages = [
            TopPage(path=row.dimension(0), **_row_metrics(row, fields))
            for row in response.rows
        ]
        return TopPagesReport(
            property_id=property_id,
            start_date=date_range.start_date.strftime(DATE_FORMAT),
            end_date=date_range.end_date.strftime(DATE_FORMAT),
            limit=limit,
            pages=pages
        )

    async def get_path_report(self, raw_path: str, date_range: DateRange) -> AggregatedReport:
        return await resolve_path_report(
            PathQuery(raw_path=raw_path, date_range=date_range),
            self.client.query,
            self.property_id
        )

    async def list_properties(self) -> List[PropertySummary]:
        return await self.client.list_properties()
