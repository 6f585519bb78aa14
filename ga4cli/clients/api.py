"""
API Client for the GA4 Data and Admin APIs
"""

from contextlib import asynccontextmanager
from typing import Optional, Dict, Any, List
import logging

import google.auth.exceptions
from google.analytics.admin_v1beta import AnalyticsAdminServiceAsyncClient
from google.analytics.admin_v1beta.types import ListAccountSummariesRequest
from google.analytics.data_v1beta import BetaAnalyticsDataAsyncClient
from google.analytics.data_v1beta.types import (
    DateRange as ReportDateRange,
    Dimension,
    FilterExpression,
    Metric,
    MetricAggregation,
    OrderBy,
    RunRealtimeReportRequest,
    RunReportRequest,
)
from google.api_core import exceptions as core_exceptions
from google.api_core.client_options import ClientOptions
from google.auth.credentials import Credentials
from google.oauth2 import service_account

from ..dates import DateRange
from ..errors import ConfigError, UpstreamError
from ..models import (
    DimensionValue,
    Header,
    MetricValue,
    PropertySummary,
    ReportResponse,
    ResponseRow,
)

logger = logging.getLogger(__name__)

READONLY_SCOPE = "https://www.googleapis.com/auth/analytics.readonly"


def _to_response_row(row: Any) -> ResponseRow:
    return ResponseRow(
        dimension_values=[DimensionValue(value=value.value) for value in row.dimension_values],
        metric_values=[MetricValue(value=value.value) for value in row.metric_values],
    )


def to_report_response(response: Any) -> ReportResponse:
    """Copy a RunReportResponse / RunRealtimeReportResponse into ReportResponse"""
    return ReportResponse(
        dimension_headers=[Header(name=header.name) for header in response.dimension_headers],
        metric_headers=[Header(name=header.name) for header in response.metric_headers],
        rows=[_to_response_row(row) for row in response.rows],
        totals=[_to_response_row(row) for row in response.totals],
        row_count=response.row_count,
    )


class ReportingClient:
    """
    Client for running GA4 reports.
    Authenticates with a service account and wraps the async gRPC clients
    of the Data API (reports) and the Admin API (property listing).
    """

    def __init__(
        self,
        credentials: Credentials,
        data_api_endpoint: str = "analyticsdata.googleapis.com",
        admin_api_endpoint: str = "analyticsadmin.googleapis.com",
        timeout: float = 30.0,
        data_client: Optional[BetaAnalyticsDataAsyncClient] = None,
        admin_client: Optional[AnalyticsAdminServiceAsyncClient] = None
    ):
        """
        Initialize the reporting client.

        The underlying clients open their channels on first use, so a
        ReportingClient can be built before an event loop is running.

        Args:
            credentials: google-auth credentials with the analytics.readonly scope
            data_api_endpoint: Host of the Data API
            admin_api_endpoint: Host of the Admin API
            timeout: Per-call timeout in seconds
            data_client: Optional preconfigured Data API client
            admin_client: Optional preconfigured Admin API client
        """
        self.credentials = credentials
        self.data_api_endpoint = data_api_endpoint
        self.admin_api_endpoint = admin_api_endpoint
        self.timeout = timeout
        self._data_client = data_client
        self._admin_client = admin_client

    @classmethod
    def from_service_account_info(cls, info: Dict[str, Any], **kwargs) -> "ReportingClient":
        """Build a client from the parsed service-account JSON"""
        try:
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=[READONLY_SCOPE]
            )
        except (ValueError, KeyError) as e:
            raise ConfigError(f"Invalid service-account credentials: {e}") from e
        return cls(credentials, **kwargs)

    @property
    def data_client(self) -> BetaAnalyticsDataAsyncClient:
        if self._data_client is None:
            self._data_client = BetaAnalyticsDataAsyncClient(
                credentials=self.credentials,
                client_options=ClientOptions(api_endpoint=self.data_api_endpoint)
            )
        return self._data_client

    @property
    def admin_client(self) -> AnalyticsAdminServiceAsyncClient:
        if self._admin_client is None:
            self._admin_client = AnalyticsAdminServiceAsyncClient(
                credentials=self.credentials,
                client_options=ClientOptions(api_endpoint=self.admin_api_endpoint)
            )
        return self._admin_client

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def close(self):
        """Close whichever channels were opened"""
        for client in (self._data_client, self._admin_client):
            if client is not None:
                await client.transport.close()
        self._data_client = None
        self._admin_client = None

    @asynccontextmanager
    async def _call(self, description: str):
        """Map google-api-core and google-auth failures to UpstreamError"""
        try:
            logger.debug(description)
            yield
        except core_exceptions.GoogleAPICallError as e:
            status_code = int(e.code) if e.code is not None else None
            logger.warning(f"API error occurred: {status_code} - {e.message}")
            raise UpstreamError(
                f"{description} failed with {status_code}: {e.message}",
                status_code=status_code
            ) from e
        except core_exceptions.GoogleAPIError as e:
            logger.warning(f"Transport error: {str(e)}")
            raise UpstreamError(f"{description} failed: {e}") from e
        except google.auth.exceptions.GoogleAuthError as e:
            raise UpstreamError(f"Authentication failed: {e}") from e

    async def query(
        self,
        property_id: str,
        date_range: DateRange,
        dimensions: List[str],
        metrics: List[str],
        dimension_filter: Optional[FilterExpression] = None,
        order_bys: Optional[List[OrderBy]] = None,
        limit: Optional[int] = None,
        metric_aggregations: Optional[List[MetricAggregation]] = None
    ) -> ReportResponse:
        """
        Run a historical report.

        Args:
            property_id: GA4 property id
            date_range: Inclusive calendar range
            dimensions: Dimension names
            metrics: Metric names
            dimension_filter: Optional FilterExpression
            order_bys: Optional OrderBy list
            limit: Optional row limit
            metric_aggregations: e.g. [MetricAggregation.TOTAL] to get a totals row

        Returns:
            Parsed report response

        Raises:
            UpstreamError: If the call or authentication fails
        """
        request = RunReportRequest(
            property=f"properties/{property_id}",
            date_ranges=[ReportDateRange(**date_range.as_api())],
            dimensions=[Dimension(name=name) for name in dimensions],
            metrics=[Metric(name=name) for name in metrics],
        )
        if dimension_filter is not None:
            request.dimension_filter = dimension_filter
        if order_bys:
            request.order_bys = order_bys
        if limit is not None:
            request.limit = limit
        if metric_aggregations:
            request.metric_aggregations = metric_aggregations

        async with self._call(f"runReport properties/{property_id}"):
            response = await self.data_client.run_report(request=request, timeout=self.timeout)
        return to_report_response(response)

    async def run_realtime_report(
        self,
        property_id: str,
        metrics: List[str],
        dimensions: Optional[List[str]] = None
    ) -> ReportResponse:
        """Run a realtime report covering the last 30 minutes"""
        request = RunRealtimeReportRequest(
            property=f"properties/{property_id}",
            metrics=[Metric(name=name) for name in metrics],
        )
        if dimensions:
            request.dimensions = [Dimension(name=name) for name in dimensions]

        async with self._call(f"runRealtimeReport properties/{property_id}"):
            response = await self.data_client.run_realtime_report(request=request, timeout=self.timeout)
        return to_report_response(response)

    async def list_properties(self) -> List[PropertySummary]:
        """
        List every property the credentials can read.

        The async pager fetches further pages as it is iterated.
        """
        properties: List[PropertySummary] = []

        async with self._call("listAccountSummaries"):
            pager = await self.admin_client.list_account_summaries(
                request=ListAccountSummariesRequest(page_size=200), timeout=self.timeout
            )
            async for account in pager:
                for prop in account.property_summaries:
                    properties.append(PropertySummary(
                        property_id=prop.property.removeprefix("properties/"),
                        display_name=prop.display_name,
                        account=account.display_name
                    ))

        return properties
