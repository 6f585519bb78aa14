"""
Tests for ReportingClient and filter builders
"""

from datetime import date

import pytest
from unittest.mock import AsyncMock, MagicMock

import google.auth.exceptions
from google.analytics.admin_v1beta.types import AccountSummary, PropertySummary as ApiPropertySummary
from google.analytics.data_v1beta.types import (
    DimensionValue as ApiDimensionValue,
    Filter,
    MetricAggregation,
    MetricValue as ApiMetricValue,
    Row,
    RunRealtimeReportResponse,
    RunReportResponse,
)
from google.api_core import exceptions as core_exceptions

from ga4cli.clients.api import ReportingClient
from ga4cli.clients.filters import begins_with_filter, in_list_filter, order_by_metric
from ga4cli.dates import DateRange
from ga4cli.errors import ConfigError, UpstreamError

DATE_RANGE = DateRange(start_date=date(2026, 10, 1), end_date=date(2026, 10, 7))


def api_row(dimensions=(), metrics=()) -> Row:
    return Row(
        dimension_values=[ApiDimensionValue(value=value) for value in dimensions],
        metric_values=[ApiMetricValue(value=value) for value in metrics],
    )


class AccountPager:
    """Stands in for the Admin API async pager"""

    def __init__(self, accounts):
        self.accounts = accounts

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for account in self.accounts:
            yield account


@pytest.fixture
def data_client():
    client = MagicMock()
    client.run_report = AsyncMock()
    client.run_realtime_report = AsyncMock()
    client.transport.close = AsyncMock()
    return client


@pytest.fixture
def admin_client():
    client = MagicMock()
    client.list_account_summaries = AsyncMock()
    client.transport.close = AsyncMock()
    return client


class TestReportingClient:
    """Tests for ReportingClient"""

    def test_init(self, fake_credentials):
        """Test client initialization"""
        client = ReportingClient(fake_credentials, data_api_endpoint="data.test", timeout=5)
        assert client.data_api_endpoint == "data.test"
        assert client.credentials is fake_credentials
        assert client.timeout == 5

    def test_invalid_service_account(self):
        with pytest.raises(ConfigError, match="Invalid service-account credentials"):
            ReportingClient.from_service_account_info({"type": "service_account"})

    @pytest.mark.asyncio
    async def test_query_builds_run_report_request(self, fake_credentials, data_client):
        data_client.run_report.return_value = RunReportResponse(
            rows=[api_row(["/"], ["12"])],
            row_count=1,
        )
        client = ReportingClient(fake_credentials, timeout=5, data_client=data_client)

        response = await client.query(
            "123",
            DATE_RANGE,
            dimensions=["pagePath"],
            metrics=["sessions"],
            dimension_filter=in_list_filter("pagePath", ["/"]),
            limit=5,
            metric_aggregations=[MetricAggregation.TOTAL],
        )

        request = data_client.run_report.call_args.kwargs["request"]
        assert request.property == "properties/123"
        assert request.date_ranges[0].start_date == "2026-10-01"
        assert request.date_ranges[0].end_date == "2026-10-07"
        assert [d.name for d in request.dimensions] == ["pagePath"]
        assert [m.name for m in request.metrics] == ["sessions"]
        assert list(request.dimension_filter.filter.in_list_filter.values) == ["/"]
        assert request.limit == 5
        assert list(request.metric_aggregations) == [MetricAggregation.TOTAL]
        assert len(request.order_bys) == 0
        assert data_client.run_report.call_args.kwargs["timeout"] == 5

        assert response.row_count == 1
        assert response.rows[0].dimension(0) == "/"
        assert response.rows[0].metric(0) == "12"
        assert response.rows[0].metric(5) == "0"

    @pytest.mark.asyncio
    async def test_query_copies_totals(self, fake_credentials, data_client):
        data_client.run_report.return_value = RunReportResponse(
            totals=[api_row(["RESERVED_TOTAL"], ["3", ""])],
        )
        client = ReportingClient(fake_credentials, data_client=data_client)

        response = await client.query("123", DATE_RANGE, dimensions=["pagePath"], metrics=["sessions"])

        assert response.rows == []
        assert response.totals_row().metric(0) == "3"
        assert response.totals_row().metric(1) == "0"

    @pytest.mark.asyncio
    async def test_realtime_report(self, fake_credentials, data_client):
        data_client.run_realtime_report.return_value = RunRealtimeReportResponse(
            rows=[api_row(metrics=["4"])]
        )
        client = ReportingClient(fake_credentials, data_client=data_client)

        response = await client.run_realtime_report("123", metrics=["activeUsers"])

        request = data_client.run_realtime_report.call_args.kwargs["request"]
        assert request.property == "properties/123"
        assert [m.name for m in request.metrics] == ["activeUsers"]
        assert len(request.dimensions) == 0
        assert response.first_row().metric(0) == "4"

    @pytest.mark.asyncio
    async def test_api_error_becomes_upstream_error(self, fake_credentials, data_client):
        data_client.run_report.side_effect = core_exceptions.PermissionDenied("denied")
        client = ReportingClient(fake_credentials, data_client=data_client)

        with pytest.raises(UpstreamError, match="403") as exc_info:
            await client.query("123", DATE_RANGE, dimensions=[], metrics=["sessions"])

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_retry_error_becomes_upstream_error(self, fake_credentials, data_client):
        data_client.run_realtime_report.side_effect = core_exceptions.RetryError(
            "deadline exceeded", cause=None
        )
        client = ReportingClient(fake_credentials, data_client=data_client)

        with pytest.raises(UpstreamError, match="deadline exceeded"):
            await client.run_realtime_report("123", metrics=["activeUsers"])

    @pytest.mark.asyncio
    async def test_refresh_failure_becomes_upstream_error(self, fake_credentials, data_client):
        data_client.run_realtime_report.side_effect = google.auth.exceptions.RefreshError("invalid_grant")
        client = ReportingClient(fake_credentials, data_client=data_client)

        with pytest.raises(UpstreamError, match="Authentication failed"):
            await client.run_realtime_report("123", metrics=["activeUsers"])

    @pytest.mark.asyncio
    async def test_list_properties_walks_every_account(self, fake_credentials, admin_client):
        admin_client.list_account_summaries.return_value = AccountPager([
            AccountSummary(
                display_name="Acme",
                property_summaries=[ApiPropertySummary(property="properties/1", display_name="Site")],
            ),
            AccountSummary(
                display_name="Other",
                property_summaries=[ApiPropertySummary(property="properties/2", display_name="Shop")],
            ),
        ])
        client = ReportingClient(fake_credentials, admin_client=admin_client)

        properties = await client.list_properties()

        request = admin_client.list_account_summaries.call_args.kwargs["request"]
        assert request.page_size == 200
        assert [(p.property_id, p.display_name, p.account) for p in properties] == [
            ("1", "Site", "Acme"),
            ("2", "Shop", "Other"),
        ]

    @pytest.mark.asyncio
    async def test_context_manager_closes_open_channels(self, fake_credentials, data_client, admin_client):
        async with ReportingClient(
            fake_credentials, data_client=data_client, admin_client=admin_client
        ) as client:
            assert client.data_client is data_client

        data_client.transport.close.assert_awaited_once()
        admin_client.transport.close.assert_awaited_once()


class TestFilters:

    def test_in_list_filter(self):
        expression = in_list_filter("pagePath", ("/a", "/a/"))
        assert expression.filter.field_name == "pagePath"
        assert list(expression.filter.in_list_filter.values) == ["/a", "/a/"]
        assert expression.filter.in_list_filter.case_sensitive is False

    def test_begins_with_filter(self):
        string_filter = begins_with_filter("pagePath", "/a").filter.string_filter
        assert string_filter.match_type == Filter.StringFilter.MatchType.BEGINS_WITH
        assert string_filter.value == "/a"
        assert string_filter.case_sensitive is False

    def test_order_by_metric(self):
        order_by = order_by_metric("screenPageViews")
        assert order_by.metric.metric_name == "screenPageViews"
        assert order_by.desc is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
