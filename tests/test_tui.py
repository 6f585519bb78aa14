import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from ga4cli.errors import UpstreamError
from ga4cli.models import RealtimeSummary, ReportSummary
from ga4cli.tui import CYCLED_RANGES, Ga4Dashboard, ViewGeneration


class TestViewGeneration:

    def test_advance_invalidates_previous(self):
        generation = ViewGeneration()
        first = generation.advance()
        assert generation.is_current(first)

        second = generation.advance()
        assert second > first
        assert not generation.is_current(first)
        assert generation.is_current(second)

    def test_starts_with_nothing_current(self):
        assert not ViewGeneration().is_current(1)


def test_custom_range_is_not_cycled():
    assert "custom" not in CYCLED_RANGES
    assert CYCLED_RANGES[0] == "today"


@pytest.fixture
def service():
    service = MagicMock()
    service.property_id = "123"
    service.get_realtime_summary = AsyncMock(return_value=RealtimeSummary(property_id="123", active_users="5"))
    service.get_report_summary = AsyncMock(return_value=ReportSummary(
        property_id="123", start_date="2026-10-12", end_date="2026-10-19"
    ))
    service.close = AsyncMock()
    return service


@pytest.fixture
def dashboard(service, settings):
    return Ga4Dashboard(service, settings)


class TestDashboardLoading:
    """Responses are rendered only while their generation is current"""

    @pytest.mark.asyncio
    async def test_stale_report_is_discarded(self, dashboard, service):
        old = dashboard.generation.advance()
        dashboard.generation.advance()

        with patch.object(dashboard, "show_result") as show_result, \
                patch.object(dashboard, "set_timer") as set_timer:
            await dashboard._load_report("report", old)

        service.get_report_summary.assert_awaited_once()
        show_result.assert_not_called()
        set_timer.assert_not_called()

    @pytest.mark.asyncio
    async def test_stale_realtime_response_schedules_no_tick(self, dashboard, service):
        old = dashboard.generation.advance()
        dashboard.generation.advance()

        with patch.object(dashboard, "show_result") as show_result, \
                patch.object(dashboard, "set_timer") as set_timer:
            await dashboard._load_report("realtime", old)

        service.get_realtime_summary.assert_awaited_once()
        show_result.assert_not_called()
        set_timer.assert_not_called()
        assert dashboard._refresh_timer is None

    @pytest.mark.asyncio
    async def test_current_realtime_response_schedules_next_tick(self, dashboard, settings):
        current = dashboard.generation.advance()

        with patch.object(dashboard, "show_result") as show_result, \
                patch.object(dashboard, "set_timer") as set_timer:
            await dashboard._load_report("realtime", current)

        show_result.assert_called_once()
        assert show_result.call_args.args[0] == "realtime"
        assert show_result.call_args.args[1].active_users == "5"
        set_timer.assert_called_once()
        assert set_timer.call_args.args[0] == settings.refresh_interval
        assert dashboard._refresh_timer is set_timer.return_value

        # the scheduled callback reloads without blanking the view
        with patch.object(dashboard, "load_view") as load_view:
            set_timer.call_args.args[1]()
        load_view.assert_called_once_with(keep_content=True)

    @pytest.mark.asyncio
    async def test_stale_error_is_logged_but_not_shown(self, dashboard, service):
        service.get_report_summary.side_effect = UpstreamError("quota exceeded")
        old = dashboard.generation.advance()
        dashboard.generation.advance()

        with patch("ga4cli.tui.log_error") as log_error, \
                patch.object(dashboard, "_set_status") as set_status:
            await dashboard._load_report("report", old)

        log_error.assert_called_once()
        assert log_error.call_args.args[1] == "tui:report"
        set_status.assert_not_called()

    def test_stale_tick_does_not_reload(self, dashboard):
        old = dashboard.generation.advance()
        dashboard.generation.advance()

        with patch.object(dashboard, "load_view") as load_view:
            dashboard._refresh_tick(old)

        load_view.assert_not_called()


class TestLoadView:

    def test_refresh_keeps_current_content(self, dashboard):
        with patch.object(dashboard, "query_one") as query_one, \
                patch.object(dashboard, "_set_status") as set_status, \
                patch.object(dashboard, "run_worker") as run_worker:
            dashboard.load_view(keep_content=True)

        query_one.assert_not_called()
        set_status.assert_not_called()
        run_worker.assert_called_once()
        run_worker.call_args.args[0].close()
        assert dashboard.generation.is_current(1)

    def test_view_change_clears_and_shows_loading(self, dashboard):
        with patch.object(dashboard, "query_one") as query_one, \
                patch.object(dashboard, "_set_status") as set_status, \
                patch.object(dashboard, "run_worker") as run_worker:
            dashboard.load_view()

        assert query_one.call_count == 2
        set_status.assert_called_once_with("Loading...")
        run_worker.call_args.args[0].close()

    def test_reload_stops_pending_timer(self, dashboard):
        timer = MagicMock()
        dashboard._refresh_timer = timer

        with patch.object(dashboard, "query_one"), \
                patch.object(dashboard, "_set_status"), \
                patch.object(dashboard, "run_worker") as run_worker:
            dashboard.load_view(keep_content=True)

        timer.stop.assert_called_once()
        assert dashboard._refresh_timer is None
        run_worker.call_args.args[0].close()
