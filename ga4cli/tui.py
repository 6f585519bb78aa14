"""
Interactive dashboard

One view is shown at a time. Every load takes a new generation from
ViewGeneration, and a response is rendered only while its generation is
still current. The realtime view re-polls on a timer and keeps its last
numbers on screen until the next response arrives.
"""

import logging
from typing import Any, Optional

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import Button, DataTable, Footer, Header, Input, Static

from .config import Settings
from .dates import RANGE_CHOICES, resolve_date_range
from .logs import log_error
from .models import AggregatedReport, PropertySummary, TopPagesReport
from .service import AnalyticsService
from .utils.formatting import format_field
from .utils.output import summary_lines

logger = logging.getLogger(__name__)

CYCLED_RANGES = [name for name in RANGE_CHOICES if name != "custom"]


class ViewGeneration:
    """Monotonic counter; a response is only rendered if its generation is current."""

    def __init__(self) -> None:
        self.value = 0

    def advance(self) -> int:
        self.value += 1
        return self.value

    def is_current(self, generation: int) -> bool:
        return generation == self.value


class Ga4Dashboard(App):
    CSS = """
    Screen {
        layout: vertical;
    }

    #main {
        height: 1fr;
    }

    #menu {
        width: 24;
        padding: 1 1;
    }

    #menu Button {
        width: 100%;
        margin-bottom: 1;
    }

    #content {
        width: 1fr;
        padding: 1 2;
    }

    #status {
        height: auto;
        color: $text-muted;
    }

    #body {
        height: auto;
        padding: 1 0;
    }

    #rows {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
        ("d", "cycle_range", "Date range"),
    ]

    def __init__(self, service: AnalyticsService, settings: Settings) -> None:
        super().__init__()
        self.service = service
        self.settings = settings
        self.generation = ViewGeneration()
        self.current_view = "realtime"
        self.range_name = "last7"
        self.lookup_path = ""
        self._refresh_timer: Optional[Timer] = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main"):
            with Vertical(id="menu"):
                yield Button("Realtime", id="realtime", variant="primary")
                yield Button("Summary", id="report")
                yield Button("Top pages", id="pages")
                yield Button("Path lookup", id="path")
                yield Button("Properties", id="properties")
                yield Button("Quit", id="quit", variant="error")
            with Vertical(id="content"):
                yield Static("", id="status")
                yield Input(placeholder="Path, e.g. /pricing", id="path_input")
                yield Static("", id="body")
                table = DataTable(id="rows")
                table.cursor_type = "row"
                yield table
        yield Footer()

    def on_mount(self) -> None:
        self.title = "GA4 CLI"
        self.show_view("realtime")

    async def on_unmount(self) -> None:
        await self.service.close()

    @on(Button.Pressed)
    def _pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "quit":
            self.exit()
            return
        self.show_view(event.button.id)

    @on(Input.Submitted, "#path_input")
    def _path_submitted(self, event: Input.Submitted) -> None:
        self.lookup_path = (event.value or "").strip()
        if self.lookup_path:
            self.load_view()

    @on(DataTable.RowSelected, "#rows")
    def _row_selected(self, event: DataTable.RowSelected) -> None:
        if self.current_view != "properties" or event.row_key.value is None:
            return
        self.service.set_property_id(event.row_key.value)
        self.notify(f"Property {event.row_key.value} selected")
        self.show_view("report")

    def action_refresh(self) -> None:
        self.load_view()

    def action_cycle_range(self) -> None:
        index = CYCLED_RANGES.index(self.range_name) if self.range_name in CYCLED_RANGES else -1
        self.range_name = CYCLED_RANGES[(index + 1) % len(CYCLED_RANGES)]
        self.load_view()

    def show_view(self, view: str) -> None:
        self.current_view = view
        path_input = self.query_one("#path_input", Input)
        path_input.display = view == "path"
        if view == "path":
            path_input.focus()
        self.load_view()

    def load_view(self, keep_content: bool = False) -> None:
        """
        Start a fresh load; anything still in flight becomes stale.

        With keep_content the current view stays on screen until the new
        response replaces it.
        """
        generation = self.generation.advance()
        if self._refresh_timer is not None:
            self._refresh_timer.stop()
            self._refresh_timer = None

        if not keep_content:
            self.query_one("#body", Static).update("")
            self.query_one("#rows", DataTable).clear(columns=True)

            if self.current_view == "path" and not self.lookup_path:
                self._set_status("Enter a path and press Enter")
                return

            self._set_status("Loading...")

        self.run_worker(self._load_report(self.current_view, generation), group="report")

    async def _load_report(self, view: str, generation: int) -> None:
        try:
            result = await self.fetch_view(view)
        except Exception as e:
            log_error(e, f"tui:{view}")
            if self.generation.is_current(generation):
                self._set_status(f"Error: {e}\nLogged to {self.settings.error_log_file}")
        else:
            if not self.generation.is_current(generation):
                logger.debug(f"Discarding stale {view} response")
                return
            self.show_result(view, result)

        # realtime is the only live view; the next tick is scheduled only
        # after this one has finished
        if view == "realtime" and self.generation.is_current(generation):
            self._refresh_timer = self.set_timer(
                self.settings.refresh_interval, lambda: self._refresh_tick(generation)
            )

    def _refresh_tick(self, generation: int) -> None:
        if self.generation.is_current(generation):
            self.load_view(keep_content=True)

    async def fetch_view(self, view: str) -> Any:
        if view == "realtime":
            return await self.service.get_realtime_summary()
        if view == "properties":
            return await self.service.list_properties()

        date_range = resolve_date_range(self.range_name)
        if view == "report":
            return await self.service.get_report_summary(date_range)
        if view == "pages":
            return await self.service.get_top_pages(date_range, self.settings.default_limit)
        if view == "path":
            return await self.service.get_path_report(self.lookup_path, date_range)
        raise ValueError(f"Unknown view: {view}")

    def _set_status(self, text: str) -> None:
        self.query_one("#status", Static).update(text)

    def show_result(self, view: str, result: Any) -> None:
        body = self.query_one("#body", Static)
        table = self.query_one("#rows", DataTable)
        self.sub_title = f"property {self.service.property_id or '-'}"
        table.clear(columns=True)

        if view == "realtime":
            self._set_status("Realtime (last 30 minutes), refreshing")
            body.update(
                f"Active Users: {result.active_users}\n"
                f"Pageviews: {result.pageviews}\n"
                f"Events: {result.event_count}"
            )
        elif view == "report":
            self._set_status(f"Summary {result.start_date} to {result.end_date} ({self.range_name})")
            body.update("\n".join(summary_lines(result)))
        elif view == "pages":
            self._render_pages(result, table)
        elif view == "path":
            self._render_path(result, body, table)
        elif view == "properties":
            self._render_properties(result, table)

    def _render_pages(self, report: TopPagesReport, table: DataTable) -> None:
        self._set_status(f"Top pages {report.start_date} to {report.end_date} ({self.range_name})")
        table.add_columns("#", "Path", "Pageviews", "Users", "Avg Duration (s)", "Bounce (%)")
        for rank, page in enumerate(report.pages, start=1):
            table.add_row(
                str(rank),
                page.path,
                format_field("pageviews", page.pageviews),
                format_field("total_users", page.total_users),
                format_field("average_session_duration", page.average_session_duration),
                format_field("bounce_rate", page.bounce_rate),
            )

    def _render_path(self, report: AggregatedReport, body: Static, table: DataTable) -> None:
        self._set_status(
            f"{report.path}: {report.match_type} match, {report.start_date} to {report.end_date}"
        )
        body.update("\n".join(summary_lines(report)))
        table.add_columns("Path", "Pageviews", "Sessions", "Bounce (%)")
        for row in report.by_path:
            table.add_row(
                row.path,
                format_field("pageviews", row.pageviews),
                format_field("sessions", row.sessions),
                format_field("bounce_rate", row.bounce_rate),
            )

    def _render_properties(self, properties: list[PropertySummary], table: DataTable) -> None:
        self._set_status("Select a property with Enter")
        table.add_columns("Property ID", "Name", "Account")
        for prop in properties:
            table.add_row(prop.property_id, prop.display_name, prop.account, key=prop.property_id)
