"""
Headless renderers: plain text through rich, JSON through orjson
"""

from typing import Any, List

import orjson
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from rich.console import Console
from rich.table import Table

from ..models import (
    AggregatedReport,
    PropertySummary,
    RealtimeSummary,
    ReportSummary,
    TopPagesReport,
)
from .formatting import FIELD_KINDS, format_field

SUMMARY_LABELS = [
    ("sessions", "Sessions"),
    ("total_users", "Users"),
    ("new_users", "New Users"),
    ("pageviews", "Pageviews"),
    ("event_count", "Events"),
    ("average_session_duration", "Avg Session Duration (s)"),
    ("bounce_rate", "Bounce Rate (%)"),
    ("engagement_rate", "Engagement Rate (%)"),
]


def display_values(value: Any) -> Any:
    """
    Apply the metric formatter to a dumped model.

    Rate and duration fields become their display strings, at any depth,
    and keys take their camelCase aliases.
    """
    if isinstance(value, dict):
        return {
            to_camel(key): format_field(key, item) if key in FIELD_KINDS else display_values(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [display_values(item) for item in value]
    return value


def to_json(data: BaseModel | List[BaseModel]) -> str:
    if isinstance(data, list):
        payload = [display_values(item.model_dump()) for item in data]
    else:
        payload = display_values(data.model_dump())
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()


def print_json(console: Console, data: BaseModel | List[BaseModel]) -> None:
    console.out(to_json(data), highlight=False)


def summary_lines(model: BaseModel) -> List[str]:
    return [f"{label}: {format_field(field, getattr(model, field))}" for field, label in SUMMARY_LABELS]


def render_realtime(console: Console, summary: RealtimeSummary) -> None:
    console.print(f"Property: {summary.property_id}")
    console.print(f"Active Users: {summary.active_users}")
    console.print(f"Pageviews (30 min): {summary.pageviews}")
    console.print(f"Events (30 min): {summary.event_count}")


def render_report(console: Console, summary: ReportSummary) -> None:
    console.print(f"Property: {summary.property_id}")
    console.print(f"Range: {summary.start_date} to {summary.end_date}")
    for line in summary_lines(summary):
        console.print(line)


def top_pages_table(report: TopPagesReport) -> Table:
    table = Table(title=f"Top pages {report.start_date} to {report.end_date}")
    table.add_column("#", justify="right")
    table.add_column("Path")
    table.add_column("Pageviews", justify="right")
    table.add_column("Users", justify="right")
    table.add_column("Avg Duration (s)", justify="right")
    table.add_column("Bounce (%)", justify="right")
    for rank, page in enumerate(report.pages, start=1):
        table.add_row(
            str(rank),
            page.path,
            format_field("pageviews", page.pageviews),
            format_field("total_users", page.total_users),
            format_field("average_session_duration", page.average_session_duration),
            format_field("bounce_rate", page.bounce_rate),
        )
    return table


def render_top_pages(console: Console, report: TopPagesReport) -> None:
    console.print(f"Property: {report.property_id}")
    if not report.pages:
        console.print("No pages found")
        return
    console.print(top_pages_table(report))


def path_rows_table(report: AggregatedReport) -> Table:
    table = Table(title="Matched paths")
    table.add_column("Path")
    table.add_column("Pageviews", justify="right")
    table.add_column("Sessions", justify="right")
    table.add_column("Bounce (%)", justify="right")
    for row in report.by_path:
        table.add_row(
            row.path,
            format_field("pageviews", row.pageviews),
            format_field("sessions", row.sessions),
            format_field("bounce_rate", row.bounce_rate),
        )
    return table


def render_path_report(console: Console, report: AggregatedReport) -> None:
    console.print(f"Property: {report.property_id}")
    console.print(f"Path: {report.path} ({report.match_type} match on {', '.join(report.path_variants)})")
    console.print(f"Range: {report.start_date} to {report.end_date}")
    for line in summary_lines(report):
        console.print(line)
    if len(report.by_path) > 1:
        console.print(path_rows_table(report))


def render_properties(console: Console, properties: List[PropertySummary]) -> None:
    if not properties:
        console.print("No properties visible to these credentials")
        return
    table = Table(title="Properties")
    table.add_column("Property ID")
    table.add_column("Name")
    table.add_column("Account")
    for prop in properties:
        table.add_row(prop.property_id, prop.display_name, prop.account)
    console.print(table)
