"""CLI entry point for ga4cli."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import click
from rich.console import Console

from .config import Settings, init_config, load_settings, load_stored_config
from .dates import DEFAULT_RANGE, resolve_date_range
from .domain import compute_variants
from .errors import InvalidInputError
from .logs import configure_logging, log_error
from .service import AnalyticsService
from .utils.output import (
    print_json,
    render_path_report,
    render_properties,
    render_realtime,
    render_report,
    render_top_pages,
)

console = Console(highlight=False)


def property_option(func):
    return click.option(
        "--property", "property_id", default=None, help="GA4 property id (overrides the config file)"
    )(func)


def json_option(func):
    return click.option("--json", "as_json", is_flag=True, help="Print JSON instead of text")(func)


def range_options(func):
    options = [
        click.option(
            "--range", "range_name", default=DEFAULT_RANGE, show_default=True,
            help="today|yesterday|last7|last30|last90|all|custom",
        ),
        click.option("--start-date", default=None, help="YYYY-MM-DD, overrides the range start"),
        click.option("--end-date", default=None, help="YYYY-MM-DD, overrides the range end"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def limit_option(func):
    return click.option("--limit", type=int, default=None, help="Maximum number of rows")(func)


def fail(settings: Settings, error: BaseException, context: str) -> None:
    """Log the error, tell the user where, exit 1."""
    log_error(error, context)
    click.echo(f"Error: {error}", err=True)
    click.echo(f"Details logged to: {settings.error_log_file}", err=True)
    raise SystemExit(1)


def run_with_service(
    ctx: click.Context,
    command: str,
    property_id: Optional[str],
    action: Callable[[AnalyticsService], Awaitable[Any]],
) -> Any:
    settings: Settings = ctx.obj

    async def runner():
        stored = load_stored_config(settings)
        async with AnalyticsService.from_config(settings, stored) as service:
            if property_id:
                service.set_property_id(property_id)
            return await action(service)

    try:
        return asyncio.run(runner())
    except Exception as e:
        fail(settings, e, f"main:{command}")


def parse_inputs(ctx: click.Context, command: str, parse: Callable[[], Any]) -> Any:
    """Validate user input before any config is read or query is sent."""
    try:
        return parse()
    except InvalidInputError as e:
        fail(ctx.obj, e, f"main:{command}")


def check_limit(limit: Optional[int], settings: Settings) -> int:
    if limit is None:
        return settings.default_limit
    if limit < 1:
        raise InvalidInputError(f"--limit must be a positive integer, got {limit}")
    return limit


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context):
    """
    Google Analytics 4 from the terminal.

    \b
    Commands:
      init        Store service-account credentials
      tui         Interactive dashboard (default)
      realtime    Activity over the last 30 minutes
      report      Property summary for a date range
      pages       Top pages by pageviews
      path        Metrics for one URL path
      properties  Properties visible to the credentials
    """
    settings = load_settings()
    configure_logging(settings)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        ctx.invoke(tui)


@cli.command("init")
@click.argument("credentials_path", type=click.Path(dir_okay=False))
@property_option
@click.pass_context
def init_cmd(ctx: click.Context, credentials_path: str, property_id: Optional[str]):
    """Save a service-account JSON key (and optional default property)."""
    settings: Settings = ctx.obj
    try:
        init_config(settings, credentials_path, property_id=property_id)
    except Exception as e:
        fail(settings, e, "main:init")
    console.print("Configuration saved!")


@cli.command("tui")
@property_option
@click.pass_context
def tui(ctx: click.Context, property_id: Optional[str] = None):
    """Open the interactive dashboard."""
    from .tui import Ga4Dashboard

    settings: Settings = ctx.obj
    try:
        stored = load_stored_config(settings)
        service = AnalyticsService.from_config(settings, stored)
        if property_id:
            service.set_property_id(property_id)
        Ga4Dashboard(service, settings).run()
    except Exception as e:
        fail(settings, e, "main:tui")


@cli.command("realtime")
@property_option
@json_option
@click.pass_context
def realtime_cmd(ctx: click.Context, property_id: Optional[str], as_json: bool):
    """Active users, pageviews and events over the last 30 minutes."""
    summary = run_with_service(
        ctx, "realtime", property_id, lambda service: service.get_realtime_summary()
    )
    if as_json:
        print_json(console, summary)
    else:
        render_realtime(console, summary)


@cli.command("report")
@property_option
@range_options
@json_option
@click.pass_context
def report_cmd(ctx, property_id, range_name, start_date, end_date, as_json):
    """Property-wide summary for a date range."""
    date_range = parse_inputs(
        ctx, "report", lambda: resolve_date_range(range_name, start_date, end_date)
    )
    summary = run_with_service(
        ctx, "report", property_id, lambda service: service.get_report_summary(date_range)
    )
    if as_json:
        print_json(console, summary)
    else:
        render_report(console, summary)


@cli.command("pages")
@property_option
@range_options
@limit_option
@json_option
@click.pass_context
def pages_cmd(ctx, property_id, range_name, start_date, end_date, limit, as_json):
    """Top pages ranked by pageviews."""
    date_range, row_limit = parse_inputs(
        ctx, "pages",
        lambda: (resolve_date_range(range_name, start_date, end_date), check_limit(limit, ctx.obj))
    )
    report = run_with_service(
        ctx, "pages", property_id, lambda service: service.get_top_pages(date_range, row_limit)
    )
    if as_json:
        print_json(console, report)
    else:
        render_top_pages(console, report)


@cli.command("path")
@click.argument("path")
@property_option
@range_options
@json_option
@click.pass_context
def path_cmd(ctx, path, property_id, range_name, start_date, end_date, as_json):
    """
    Metrics for one URL path.

    \b
    Examples:
        ga4 path /pricing
        ga4 path about --range last30
        ga4 path /blog/ --start-date 2026-01-01 --end-date 2026-01-31 --json
    """
    def parse():
        compute_variants(path)
        return resolve_date_range(range_name, start_date, end_date)

    date_range = parse_inputs(ctx, "path", parse)
    report = run_with_service(
        ctx, "path", property_id, lambda service: service.get_path_report(path, date_range)
    )
    if as_json:
        print_json(console, report)
    else:
        render_path_report(console, report)


@cli.command("properties")
@json_option
@click.pass_context
def properties_cmd(ctx, as_json):
    """List the GA4 properties the credentials can read."""
    properties = run_with_service(
        ctx, "properties", None, lambda service: service.list_properties()
    )
    if as_json:
        print_json(console, properties)
    else:
        render_properties(console, properties)


def main():
    cli()


if __name__ == "__main__":
    main()
