"""Salesboard CLI entry points.

This module exposes upload, statistics, filter, table, and chart commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from analytics.filter_engine import FilterState, build_filter_state
from analytics.report_lines import (
    format_filter_option_lines,
    format_kpi_lines,
    format_table_lines,
    format_upload_lines,
)
from analytics.table_rows import build_property_table
from core.config import SalesboardConfig, parse_collection_name
from core.constants import DEFAULT_TABLE_ROW_LIMIT
from core.errors import SalesboardConfigError, SalesboardError
from core.logging_config import configure_logging
from core.run_spec_execution import execute_run_spec_file
from core.types import DashboardLoad, FilterDimension, UploadProgress
from ingest.pipeline import NO_DATA_MESSAGE
from store.dashboard_sdk import SalesboardClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="salesboard", description="Real-estate sales dashboard")
    parser.add_argument("--data-root", help="Override SALESBOARD_DATA_ROOT for this command")
    parser.add_argument("--collection", help="Override SALESBOARD_COLLECTION for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_upload_command(subparsers)
    _add_kpis_command(subparsers)
    _add_filters_command(subparsers)
    _add_table_command(subparsers)
    _add_charts_command(subparsers)
    _add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Salesboard CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root, args.collection)
        return _dispatch(parser, client, args)
    except SalesboardError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    client: SalesboardClient,
    args: argparse.Namespace,
) -> int:
    if args.command == "upload":
        return _run_upload_command(client, args)
    if args.command == "kpis":
        return _run_kpis_command(client, args)
    if args.command == "filters":
        return _run_filters_command(client)
    if args.command == "table":
        return _run_table_command(client, args)
    if args.command == "charts":
        return _run_charts_command(client, args)
    if args.command == "run-spec":
        return _run_run_spec_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None, collection: str | None) -> SalesboardClient:
    """Build SDK client with optional overrides.

    Args:
        data_root: Optional data root override path.
        collection: Optional collection name override.

    Returns:
        Configured SDK client.
    """
    config = SalesboardConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    if collection:
        config = replace(config, collection=parse_collection_name(collection))
    configure_logging(config.log_level)
    return SalesboardClient(config)


def _run_upload_command(client: SalesboardClient, args: argparse.Namespace) -> int:
    """Handle upload command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    result = client.upload_file(args.source, on_progress=_print_upload_progress)
    for line in format_upload_lines(result):
        print(line)
    return 0


def _run_kpis_command(client: SalesboardClient, args: argparse.Namespace) -> int:
    load = client.load()
    if load.is_empty:
        print(NO_DATA_MESSAGE)
        return 0
    visible = _filter_state_from_args(load, args).apply(load.records)
    for line in format_kpi_lines(client.compute_kpis(visible)):
        print(line)
    return 0


def _run_filters_command(client: SalesboardClient) -> int:
    session = client.open_session()
    if session.load.is_empty:
        print(NO_DATA_MESSAGE)
        return 0
    for line in format_filter_option_lines(session.filter_options()):
        print(line)
    return 0


def _run_table_command(client: SalesboardClient, args: argparse.Namespace) -> int:
    if args.limit < 1:
        raise SalesboardConfigError(
            f"Invalid --limit value: got {args.limit}. Use a positive row count."
        )
    load = client.load()
    if load.is_empty:
        print(NO_DATA_MESSAGE)
        return 0
    visible = _filter_state_from_args(load, args).apply(load.records)
    for line in format_table_lines(build_property_table(visible, args.limit)):
        print(line)
    return 0


def _run_charts_command(client: SalesboardClient, args: argparse.Namespace) -> int:
    """Handle charts command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when any chart failed to render.
    """
    load = client.load()
    if load.is_empty:
        print(NO_DATA_MESSAGE)
        return 0
    visible = _filter_state_from_args(load, args).apply(load.records)
    report = client.render_charts(visible, args.output_dir)
    for chart_name, path in sorted(report.written.items()):
        print(f"{chart_name}={path}")
    for chart_name, message in sorted(report.failures.items()):
        print(f"{chart_name}_failed={message}", file=sys.stderr)
    return 1 if report.failures else 0


def _run_run_spec_command(client: SalesboardClient, args: argparse.Namespace) -> int:
    """Execute every step of a YAML run-spec and print its output lines."""
    for line in execute_run_spec_file(client, args.spec_file):
        print(line)
    return 0


def _filter_state_from_args(load: DashboardLoad, args: argparse.Namespace) -> FilterState:
    selections = {
        FilterDimension.YEAR: args.year,
        FilterDimension.CITY: args.city,
        FilterDimension.NEW_CONSTRUCTION: args.new_construction,
        FilterDimension.INSIDE_CITY_LIMITS: args.inside_city_limits,
    }
    return build_filter_state(
        load.records,
        {dimension: values for dimension, values in selections.items() if values},
    )


def _print_upload_progress(progress: UploadProgress) -> None:
    print(
        f"Uploading... {progress.percent}% ({progress.uploaded}/{progress.total})",
        file=sys.stderr,
    )


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    """Register repeatable select-only filter flags."""
    parser.add_argument("--year", action="append", help="Keep only this year (repeatable)")
    parser.add_argument("--city", action="append", help="Keep only this city (repeatable)")
    parser.add_argument(
        "--new-construction",
        action="append",
        choices=("Yes", "No"),
        help="Keep only this new construction value (repeatable)",
    )
    parser.add_argument(
        "--inside-city-limits",
        action="append",
        choices=("Yes", "No", "Unknown"),
        help="Keep only this city limits value (repeatable)",
    )


def _add_upload_command(subparsers: Any) -> None:
    """Register upload subcommand."""
    parser = subparsers.add_parser("upload", help="Upload a sales spreadsheet")
    parser.add_argument("source", help="Local .xlsx/.xlsm/.csv file or s3://bucket/key")


def _add_kpis_command(subparsers: Any) -> None:
    """Register kpis subcommand."""
    parser = subparsers.add_parser("kpis", help="Print headline statistics")
    _add_filter_arguments(parser)


def _add_filters_command(subparsers: Any) -> None:
    """Register filters subcommand."""
    subparsers.add_parser("filters", help="List filter options per dimension")


def _add_table_command(subparsers: Any) -> None:
    """Register table subcommand."""
    parser = subparsers.add_parser("table", help="Print the property table")
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_TABLE_ROW_LIMIT,
        help="Maximum rows to print",
    )
    _add_filter_arguments(parser)


def _add_charts_command(subparsers: Any) -> None:
    """Register charts subcommand."""
    parser = subparsers.add_parser("charts", help="Render dashboard charts to PNG files")
    parser.add_argument("--output-dir", required=True, help="Directory for chart images")
    _add_filter_arguments(parser)


def _add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser("run-spec", help="Run a YAML list of dashboard steps")
    parser.add_argument("spec_file", help="Path to YAML run-spec file")
