"""Run-spec step execution against a dashboard client.

Each report step reloads the collection and applies its own filter selections.
Output lines match what the corresponding CLI command prints.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Sequence

from analytics.filter_engine import build_filter_state, filter_options
from analytics.report_lines import (
    format_filter_option_lines,
    format_kpi_lines,
    format_table_lines,
    format_upload_lines,
)
from analytics.table_rows import build_property_table
from core.constants import DEFAULT_TABLE_ROW_LIMIT
from core.errors import SalesboardRunSpecError
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.run_spec_fields import (
    parse_filter_selections,
    step_path,
    step_row_limit,
)
from core.s3_uri import is_s3_uri
from core.types import CanonicalRecord, DashboardLoad, DashboardView, Kpis, UploadResult
from ingest.pipeline import NO_DATA_MESSAGE


class RunSpecClient(Protocol):
    """Subset of ``SalesboardClient`` that run-spec steps call."""

    def with_config(self, **changes: Any) -> Any: ...

    def load(self) -> DashboardLoad: ...

    def upload_file(self, source_uri: str) -> UploadResult: ...

    def compute_kpis(self, records: Sequence[CanonicalRecord]) -> Kpis: ...

    def build_dashboard(self, records: Sequence[CanonicalRecord]) -> DashboardView: ...

    def render_charts(self, records: Sequence[CanonicalRecord], output_dir: str) -> Any: ...


@dataclass(frozen=True)
class RunSpecExecutionContext:
    """Client and spec directory shared by every step of one run."""

    client: RunSpecClient
    base_dir: Path | None = None


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Parse ``spec_file`` and run its steps in order."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Run every step after applying the spec defaults to ``client``."""
    overrides: dict[str, Any] = {}
    if spec.defaults.data_root:
        overrides["data_root"] = spec.defaults.data_root
    if spec.defaults.collection:
        overrides["collection"] = spec.defaults.collection
    execution_client = client.with_config(**overrides) if overrides else client
    context = RunSpecExecutionContext(client=execution_client, base_dir=spec.base_dir)
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(context, step))
    return tuple(output_lines)


def _execute_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    if step.command == "upload":
        result = context.client.upload_file(
            _resolve_step_path(context, step_path(step.args, "source", required=True))
        )
        return format_upload_lines(result)
    load = context.client.load()
    if load.is_empty:
        return (NO_DATA_MESSAGE,)
    if step.command == "filters":
        return format_filter_option_lines(filter_options(load.records))
    visible = _visible_records(load, step)
    if step.command == "kpis":
        return format_kpi_lines(context.client.compute_kpis(visible))
    if step.command == "table":
        limit = step_row_limit(step.args, "limit", DEFAULT_TABLE_ROW_LIMIT)
        return format_table_lines(build_property_table(visible, limit))
    if step.command == "charts":
        return _execute_charts_step(context, step, visible)
    raise SalesboardRunSpecError(f"Unsupported run-spec command '{step.command}'.")


def _execute_charts_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
    visible: list[CanonicalRecord],
) -> tuple[str, ...]:
    output_dir = step_path(step.args, "output_dir")
    if output_dir is None:
        raise SalesboardRunSpecError(
            "Run-spec command 'charts' requires 'output_dir'. Set it on the step."
        )
    report = context.client.render_charts(visible, _resolve_step_path(context, output_dir))
    lines = [f"{name}={path}" for name, path in sorted(report.written.items())]
    lines.extend(f"{name}_failed={message}" for name, message in sorted(report.failures.items()))
    return tuple(lines)


def _visible_records(load: DashboardLoad, step: RunSpecStep) -> list[CanonicalRecord]:
    state = build_filter_state(load.records, parse_filter_selections(step.args))
    return state.apply(load.records)


def _resolve_step_path(context: RunSpecExecutionContext, raw_path: str) -> str:
    if context.base_dir is None or is_s3_uri(raw_path):
        return raw_path
    path = Path(raw_path).expanduser()
    if path.is_absolute():
        return str(path)
    return str(context.base_dir / path)
