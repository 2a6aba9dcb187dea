"""Dashboard view assembly.

Every chart series and the property table are built independently, so a
failure in one view is recorded and logged while the KPIs and the other
views are still produced.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from analytics.aggregation import city_series, compute_kpis, distribution_series, trend_series
from analytics.table_rows import build_property_table
from core.constants import DEFAULT_HISTOGRAM_BIN_WIDTH
from core.logging_config import get_logger
from core.types import CanonicalRecord, DashboardView, PipelineEvent

_LOGGER = get_logger(__name__)

EventCallback = Callable[[PipelineEvent], None]


def build_dashboard(
    records: Sequence[CanonicalRecord],
    bin_width: float = DEFAULT_HISTOGRAM_BIN_WIDTH,
    on_event: EventCallback | None = None,
) -> DashboardView:
    """Build KPIs, chart series, and the property table for a record subset.

    Args:
        records: Filtered records in display order.
        bin_width: Price distribution bucket width.
        on_event: Optional status callback invoked before each view.

    Returns:
        Dashboard view with per-view failures recorded.
    """
    builders: tuple[tuple[str, str, Callable[[Sequence[CanonicalRecord]], Any]], ...] = (
        ("kpis", "Building: KPIs...", compute_kpis),
        ("trend", "Rendering: Trend Chart...", trend_series),
        (
            "distribution",
            "Rendering: Distribution Chart...",
            lambda items: distribution_series(items, bin_width),
        ),
        ("city", "Rendering: City Chart...", city_series),
        ("table", "Building: Property List...", build_property_table),
    )
    views: dict[str, Any] = {}
    failures: dict[str, str] = {}
    for view_name, message, builder in builders:
        _emit(on_event, view_name, message)
        try:
            views[view_name] = builder(records)
        except Exception as error:
            failures[view_name] = str(error)
            _LOGGER.error("dashboard_view_failed", view=view_name, error=str(error))
    return DashboardView(
        kpis=views.get("kpis"),
        trend=views.get("trend"),
        distribution=views.get("distribution"),
        city=views.get("city"),
        table=views.get("table"),
        failures=failures,
    )


def _emit(on_event: EventCallback | None, stage: str, message: str) -> None:
    if on_event is not None:
        on_event(PipelineEvent(stage=stage, message=message))
