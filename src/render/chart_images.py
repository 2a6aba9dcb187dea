"""PNG rendering of dashboard chart series.

Each chart is drawn and saved on its own, so one chart failing to render
does not stop the others from being written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

from core.constants import CHART_IMAGE_EXTENSION
from core.errors import SalesboardDependencyError
from core.logging_config import get_logger
from core.types import ChartSeries, DashboardView

_LOGGER = get_logger(__name__)

_BRAND_COLOR = "#bed600"
_BRAND_LIGHT_COLOR = "#d9e855"
_ACCENT_COLOR = "#13294b"


@dataclass(frozen=True)
class ChartRenderReport:
    """Paths written and failures recorded by one render pass."""

    written: Mapping[str, Path] = field(default_factory=dict)
    failures: Mapping[str, str] = field(default_factory=dict)


def render_dashboard_charts(view: DashboardView, output_dir: str | Path) -> ChartRenderReport:
    """Render the trend, distribution, and city charts to PNG files.

    Args:
        view: Dashboard view holding the chart series.
        output_dir: Directory for ``<chart>.png`` files.

    Returns:
        Written file paths and per-chart failure messages.

    Raises:
        SalesboardDependencyError: If matplotlib is missing.
    """
    plot = _import_pyplot()
    resolved_dir = Path(output_dir).expanduser().resolve()
    resolved_dir.mkdir(parents=True, exist_ok=True)
    charts: tuple[tuple[str, ChartSeries | None, Callable[[Any, ChartSeries], None]], ...] = (
        ("trend", view.trend, _draw_trend),
        ("distribution", view.distribution, _draw_distribution),
        ("city", view.city, _draw_city),
    )
    written: dict[str, Path] = {}
    failures: dict[str, str] = dict(view.failures)
    for chart_name, series, draw in charts:
        if series is None:
            continue
        try:
            written[chart_name] = _save_chart(plot, resolved_dir, chart_name, series, draw)
        except Exception as error:
            failures[chart_name] = str(error)
            _LOGGER.error("chart_render_failed", chart=chart_name, error=str(error))
    failures.pop("table", None)
    return ChartRenderReport(written=written, failures=failures)


def _import_pyplot() -> Any:
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plot
    except ImportError as error:
        raise SalesboardDependencyError(
            "Chart rendering requires matplotlib. Install matplotlib to produce chart images."
        ) from error
    return plot


def _save_chart(
    plot: Any,
    output_dir: Path,
    chart_name: str,
    series: ChartSeries,
    draw: Callable[[Any, ChartSeries], None],
) -> Path:
    figure, axis = plot.subplots(1, 1, figsize=(9, 4.8))
    try:
        draw(axis, series)
        chart_path = output_dir / f"{chart_name}{CHART_IMAGE_EXTENSION}"
        figure.tight_layout()
        figure.savefig(chart_path)
    finally:
        plot.close(figure)
    return chart_path


def _draw_trend(axis: Any, series: ChartSeries) -> None:
    """Line chart of monthly median price."""
    axis.plot(list(series.labels), list(series.series), color=_BRAND_COLOR, linewidth=2.0)
    axis.fill_between(range(len(series.series)), list(series.series), alpha=0.1, color=_BRAND_COLOR)
    axis.set_title("Median Price by Month")
    axis.set_ylabel("Median Price")
    axis.tick_params(axis="x", labelrotation=45)
    axis.grid(alpha=0.3)


def _draw_distribution(axis: Any, series: ChartSeries) -> None:
    """Bar chart of sales count per price bucket."""
    axis.bar(list(series.labels), list(series.series), color=_ACCENT_COLOR)
    axis.set_title("Price Distribution")
    axis.set_ylabel("Number of Sales")
    axis.tick_params(axis="x", labelrotation=45)
    axis.grid(alpha=0.3, axis="y")


def _draw_city(axis: Any, series: ChartSeries) -> None:
    """Horizontal bar chart of median price per city."""
    axis.barh(list(series.labels), list(series.series), color=_BRAND_LIGHT_COLOR)
    axis.set_title("Median Price by City")
    axis.set_xlabel("Median Price")
    axis.grid(alpha=0.3, axis="x")
