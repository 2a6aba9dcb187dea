"""Unit tests for chart image rendering."""

from __future__ import annotations

from dataclasses import replace

from analytics.dashboard import build_dashboard
from core.types import ChartSeries
from render import chart_images
from render.chart_images import render_dashboard_charts
from tests.record_builders import build_record


def test_render_dashboard_charts_writes_png_per_chart(tmp_path) -> None:
    """Each chart series should be written as a PNG file."""
    view = build_dashboard([build_record(), build_record(address="40 Elm Ave", city="Leander")])

    report = render_dashboard_charts(view, tmp_path)

    assert sorted(report.written) == ["city", "distribution", "trend"]
    assert all(path.suffix == ".png" and path.exists() for path in report.written.values())


def test_render_dashboard_charts_isolates_failing_chart(tmp_path, monkeypatch) -> None:
    """A failing chart should be reported while the others are written."""

    def _broken_draw(axis, series: ChartSeries) -> None:
        raise RuntimeError("bad axis")

    monkeypatch.setattr(chart_images, "_draw_city", _broken_draw)
    view = build_dashboard([build_record()])

    report = render_dashboard_charts(view, tmp_path)

    assert report.failures == {"city": "bad axis"} and sorted(report.written) == [
        "distribution",
        "trend",
    ]


def test_render_dashboard_charts_skips_missing_series(tmp_path) -> None:
    """Views that failed to build should be carried over as failures."""
    view = replace(build_dashboard([build_record()]), trend=None, failures={"trend": "boom"})

    report = render_dashboard_charts(view, tmp_path)

    assert "trend" not in report.written and report.failures == {"trend": "boom"}
