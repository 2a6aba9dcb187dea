"""Unit tests for display formatting and report lines."""

from __future__ import annotations

from datetime import datetime, timezone

from analytics.formatting import format_count, format_currency, format_date, format_price_per_sq_ft
from analytics.report_lines import format_kpi_lines
from core.types import Kpis


def test_format_currency_rounds_half_up() -> None:
    """Currency should round to whole dollars with separators."""
    assert (format_currency(200000), format_currency(1234.5)) == ("$200,000", "$1,235")


def test_format_price_per_sq_ft_keeps_two_decimals() -> None:
    """Price per square foot should show cents by default."""
    assert format_price_per_sq_ft(152.349) == "$152.35"


def test_format_count_trims_fractional_zeros() -> None:
    """Counts should drop trailing zeros after the decimal point."""
    assert (format_count(2138), format_count(2.5)) == ("2,138", "2.5")


def test_format_date_uses_month_day_year() -> None:
    """Dates should render without zero padding."""
    assert format_date(datetime(2023, 6, 1, tzinfo=timezone.utc)) == "6/1/2023"


def test_format_kpi_lines_renders_key_value_pairs() -> None:
    """KPI lines should be printable key=value pairs."""
    lines = format_kpi_lines(
        Kpis(count=2, total_volume=650000, median_price=325000, median_ppsf=180.25)
    )

    assert lines == (
        "count=2",
        "total_volume=$650,000",
        "median_price=$325,000",
        "median_price_per_sq_ft=$180.25",
    )
