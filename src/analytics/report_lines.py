"""Plain-text output lines shared by the CLI and run-spec execution."""

from __future__ import annotations

from typing import Any, Mapping

from analytics.formatting import format_count, format_currency, format_price_per_sq_ft
from core.types import FilterDimension, Kpis, PropertyTable, UploadResult


def format_kpi_lines(kpis: Kpis) -> tuple[str, ...]:
    return (
        f"count={format_count(kpis.count)}",
        f"total_volume={format_currency(kpis.total_volume)}",
        f"median_price={format_currency(kpis.median_price)}",
        f"median_price_per_sq_ft={format_price_per_sq_ft(kpis.median_ppsf)}",
    )


def format_filter_option_lines(
    options: Mapping[FilterDimension, tuple[Any, ...]],
) -> tuple[str, ...]:
    """Render one ``dimension<TAB>value, value`` line per filter dimension."""
    return tuple(
        f"{dimension.attribute}\t{', '.join(str(value) for value in options[dimension])}"
        for dimension in FilterDimension
    )


def format_table_lines(table: PropertyTable) -> tuple[str, ...]:
    """Render table rows as tab-separated lines, notice last."""
    lines = [
        "\t".join((row.date, row.address, row.city, row.price, row.sq_ft, row.price_per_sq_ft))
        for row in table.rows
    ]
    if table.notice:
        lines.append(table.notice)
    return tuple(lines)


def format_upload_lines(result: UploadResult) -> tuple[str, ...]:
    return (
        f"uploaded={result.uploaded}",
        f"total={result.total}",
        f"rejected={result.rejected}",
        f"duplicates_collapsed={result.duplicates_collapsed}",
    )
