"""Unit tests for the property table."""

from __future__ import annotations

from analytics.table_rows import build_property_table
from tests.record_builders import build_record


def test_build_property_table_formats_cells() -> None:
    """Rows should carry display-formatted date, price, and area."""
    table = build_property_table([build_record()])

    row = table.rows[0]
    assert (row.date, row.price, row.sq_ft, row.price_per_sq_ft) == (
        "3/15/2022",
        "$200,000",
        "1,333",
        "$150",
    )


def test_build_property_table_truncates_with_notice() -> None:
    """Tables past the limit should keep the first rows and explain the cut."""
    records = [build_record(address=f"{index} Oak St") for index in range(5)]

    table = build_property_table(records, limit=2)

    assert [row.address for row in table.rows] == ["0 Oak St", "1 Oak St"]
    assert table.notice == "Showing top 2 results of 5..."


def test_build_property_table_without_overflow_has_no_notice() -> None:
    """Tables within the limit should not carry a notice."""
    assert build_property_table([build_record()]).notice is None
