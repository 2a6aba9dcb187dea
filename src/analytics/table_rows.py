"""Property table rows for the dashboard list view."""

from __future__ import annotations

from typing import Sequence

from analytics.formatting import format_count, format_currency, format_date, format_price_per_sq_ft
from core.constants import DEFAULT_TABLE_ROW_LIMIT
from core.types import CanonicalRecord, PropertyTable, TableRow


def build_property_table(
    records: Sequence[CanonicalRecord],
    limit: int = DEFAULT_TABLE_ROW_LIMIT,
) -> PropertyTable:
    """Format the first ``limit`` records as table rows.

    Args:
        records: Records in display order.
        limit: Maximum number of rows to format.

    Returns:
        Table rows plus a notice when records were cut off.
    """
    rows = tuple(_build_row(record) for record in records[:limit])
    notice = None
    if len(records) > limit:
        notice = f"Showing top {limit} results of {len(records)}..."
    return PropertyTable(rows=rows, total_count=len(records), notice=notice)


def _build_row(record: CanonicalRecord) -> TableRow:
    return TableRow(
        date=format_date(record.date),
        address=record.address,
        city=record.city,
        price=format_currency(record.price),
        sq_ft=format_count(record.sq_ft),
        price_per_sq_ft=format_price_per_sq_ft(record.price_per_sq_ft, decimals=0),
    )
