"""Source field alias table.

The query store and the uploaded spreadsheets spell the same concepts
differently. This module keeps every accepted spelling in one table and
resolves a raw row into canonical field values.
"""

from __future__ import annotations

from typing import Any, Mapping

FIELD_ALIASES: Mapping[str, tuple[str, ...]] = {
    "address": ("address", "Address", "Street Address", "Street Name"),
    "date": ("date", "Closed Date", "Close Date"),
    "price": ("price", "Price", "Sold Price"),
    "price_per_sq_ft": ("pricePerSqFt", "Price Per SQFT"),
    "sq_ft": ("sqFt", "Apx SQFT"),
    "days_on_market": ("daysOnMarket", "Days On Market"),
    "city": ("city", "City"),
    "subdivision": ("subdivision", "Subdivision"),
    "beds": ("beds", "Beds"),
    "baths": ("baths", "Full Baths"),
    "new_construction": ("newConstruction", "New Construction?", "New Construction"),
    "inside_city_limits": ("insideCityLimits", "Inside City Limits", "Inside City Limit"),
}


def resolve_fields(row: Mapping[str, Any]) -> dict[str, Any]:
    """Resolve canonical field values from a raw row.

    Exact key matches are tried first for every alias, then a
    case- and whitespace-insensitive match. The first alias holding a
    non-empty value wins.

    Args:
        row: Raw source row.

    Returns:
        Mapping of canonical field name to raw value, ``None`` when absent.
    """
    folded_row = {_fold_key(key): value for key, value in row.items() if isinstance(key, str)}
    return {
        field_name: _lookup(row, folded_row, aliases)
        for field_name, aliases in FIELD_ALIASES.items()
    }


def _lookup(
    row: Mapping[str, Any],
    folded_row: Mapping[str, Any],
    aliases: tuple[str, ...],
) -> Any:
    for alias in aliases:
        value = row.get(alias)
        if _has_value(value):
            return value
    for alias in aliases:
        value = folded_row.get(_fold_key(alias))
        if _has_value(value):
            return value
    return None


def _fold_key(key: str) -> str:
    return "".join(key.split()).lower()


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
