"""Canonical record to document field serialization.

Persisted documents use the camelCase field names of the original
``sales_data`` collection so the query path can read them back through
the same alias table as spreadsheet rows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core.types import CanonicalRecord


def record_to_fields(record: CanonicalRecord) -> dict[str, Any]:
    """Serialize a record into document fields.

    Args:
        record: Canonical record.

    Returns:
        Field mapping with a native ``datetime`` under ``date``.
    """
    return {
        "address": record.address,
        "date": record.date,
        "price": record.price,
        "pricePerSqFt": record.price_per_sq_ft,
        "sqFt": record.sq_ft,
        "daysOnMarket": record.days_on_market,
        "city": record.city,
        "subdivision": record.subdivision,
        "beds": record.beds,
        "baths": record.baths,
        "year": record.year,
        "newConstruction": record.new_construction,
        "insideCityLimits": record.inside_city_limits,
        "fingerprint": record.fingerprint,
    }


def to_json_value(value: Any) -> Any:
    """``json.dumps`` default hook that renders datetimes as ISO-8601 text.

    Raises:
        TypeError: For values JSON cannot represent.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
