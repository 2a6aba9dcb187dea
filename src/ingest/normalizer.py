"""Raw row to canonical record normalization.

This module applies the acceptance policy shared by the query and
upload paths: a row needs a valid date, a positive price, and a
closing year after 2000. Every other field falls back to a default.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Iterable, Mapping

from core.constants import DEFAULT_CITY, MIN_RECORD_YEAR_EXCLUSIVE
from core.logging_config import get_logger
from core.types import CanonicalRecord, NormalizedBatch
from ingest.field_aliases import resolve_fields
from ingest.field_coercion import (
    INVALID_DATE,
    to_city_limits,
    to_count,
    to_date,
    to_price,
    to_text,
    to_yes_no,
)
from transforms.fingerprint import build_fingerprint

REJECT_INVALID_DATE = "invalid_date"
REJECT_INVALID_PRICE = "invalid_price"
REJECT_DATE_BEFORE_CUTOFF = "date_before_cutoff"

_LOGGER = get_logger(__name__)


def normalize_row(row: Mapping[str, Any]) -> CanonicalRecord | None:
    """Normalize one raw row from either source.

    Args:
        row: Raw key/value row from the store or a spreadsheet.

    Returns:
        Canonical record, or ``None`` when the row is rejected.
    """
    record, _ = _normalize_with_reason(row)
    return record


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> NormalizedBatch:
    """Normalize raw rows, skipping and counting rejects.

    Args:
        rows: Raw rows in source order.

    Returns:
        Accepted records in input order with rejection counts by reason.
    """
    records: list[CanonicalRecord] = []
    rejected: Counter[str] = Counter()
    input_count = 0
    for row in rows:
        input_count += 1
        record, reason = _normalize_with_reason(row)
        if record is None:
            rejected[reason] += 1
            continue
        records.append(record)
    _LOGGER.info(
        "rows_normalized",
        input_count=input_count,
        accepted_count=len(records),
        rejected=dict(rejected),
    )
    return NormalizedBatch(records=tuple(records), input_count=input_count, rejected=dict(rejected))


def _normalize_with_reason(row: Mapping[str, Any]) -> tuple[CanonicalRecord | None, str]:
    fields = resolve_fields(row)
    closed_at = to_date(fields["date"])
    if closed_at is INVALID_DATE:
        return None, REJECT_INVALID_DATE
    price = to_price(fields["price"])
    if not math.isfinite(price) or price <= 0:
        return None, REJECT_INVALID_PRICE
    if closed_at.year <= MIN_RECORD_YEAR_EXCLUSIVE:
        return None, REJECT_DATE_BEFORE_CUTOFF
    address = to_text(fields["address"])
    record = CanonicalRecord(
        address=address,
        date=closed_at,
        price=price,
        price_per_sq_ft=to_count(fields["price_per_sq_ft"]),
        sq_ft=to_count(fields["sq_ft"]),
        days_on_market=to_count(fields["days_on_market"]),
        beds=to_count(fields["beds"]),
        baths=to_count(fields["baths"]),
        city=to_text(fields["city"], DEFAULT_CITY),
        subdivision=to_text(fields["subdivision"]),
        year=closed_at.year,
        new_construction=to_yes_no(fields["new_construction"]),
        inside_city_limits=to_city_limits(fields["inside_city_limits"]),
        fingerprint=build_fingerprint(closed_at, address, price),
    )
    return record, ""
