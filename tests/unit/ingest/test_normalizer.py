"""Unit tests for raw row normalization."""

from __future__ import annotations

from datetime import datetime, timezone

from ingest.normalizer import (
    REJECT_DATE_BEFORE_CUTOFF,
    REJECT_INVALID_DATE,
    REJECT_INVALID_PRICE,
    normalize_row,
    normalize_rows,
)


def test_normalize_row_builds_canonical_record() -> None:
    """A spreadsheet row should map to every canonical field."""
    record = normalize_row(
        {
            "Address": " 12 Oak St ",
            "Closed Date": "2022-03-15",
            "Sold Price": "$200,000",
            "City": "Austin",
            "New Construction?": "N",
            "Inside City Limits": "Y",
        }
    )

    assert record is not None
    assert (record.address, record.price, record.year, record.city) == (
        "12 Oak St",
        200000.0,
        2022,
        "Austin",
    )
    assert (record.new_construction, record.inside_city_limits) == ("No", "Yes")
    assert record.date == datetime(2022, 3, 15, tzinfo=timezone.utc)


def test_normalize_row_applies_field_defaults() -> None:
    """Absent optional fields should take their documented defaults."""
    record = normalize_row({"date": "2023-01-20", "price": 310000})

    assert record is not None
    assert (record.address, record.city, record.inside_city_limits, record.beds) == (
        "",
        "Unknown",
        "Unknown",
        0.0,
    )


def test_normalize_row_fingerprint_uses_folded_address() -> None:
    """Fingerprints should use epoch millis, lowercased address, and price."""
    record = normalize_row({"address": "12 Oak St", "date": "2022-03-15", "price": 200000})

    assert record is not None and record.fingerprint == "1647302400000|12 oak st|200000"


def test_normalize_row_rejects_year_2000_and_earlier() -> None:
    """Sales closing in 2000 or earlier should be dropped."""
    assert normalize_row({"date": "2000-12-31", "price": 100000}) is None
    assert normalize_row({"date": "2000-01-01", "price": 100000}) is None


def test_normalize_row_keeps_first_day_of_2001() -> None:
    """The first day after the cutoff year should be retained."""
    record = normalize_row({"date": "2001-01-01", "price": 100000})

    assert record is not None and record.year == 2001


def test_normalize_row_rejects_non_positive_price() -> None:
    """Zero prices should be dropped."""
    assert normalize_row({"date": "2022-03-15", "price": "$0"}) is None


def test_normalize_rows_counts_rejections_by_reason() -> None:
    """Rejected rows should be tallied by reason and never raise."""
    batch = normalize_rows(
        [
            {"date": "2022-03-15", "price": 200000},
            {"date": "garbage", "price": 200000},
            {"date": "2022-03-15", "price": -5},
            {"date": "1999-06-01", "price": 90000},
        ]
    )

    assert len(batch.records) == 1 and batch.rejected == {
        REJECT_INVALID_DATE: 1,
        REJECT_INVALID_PRICE: 1,
        REJECT_DATE_BEFORE_CUTOFF: 1,
    }


def test_normalize_rows_rejects_price_text_without_number() -> None:
    batch = normalize_rows([{"date": "2022-03-15", "price": "call agent"}])

    assert batch.records == () and batch.rejected == {REJECT_INVALID_PRICE: 1}


def test_normalize_row_partial_date_fingerprint_is_stable() -> None:
    """Month-only dates should fingerprint at the first of the month."""
    record = normalize_row({"address": "1 Main St", "date": "2022-05", "price": 200000})

    assert record is not None
    assert record.fingerprint == "1651363200000|1 main st|200000"
