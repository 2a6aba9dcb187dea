"""Unit tests for raw field coercion."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone

from ingest.field_coercion import (
    INVALID_DATE,
    to_city_limits,
    to_count,
    to_date,
    to_price,
    to_text,
    to_yes_no,
)


class _StoreTimestamp:
    """Timestamp wrapper exposing a ``to_datetime`` conversion."""

    def __init__(self, value: datetime) -> None:
        self._value = value

    def to_datetime(self) -> datetime:
        return self._value


def test_to_price_strips_currency_formatting() -> None:
    """Currency text should parse to its numeric value."""
    assert to_price("$200,000") == 200000.0


def test_to_price_parses_leading_number_only() -> None:
    """Trailing text after the number should be ignored."""
    assert to_price("1,250.50 USD") == 1250.5


def test_to_price_unparsable_text_is_zero() -> None:
    """Text without a leading number should coerce to zero."""
    assert to_price("call agent") == 0.0


def test_to_price_passes_numbers_through() -> None:
    """Numeric values should be returned unchanged."""
    assert to_price(315000) == 315000.0


def test_to_count_clamps_negative_and_nan() -> None:
    """Negative and non-finite counts should become zero."""
    assert (to_count(-3), to_count(math.nan), to_count("4")) == (0.0, 0.0, 4.0)


def test_to_date_accepts_store_timestamp_wrapper() -> None:
    """Wrappers exposing ``to_datetime`` should be unwrapped."""
    closed_at = datetime(2022, 3, 15, 12, 30, tzinfo=timezone.utc)

    assert to_date(_StoreTimestamp(closed_at)) == closed_at


def test_to_date_treats_naive_text_as_utc() -> None:
    """Date text without a zone should be read as UTC midnight."""
    assert to_date("2022-03-15") == datetime(2022, 3, 15, tzinfo=timezone.utc)


def test_to_date_accepts_plain_date() -> None:
    """Calendar dates should map to UTC midnight."""
    assert to_date(date(2023, 1, 20)) == datetime(2023, 1, 20, tzinfo=timezone.utc)


def test_to_date_reads_numbers_as_epoch_millis() -> None:
    """Numbers should be read as epoch milliseconds."""
    assert to_date(1647302400000) == datetime(2022, 3, 15, tzinfo=timezone.utc)


def test_to_date_unparsable_text_is_invalid() -> None:
    """Unparsable text should yield the invalid-date sentinel."""
    assert to_date("not a date") is INVALID_DATE


def test_to_yes_no_accepts_only_yes_tokens() -> None:
    """Only Y and YES, in any case, should map to Yes."""
    assert [to_yes_no(value) for value in ("y", "YES", "n", "maybe", None)] == [
        "Yes",
        "Yes",
        "No",
        "No",
        "No",
    ]


def test_to_city_limits_keeps_unknown_for_other_values() -> None:
    """Values outside Y/N tokens should map to Unknown."""
    assert [to_city_limits(value) for value in ("Y", "no", "", "partial")] == [
        "Yes",
        "No",
        "Unknown",
        "Unknown",
    ]


def test_to_text_uses_default_for_blank() -> None:
    """Blank text should fall back to the default."""
    assert to_text("   ", default="Unknown") == "Unknown"


def test_to_date_fills_partial_text_from_first_of_period() -> None:
    """Month-only and year-only text should not pick up today's date parts."""
    assert (to_date("2022-05"), to_date("May 2022"), to_date("2022")) == (
        datetime(2022, 5, 1, tzinfo=timezone.utc),
        datetime(2022, 5, 1, tzinfo=timezone.utc),
        datetime(2022, 1, 1, tzinfo=timezone.utc),
    )
