"""Field coercion for untyped source values.

Every function here is total: malformed input falls back to a defined
default instead of raising. Dates are the exception to defaulting and
return ``INVALID_DATE`` so the normalizer can reject the row.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from dateutil import parser as date_parser

from core.constants import DEFAULT_CITY_LIMITS, NO, YES

INVALID_DATE = None

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_CURRENCY_CHARACTERS = str.maketrans("", "", "$,")
_YES_TOKENS = frozenset({"Y", "YES"})
_NO_TOKENS = frozenset({"N", "NO"})
# Fills date parts missing from text such as "2022-05". A bare year before the
# cutoff stays rejected.
_PARTIAL_DATE_DEFAULT = datetime(2000, 1, 1)


def to_price(value: Any) -> float:
    """Coerce a price-like value to a float.

    Numbers are returned unchanged. Text has ``$`` and ``,`` removed and its
    leading numeric prefix parsed, so ``"$200,000"`` and ``"200000 USD"``
    both yield ``200000.0``.

    Args:
        value: Raw field value.

    Returns:
        Parsed number, ``0.0`` for unparsable text or unsupported types.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER_PREFIX.match(value.translate(_CURRENCY_CHARACTERS))
        if match is None:
            return 0.0
        return float(match.group(0))
    return 0.0


def to_count(value: Any) -> float:
    """Coerce an optional non-negative numeric field such as beds or sq ft.

    Args:
        value: Raw field value.

    Returns:
        Parsed value, ``0.0`` when absent, negative, or not finite.
    """
    number = to_price(value)
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def to_date(value: Any) -> datetime | None:
    """Coerce a date-like value to a UTC datetime.

    Accepts store timestamp wrappers exposing ``to_datetime()`` or
    ``ToDatetime()``, native datetimes and dates, text parsed by
    python-dateutil, and numbers read as epoch milliseconds. Naive values
    are treated as UTC.

    Args:
        value: Raw field value.

    Returns:
        Timezone-aware datetime, or ``INVALID_DATE`` when unparsable.
    """
    if value is None or isinstance(value, bool):
        return INVALID_DATE
    converter = getattr(value, "to_datetime", None) or getattr(value, "ToDatetime", None)
    if callable(converter) and not isinstance(value, datetime):
        try:
            value = converter()
        except (TypeError, ValueError, OverflowError):
            return INVALID_DATE
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return _from_epoch_millis(float(value))
    if isinstance(value, str):
        return _parse_date_text(value)
    return INVALID_DATE


def to_yes_no(value: Any) -> str:
    """Normalize a new-construction flag to ``"Yes"`` or ``"No"``."""
    if not value:
        return NO
    return YES if str(value).strip().upper() in _YES_TOKENS else NO


def to_city_limits(value: Any) -> str:
    """Normalize an inside-city-limits flag to ``"Yes"``, ``"No"``, or ``"Unknown"``."""
    if not value:
        return DEFAULT_CITY_LIMITS
    token = str(value).strip().upper()
    if token in _YES_TOKENS:
        return YES
    if token in _NO_TOKENS:
        return NO
    return DEFAULT_CITY_LIMITS


def to_text(value: Any, default: str = "") -> str:
    """Coerce a value to trimmed text with a fallback for blanks."""
    if value is None:
        return default
    text = str(value).strip()
    return text if text else default


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_epoch_millis(millis: float) -> datetime | None:
    if not math.isfinite(millis):
        return INVALID_DATE
    try:
        return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return INVALID_DATE


def _parse_date_text(text: str) -> datetime | None:
    stripped = text.strip()
    if not stripped:
        return INVALID_DATE
    try:
        parsed = date_parser.parse(stripped, default=_PARTIAL_DATE_DEFAULT)
    except (ValueError, OverflowError):
        return INVALID_DATE
    return _as_utc(parsed)
