"""Display formatting for KPI values and table cells."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal


def format_currency(amount: float) -> str:
    """Format a whole-dollar amount, e.g. ``$200,000``."""
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"${int(rounded):,}"


def format_price_per_sq_ft(amount: float, decimals: int = 2) -> str:
    """Format a price per square foot with fixed decimals, e.g. ``$152.35``."""
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"${rounded}"


def format_count(value: float) -> str:
    """Format a count with thousands separators, keeping up to three decimals."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_date(value: datetime) -> str:
    """Format a date as ``M/D/YYYY``."""
    return f"{value.month}/{value.day}/{value.year}"
