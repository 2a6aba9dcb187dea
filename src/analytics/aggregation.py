"""Statistics and chart series over record sequences.

All functions are pure: identical input sequences give identical output.
Groupings are sparse, so months or price buckets without sales are
absent rather than zero-filled.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterable, Sequence

from core.constants import DEFAULT_HISTOGRAM_BIN_WIDTH
from core.types import CanonicalRecord, ChartSeries, HistogramBin, Kpis


def median(values: Iterable[float]) -> float:
    """Return the median, averaging the middle pair for even counts.

    Args:
        values: Numbers to summarize.

    Returns:
        Median value, ``0`` for empty input.
    """
    ordered = sorted(values)
    if not ordered:
        return 0.0
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[middle])
    return (ordered[middle - 1] + ordered[middle]) / 2


def total_volume(records: Iterable[CanonicalRecord]) -> float:
    """Return the sum of sale prices."""
    return float(sum(record.price for record in records))


def compute_kpis(records: Sequence[CanonicalRecord]) -> Kpis:
    """Compute headline statistics for a record subset."""
    return Kpis(
        count=len(records),
        total_volume=total_volume(records),
        median_price=median(record.price for record in records),
        median_ppsf=median(record.price_per_sq_ft for record in records),
    )


def group_by_month(records: Iterable[CanonicalRecord]) -> dict[str, float]:
    """Median price per ``YYYY-MM`` month, ordered by month.

    Args:
        records: Records to group.

    Returns:
        Ordered mapping of month key to median price.
    """
    prices_by_month: dict[str, list[float]] = defaultdict(list)
    for record in records:
        prices_by_month[record.date.strftime("%Y-%m")].append(record.price)
    return {month: median(prices_by_month[month]) for month in sorted(prices_by_month)}


def price_histogram(
    records: Iterable[CanonicalRecord],
    bin_width: float = DEFAULT_HISTOGRAM_BIN_WIDTH,
) -> list[HistogramBin]:
    """Count records per fixed-width price bucket.

    Args:
        records: Records to bucket.
        bin_width: Bucket width in currency units.

    Returns:
        Populated buckets ordered by lower bound.

    Raises:
        ValueError: If ``bin_width`` is not positive.
    """
    if not bin_width > 0:
        raise ValueError(f"bin_width must be positive, got {bin_width}")
    counts: dict[float, int] = defaultdict(int)
    for record in records:
        counts[math.floor(record.price / bin_width) * bin_width] += 1
    return [
        HistogramBin(
            lower=lower,
            upper=lower + bin_width,
            label=f"{_thousands(lower)}k-{_thousands(lower + bin_width)}k",
            count=counts[lower],
        )
        for lower in sorted(counts)
    ]


def group_by_city(records: Iterable[CanonicalRecord]) -> dict[str, float]:
    """Median price per city, in first-seen city order."""
    prices_by_city: dict[str, list[float]] = defaultdict(list)
    for record in records:
        prices_by_city[record.city].append(record.price)
    return {city: median(prices) for city, prices in prices_by_city.items()}


def trend_series(records: Sequence[CanonicalRecord]) -> ChartSeries:
    """Monthly median price series for the trend chart."""
    by_month = group_by_month(records)
    return ChartSeries(labels=tuple(by_month), series=tuple(by_month.values()))


def distribution_series(
    records: Sequence[CanonicalRecord],
    bin_width: float = DEFAULT_HISTOGRAM_BIN_WIDTH,
) -> ChartSeries:
    """Sales count per price bucket for the distribution chart."""
    bins = price_histogram(records, bin_width)
    return ChartSeries(
        labels=tuple(item.label for item in bins),
        series=tuple(float(item.count) for item in bins),
    )


def city_series(records: Sequence[CanonicalRecord]) -> ChartSeries:
    """Median price per city for the city chart."""
    by_city = group_by_city(records)
    return ChartSeries(labels=tuple(by_city), series=tuple(by_city.values()))


def _thousands(amount: float) -> str:
    value = amount / 1000
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.10g}"
