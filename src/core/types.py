"""Shared typed models.

This module defines immutable data models used by ingest, analytics,
store, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


@dataclass(frozen=True)
class CanonicalRecord:
    """Normalized, fully-typed representation of one sale transaction.

    Attributes:
        address: Trimmed street address, possibly empty.
        date: Closing date as a timezone-aware UTC datetime.
        price: Sale price, strictly positive.
        price_per_sq_ft: Price per square foot, zero when absent.
        sq_ft: Approximate living area.
        days_on_market: Days between listing and close.
        beds: Bedroom count.
        baths: Full bathroom count.
        city: City name, ``"Unknown"`` when absent.
        subdivision: Subdivision name, possibly empty.
        year: Calendar year of ``date``.
        new_construction: ``"Yes"`` or ``"No"``.
        inside_city_limits: ``"Yes"``, ``"No"``, or ``"Unknown"``.
        fingerprint: Stable identity derived from date, address, and price.
    """

    address: str
    date: datetime
    price: float
    price_per_sq_ft: float
    sq_ft: float
    days_on_market: float
    beds: float
    baths: float
    city: str
    subdivision: str
    year: int
    new_construction: str
    inside_city_limits: str
    fingerprint: str


class FilterDimension(Enum):
    """Filterable record dimensions with their declared value types."""

    YEAR = ("year", int)
    CITY = ("city", str)
    NEW_CONSTRUCTION = ("new_construction", str)
    INSIDE_CITY_LIMITS = ("inside_city_limits", str)

    def __init__(self, attribute: str, value_type: type) -> None:
        self.attribute = attribute
        self.value_type = value_type

    def value_of(self, record: CanonicalRecord) -> Any:
        """Return this dimension's value for a record."""
        return getattr(record, self.attribute)


@dataclass(frozen=True)
class StoredDocument:
    """One document returned by a document store query.

    Attributes:
        document_id: Store-level identifier.
        fields: Raw field mapping as persisted.
    """

    document_id: str
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class NormalizedBatch:
    """Normalizer output for a sequence of raw rows.

    Attributes:
        records: Accepted records in input order.
        input_count: Number of raw rows examined.
        rejected: Rejected row counts keyed by rejection reason.
    """

    records: tuple[CanonicalRecord, ...]
    input_count: int
    rejected: Mapping[str, int] = field(default_factory=dict)

    @property
    def rejected_count(self) -> int:
        """Return the total number of rejected rows."""
        return sum(self.rejected.values())


@dataclass(frozen=True)
class DashboardLoad:
    """Result of a full reload from the document store.

    Attributes:
        records: Normalized, deduplicated records, most recent first.
        downloaded_count: Documents returned by the store query.
        rejected_count: Documents dropped by the normalizer.
        duplicate_count: Records dropped by deduplication.
    """

    records: tuple[CanonicalRecord, ...]
    downloaded_count: int
    rejected_count: int
    duplicate_count: int

    @property
    def is_empty(self) -> bool:
        """Return whether the store query succeeded with zero documents."""
        return self.downloaded_count == 0


@dataclass(frozen=True)
class Kpis:
    """Headline dashboard statistics.

    Attributes:
        count: Number of sales.
        total_volume: Sum of sale prices.
        median_price: Median sale price.
        median_ppsf: Median price per square foot.
    """

    count: int
    total_volume: float
    median_price: float
    median_ppsf: float


@dataclass(frozen=True)
class ChartSeries:
    """Labels and values handed to a chart sink."""

    labels: tuple[str, ...]
    series: tuple[float, ...]


@dataclass(frozen=True)
class HistogramBin:
    """One populated price bucket.

    Attributes:
        lower: Inclusive lower bound.
        upper: Exclusive upper bound.
        label: Display label such as ``0k-50k``.
        count: Number of records in the bucket.
    """

    lower: float
    upper: float
    label: str
    count: int


@dataclass(frozen=True)
class TableRow:
    """One formatted property table row."""

    date: str
    address: str
    city: str
    price: str
    sq_ft: str
    price_per_sq_ft: str


@dataclass(frozen=True)
class PropertyTable:
    """Formatted property table with an optional truncation notice."""

    rows: tuple[TableRow, ...]
    total_count: int
    notice: str | None = None


@dataclass(frozen=True)
class DashboardView:
    """All derived dashboard views for one record subset.

    Attributes:
        kpis: Headline statistics, ``None`` if they failed.
        trend: Monthly median price series, ``None`` if it failed.
        distribution: Price histogram series, ``None`` if it failed.
        city: Median price per city series, ``None`` if it failed.
        table: Property table, ``None`` if it failed.
        failures: Error messages keyed by view name.
    """

    kpis: Kpis | None
    trend: ChartSeries | None
    distribution: ChartSeries | None
    city: ChartSeries | None
    table: PropertyTable | None
    failures: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PipelineEvent:
    """Status update emitted between pipeline stages.

    Attributes:
        stage: Machine-readable stage name.
        message: Human-readable status text.
        processed: Optional processed item count.
        total: Optional total item count.
    """

    stage: str
    message: str
    processed: int | None = None
    total: int | None = None


@dataclass(frozen=True)
class UploadProgress:
    """Cumulative progress after one committed chunk.

    Attributes:
        uploaded: Records committed so far.
        total: Records scheduled for upload.
        percent: Rounded completion percentage.
    """

    uploaded: int
    total: int
    percent: int


@dataclass(frozen=True)
class UploadResult:
    """Final batch upsert summary.

    Attributes:
        uploaded: Records committed to the store.
        total: Records scheduled for upload.
        rejected: Raw rows dropped by the normalizer.
        duplicates_collapsed: Rows merged into a later row with the same fingerprint.
    """

    uploaded: int
    total: int
    rejected: int = 0
    duplicates_collapsed: int = 0
