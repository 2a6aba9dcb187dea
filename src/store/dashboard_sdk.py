"""Python SDK for dashboard operations.

This module exposes high-level APIs for reload, filtering, statistics,
chart rendering, and uploads backed by a document store.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from analytics.aggregation import compute_kpis
from analytics.dashboard import EventCallback, build_dashboard
from analytics.filter_engine import FilterState, filter_options
from core.cancellation import CancellationToken
from core.config import SalesboardConfig, parse_collection_name
from core.types import (
    CanonicalRecord,
    DashboardLoad,
    DashboardView,
    FilterDimension,
    Kpis,
    UploadResult,
)
from ingest.input_reader import read_upload_rows
from ingest.pipeline import load_dashboard_records
from ingest.upload import ProgressCallback, upload_rows
from render.chart_images import ChartRenderReport, render_dashboard_charts
from store.document_store import DocumentStore, build_document_store


class DashboardSession:
    """Working record set and its filter state for one dashboard session.

    The record set is replaced wholesale on reload, which also resets the
    filter to every observed value.
    """

    def __init__(self, load: DashboardLoad) -> None:
        self._load = load
        self._filter_state = FilterState.all_selected(load.records)

    @property
    def load(self) -> DashboardLoad:
        """Return the load result backing this session."""
        return self._load

    @property
    def records(self) -> tuple[CanonicalRecord, ...]:
        """Return the full working record set."""
        return self._load.records

    @property
    def filter_state(self) -> FilterState:
        """Return the mutable filter state."""
        return self._filter_state

    def replace_records(self, load: DashboardLoad) -> None:
        """Swap in a new record set and reset the filter."""
        self._load = load
        self._filter_state = FilterState.all_selected(load.records)

    def visible_records(self) -> list[CanonicalRecord]:
        """Return records passing the current filter."""
        return self._filter_state.apply(self._load.records)

    def filter_options(self) -> dict[FilterDimension, tuple[Any, ...]]:
        """Return display options for every filter dimension."""
        return filter_options(self._load.records)


class SalesboardClient:
    """Primary SDK entry point for dashboard workflows."""

    def __init__(
        self,
        config: SalesboardConfig | None = None,
        store: DocumentStore | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store: Optional document store; built from config when omitted.
        """
        self._config = config or SalesboardConfig.from_env()
        self._store = store or build_document_store(self._config)

    @property
    def config(self) -> SalesboardConfig:
        """Return the runtime configuration."""
        return self._config

    def load(
        self,
        on_event: EventCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> DashboardLoad:
        """Reload every stored sale into a cleaned record set.

        Raises:
            SalesboardConnectionError: If the fetch times out or fails in transport.
        """
        return load_dashboard_records(self._store, self._config, on_event, cancellation)

    def load_and_normalize(
        self,
        on_event: EventCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> list[CanonicalRecord]:
        """Reload and return the normalized, deduplicated records."""
        return list(self.load(on_event, cancellation).records)

    def open_session(
        self,
        on_event: EventCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> DashboardSession:
        """Reload and wrap the result in a new dashboard session."""
        return DashboardSession(self.load(on_event, cancellation))

    def apply_filters(
        self,
        state: FilterState,
        records: Iterable[CanonicalRecord],
    ) -> list[CanonicalRecord]:
        """Return the records visible under a filter state."""
        return state.apply(records)

    def compute_kpis(self, records: Sequence[CanonicalRecord]) -> Kpis:
        """Return count, volume, median price, and median price per sq ft."""
        return compute_kpis(records)

    def build_dashboard(
        self,
        records: Sequence[CanonicalRecord],
        on_event: EventCallback | None = None,
    ) -> DashboardView:
        """Build every dashboard view for a record subset."""
        return build_dashboard(records, self._config.histogram_bin_width, on_event)

    def render_charts(
        self,
        records: Sequence[CanonicalRecord],
        output_dir: str,
    ) -> ChartRenderReport:
        """Render chart images for a record subset.

        Args:
            records: Records to chart.
            output_dir: Directory for PNG files.

        Returns:
            Written paths and per-chart failures.
        """
        return render_dashboard_charts(self.build_dashboard(records), output_dir)

    def upload_batch(
        self,
        raw_rows: Iterable[Mapping[str, Any]],
        on_progress: ProgressCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> UploadResult:
        """Normalize raw rows and upsert them in sequential chunks.

        Raises:
            SalesboardUploadError: If a chunk fails after all attempts.
        """
        return upload_rows(self._store, self._config, raw_rows, on_progress, cancellation)

    def upload_file(
        self,
        source_uri: str,
        on_progress: ProgressCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> UploadResult:
        """Read a spreadsheet from a path or S3 URI and upload its rows.

        Raises:
            SalesboardIngestError: If the source cannot be read.
            SalesboardUploadError: If a chunk fails after all attempts.
        """
        raw_rows = read_upload_rows(source_uri, self._config)
        return self.upload_batch(raw_rows, on_progress, cancellation)

    def with_config(self, **changes: Any) -> "SalesboardClient":
        """Clone the client with configuration overrides.

        Args:
            changes: ``SalesboardConfig`` field overrides.

        Returns:
            New SDK client instance.
        """
        if "data_root" in changes:
            changes["data_root"] = Path(changes["data_root"]).expanduser().resolve()
        if "collection" in changes:
            changes["collection"] = parse_collection_name(changes["collection"])
        return SalesboardClient(replace(self._config, **changes))
