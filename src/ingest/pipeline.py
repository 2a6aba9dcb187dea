"""Full reload pipeline for the dashboard.

This module fetches every stored sale under a wall-clock timeout, then
normalizes and deduplicates the documents into the working record set.
Status events are emitted between stages for an interactive surface.
"""

from __future__ import annotations

import queue
import threading
from typing import Callable, cast

from core.cancellation import CancellationToken
from core.config import SalesboardConfig
from core.constants import DEFAULT_ORDER_BY_FIELD
from core.errors import SalesboardConnectionError
from core.logging_config import get_logger
from core.types import DashboardLoad, PipelineEvent, StoredDocument
from ingest.normalizer import normalize_rows
from store.document_store import DocumentStore
from transforms.fingerprint import remove_duplicate_records

_LOGGER = get_logger(__name__)

EventCallback = Callable[[PipelineEvent], None]

NO_DATA_MESSAGE = "Connected, but no data found. Please upload data first."


class LoadPipelineRunner:
    """Runner for one full reload of the working record set."""

    def __init__(
        self,
        store: DocumentStore,
        config: SalesboardConfig,
        on_event: EventCallback | None = None,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._on_event = on_event
        self._cancellation = cancellation or CancellationToken()

    def run(self) -> DashboardLoad:
        """Execute the reload and return the cleaned record set."""
        documents = self._fetch_documents()
        if not documents:
            self._emit("no_data", NO_DATA_MESSAGE)
            _LOGGER.warning("load_empty", collection=self._config.collection)
            return DashboardLoad(records=(), downloaded_count=0, rejected_count=0, duplicate_count=0)
        self._emit(
            "downloaded",
            f"Downloaded {len(documents)} records. Parsing...",
            total=len(documents),
        )
        self._cancellation.raise_if_cancelled("normalizing")
        self._emit("normalizing", "Normalizing data types...")
        batch = normalize_rows(document.fields for document in documents)
        self._cancellation.raise_if_cancelled("deduplicating")
        self._emit(
            "deduplicating",
            f"Checking for duplicates in {len(batch.records)} records...",
            total=len(batch.records),
        )
        unique_records = remove_duplicate_records(batch.records)
        result = DashboardLoad(
            records=tuple(unique_records),
            downloaded_count=len(documents),
            rejected_count=batch.rejected_count,
            duplicate_count=len(batch.records) - len(unique_records),
        )
        self._emit(
            "loaded",
            f"Processed {len(unique_records)} valid records.",
            processed=len(unique_records),
            total=len(documents),
        )
        _log_load_completion(self._config.collection, result)
        return result

    def _fetch_documents(self) -> list[StoredDocument]:
        """Run the store query, failing fast when it exceeds the timeout.

        Returns:
            Stored documents, most recent first.

        Raises:
            SalesboardConnectionError: On timeout or transport failure.
        """
        timeout_seconds = self._config.fetch_timeout_seconds
        self._emit("connecting", f"Connecting to database (Timeout {timeout_seconds:g}s)...")
        self._cancellation.raise_if_cancelled("connecting")
        outcome: queue.Queue[tuple[bool, object]] = queue.Queue(maxsize=1)
        # Daemon: a query stuck on the network must not block interpreter exit.
        worker = threading.Thread(
            target=self._query_into,
            args=(outcome,),
            name="salesboard-fetch",
            daemon=True,
        )
        worker.start()
        try:
            succeeded, payload = outcome.get(timeout=timeout_seconds)
        except queue.Empty as error:
            _LOGGER.error(
                "load_timed_out",
                collection=self._config.collection,
                timeout_seconds=timeout_seconds,
            )
            raise SalesboardConnectionError(
                "Connection timed out. Check firewall or internet."
            ) from error
        if not succeeded:
            raise cast(Exception, payload)
        return cast(list[StoredDocument], payload)

    def _query_into(self, outcome: queue.Queue[tuple[bool, object]]) -> None:
        try:
            documents = self._store.query_all(
                self._config.collection,
                DEFAULT_ORDER_BY_FIELD,
                True,
            )
        except Exception as error:
            outcome.put((False, error))
            return
        outcome.put((True, documents))

    def _emit(
        self,
        stage: str,
        message: str,
        processed: int | None = None,
        total: int | None = None,
    ) -> None:
        if self._on_event is None:
            return
        self._on_event(PipelineEvent(stage=stage, message=message, processed=processed, total=total))


def load_dashboard_records(
    store: DocumentStore,
    config: SalesboardConfig,
    on_event: EventCallback | None = None,
    cancellation: CancellationToken | None = None,
) -> DashboardLoad:
    """Reload, normalize, and deduplicate every stored sale.

    Args:
        store: Document store to query.
        config: Runtime configuration.
        on_event: Optional status callback.
        cancellation: Optional token checked between stages.

    Returns:
        Load result; ``is_empty`` marks a store with no documents.

    Raises:
        SalesboardConnectionError: If the fetch times out or fails in transport.
        SalesboardStoreError: If stored data cannot be read.
        SalesboardCancelledError: If cancellation was requested.
    """
    runner = LoadPipelineRunner(store, config, on_event, cancellation)
    return runner.run()


def _log_load_completion(collection: str, result: DashboardLoad) -> None:
    _LOGGER.info(
        "load_completed",
        collection=collection,
        downloaded_count=result.downloaded_count,
        record_count=len(result.records),
        rejected_count=result.rejected_count,
        duplicate_count=result.duplicate_count,
    )
