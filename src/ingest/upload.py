"""Chunked batch upsert of uploaded sale rows.

Rows are normalized and fingerprinted, then written in sequential
atomic chunks keyed by storage id, so re-uploading unchanged data
overwrites the same documents. A failed chunk stops the upload; chunks
already committed stay committed.
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from core.cancellation import CancellationToken
from core.config import SalesboardConfig
from core.constants import UPLOAD_BACKOFF_MULTIPLIER, UPLOAD_INITIAL_BACKOFF_SECONDS
from core.errors import SalesboardStoreError, SalesboardUploadError
from core.logging_config import get_logger
from core.types import CanonicalRecord, UploadProgress, UploadResult
from ingest.normalizer import normalize_rows
from store.document_store import DocumentEntry, DocumentStore
from store.record_payload import record_to_fields
from transforms.fingerprint import build_storage_id, collapse_duplicates_keep_last

_LOGGER = get_logger(__name__)

ProgressCallback = Callable[[UploadProgress], None]


class BatchUpsertRunner:
    """Sequential chunk writer with bounded per-chunk retries."""

    def __init__(
        self,
        store: DocumentStore,
        config: SalesboardConfig,
        on_progress: ProgressCallback | None = None,
        cancellation: CancellationToken | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._config = config
        self._on_progress = on_progress
        self._cancellation = cancellation or CancellationToken()
        self._sleep = sleep
        self._chunk_size = min(config.upload_batch_size, store.max_batch_size)

    def run(self, raw_rows: Iterable[Mapping[str, Any]]) -> UploadResult:
        """Normalize and upload rows.

        Args:
            raw_rows: Raw spreadsheet rows.

        Returns:
            Final upload summary.

        Raises:
            SalesboardUploadError: If a chunk fails after all attempts.
            SalesboardCancelledError: If cancellation was requested between chunks.
        """
        batch = normalize_rows(raw_rows)
        records = collapse_duplicates_keep_last(batch.records)
        total = len(records)
        _LOGGER.info(
            "upload_started",
            collection=self._config.collection,
            input_count=batch.input_count,
            total=total,
            chunk_size=self._chunk_size,
        )
        uploaded = 0
        for chunk in chunk_records(records, self._chunk_size):
            self._cancellation.raise_if_cancelled(f"upload chunk at {uploaded}/{total}")
            self._commit_with_retry(chunk, uploaded, total)
            uploaded += len(chunk)
            self._report_progress(uploaded, total)
        result = UploadResult(
            uploaded=uploaded,
            total=total,
            rejected=batch.rejected_count,
            duplicates_collapsed=len(batch.records) - total,
        )
        _LOGGER.info(
            "upload_completed",
            collection=self._config.collection,
            uploaded=result.uploaded,
            total=result.total,
            rejected=result.rejected,
            duplicates_collapsed=result.duplicates_collapsed,
        )
        return result

    def _commit_with_retry(self, chunk: Sequence[CanonicalRecord], uploaded: int, total: int) -> None:
        """Commit one chunk, retrying store failures with exponential backoff.

        Raises:
            SalesboardUploadError: After the final failed attempt.
        """
        entries = build_document_entries(chunk)
        max_attempts = self._config.upload_max_attempts
        for attempt in range(max_attempts):
            try:
                self._store.batch_upsert(self._config.collection, entries)
                return
            except SalesboardStoreError as error:
                if attempt == max_attempts - 1:
                    _LOGGER.error(
                        "upload_chunk_failed",
                        collection=self._config.collection,
                        uploaded=uploaded,
                        remaining=total - uploaded,
                        attempts=max_attempts,
                        error=str(error),
                    )
                    raise SalesboardUploadError(
                        f"Upload failed after {max_attempts} attempts with {uploaded} of "
                        f"{total} records committed: {error}",
                        uploaded=uploaded,
                        remaining=total - uploaded,
                    ) from error
                backoff = UPLOAD_INITIAL_BACKOFF_SECONDS * (UPLOAD_BACKOFF_MULTIPLIER**attempt)
                _LOGGER.warning(
                    "upload_chunk_retry",
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    backoff_seconds=backoff,
                    error=str(error),
                )
                self._sleep(backoff)

    def _report_progress(self, uploaded: int, total: int) -> None:
        progress = UploadProgress(
            uploaded=uploaded,
            total=total,
            percent=_round_percent(uploaded, total),
        )
        _LOGGER.info(
            "upload_chunk_committed",
            uploaded=progress.uploaded,
            total=progress.total,
            percent=progress.percent,
        )
        if self._on_progress is not None:
            self._on_progress(progress)


def upload_rows(
    store: DocumentStore,
    config: SalesboardConfig,
    raw_rows: Iterable[Mapping[str, Any]],
    on_progress: ProgressCallback | None = None,
    cancellation: CancellationToken | None = None,
) -> UploadResult:
    """Normalize raw rows and upsert them in sequential chunks.

    Args:
        store: Target document store.
        config: Runtime configuration.
        raw_rows: Raw spreadsheet rows.
        on_progress: Optional callback invoked after each committed chunk.
        cancellation: Optional token checked before each chunk.

    Returns:
        Final upload summary.
    """
    runner = BatchUpsertRunner(store, config, on_progress, cancellation)
    return runner.run(raw_rows)


def chunk_records(
    records: Sequence[CanonicalRecord],
    chunk_size: int,
) -> Iterator[Sequence[CanonicalRecord]]:
    """Yield consecutive fixed-size slices of a record sequence."""
    for start in range(0, len(records), chunk_size):
        yield records[start : start + chunk_size]


def build_document_entries(records: Iterable[CanonicalRecord]) -> list[DocumentEntry]:
    """Key each record's stored fields by its storage id."""
    return [(build_storage_id(record.fingerprint), record_to_fields(record)) for record in records]


def _round_percent(uploaded: int, total: int) -> int:
    if total == 0:
        return 100
    return math.floor(uploaded * 100 / total + 0.5)
