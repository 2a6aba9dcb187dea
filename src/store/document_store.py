"""Document store interface and the local file-backed adapter.

The dashboard consumes the store through two calls: a full ordered query
and an atomic batched upsert. The local adapter keeps one JSON file per
collection under the data root and replaces it atomically per batch.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from core.config import SalesboardConfig
from core.constants import COLLECTIONS_DIR_NAME, MAX_STORE_BATCH_SIZE
from core.errors import SalesboardStoreError
from core.logging_config import get_logger
from core.types import StoredDocument
from store.record_payload import to_json_value

_LOGGER = get_logger(__name__)

DocumentEntry = tuple[str, Mapping[str, Any]]


class DocumentStore(Protocol):
    """Operations the pipelines require from a document store."""

    max_batch_size: int

    def query_all(
        self,
        collection: str,
        order_by: str,
        descending: bool = True,
    ) -> list[StoredDocument]: ...

    def batch_upsert(self, collection: str, entries: Sequence[DocumentEntry]) -> None: ...


class LocalDocumentStore:
    """File-backed document store.

    Each collection lives in ``<data_root>/collections/<name>.json`` as a
    mapping of document id to fields. A batch is applied in memory and the
    file replaced in one ``os.replace`` call, so a batch is all-or-nothing.
    """

    max_batch_size = MAX_STORE_BATCH_SIZE

    def __init__(self, data_root: Path) -> None:
        """Initialize the store under a data root.

        Args:
            data_root: Root directory for collection files.
        """
        self._collections_root = data_root / COLLECTIONS_DIR_NAME
        self._collections_root.mkdir(parents=True, exist_ok=True)

    def query_all(
        self,
        collection: str,
        order_by: str,
        descending: bool = True,
    ) -> list[StoredDocument]:
        """Return every document ordered by one field.

        Args:
            collection: Collection name.
            order_by: Field to sort on; documents missing it sort last.
            descending: Sort direction.

        Returns:
            Ordered documents, empty when the collection does not exist.

        Raises:
            SalesboardStoreError: If the collection file is unreadable.
        """
        documents = self._read_collection(collection)
        with_field = [
            StoredDocument(document_id=document_id, fields=fields)
            for document_id, fields in documents.items()
            if fields.get(order_by) is not None
        ]
        without_field = [
            StoredDocument(document_id=document_id, fields=fields)
            for document_id, fields in documents.items()
            if fields.get(order_by) is None
        ]
        ordered = sorted(
            with_field,
            key=lambda document: str(document.fields[order_by]),
            reverse=descending,
        )
        return ordered + without_field

    def batch_upsert(self, collection: str, entries: Sequence[DocumentEntry]) -> None:
        """Write a batch of documents, overwriting existing ids.

        Args:
            collection: Collection name.
            entries: ``(document_id, fields)`` pairs applied in order.

        Raises:
            SalesboardStoreError: If the batch is too large or the write fails.
        """
        if len(entries) > self.max_batch_size:
            raise SalesboardStoreError(
                f"Batch of {len(entries)} documents exceeds the store limit of "
                f"{self.max_batch_size}. Split the write into smaller batches."
            )
        documents = self._read_collection(collection)
        for document_id, fields in entries:
            documents[document_id] = json.loads(json.dumps(dict(fields), default=to_json_value))
        self._write_collection(collection, documents)
        _LOGGER.debug("batch_upserted", collection=collection, document_count=len(entries))

    def _collection_path(self, collection: str) -> Path:
        return self._collections_root / f"{collection}.json"

    def _read_collection(self, collection: str) -> dict[str, dict[str, Any]]:
        """Read a collection file.

        Args:
            collection: Collection name.

        Returns:
            Document fields keyed by document id.

        Raises:
            SalesboardStoreError: If the file is not valid JSON.
        """
        collection_path = self._collection_path(collection)
        if not collection_path.exists():
            return {}
        try:
            payload = json.loads(collection_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise SalesboardStoreError(
                f"Failed to read collection '{collection}' at {collection_path}: {error}. "
                "Restore the file or re-upload the source data."
            ) from error
        documents = payload.get("documents") if isinstance(payload, dict) else None
        if not isinstance(documents, dict):
            raise SalesboardStoreError(
                f"Failed to read collection '{collection}' at {collection_path}: "
                "expected a JSON object with a 'documents' mapping."
            )
        return documents

    def _write_collection(self, collection: str, documents: dict[str, dict[str, Any]]) -> None:
        collection_path = self._collection_path(collection)
        payload = json.dumps({"documents": documents}, indent=2, sort_keys=True) + "\n"
        try:
            file_descriptor, temp_name = tempfile.mkstemp(
                dir=self._collections_root, prefix=f".{collection}.", suffix=".tmp"
            )
            with os.fdopen(file_descriptor, "w", encoding="utf-8") as temp_file:
                temp_file.write(payload)
            os.replace(temp_name, collection_path)
        except OSError as error:
            raise SalesboardStoreError(
                f"Failed to write collection '{collection}' at {collection_path}: {error}. "
                "Check write permissions and available disk space."
            ) from error


def build_document_store(config: SalesboardConfig) -> DocumentStore:
    """Create the document store selected by configuration.

    Args:
        config: Runtime configuration.

    Returns:
        Store adapter instance.
    """
    if config.store_backend == "firestore":
        from store.firestore_store import FirestoreDocumentStore

        return FirestoreDocumentStore(config)
    return LocalDocumentStore(config.data_root)
