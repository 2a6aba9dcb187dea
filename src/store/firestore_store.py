"""Firestore document store adapter.

This adapter maps the store interface onto a Firestore collection using
the Firebase Admin SDK, which is an optional dependency.
"""

from __future__ import annotations

from typing import Any, Sequence

from core.config import SalesboardConfig
from core.constants import MAX_STORE_BATCH_SIZE
from core.errors import (
    SalesboardConnectionError,
    SalesboardDependencyError,
    SalesboardStoreError,
)
from core.types import StoredDocument
from store.document_store import DocumentEntry


class FirestoreDocumentStore:
    """Document store backed by Cloud Firestore."""

    max_batch_size = MAX_STORE_BATCH_SIZE

    def __init__(self, config: SalesboardConfig) -> None:
        self._firestore, self._client = _create_firestore_client(config)

    def query_all(
        self,
        collection: str,
        order_by: str,
        descending: bool = True,
    ) -> list[StoredDocument]:
        """Stream every document of a collection in field order.

        Raises:
            SalesboardConnectionError: If the query fails in transport.
        """
        direction = (
            self._firestore.Query.DESCENDING if descending else self._firestore.Query.ASCENDING
        )
        query = self._client.collection(collection).order_by(order_by, direction=direction)
        try:
            return [
                StoredDocument(document_id=snapshot.id, fields=snapshot.to_dict() or {})
                for snapshot in query.stream()
            ]
        except Exception as error:
            raise SalesboardConnectionError(
                f"Failed to query Firestore collection '{collection}': {error}. "
                "Check credentials and network access."
            ) from error

    def batch_upsert(self, collection: str, entries: Sequence[DocumentEntry]) -> None:
        """Commit one atomic write batch.

        Raises:
            SalesboardStoreError: If the batch is too large or the commit fails.
        """
        if len(entries) > self.max_batch_size:
            raise SalesboardStoreError(
                f"Batch of {len(entries)} documents exceeds the Firestore limit of "
                f"{self.max_batch_size}. Split the write into smaller batches."
            )
        collection_ref = self._client.collection(collection)
        batch = self._client.batch()
        for document_id, fields in entries:
            batch.set(collection_ref.document(document_id), dict(fields))
        try:
            batch.commit()
        except Exception as error:
            raise SalesboardStoreError(
                f"Failed to commit Firestore batch to '{collection}': {error}."
            ) from error


def _create_firestore_client(config: SalesboardConfig) -> tuple[Any, Any]:
    """Initialize Firebase Admin and return the firestore module and client.

    Raises:
        SalesboardDependencyError: If firebase-admin is missing.
    """
    try:
        import firebase_admin
        from firebase_admin import credentials, firestore
    except ImportError as error:
        raise SalesboardDependencyError(
            "Firestore support requires firebase-admin, but it is not installed. "
            "Install salesboard[firestore] to use SALESBOARD_STORE_BACKEND=firestore."
        ) from error
    try:
        app = firebase_admin.get_app()
    except ValueError:
        if config.firebase_credentials:
            certificate = credentials.Certificate(config.firebase_credentials)
            app = firebase_admin.initialize_app(certificate)
        else:
            app = firebase_admin.initialize_app()
    return firestore, firestore.client(app)
