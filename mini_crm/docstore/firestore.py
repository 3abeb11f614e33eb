"""Firestore document store.

Each table maps to a top-level collection named ``<prefix><table>``. The
document id doubles as the record id and is also written into the document
body so reads can return it without extra bookkeeping.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from google.api_core.exceptions import GoogleAPICallError, NotFound

from ..errors import DocumentNotFoundError, StoreError
from .base import DocumentStore, Record, new_id

logger = logging.getLogger(__name__)


def _doc_record(doc: Any) -> Record:
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


class FirestoreDocumentStore(DocumentStore):
    """Document store backed by a ``google.cloud.firestore.Client``."""

    backend_name = "firestore"

    def __init__(self, client: Any, *, collection_prefix: str = "") -> None:
        self._db = client
        self._prefix = collection_prefix

    def _collection(self, table: str):
        return self._db.collection(f"{self._prefix}{table}")

    def insert(self, table: str, record: Mapping[str, Any]) -> str:
        record_id = new_id()
        try:
            self._collection(table).document(record_id).set({**dict(record), "id": record_id})
        except GoogleAPICallError as exc:
            raise StoreError(f"Firestore insert into {table} failed: {exc}") from exc
        return record_id

    def patch(self, table: str, record_id: str, partial: Mapping[str, Any]) -> None:
        # update() fails server-side when the document is missing, so the
        # existence check and the write are a single call.
        try:
            self._collection(table).document(record_id).update(dict(partial))
        except NotFound as exc:
            raise DocumentNotFoundError(table, record_id) from exc
        except GoogleAPICallError as exc:
            raise StoreError(f"Firestore patch of {table}/{record_id} failed: {exc}") from exc

    def delete(self, table: str, record_id: str) -> bool:
        doc_ref = self._collection(table).document(record_id)
        try:
            doc = doc_ref.get()
            if not doc.exists:
                return False
            doc_ref.delete()
        except GoogleAPICallError as exc:
            raise StoreError(f"Firestore delete of {table}/{record_id} failed: {exc}") from exc
        return True

    def get(self, table: str, record_id: str) -> Optional[Record]:
        try:
            doc = self._collection(table).document(record_id).get()
        except GoogleAPICallError as exc:
            raise StoreError(f"Firestore read of {table}/{record_id} failed: {exc}") from exc
        if doc.exists:
            return _doc_record(doc)
        return None

    def collect(self, table: str) -> List[Record]:
        try:
            return [_doc_record(doc) for doc in self._collection(table).stream()]
        except GoogleAPICallError as exc:
            raise StoreError(f"Firestore scan of {table} failed: {exc}") from exc

    def query_index(self, table: str, field: str, value: Any) -> List[Record]:
        query = self._collection(table).where(field, "==", value)
        try:
            return [_doc_record(doc) for doc in query.stream()]
        except GoogleAPICallError as exc:
            raise StoreError(f"Firestore query on {table}.{field} failed: {exc}") from exc
