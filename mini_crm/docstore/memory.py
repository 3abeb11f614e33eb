"""In-process document store, used by tests and the ``memory`` backend."""
from __future__ import annotations

import copy
import threading
from typing import Any, Dict, List, Mapping, Optional

from ..errors import DocumentNotFoundError
from .base import DocumentStore, Record, new_id


class InMemoryDocumentStore(DocumentStore):
    """Dict-of-dicts store guarded by a single lock."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[str, Record]] = {}
        self._lock = threading.Lock()

    def insert(self, table: str, record: Mapping[str, Any]) -> str:
        record_id = new_id()
        with self._lock:
            rows = self._tables.setdefault(table, {})
            rows[record_id] = {**copy.deepcopy(dict(record)), "id": record_id}
        return record_id

    def patch(self, table: str, record_id: str, partial: Mapping[str, Any]) -> None:
        with self._lock:
            row = self._tables.get(table, {}).get(record_id)
            if row is None:
                raise DocumentNotFoundError(table, record_id)
            row.update(copy.deepcopy(dict(partial)))
            row["id"] = record_id

    def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            return self._tables.get(table, {}).pop(record_id, None) is not None

    def get(self, table: str, record_id: str) -> Optional[Record]:
        with self._lock:
            row = self._tables.get(table, {}).get(record_id)
            return copy.deepcopy(row) if row is not None else None

    def collect(self, table: str) -> List[Record]:
        with self._lock:
            return [copy.deepcopy(row) for row in self._tables.get(table, {}).values()]

    def query_index(self, table: str, field: str, value: Any) -> List[Record]:
        return [row for row in self.collect(table) if row.get(field) == value]
