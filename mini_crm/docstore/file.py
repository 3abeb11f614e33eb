"""JSONL file document store.

Layout: ``<directory>/<table>.jsonl`` with one record per line. Mutations
read the whole table, apply the change and write it back through a temporary
file, so a single call never leaves a half-written table behind.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..errors import DocumentNotFoundError, StoreError
from .base import DocumentStore, Record, new_id

logger = logging.getLogger(__name__)


class FileDocumentStore(DocumentStore):
    """Local fallback store used when Firestore is not available."""

    backend_name = "file"

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    # --- DocumentStore API ---

    def insert(self, table: str, record: Mapping[str, Any]) -> str:
        record_id = new_id()
        with self._lock:
            rows = self._read(table)
            rows[record_id] = {**dict(record), "id": record_id}
            self._write(table, rows)
        return record_id

    def patch(self, table: str, record_id: str, partial: Mapping[str, Any]) -> None:
        with self._lock:
            rows = self._read(table)
            if record_id not in rows:
                raise DocumentNotFoundError(table, record_id)
            rows[record_id].update(partial)
            rows[record_id]["id"] = record_id
            self._write(table, rows)

    def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            rows = self._read(table)
            if rows.pop(record_id, None) is None:
                return False
            self._write(table, rows)
            return True

    def get(self, table: str, record_id: str) -> Optional[Record]:
        with self._lock:
            return self._read(table).get(record_id)

    def collect(self, table: str) -> List[Record]:
        with self._lock:
            return list(self._read(table).values())

    def query_index(self, table: str, field: str, value: Any) -> List[Record]:
        return [row for row in self.collect(table) if row.get(field) == value]

    # --- File helpers ---

    def _table_file(self, table: str) -> Path:
        safe_name = table.replace("/", "_").replace("\\", "_")
        return self.directory / f"{safe_name}.jsonl"

    def _read(self, table: str) -> Dict[str, Record]:
        path = self._table_file(table)
        if not path.exists():
            return {}

        rows: Dict[str, Record] = {}
        try:
            with path.open("r", encoding="utf-8") as handle:
                for line_no, line in enumerate(handle, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                        rows[data["id"]] = data
                    except (json.JSONDecodeError, KeyError, TypeError):
                        logger.warning("Skipping unreadable line %d in %s", line_no, path)
        except OSError as exc:
            raise StoreError(f"Failed to read {path}: {exc}") from exc
        return rows

    def _write(self, table: str, rows: Dict[str, Record]) -> None:
        path = self._table_file(table)
        tmp_path = path.with_suffix(".jsonl.tmp")
        try:
            lines = [json.dumps(row) + "\n" for row in rows.values()]
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Cannot store {table} record as JSON: {exc}") from exc

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.writelines(lines)
            os.replace(tmp_path, path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StoreError(f"Failed to write {path}: {exc}") from exc
