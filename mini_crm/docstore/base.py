"""Storage port used by the CRM stores.

A document store keeps plain ``dict`` records in named tables. Every record
it returns carries its ``id``. Each method is atomic on its own; nothing here
spans more than one call, so two concurrent patches resolve as last writer
wins.
"""
from __future__ import annotations

import time
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from ..schema import get_table

Record = Dict[str, Any]


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def new_id() -> str:
    return str(uuid.uuid4())


class DocumentStore(ABC):
    """Abstract per-record CRUD over named tables."""

    backend_name = "abstract"

    @abstractmethod
    def insert(self, table: str, record: Mapping[str, Any]) -> str:
        """Store ``record`` under a new id and return that id."""

    @abstractmethod
    def patch(self, table: str, record_id: str, partial: Mapping[str, Any]) -> None:
        """Overwrite the supplied keys of an existing record.

        Raises:
            DocumentNotFoundError: if ``record_id`` is not in ``table``.
        """

    @abstractmethod
    def delete(self, table: str, record_id: str) -> bool:
        """Remove a record. Returns False when it was already absent."""

    @abstractmethod
    def get(self, table: str, record_id: str) -> Optional[Record]:
        """Return the record or None."""

    @abstractmethod
    def collect(self, table: str) -> List[Record]:
        """Return every record in ``table`` in no particular order."""

    @abstractmethod
    def query_index(self, table: str, field: str, value: Any) -> List[Record]:
        """Return records whose ``field`` equals ``value``."""

    def query_named_index(self, table: str, index_name: str, value: Any) -> List[Record]:
        """Look up records through an index declared in the table schema."""
        return self.query_index(table, get_table(table).index_field(index_name), value)
