"""Document store backends and the factory that picks one from settings."""
from __future__ import annotations

import logging
from typing import Optional

from ..config import Settings, load_settings
from .base import DocumentStore, Record, new_id, now_ms
from .file import FileDocumentStore
from .memory import InMemoryDocumentStore

logger = logging.getLogger(__name__)


def get_document_store(settings: Optional[Settings] = None) -> DocumentStore:
    """Build the document store selected by ``settings.store_backend``.

    ``auto`` tries Firestore first and falls back to the JSONL file store
    when no client can be created (missing credentials, library not
    installed). ``firestore`` propagates that failure instead.
    """
    settings = settings or load_settings()
    backend = settings.store_backend

    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "file":
        return FileDocumentStore(settings.store_dir)

    try:
        store = _firestore_store(settings)
    except Exception as exc:
        if backend == "firestore":
            raise
        logger.warning(
            "Firestore unavailable, using file store at %s: %s", settings.store_dir, exc
        )
        return FileDocumentStore(settings.store_dir)
    return store


def _firestore_store(settings: Settings) -> DocumentStore:
    from ..firestore import get_firestore_client
    from .firestore import FirestoreDocumentStore

    return FirestoreDocumentStore(
        get_firestore_client(), collection_prefix=settings.collection_prefix
    )


__all__ = [
    "DocumentStore",
    "FileDocumentStore",
    "InMemoryDocumentStore",
    "Record",
    "get_document_store",
    "new_id",
    "now_ms",
]
