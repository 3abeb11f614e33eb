"""Firestore client bootstrap for the document store backend."""
from __future__ import annotations

import logging
import os
from typing import Any, Optional

logger = logging.getLogger(__name__)

PROJECT_ENV = "CRM_FIRESTORE_PROJECT"

_client: Optional[Any] = None


def get_firestore_client() -> Any:
    """Return a process-wide Firestore client, creating it on first use.

    Credentials come from Application Default Credentials. Set
    ``CRM_FIRESTORE_PROJECT`` to pin the Google Cloud project.
    """

    global _client
    if _client is not None:
        return _client

    try:
        import firebase_admin
        from firebase_admin import firestore
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise RuntimeError(
            "firebase-admin is required for the Firestore store backend. "
            "Install dependencies or set CRM_STORE_BACKEND=file."
        ) from exc

    if not firebase_admin._apps:
        project = os.getenv(PROJECT_ENV, "").strip()
        options = {"projectId": project} if project else None
        firebase_admin.initialize_app(options=options)
        logger.info("Initialized Firebase app (project=%s)", project or "default")

    _client = firestore.client()
    return _client


def reset_firestore_client() -> None:
    """Forget the cached client so the next call builds a fresh one."""
    global _client
    _client = None
