"""Shared dependencies and helper functions for API routers.

Usage in routers:
    from api.dependencies import get_contact_store, store_errors
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from fastapi import Depends, HTTPException

from mini_crm.config import Settings, load_settings
from mini_crm.contacts import ContactStore
from mini_crm.docstore import DocumentStore, get_document_store as build_document_store
from mini_crm.errors import NotFoundError, ValidationError
from mini_crm.users import UserStore

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

LOCAL_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def allowed_origins(settings: Settings) -> list[str]:
    origins = list(LOCAL_ORIGINS)
    if settings.allowed_frontend:
        origins.append(settings.allowed_frontend)
    return origins


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


@lru_cache
def get_document_store() -> DocumentStore:
    """Build the configured document store once per process."""
    store = build_document_store(get_settings())
    logger.info("Using %s document store", store.backend_name)
    return store


def get_contact_store(db: DocumentStore = Depends(get_document_store)) -> ContactStore:
    return ContactStore(db)


def get_user_store(db: DocumentStore = Depends(get_document_store)) -> UserStore:
    return UserStore(db)


# =============================================================================
# Error Mapping
# =============================================================================

@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Translate store exceptions into HTTP errors.

    Validation problems become 400 and missing records 404. Anything else is
    logged and reported as a generic 500 naming the failed action.
    """
    try:
        yield
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to %s", action)
        raise HTTPException(status_code=500, detail=f"Failed to {action}. Please try again.")
