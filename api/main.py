"""FastAPI service for the Mini CRM."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import allowed_origins, get_document_store, get_settings
from api.routers import contacts_router, users_router
from mini_crm import __version__
from mini_crm.docstore import DocumentStore

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Mini CRM API",
    version=__version__,
    description="Contacts and users backed by a document store.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(settings),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(contacts_router, prefix="/contacts", tags=["contacts"])
app.include_router(users_router, prefix="/users", tags=["users"])


@app.get("/health")
def health_check(db: DocumentStore = Depends(get_document_store)) -> dict:
    """Health check endpoint with storage backend status."""
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "environment": get_settings().environment,
        "backend": db.backend_name,
    }
