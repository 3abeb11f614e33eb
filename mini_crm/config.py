"""Configuration helpers for the Mini CRM service and CLI."""
from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import CRMError

STORE_BACKENDS = ("auto", "firestore", "file", "memory")
DEFAULT_STORE_DIR = Path(__file__).resolve().parents[1] / "crm_store"


class ConfigError(CRMError):
    """Raised when configuration values are missing or invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration shared by the API and CLI."""

    environment: str = "local"
    store_backend: str = "auto"
    store_dir: Path = DEFAULT_STORE_DIR
    collection_prefix: str = ""
    log_level: str = "INFO"
    allowed_frontend: Optional[str] = None


def load_settings(*, env_file: Optional[str] = None) -> Settings:
    """Load settings from environment variables.

    Args:
        env_file: Optional path to a ``.env`` file. When omitted, python-dotenv
            searches upwards from this package for one. Variables already
            set in the environment win over the file.

    Returns:
        Settings with every value resolved.

    Raises:
        ConfigError: if ``CRM_STORE_BACKEND`` names an unknown backend.
    """

    load_dotenv(env_file)

    backend = os.getenv("CRM_STORE_BACKEND", "auto").strip().lower() or "auto"
    if backend not in STORE_BACKENDS:
        raise ConfigError(
            f"Unknown CRM_STORE_BACKEND {backend!r}. "
            f"Expected one of: {', '.join(STORE_BACKENDS)}."
        )

    store_dir = os.getenv("CRM_STORE_DIR", "").strip()
    frontend = os.getenv("CRM_ALLOWED_FRONTEND", "").strip()

    return Settings(
        environment=os.getenv("CRM_ENV", "local"),
        store_backend=backend,
        store_dir=Path(store_dir) if store_dir else DEFAULT_STORE_DIR,
        collection_prefix=os.getenv("CRM_COLLECTION_PREFIX", "").strip(),
        log_level=os.getenv("CRM_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        allowed_frontend=frontend or None,
    )
