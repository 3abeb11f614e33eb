"""Contact storage module."""
from .format import format_contact_detail, format_contact_rows
from .store import (
    Contact,
    ContactStore,
    SEARCH_FIELDS,
)

__all__ = [
    "Contact",
    "ContactStore",
    "SEARCH_FIELDS",
    "format_contact_detail",
    "format_contact_rows",
]
