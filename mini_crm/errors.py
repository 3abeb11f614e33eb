"""Exception types shared across the CRM stores."""
from __future__ import annotations


class CRMError(Exception):
    """Base class for all CRM errors."""


class ValidationError(CRMError):
    """Raised when a record fails a required-field or field-name check."""


class NotFoundError(CRMError):
    """Raised when an operation targets an id that does not exist."""

    def __init__(self, record_id: str, message: str | None = None) -> None:
        self.record_id = record_id
        super().__init__(message or f"Record not found: {record_id}")


class DocumentNotFoundError(NotFoundError):
    """Storage-level miss on patch."""

    def __init__(self, table: str, record_id: str) -> None:
        self.table = table
        super().__init__(record_id, f"No document {record_id!r} in {table!r}")


class ContactNotFoundError(NotFoundError):
    def __init__(self, contact_id: str) -> None:
        super().__init__(contact_id, f"Contact not found: {contact_id}")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(user_id, f"User not found: {user_id}")


class StoreError(CRMError):
    """Raised when the backing document store fails."""
