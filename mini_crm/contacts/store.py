"""Contact storage on top of the injected document store.

Contacts live in the ``contacts`` table. ``company_id`` and ``owner_id`` are
weak references: they are stored as given and may point at records that no
longer exist. Deleting a contact leaves any deals or activities that mention
it untouched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..docstore import DocumentStore, now_ms
from ..errors import ContactNotFoundError, DocumentNotFoundError
from ..schema import CONTACTS, get_table

logger = logging.getLogger(__name__)

CONTACT_SCHEMA = get_table(CONTACTS)
SEARCH_FIELDS = ("first_name", "last_name", "email", "phone")


@dataclass(slots=True)
class Contact:
    """A person in the CRM."""

    id: str
    first_name: str
    created_at: int  # ms since epoch
    updated_at: int  # ms since epoch
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    company_id: Optional[str] = None
    owner_id: Optional[str] = None
    image: Optional[str] = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Contact":
        return cls(
            id=data["id"],
            first_name=data["first_name"],
            created_at=int(data["created_at"]),
            updated_at=int(data["updated_at"]),
            last_name=data.get("last_name"),
            email=data.get("email"),
            phone=data.get("phone"),
            title=data.get("title"),
            company_id=data.get("company_id"),
            owner_id=data.get("owner_id"),
            image=data.get("image"),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        """Convert to API response format (camelCase)."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "title": self.title,
            "companyId": self.company_id,
            "ownerId": self.owner_id,
            "image": self.image,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match over name, email and phone."""
        needle = term.lower()
        return any(
            needle in (getattr(self, name) or "").lower() for name in SEARCH_FIELDS
        )


class ContactStore:
    """Create, edit, delete and query contacts.

    Args:
        db: Backing document store.
        clock: Millisecond clock, replaceable in tests.
    """

    table = CONTACTS

    def __init__(self, db: DocumentStore, *, clock: Callable[[], int] = now_ms) -> None:
        self._db = db
        self._clock = clock

    def create(self, first_name: str, **fields: Any) -> str:
        """Insert a new contact and return its id.

        Raises:
            ValidationError: if ``first_name`` is blank or a field is unknown.
        """
        payload = {"first_name": first_name, **fields}
        CONTACT_SCHEMA.check_fields(payload)

        now = self._clock()
        contact_id = self._db.insert(
            self.table, {**payload, "created_at": now, "updated_at": now}
        )
        logger.info("Created contact %s", contact_id)
        return contact_id

    def edit(self, contact_id: str, fields: Mapping[str, Any]) -> Contact:
        """Apply a partial update and return the resulting contact.

        Only the supplied keys change; passing ``None`` for an optional field
        clears it. ``created_at`` is never touched and ``updated_at`` never
        moves backwards.

        Raises:
            ContactNotFoundError: if ``contact_id`` does not exist.
            ValidationError: on a blank ``first_name`` or a non-editable field.
        """
        CONTACT_SCHEMA.check_fields(fields, partial=True)

        current = self._db.get(self.table, contact_id)
        if current is None:
            raise ContactNotFoundError(contact_id)

        changes = {
            **dict(fields),
            "updated_at": max(self._clock(), int(current["updated_at"])),
        }
        try:
            self._db.patch(self.table, contact_id, changes)
        except DocumentNotFoundError:
            # Removed between the read and the patch.
            raise ContactNotFoundError(contact_id) from None

        logger.info("Updated contact %s (%s)", contact_id, ", ".join(sorted(fields)) or "touch")
        return Contact.from_dict({**current, **changes})

    def delete(self, contact_id: str) -> bool:
        """Hard-delete a contact. Returns False if it was already gone."""
        deleted = self._db.delete(self.table, contact_id)
        if deleted:
            logger.info("Deleted contact %s", contact_id)
        else:
            logger.debug("Delete skipped, contact %s not found", contact_id)
        return deleted

    def get(self, contact_id: str) -> Optional[Contact]:
        record = self._db.get(self.table, contact_id)
        return Contact.from_dict(record) if record is not None else None

    def list(self) -> List[Contact]:
        """Return every contact. Order is whatever the backend yields."""
        return [Contact.from_dict(record) for record in self._db.collect(self.table)]

    def list_by_owner(self, owner_id: str) -> List[Contact]:
        records = self._db.query_named_index(self.table, "by_owner", owner_id)
        return [Contact.from_dict(record) for record in records]

    def search(self, term: str) -> List[Contact]:
        """Filter contacts the way the contacts page search box does."""
        term = (term or "").strip()
        contacts = self.list()
        if not term:
            return contacts
        return [contact for contact in contacts if contact.matches(term)]
