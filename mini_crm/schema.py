"""Table definitions for the CRM document store.

Every table carries an auto-assigned ``id`` plus ``created_at`` /
``updated_at`` timestamps in milliseconds since the epoch (``activities``
only has ``created_at``). Reference fields such as ``company_id`` or
``owner_id`` are weak: nothing checks that the target exists and nothing
cascades on delete.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from .errors import ValidationError

USERS = "users"
COMPANIES = "companies"
CONTACTS = "contacts"
DEALS = "deals"
ACTIVITIES = "activities"

SYSTEM_FIELDS = ("id", "created_at", "updated_at")


@dataclass(frozen=True, slots=True)
class TableSchema:
    """Field layout and secondary indexes for one table."""

    name: str
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()
    indexes: Dict[str, str] = field(default_factory=dict)  # index name -> field
    numeric: Tuple[str, ...] = ()  # optional columns holding numbers, not strings

    @property
    def editable(self) -> Tuple[str, ...]:
        return self.required + self.optional

    def index_field(self, index_name: str) -> str:
        try:
            return self.indexes[index_name]
        except KeyError:
            raise KeyError(f"Table {self.name!r} has no index {index_name!r}") from None

    def check_fields(self, fields: Mapping[str, Any], *, partial: bool = False) -> None:
        """Validate field names and required values for a write.

        With ``partial`` set, required fields may be omitted but must not be
        blank when present.

        Raises:
            ValidationError: on unknown or system-managed fields, and on values
                that do not fit their column.
        """
        system = sorted(set(fields) & set(SYSTEM_FIELDS))
        if system:
            raise ValidationError(f"{', '.join(system)} cannot be set on {self.name}")

        unknown = sorted(set(fields) - set(self.editable))
        if unknown:
            raise ValidationError(f"Unknown {self.name} field(s): {', '.join(unknown)}")

        for name in self.required:
            if partial and name not in fields:
                continue
            value = fields.get(name)
            # Every required column in this schema is a string.
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{name} is required")

        for name in self.optional:
            value = fields.get(name)
            if value is None:
                continue
            if name in self.numeric:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValidationError(f"{name} must be a number")
            elif not isinstance(value, str):
                raise ValidationError(f"{name} must be a string")


TABLES: Dict[str, TableSchema] = {
    USERS: TableSchema(
        name=USERS,
        required=("name", "email", "password"),
        optional=("image",),
        indexes={"by_email": "email"},
    ),
    COMPANIES: TableSchema(
        name=COMPANIES,
        required=("name",),
        optional=("website", "phone"),
        indexes={"by_name": "name"},
    ),
    CONTACTS: TableSchema(
        name=CONTACTS,
        required=("first_name",),
        optional=(
            "last_name",
            "email",
            "phone",
            "title",
            "company_id",
            "owner_id",  # who manages this contact
            "image",  # avatar URL
        ),
        indexes={"by_owner": "owner_id"},
    ),
    DEALS: TableSchema(
        name=DEALS,
        required=("title", "stage"),  # stage: lead, qualified, proposal, won, lost
        optional=("value", "currency", "contact_id", "company_id", "owner_id"),
        numeric=("value",),
        indexes={"by_stage": "stage"},
    ),
    ACTIVITIES: TableSchema(
        name=ACTIVITIES,
        required=("kind", "body", "author_id"),  # kind: note, call, meeting
        optional=("contact_id", "deal_id"),
        indexes={"by_contact": "contact_id"},
    ),
}


def get_table(name: str) -> TableSchema:
    """Return the schema for ``name`` or raise ``KeyError``."""
    try:
        return TABLES[name]
    except KeyError:
        raise KeyError(f"Unknown table: {name!r}") from None
