"""Plain-text rendering of contacts for the CLI."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from .store import Contact


def _ms_to_iso(value: int) -> str:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat(timespec="seconds")


def format_contact_rows(contacts: Iterable[Contact]) -> str:
    """Return a human-friendly summary table string."""

    lines = ["ID | Name | Email | Phone | Title"]
    for contact in contacts:
        lines.append(
            f"{contact.id} | {contact.full_name} | {contact.email or '-'} | "
            f"{contact.phone or '-'} | {contact.title or '-'}"
        )
    return "\n".join(lines)


def format_contact_detail(contact: Contact) -> str:
    lines = [
        f"{contact.full_name} ({contact.id})",
        f"  Email:   {contact.email or '-'}",
        f"  Phone:   {contact.phone or '-'}",
        f"  Title:   {contact.title or '-'}",
        f"  Company: {contact.company_id or '-'}",
        f"  Owner:   {contact.owner_id or '-'}",
        f"  Image:   {contact.image or '-'}",
        f"  Created: {_ms_to_iso(contact.created_at)}",
        f"  Updated: {_ms_to_iso(contact.updated_at)}",
    ]
    return "\n".join(lines)
