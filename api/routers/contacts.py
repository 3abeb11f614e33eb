"""Contacts Router - contact CRUD, owner lookup and search.

Mounted at /contacts.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_contact_store, store_errors
from api.models import ContactCreateRequest, ContactUpdateRequest
from mini_crm.contacts import ContactStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_contacts(
    search: Optional[str] = Query(None, description="Match name, email or phone"),
    owner_id: Optional[str] = Query(None, alias="ownerId", description="Only contacts managed by this user"),
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    """List contacts, optionally narrowed by owner and search term."""
    with store_errors("load contacts"):
        if owner_id:
            contacts = store.list_by_owner(owner_id)
            if search:
                contacts = [c for c in contacts if c.matches(search.strip())]
        elif search:
            contacts = store.search(search)
        else:
            contacts = store.list()

    return {
        "count": len(contacts),
        "contacts": [c.to_api_dict() for c in contacts],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_contact(
    request: ContactCreateRequest,
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    """Create a contact and return it with its new id."""
    fields = request.supplied_fields()
    first_name = fields.pop("first_name")

    with store_errors("save contact"):
        contact_id = store.create(first_name, **fields)
        contact = store.get(contact_id)

    return {"id": contact_id, "contact": contact.to_api_dict() if contact else None}


@router.get("/{contact_id}")
def get_contact(
    contact_id: str,
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    with store_errors("load contact"):
        contact = store.get(contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"contact": contact.to_api_dict()}


@router.patch("/{contact_id}")
def edit_contact(
    contact_id: str,
    request: ContactUpdateRequest,
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    """Apply the supplied fields to an existing contact."""
    with store_errors("save contact"):
        contact = store.edit(contact_id, request.supplied_fields())
    return {"contact": contact.to_api_dict()}


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: str,
    store: ContactStore = Depends(get_contact_store),
) -> dict:
    """Delete a contact. Deals and activities pointing at it are left as they are."""
    with store_errors("delete contact"):
        deleted = store.delete(contact_id)
    return {"deleted": deleted, "contactId": contact_id}
