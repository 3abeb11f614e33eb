"""Shared Pydantic models for API routers.

Request bodies accept snake_case field names as well as the camelCase aliases
the web client sends.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def supplied_fields(self) -> Dict[str, Any]:
        """Fields the client actually sent, keyed by store column name."""
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Contact Models
# =============================================================================

class ContactCreateRequest(_RequestModel):
    """Request body for creating a contact."""
    first_name: str = Field(..., alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    company_id: Optional[str] = Field(None, alias="companyId")
    owner_id: Optional[str] = Field(None, alias="ownerId")
    image: Optional[str] = Field(None, description="Avatar URL returned by the upload service.")


class ContactUpdateRequest(_RequestModel):
    """Request body for editing a contact.

    Omitted fields are left alone; fields sent as null are cleared.
    """
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    company_id: Optional[str] = Field(None, alias="companyId")
    owner_id: Optional[str] = Field(None, alias="ownerId")
    image: Optional[str] = None


# =============================================================================
# User Models
# =============================================================================

class UserCreateRequest(_RequestModel):
    name: str
    email: str
    password: str
    image: Optional[str] = None


class UserUpdateRequest(_RequestModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    image: Optional[str] = None
