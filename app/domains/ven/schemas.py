# app/domains/ven/schemas.py

"""
API data transfer objects for the 'ven' domain: vendors and vendor-variety links.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator
from sqlmodel import SQLModel, Field

from app.core.pagination import Pagination
from app.domains.var.models import VarietyKind


# =============================================================================
# 1. Vendor schemas
# =============================================================================
class VendorBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    contact_info: Optional[str] = None
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = Field(None, max_length=100)
    is_active: bool = True


class VendorCreate(VendorBase):
    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class VendorUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    contact_info: Optional[str] = None
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = Field(None, max_length=100)
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class VendorRead(VendorBase):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class VendorPage(BaseModel):
    vendors: List[VendorRead]
    pagination: Pagination


# =============================================================================
# 2. Vendor-variety link schemas
# =============================================================================
class AttachRequest(BaseModel):
    """
    `variety_name_or_id` is treated as an id when it has the UUID shape,
    otherwise as a (trimmed, case-insensitive) name that is created on demand.
    """
    variety_name_or_id: str = Field(..., min_length=1, max_length=100)
    notes: Optional[str] = None
    kind: VarietyKind = VarietyKind.BASE_FRUIT
    item_type: Optional[str] = Field(None, max_length=50, description="Category for auto-created additive/packaging varieties")

    @field_validator("variety_name_or_id")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("variety_name_or_id must not be blank")
        return value


class AttachResult(BaseModel):
    success: bool = True
    already_exists: bool
    variety_id: uuid.UUID
    variety_name: str
    link_id: Optional[uuid.UUID] = None
    message: str


class DetachResult(BaseModel):
    success: bool = True
    message: str


class VendorVarietyEntry(BaseModel):
    id: uuid.UUID
    name: str
    is_active: bool
    notes: Optional[str] = None
    linked_at: Optional[datetime] = None
    link_id: uuid.UUID
    kind: VarietyKind
    category: Optional[str] = None


class VendorVarietyList(BaseModel):
    vendor_id: uuid.UUID
    varieties: List[VendorVarietyEntry]
    count: int


class VarietySuggestion(BaseModel):
    id: uuid.UUID
    name: str
    is_active: bool = True
    fruit_type: Optional[str] = None


class VarietySearchResult(BaseModel):
    varieties: List[VarietySuggestion]
    count: int
    search_query: str
