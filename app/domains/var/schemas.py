# app/domains/var/schemas.py

"""
API data transfer objects for the 'var' domain.

One Create/Update/Read schema family covers all four kinds; kind-specific
columns (fruit_type, variety_notes, item_type) are optional here and
validated against the kind in crud.py.
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator
from sqlmodel import SQLModel, Field

from app.core.pagination import Pagination
from .models import VarietyKind


def _strip_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("name must not be blank")
    return value


class VarietyCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True
    fruit_type: Optional[str] = Field(None, max_length=20)
    variety_notes: Optional[str] = None
    item_type: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        return _strip_name(value)


class VarietyUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None
    fruit_type: Optional[str] = Field(None, max_length=20)
    variety_notes: Optional[str] = None
    item_type: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        return _strip_name(value)


class VarietyRead(SQLModel):
    id: uuid.UUID
    kind: VarietyKind
    name: str
    is_active: bool
    fruit_type: Optional[str] = None
    variety_notes: Optional[str] = None
    item_type: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class VarietyPage(BaseModel):
    varieties: List[VarietyRead]
    pagination: Pagination


class VarietyListParams(BaseModel):
    limit: int = 20
    offset: int = 0
    search: Optional[str] = None
    include_inactive: bool = False
    sort_by: Literal["name", "created_at"] = "name"
    sort_order: Literal["asc", "desc"] = "asc"
