# app/domains/usr/schemas.py

"""
API data transfer objects for the 'usr' domain (users and authentication).
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, EmailStr

from . import models as usr_models


# =============================================================================
# 1. User schemas
# =============================================================================
class UserBase(SQLModel):
    username: str = Field(..., max_length=50)
    email: Optional[EmailStr] = Field(None, max_length=100)
    full_name: Optional[str] = Field(None, max_length=100)
    role: usr_models.UserRole = Field(default=usr_models.UserRole.VIEWER, description="User role")
    is_active: bool = True


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)


class UserRead(UserBase):
    """
    User as returned by the API. The password hash is never exposed.
    """
    id: int
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 2. Token schemas
# =============================================================================
class Token(BaseModel):
    """JWT token response"""
    access_token: str
    token_type: str
