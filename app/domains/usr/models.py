# app/domains/usr/models.py

"""
ORM models for the 'usr' domain (PostgreSQL 'usr' schema).

Holds the application users and the role enum used by the authorization matrix.
"""

from typing import Optional
from enum import IntEnum
from sqlmodel import Field, SQLModel

from app.core.lifecycle import TimestampMixin


# =============================================================================
# User roles (RBAC)
# =============================================================================
class UserRole(IntEnum):
    """
    User roles. Lower value means more privileges.
    """
    ADMIN = 10      # full access
    OPERATOR = 50   # day-to-day production work, cannot delete vendors
    VIEWER = 100    # read-only


# =============================================================================
# 1. usr.users
# =============================================================================
class UserBase(SQLModel):
    """
    Base attributes of the usr.users table.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="User ID")
    username: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="Login name")
    password_hash: str = Field(max_length=255, description="Hashed password")
    email: Optional[str] = Field(default=None, max_length=100, sa_column_kwargs={"unique": True}, description="Email")
    full_name: Optional[str] = Field(default=None, max_length=100, description="Full name")
    role: UserRole = Field(default=UserRole.VIEWER, description="User role (permissions)")
    is_active: bool = Field(default=True, description="Account enabled")


class User(UserBase, TimestampMixin, table=True):
    """
    SQLModel ORM class mapped to usr.users.
    """
    __tablename__ = "users"
    __table_args__ = {'schema': 'usr'}
