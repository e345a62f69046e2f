# app/domains/aud/models.py

"""
ORM models for the 'aud' domain (PostgreSQL 'aud' schema).
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, ForeignKey, Index, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel

from app.core.lifecycle import utcnow

# JSONB on PostgreSQL, plain JSON elsewhere (test databases)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class AuditOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# =============================================================================
# 1. aud.audit_logs
# =============================================================================
class AuditLogBase(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    table_name: str = Field(max_length=100, index=True, description="Changed table")
    record_id: str = Field(max_length=64, index=True, description="Primary key of the changed row")
    operation: AuditOperation = Field(description="create | update | delete")
    old_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONType), description="Row state before the change")
    new_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONType), description="Row state after the change")
    changed_by: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("usr.users.id", ondelete="SET NULL")),
        description="Acting user ID (FK)"
    )
    changed_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
        description="Change time"
    )
    reason: Optional[str] = Field(default=None, description="Free-text reason for the change")


class AuditLog(AuditLogBase, table=True):
    """
    Append-only. Rows are written in the same transaction as the change they document.
    """
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_table_record", "table_name", "record_id"),
        {'schema': 'aud'},
    )
