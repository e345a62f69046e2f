# app/domains/aud/schemas.py

"""
API data transfer objects for the 'aud' domain.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel

from app.core.pagination import Pagination
from .models import AuditOperation


class AuditLogRead(SQLModel):
    id: uuid.UUID
    table_name: str
    record_id: str
    operation: AuditOperation
    old_data: Optional[Dict[str, Any]] = None
    new_data: Optional[Dict[str, Any]] = None
    changed_by: Optional[int] = None
    changed_at: datetime
    reason: Optional[str] = None


class AuditLogPage(BaseModel):
    logs: List[AuditLogRead]
    pagination: Pagination


class AuditLogHistory(BaseModel):
    table_name: str
    record_id: str
    history: List[AuditLogRead]


class AuditStats(BaseModel):
    total: int
    by_operation: Dict[str, int]
    by_table: Dict[str, int]
