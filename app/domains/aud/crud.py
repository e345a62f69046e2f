# app/domains/aud/crud.py

"""
Audit log writing and querying.

AuditLogWriter.append() only adds and flushes; the caller's transaction
decides whether the record survives, so an audit row is never committed
without the change it documents.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from fastapi.encoders import jsonable_encoder
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.pagination import Pagination, paginate_select
from .models import AuditLog, AuditOperation

logger = logging.getLogger(__name__)


def snapshot(data: Any) -> Optional[Dict[str, Any]]:
    """JSON-safe copy of a model/dict (UUIDs, datetimes and Decimals become strings/numbers)."""
    if data is None:
        return None
    if hasattr(data, "model_dump"):
        data = data.model_dump()
    return jsonable_encoder(data)


# =============================================================================
# 1. Writer
# =============================================================================
class AuditLogWriter:
    async def append(
        self,
        db: AsyncSession,
        table_name: str,
        record_id: Any,
        operation: AuditOperation,
        old_data: Any = None,
        new_data: Any = None,
        changed_by: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> AuditLog:
        entry = AuditLog(
            table_name=table_name,
            record_id=str(record_id),
            operation=AuditOperation(operation),
            old_data=snapshot(old_data),
            new_data=snapshot(new_data),
            changed_by=changed_by,
            reason=reason,
        )
        db.add(entry)
        await db.flush()
        logger.debug("Audit %s %s/%s by user %s", entry.operation.value, table_name, entry.record_id, changed_by)
        return entry


audit_writer = AuditLogWriter()


# =============================================================================
# 2. Queries (read-only)
# =============================================================================
class CRUDAuditLog(CRUDBase[AuditLog, AuditLog, AuditLog]):
    def __init__(self):
        super().__init__(model=AuditLog)

    async def get_page(
        self,
        db: AsyncSession,
        *,
        table_name: Optional[str] = None,
        record_id: Optional[str] = None,
        operation: Optional[AuditOperation] = None,
        changed_by: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[AuditLog], Pagination]:
        statement = select(AuditLog)
        if table_name:
            statement = statement.where(AuditLog.table_name == table_name)
        if record_id:
            statement = statement.where(AuditLog.record_id == record_id)
        if operation:
            statement = statement.where(AuditLog.operation == operation)
        if changed_by is not None:
            statement = statement.where(AuditLog.changed_by == changed_by)
        if start_date is not None:
            statement = statement.where(AuditLog.changed_at >= start_date)
        if end_date is not None:
            # end_date inclusive
            statement = statement.where(AuditLog.changed_at < end_date + timedelta(days=1))

        statement = statement.order_by(AuditLog.changed_at.desc())
        return await paginate_select(db, statement, limit=limit, offset=offset)

    async def get_history(self, db: AsyncSession, *, table_name: str, record_id: str) -> List[AuditLog]:
        statement = (
            select(AuditLog)
            .where(AuditLog.table_name == table_name, AuditLog.record_id == record_id)
            .order_by(AuditLog.changed_at.asc())
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_stats(self, db: AsyncSession) -> Dict[str, Any]:
        by_operation = await db.execute(
            select(AuditLog.operation, func.count()).group_by(AuditLog.operation)
        )
        by_table = await db.execute(
            select(AuditLog.table_name, func.count()).group_by(AuditLog.table_name)
        )
        operations = {AuditOperation(op).value: count for op, count in by_operation.all()}
        tables = {name: count for name, count in by_table.all()}
        return {"total": sum(operations.values()), "by_operation": operations, "by_table": tables}


audit_log = CRUDAuditLog()
