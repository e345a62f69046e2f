# app/domains/aud/routers.py

"""
Read-only API endpoints for the audit trail.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User

from . import crud as aud_crud
from . import schemas as aud_schemas
from .models import AuditOperation


router = APIRouter(
    tags=["Audit Log"],
    responses={404: {"description": "Not found"}},
)


@router.get("/logs", response_model=aud_schemas.AuditLogPage, summary="Search audit records")
async def read_audit_logs(
    table_name: Optional[str] = Query(None),
    record_id: Optional[str] = Query(None),
    operation: Optional[AuditOperation] = Query(None),
    changed_by: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("list", "audit_log")),
):
    logs, pagination = await aud_crud.audit_log.get_page(
        db,
        table_name=table_name,
        record_id=record_id,
        operation=operation,
        changed_by=changed_by,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return {"logs": logs, "pagination": pagination}


@router.get("/logs/{table_name}/{record_id}", response_model=aud_schemas.AuditLogHistory, summary="History of one record")
async def read_record_history(
    table_name: str,
    record_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("read", "audit_log")),
):
    history = await aud_crud.audit_log.get_history(db, table_name=table_name, record_id=record_id)
    return {"table_name": table_name, "record_id": record_id, "history": history}


@router.get("/stats", response_model=aud_schemas.AuditStats, summary="Audit record counts")
async def read_audit_stats(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("read", "audit_log")),
):
    return await aud_crud.audit_log.get_stats(db)
