# app/domains/var/routers.py

"""
API endpoints for the 'var' domain.

All four kinds share one contract under /var/{kind}, where kind is one of
base_fruit, additive, juice, packaging.
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.exceptions import NotFoundError
from app.domains.usr.models import User

from . import crud as var_crud
from . import schemas as var_schemas
from .models import VarietyKind


router = APIRouter(
    tags=["Variety Management"],
    responses={404: {"description": "Not found"}},
)


@router.get("/{kind}", response_model=var_schemas.VarietyPage, summary="List varieties of a kind")
async def read_varieties(
    kind: VarietyKind,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = Query(None, description="Case-insensitive name substring"),
    include_inactive: bool = Query(False),
    sort_by: Literal["name", "created_at"] = Query("name"),
    sort_order: Literal["asc", "desc"] = Query("asc"),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("list", "variety")),
):
    params = var_schemas.VarietyListParams(
        limit=limit, offset=offset, search=search, include_inactive=include_inactive,
        sort_by=sort_by, sort_order=sort_order,
    )
    rows, pagination = await var_crud.variety[kind].get_page(db, params=params)
    return {"varieties": [var_crud.to_read(kind, row) for row in rows], "pagination": pagination}


@router.get("/{kind}/{variety_id}", response_model=var_schemas.VarietyRead, summary="Get a variety")
async def read_variety(
    kind: VarietyKind,
    variety_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("read", "variety")),
):
    crud = var_crud.variety[kind]
    db_obj = await crud.get_live(db, variety_id)
    if db_obj is None:
        raise NotFoundError(crud.not_found_message)
    return var_crud.to_read(kind, db_obj)


@router.post("/{kind}", response_model=var_schemas.VarietyRead, status_code=status.HTTP_201_CREATED, summary="Create a variety")
async def create_variety(
    kind: VarietyKind,
    variety_in: var_schemas.VarietyCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("create", "variety")),
):
    user_id = current_user.id
    db_obj = await var_crud.variety[kind].create(db, obj_in=variety_in, changed_by=user_id)
    return var_crud.to_read(kind, db_obj)


@router.put("/{kind}/{variety_id}", response_model=var_schemas.VarietyRead, summary="Update a variety")
async def update_variety(
    kind: VarietyKind,
    variety_id: uuid.UUID,
    variety_in: var_schemas.VarietyUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("update", "variety")),
):
    user_id = current_user.id
    db_obj = await var_crud.variety[kind].update(db, id=variety_id, obj_in=variety_in, changed_by=user_id)
    return var_crud.to_read(kind, db_obj)


@router.delete("/{kind}/{variety_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a variety")
async def delete_variety(
    kind: VarietyKind,
    variety_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("delete", "variety")),
):
    user_id = current_user.id
    await var_crud.variety[kind].remove(db, id=variety_id, changed_by=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
