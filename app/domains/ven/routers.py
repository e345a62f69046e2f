# app/domains/ven/routers.py

"""
API endpoints for the 'ven' domain: vendors and vendor-variety links.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.domains.usr.models import User
from app.domains.var.models import VarietyKind

from . import crud as ven_crud
from . import schemas as ven_schemas
from .services import VarietyLinkService

router = APIRouter(
    tags=["Vendor Management"],
    responses={404: {"description": "Not found"}},
)


def get_link_service(db: AsyncSession = Depends(deps.get_db_session)) -> VarietyLinkService:
    return VarietyLinkService(db, authorizer=deps.authorizer)


# =============================================================================
# 1. Vendors
# =============================================================================
@router.get("/vendors", response_model=ven_schemas.VendorPage, summary="List vendors")
async def read_vendors(
    search: Optional[str] = Query(None, description="Case-insensitive name substring"),
    include_inactive: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("list", "vendor")),
):
    vendors, pagination = await ven_crud.vendor.get_page(
        db, search=search, include_inactive=include_inactive, limit=limit, offset=offset
    )
    return {"vendors": vendors, "pagination": pagination}


@router.post(
    "/vendors",
    response_model=ven_schemas.VendorRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a vendor",
)
async def create_vendor(
    vendor_in: ven_schemas.VendorCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("create", "vendor")),
):
    """
    Create a vendor.
    - **name**: vendor name (required, unique among live vendors, case-insensitive)
    - **contact_info / address / phone / email**: optional contact details
    """
    user_id = current_user.id
    return await ven_crud.vendor.create(db, obj_in=vendor_in, changed_by=user_id)


@router.get("/vendors/{vendor_id}", response_model=ven_schemas.VendorRead, summary="Get a vendor")
async def read_vendor(
    vendor_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("read", "vendor")),
):
    db_vendor = await ven_crud.vendor.get_live(db, vendor_id)
    if db_vendor is None:
        raise NotFoundError("Vendor not found")
    return db_vendor


@router.put("/vendors/{vendor_id}", response_model=ven_schemas.VendorRead, summary="Update a vendor")
async def update_vendor(
    vendor_id: uuid.UUID,
    vendor_in: ven_schemas.VendorUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("update", "vendor")),
):
    user_id = current_user.id
    return await ven_crud.vendor.update(db, id=vendor_id, obj_in=vendor_in, changed_by=user_id)


@router.delete("/vendors/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Soft-delete a vendor")
async def delete_vendor(
    vendor_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("delete", "vendor")),
):
    user_id = current_user.id
    await ven_crud.vendor.remove(db, id=vendor_id, changed_by=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. Vendor-variety links
# =============================================================================
@router.get(
    "/vendors/{vendor_id}/varieties",
    response_model=ven_schemas.VendorVarietyList,
    summary="List a vendor's varieties (all kinds)",
)
async def list_vendor_varieties(
    vendor_id: uuid.UUID,
    service: VarietyLinkService = Depends(get_link_service),
    current_user: User = Depends(deps.require_permission("list", "vendor")),
):
    return await service.list_for_vendor(vendor_id)


@router.post(
    "/vendors/{vendor_id}/varieties",
    response_model=ven_schemas.AttachResult,
    summary="Attach a variety to a vendor",
)
async def attach_vendor_variety(
    vendor_id: uuid.UUID,
    attach_in: ven_schemas.AttachRequest,
    service: VarietyLinkService = Depends(get_link_service),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Attach a variety to a vendor, creating the variety when a new name is given.
    - **variety_name_or_id**: variety UUID, or a name (trimmed, matched case-insensitively)
    - **notes**: optional link notes
    - **kind**: base_fruit (default), additive, juice or packaging

    Returns `already_exists=true` instead of an error when the link is already live.
    """
    return await service.attach(
        vendor_id,
        attach_in.variety_name_or_id,
        current_user,
        notes=attach_in.notes,
        kind=attach_in.kind,
        item_type=attach_in.item_type,
    )


@router.delete(
    "/vendors/{vendor_id}/varieties/{variety_id}",
    response_model=ven_schemas.DetachResult,
    summary="Detach a variety from a vendor",
)
async def detach_vendor_variety(
    vendor_id: uuid.UUID,
    variety_id: uuid.UUID,
    kind: VarietyKind = Query(VarietyKind.BASE_FRUIT),
    service: VarietyLinkService = Depends(get_link_service),
    current_user: User = Depends(deps.get_current_active_user),
):
    return await service.detach(vendor_id, variety_id, current_user, kind=kind)


@router.get(
    "/varieties/search",
    response_model=ven_schemas.VarietySearchResult,
    summary="Base fruit variety autocomplete",
)
async def search_varieties(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=settings.VARIETY_SEARCH_MAX_LIMIT),
    service: VarietyLinkService = Depends(get_link_service),
    current_user: User = Depends(deps.require_permission("list", "vendor")),
):
    return await service.search(q, limit=limit)
