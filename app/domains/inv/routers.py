# app/domains/inv/routers.py

"""
API endpoints for the 'inv' domain.

- /{kind}-purchases for juice, packaging and basefruit purchases (same contract).
- /basefruit-purchase-items: base fruit on hand, item update and delete.
- /juice-inventory and /packaging-inventory availability views with allocation.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User

from . import crud as inv_crud
from . import schemas as inv_schemas
from .models import PurchaseKind

router = APIRouter(
    tags=["Purchasing & Inventory"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. Purchases (one route set per kind)
# =============================================================================
def register_purchase_routes(kind: PurchaseKind, create_schema, read_schema) -> None:
    crud = inv_crud.purchases[kind]
    prefix = f"/{kind.value}-purchases"
    label = kind.value

    @router.post(
        prefix,
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        summary=f"Record a {label} purchase",
        name=f"create_{label}_purchase",
    )
    async def create_purchase(
        purchase_in: create_schema,
        db: AsyncSession = Depends(deps.get_db_session),
        current_user: User = Depends(deps.require_permission("create", "purchase")),
    ):
        user_id = current_user.id
        return await crud.create(db, obj_in=purchase_in, changed_by=user_id)

    @router.get(
        prefix,
        response_model=inv_schemas.PurchasePage,
        summary=f"List {label} purchases",
        name=f"list_{label}_purchases",
    )
    async def list_purchases(
        vendor_id: Optional[uuid.UUID] = Query(None),
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        db: AsyncSession = Depends(deps.get_db_session),
        current_user: User = Depends(deps.require_permission("list", "purchase")),
    ):
        purchases, pagination = await crud.get_page(db, vendor_id=vendor_id, limit=limit, offset=offset)
        return {"purchases": purchases, "pagination": pagination}

    @router.get(
        f"{prefix}/{{purchase_id}}",
        response_model=read_schema,
        summary=f"Get a {label} purchase with its items",
        name=f"read_{label}_purchase",
    )
    async def read_purchase(
        purchase_id: uuid.UUID,
        db: AsyncSession = Depends(deps.get_db_session),
        current_user: User = Depends(deps.require_permission("read", "purchase")),
    ):
        return await crud.get_detail(db, purchase_id)

    @router.delete(
        f"{prefix}/{{purchase_id}}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Soft-delete a {label} purchase",
        name=f"delete_{label}_purchase",
    )
    async def delete_purchase(
        purchase_id: uuid.UUID,
        db: AsyncSession = Depends(deps.get_db_session),
        current_user: User = Depends(deps.require_permission("delete", "purchase")),
    ):
        user_id = current_user.id
        await crud.remove(db, id=purchase_id, changed_by=user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


register_purchase_routes(PurchaseKind.JUICE, inv_schemas.JuicePurchaseCreate, inv_schemas.JuicePurchaseRead)
register_purchase_routes(PurchaseKind.PACKAGING, inv_schemas.PackagingPurchaseCreate, inv_schemas.PackagingPurchaseRead)
register_purchase_routes(PurchaseKind.BASEFRUIT, inv_schemas.BaseFruitPurchaseCreate, inv_schemas.BaseFruitPurchaseRead)


# =============================================================================
# 1b. Base fruit purchase items
# =============================================================================
@router.get(
    "/basefruit-purchase-items",
    response_model=inv_schemas.BaseFruitItemPage,
    summary="List base fruit on hand",
)
async def list_basefruit_items(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("list", "purchase")),
):
    """
    Individual live, non-depleted base fruit purchase items with their vendor
    and variety, newest purchase first.
    """
    items, pagination = await inv_crud.basefruit_purchase.get_items_page(db, limit=limit, offset=offset)
    return {"items": items, "pagination": pagination}


@router.put(
    "/basefruit-purchase-items/{item_id}",
    response_model=inv_schemas.BaseFruitItemRow,
    summary="Update a base fruit purchase item",
)
async def update_basefruit_item(
    item_id: uuid.UUID,
    item_in: inv_schemas.BaseFruitPurchaseItemUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("update", "purchase")),
):
    """
    Changing quantity, unit or price recomputes the item total, its weight in
    kg and the purchase total. `purchase_date` is applied to the purchase.
    """
    user_id = current_user.id
    return await inv_crud.basefruit_purchase.update_item(db, id=item_id, obj_in=item_in, changed_by=user_id)


@router.delete(
    "/basefruit-purchase-items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft-delete a base fruit purchase item",
)
async def delete_basefruit_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("delete", "purchase")),
):
    user_id = current_user.id
    await inv_crud.basefruit_purchase.remove_item(db, id=item_id, changed_by=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. Juice inventory
# =============================================================================
@router.get("/juice-inventory", response_model=inv_schemas.JuiceInventoryPage, summary="Juice availability")
async def read_juice_inventory(
    vendor_id: Optional[uuid.UUID] = Query(None),
    show_fully_allocated: bool = Query(False, description="Include items with no volume left"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("list", "inventory")),
):
    """
    Live juice purchase items with `available_volume_l = volume_l - volume_allocated_l`.
    """
    items, pagination = await inv_crud.juice_inventory.get_page(
        db, vendor_id=vendor_id, show_fully_allocated=show_fully_allocated, limit=limit, offset=offset
    )
    return {"items": items, "pagination": pagination}


@router.post(
    "/juice-inventory/{item_id}/allocate",
    response_model=inv_schemas.JuiceInventoryItem,
    summary="Allocate juice volume",
)
async def allocate_juice(
    item_id: uuid.UUID,
    allocate_in: inv_schemas.JuiceAllocateRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("update", "inventory")),
):
    user_id = current_user.id
    return await inv_crud.juice_inventory.allocate(
        db, id=item_id, volume_l=allocate_in.volume_l, changed_by=user_id, reason=allocate_in.reason
    )


# =============================================================================
# 3. Packaging inventory
# =============================================================================
@router.get("/packaging-inventory", response_model=inv_schemas.PackagingInventoryPage, summary="Packaging availability")
async def read_packaging_inventory(
    item_type: Optional[str] = Query(None, description="Packaging variety category, e.g. bottle, can"),
    material_type: Optional[str] = Query(None),
    show_fully_allocated: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("list", "inventory")),
):
    items, pagination = await inv_crud.packaging_inventory.get_page(
        db,
        item_type=item_type,
        material_type=material_type,
        show_fully_allocated=show_fully_allocated,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "pagination": pagination}


@router.post(
    "/packaging-inventory/{item_id}/allocate",
    response_model=inv_schemas.PackagingInventoryItem,
    summary="Allocate packaging units",
)
async def allocate_packaging(
    item_id: uuid.UUID,
    allocate_in: inv_schemas.PackagingAllocateRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("update", "inventory")),
):
    user_id = current_user.id
    return await inv_crud.packaging_inventory.allocate(
        db, id=item_id, quantity=allocate_in.quantity, changed_by=user_id, reason=allocate_in.reason
    )
