# app/domains/inv/crud.py

"""
CRUD operations for the 'inv' domain.

- CRUDPurchase: one generic implementation configured per purchase kind
  (juice, packaging, base fruit). Header, items and audit record are written
  in a single transaction.
- CRUDJuiceInventory / CRUDPackagingInventory: availability views over the
  live purchase items (available = total - allocated) and allocation.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import func, update
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase, transaction
from app.core.exceptions import ConflictError, NotFoundError
from app.core.lifecycle import live, utcnow
from app.core.pagination import Pagination, paginate_select
from app.domains.aud.crud import audit_writer
from app.domains.aud.models import AuditOperation
from app.domains.var import crud as var_crud
from app.domains.var.models import BaseFruitVariety, JuiceVariety, PackagingVariety, VarietyKind
from app.domains.ven import crud as ven_crud
from app.domains.ven.models import Vendor

from . import models as inv_models
from . import schemas as inv_schemas

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
GRAM = Decimal("0.001")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_available(total, allocated):
    """What is left of a purchase item. Never negative."""
    remaining = (total or 0) - (allocated or 0)
    return remaining if remaining > 0 else type(remaining)(0)


def quantity_in_kg(quantity, unit) -> Decimal:
    unit = inv_models.FruitUnit(unit or inv_models.FruitUnit.KG)
    return (Decimal(quantity) * inv_models.KG_PER_UNIT[unit]).quantize(GRAM, rounding=ROUND_HALF_UP)


# =============================================================================
# 1. Purchases
# =============================================================================
@dataclass(frozen=True)
class PurchaseConfig:
    kind: inv_models.PurchaseKind
    header_model: Type[SQLModel]
    item_model: Type[SQLModel]
    variety_kind: VarietyKind
    variety_field: str
    quantity_field: str
    price_field: str
    item_read: Type[SQLModel]
    purchase_read: Type[SQLModel]


class CRUDPurchase(CRUDBase):
    def __init__(self, config: PurchaseConfig):
        super().__init__(model=config.header_model)
        self.config = config

    @property
    def label(self) -> str:
        return f"{self.config.kind.value} purchase"

    # -------------------------------------------------------------------------
    # Item preparation
    # -------------------------------------------------------------------------
    def item_total(self, data: Dict[str, Any]) -> Decimal:
        if data.get("total_cost") is not None:
            return money(data["total_cost"])
        price = data.get(self.config.price_field)
        if price is None:
            # free fruit / samples
            return money(Decimal("0"))
        return money(Decimal(data[self.config.quantity_field]) * Decimal(price))

    def prepare_item(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data["total_cost"] = self.item_total(data)
        return data

    async def _check_varieties(self, db: AsyncSession, items: List[Dict[str, Any]]) -> None:
        crud = var_crud.variety[self.config.variety_kind]
        ids = {item[self.config.variety_field] for item in items if item.get(self.config.variety_field)}
        for variety_id in ids:
            if await crud.get_live(db, variety_id) is None:
                raise NotFoundError(crud.not_found_message)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def _item_count(self):
        item_model = self.config.item_model
        return (
            select(func.count(item_model.id))
            .where(item_model.purchase_id == self.model.id, live(item_model))
            .correlate(self.model)
            .scalar_subquery()
        )

    async def get_page(
        self, db: AsyncSession, *, vendor_id: Optional[uuid.UUID] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[inv_schemas.PurchaseSummary], Pagination]:
        statement = (
            select(self.model, Vendor.name, self._item_count().label("item_count"))
            .join(Vendor, Vendor.id == self.model.vendor_id)
            .where(live(self.model))
        )
        if vendor_id is not None:
            statement = statement.where(self.model.vendor_id == vendor_id)
        statement = statement.order_by(self.model.purchase_date.desc(), self.model.created_at.desc())

        rows, pagination = await paginate_select(db, statement, limit=limit, offset=offset, scalars=False)
        summaries = [
            inv_schemas.PurchaseSummary(**header.model_dump(), vendor_name=vendor_name, item_count=item_count)
            for header, vendor_name, item_count in rows
        ]
        return summaries, pagination

    async def get_detail(self, db: AsyncSession, id: uuid.UUID):
        row = (
            await db.execute(
                select(self.model, Vendor.name)
                .join(Vendor, Vendor.id == self.model.vendor_id)
                .where(self.model.id == id, live(self.model))
            )
        ).first()
        if row is None:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        header, vendor_name = row
        items = await self._items(db, header.id)
        return self.to_read(header, vendor_name, items)

    async def _items(self, db: AsyncSession, purchase_id: uuid.UUID) -> List[SQLModel]:
        item_model = self.config.item_model
        result = await db.execute(
            select(item_model)
            .where(item_model.purchase_id == purchase_id, live(item_model))
            .order_by(item_model.created_at)
        )
        return list(result.scalars().all())

    def to_read(self, header: SQLModel, vendor_name: Optional[str], items: List[SQLModel]):
        return self.config.purchase_read(
            **header.model_dump(),
            vendor_name=vendor_name,
            item_count=len(items),
            items=[self.config.item_read.model_validate(item.model_dump()) for item in items],
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------
    async def create(self, db: AsyncSession, *, obj_in, changed_by: Optional[int] = None):
        vendor = await ven_crud.vendor.get_active(db, obj_in.vendor_id)
        if vendor is None:
            raise NotFoundError("Vendor not found")
        vendor_name = vendor.name

        items_data = [self.prepare_item(item.model_dump()) for item in obj_in.items]
        await self._check_varieties(db, items_data)

        async with transaction(db, action=f"create {self.label}"):
            header = self.model(
                **obj_in.model_dump(exclude={"items"}),
                total_cost=money(sum((item["total_cost"] for item in items_data), Decimal("0"))),
            )
            db.add(header)
            await db.flush()

            items = []
            for data in items_data:
                item = self.config.item_model(**data, purchase_id=header.id)
                db.add(item)
                items.append(item)
            await db.flush()

            await audit_writer.append(
                db, self.model.__tablename__, header.id, AuditOperation.CREATE,
                new_data={**header.model_dump(), "item_count": len(items)},
                changed_by=changed_by, reason="Purchase recorded via API",
            )

        logger.info("Recorded %s %s for vendor %s, total %s", self.label, header.id, header.vendor_id, header.total_cost)
        return self.to_read(header, vendor_name, items)

    async def remove(self, db: AsyncSession, *, id: uuid.UUID, changed_by: Optional[int] = None) -> None:
        header = await self.get_live(db, id)
        if header is None:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        items = await self._items(db, header.id)
        old_data = {**header.model_dump(), "item_count": len(items)}

        async with transaction(db, action=f"delete {self.label}"):
            state = header.mark_deleted()
            db.add(header)
            for item in items:
                item.mark_deleted(state.at)
                db.add(item)
            await db.flush()
            await audit_writer.append(
                db, self.model.__tablename__, header.id, AuditOperation.DELETE,
                old_data=old_data, new_data={"deleted_at": state.at},
                changed_by=changed_by, reason="Purchase deleted via API",
            )
        logger.info("Soft-deleted %s %s with %d items", self.label, header.id, len(items))


class CRUDBaseFruitPurchase(CRUDPurchase):
    def prepare_item(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = super().prepare_item(data)
        data["quantity_kg"] = quantity_in_kg(data["quantity"], data.get("unit"))
        return data

    # -------------------------------------------------------------------------
    # Individual items
    # -------------------------------------------------------------------------
    def _item_statement(self):
        item, header = self.config.item_model, self.model
        return (
            select(item, header, Vendor.name, BaseFruitVariety.name)
            .join(header, header.id == item.purchase_id)
            .outerjoin(Vendor, Vendor.id == header.vendor_id)
            .outerjoin(BaseFruitVariety, BaseFruitVariety.id == item.fruit_variety_id)
            .where(live(item), live(header))
        )

    def to_item_row(self, row) -> inv_schemas.BaseFruitItemRow:
        item, header, vendor_name, variety_name = row
        return inv_schemas.BaseFruitItemRow(
            id=item.id,
            purchase_id=header.id,
            vendor_id=header.vendor_id,
            vendor_name=vendor_name,
            variety_id=item.fruit_variety_id,
            variety_name=variety_name,
            purchase_date=header.purchase_date,
            harvest_date=item.harvest_date,
            quantity=item.quantity,
            unit=item.unit,
            quantity_kg=item.quantity_kg,
            price_per_unit=item.price_per_unit,
            total_cost=item.total_cost,
            is_depleted=item.is_depleted,
            notes=item.notes,
            updated_at=item.updated_at,
        )

    async def get_items_page(
        self, db: AsyncSession, *, limit: int = 50, offset: int = 0
    ) -> Tuple[List[inv_schemas.BaseFruitItemRow], Pagination]:
        """Live fruit still on hand (not depleted), newest purchase first."""
        item, header = self.config.item_model, self.model
        statement = (
            self._item_statement()
            .where(item.is_depleted.is_(False))
            .order_by(header.purchase_date.desc(), item.created_at.desc())
        )
        rows, pagination = await paginate_select(db, statement, limit=limit, offset=offset, scalars=False)
        return [self.to_item_row(row) for row in rows], pagination

    async def on_hand_kg(self, db: AsyncSession) -> Decimal:
        """Weight of live, non-depleted fruit across live purchases."""
        item, header = self.config.item_model, self.model
        total = (
            await db.execute(
                select(func.coalesce(func.sum(item.quantity_kg), 0))
                .join(header, header.id == item.purchase_id)
                .where(live(item), live(header), item.is_depleted.is_(False))
            )
        ).scalar_one()
        return Decimal(str(total)).quantize(GRAM, rounding=ROUND_HALF_UP)

    async def _get_item_row(self, db: AsyncSession, id: uuid.UUID):
        statement = self._item_statement().where(self.config.item_model.id == id)
        row = (await db.execute(statement.execution_options(populate_existing=True))).first()
        if row is None:
            raise NotFoundError("Base fruit purchase item not found")
        return row

    async def _refresh_header_total(self, db: AsyncSession, header: SQLModel) -> None:
        item = self.config.item_model
        total = (
            await db.execute(
                select(func.coalesce(func.sum(item.total_cost), 0)).where(item.purchase_id == header.id, live(item))
            )
        ).scalar_one()
        header.total_cost = money(Decimal(total))
        db.add(header)

    async def update_item(
        self,
        db: AsyncSession,
        *,
        id: uuid.UUID,
        obj_in: inv_schemas.BaseFruitPurchaseItemUpdate,
        changed_by: Optional[int] = None,
    ) -> inv_schemas.BaseFruitItemRow:
        db_item, header, _, _ = await self._get_item_row(db, id)
        updates = obj_in.model_dump(exclude_unset=True)
        purchase_date = updates.pop("purchase_date", None)

        if updates.get("fruit_variety_id") is not None:
            await self._check_varieties(db, [updates])
        elif "fruit_variety_id" in updates:
            updates.pop("fruit_variety_id")

        old_item = db_item.model_dump()
        old_header = {"purchase_date": header.purchase_date, "total_cost": header.total_cost}

        async with transaction(db, action="update base fruit purchase item"):
            for key, value in updates.items():
                setattr(db_item, key, value)
            if {"quantity", "unit", "price_per_unit"} & updates.keys():
                price = db_item.price_per_unit or Decimal("0")
                db_item.total_cost = money(Decimal(db_item.quantity) * Decimal(price))
                db_item.quantity_kg = quantity_in_kg(db_item.quantity, db_item.unit)
            db.add(db_item)
            await db.flush()

            if purchase_date is not None:
                header.purchase_date = purchase_date
            await self._refresh_header_total(db, header)
            await db.flush()

            await audit_writer.append(
                db, self.config.item_model.__tablename__, db_item.id, AuditOperation.UPDATE,
                old_data=old_item, new_data=db_item,
                changed_by=changed_by, reason="Purchase item updated via API",
            )
            new_header = {"purchase_date": header.purchase_date, "total_cost": header.total_cost}
            if new_header != old_header:
                await audit_writer.append(
                    db, self.model.__tablename__, header.id, AuditOperation.UPDATE,
                    old_data=old_header, new_data=new_header,
                    changed_by=changed_by, reason="Purchase item updated via API",
                )

        logger.info("Updated base fruit purchase item %s, purchase total now %s", db_item.id, header.total_cost)
        return self.to_item_row(await self._get_item_row(db, id))

    async def remove_item(self, db: AsyncSession, *, id: uuid.UUID, changed_by: Optional[int] = None) -> None:
        db_item, header, _, _ = await self._get_item_row(db, id)
        old_item = db_item.model_dump()

        async with transaction(db, action="delete base fruit purchase item"):
            state = db_item.mark_deleted()
            db.add(db_item)
            await db.flush()
            await self._refresh_header_total(db, header)
            await db.flush()
            await audit_writer.append(
                db, self.config.item_model.__tablename__, db_item.id, AuditOperation.DELETE,
                old_data=old_item, new_data={"deleted_at": state.at},
                changed_by=changed_by, reason="Purchase item deleted via API",
            )
        logger.info("Soft-deleted base fruit purchase item %s of purchase %s", db_item.id, header.id)


juice_purchase = CRUDPurchase(PurchaseConfig(
    kind=inv_models.PurchaseKind.JUICE,
    header_model=inv_models.JuicePurchase,
    item_model=inv_models.JuicePurchaseItem,
    variety_kind=VarietyKind.JUICE,
    variety_field="juice_variety_id",
    quantity_field="volume_l",
    price_field="price_per_liter",
    item_read=inv_schemas.JuicePurchaseItemRead,
    purchase_read=inv_schemas.JuicePurchaseRead,
))

packaging_purchase = CRUDPurchase(PurchaseConfig(
    kind=inv_models.PurchaseKind.PACKAGING,
    header_model=inv_models.PackagingPurchase,
    item_model=inv_models.PackagingPurchaseItem,
    variety_kind=VarietyKind.PACKAGING,
    variety_field="packaging_variety_id",
    quantity_field="quantity",
    price_field="price_per_unit",
    item_read=inv_schemas.PackagingPurchaseItemRead,
    purchase_read=inv_schemas.PackagingPurchaseRead,
))

basefruit_purchase = CRUDBaseFruitPurchase(PurchaseConfig(
    kind=inv_models.PurchaseKind.BASEFRUIT,
    header_model=inv_models.BaseFruitPurchase,
    item_model=inv_models.BaseFruitPurchaseItem,
    variety_kind=VarietyKind.BASE_FRUIT,
    variety_field="fruit_variety_id",
    quantity_field="quantity",
    price_field="price_per_unit",
    item_read=inv_schemas.BaseFruitPurchaseItemRead,
    purchase_read=inv_schemas.BaseFruitPurchaseRead,
))

purchases = {
    inv_models.PurchaseKind.JUICE: juice_purchase,
    inv_models.PurchaseKind.PACKAGING: packaging_purchase,
    inv_models.PurchaseKind.BASEFRUIT: basefruit_purchase,
}


# =============================================================================
# 2. Inventory availability
# =============================================================================
class CRUDInventory:
    """
    Availability view over live purchase items of one material.

    Allocation is a single conditional UPDATE: the row only changes while the
    remaining amount still covers the request, so concurrent allocations can
    never push the allocated total past what was purchased.
    """
    item_model: Type[SQLModel]
    header_model: Type[SQLModel]
    total_field: str
    allocated_field: str
    label: str

    def _base_statement(self):
        raise NotImplementedError

    def to_read(self, row):
        raise NotImplementedError

    async def get_item(self, db: AsyncSession, id: uuid.UUID):
        statement = self._base_statement().where(self.item_model.id == id)
        # rows may have been changed by a statement the identity map did not see
        row = (await db.execute(statement.execution_options(populate_existing=True))).first()
        if row is None:
            raise NotFoundError(f"{self.label.capitalize()} inventory item not found")
        return self.to_read(row)

    async def totals(self, db: AsyncSession) -> Dict[str, Any]:
        """Purchased / allocated / available sums over live items of live purchases."""
        item = self.item_model
        total = getattr(item, self.total_field)
        allocated = getattr(item, self.allocated_field)
        live_headers = select(self.header_model.id).where(live(self.header_model))
        count, purchased, reserved = (
            await db.execute(
                select(func.count(item.id), func.coalesce(func.sum(total), 0), func.coalesce(func.sum(allocated), 0))
                .where(live(item), item.purchase_id.in_(live_headers))
            )
        ).one()
        purchased, reserved = Decimal(str(purchased)), Decimal(str(reserved))
        return {
            "items": count,
            "purchased": purchased,
            "allocated": reserved,
            "available": compute_available(purchased, reserved),
        }

    async def _reserve(self, db: AsyncSession, id: uuid.UUID, amount) -> Optional[Any]:
        """Add `amount` to the allocated column if it is still available. Returns the new total or None."""
        item = self.item_model
        total = getattr(item, self.total_field)
        allocated = getattr(item, self.allocated_field)
        live_headers = select(self.header_model.id).where(live(self.header_model))
        statement = (
            update(item)
            .where(
                item.id == id,
                live(item),
                item.purchase_id.in_(live_headers),
                total - allocated >= amount,
            )
            .values({self.allocated_field: allocated + amount, "updated_at": utcnow()})
            .returning(allocated)
            .execution_options(synchronize_session=False)
        )
        return (await db.execute(statement)).scalar_one_or_none()

    def conflict_message(self, amount, current) -> str:
        raise NotImplementedError

    async def _allocate(
        self, db: AsyncSession, *, id: uuid.UUID, amount, changed_by: Optional[int], reason: str
    ):
        async with transaction(db, action=f"allocate {self.label} inventory"):
            new_allocated = await self._reserve(db, id, amount)
            if new_allocated is None:
                current = await self.get_item(db, id)
                raise ConflictError(self.conflict_message(amount, current))
            await audit_writer.append(
                db, self.item_model.__tablename__, id, AuditOperation.UPDATE,
                old_data={self.allocated_field: new_allocated - amount},
                new_data={self.allocated_field: new_allocated},
                changed_by=changed_by, reason=reason,
            )
        logger.info("Allocated %s of %s item %s", amount, self.label, id)
        return await self.get_item(db, id)


class CRUDJuiceInventory(CRUDInventory):
    item_model = inv_models.JuicePurchaseItem
    header_model = inv_models.JuicePurchase
    total_field = "volume_l"
    allocated_field = "volume_allocated_l"
    label = "juice"

    def _base_statement(self):
        item, header = self.item_model, self.header_model
        return (
            select(item, header, Vendor.name, JuiceVariety.name)
            .join(header, header.id == item.purchase_id)
            .join(Vendor, Vendor.id == header.vendor_id)
            .outerjoin(JuiceVariety, JuiceVariety.id == item.juice_variety_id)
            .where(live(item), live(header))
        )

    def to_read(self, row) -> inv_schemas.JuiceInventoryItem:
        item, header, vendor_name, variety_name = row
        return inv_schemas.JuiceInventoryItem(
            id=item.id,
            purchase_id=header.id,
            vendor_id=header.vendor_id,
            vendor_name=vendor_name,
            purchase_date=header.purchase_date,
            variety_id=item.juice_variety_id,
            variety_name=variety_name,
            volume_l=item.volume_l,
            volume_allocated_l=item.volume_allocated_l,
            available_volume_l=compute_available(item.volume_l, item.volume_allocated_l),
            brix=item.brix,
            container_type=item.container_type,
            price_per_liter=item.price_per_liter,
        )

    def conflict_message(self, amount, current) -> str:
        return f"Requested {amount} L exceeds available volume of {current.available_volume_l} L"

    async def get_page(
        self,
        db: AsyncSession,
        *,
        vendor_id: Optional[uuid.UUID] = None,
        show_fully_allocated: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[inv_schemas.JuiceInventoryItem], Pagination]:
        item, header = self.item_model, self.header_model
        statement = self._base_statement()
        if vendor_id is not None:
            statement = statement.where(header.vendor_id == vendor_id)
        if not show_fully_allocated:
            statement = statement.where(item.volume_l - item.volume_allocated_l > 0)
        statement = statement.order_by(header.purchase_date.desc(), item.created_at.desc())

        rows, pagination = await paginate_select(db, statement, limit=limit, offset=offset, scalars=False)
        return [self.to_read(row) for row in rows], pagination

    async def allocate(
        self, db: AsyncSession, *, id: uuid.UUID, volume_l: Decimal, changed_by: Optional[int] = None, reason: Optional[str] = None
    ) -> inv_schemas.JuiceInventoryItem:
        return await self._allocate(
            db, id=id, amount=Decimal(volume_l), changed_by=changed_by, reason=reason or "Juice allocated via API"
        )


class CRUDPackagingInventory(CRUDInventory):
    item_model = inv_models.PackagingPurchaseItem
    header_model = inv_models.PackagingPurchase
    total_field = "quantity"
    allocated_field = "quantity_allocated"
    label = "packaging"

    def _base_statement(self):
        item, header = self.item_model, self.header_model
        return (
            select(item, header, Vendor.name, PackagingVariety.name, PackagingVariety.item_type)
            .join(header, header.id == item.purchase_id)
            .join(Vendor, Vendor.id == header.vendor_id)
            .outerjoin(PackagingVariety, PackagingVariety.id == item.packaging_variety_id)
            .where(live(item), live(header))
        )

    def to_read(self, row) -> inv_schemas.PackagingInventoryItem:
        item, header, vendor_name, variety_name, item_type = row
        return inv_schemas.PackagingInventoryItem(
            id=item.id,
            purchase_id=header.id,
            vendor_id=header.vendor_id,
            vendor_name=vendor_name,
            purchase_date=header.purchase_date,
            variety_id=item.packaging_variety_id,
            variety_name=variety_name,
            item_type=item_type,
            package_type=item.package_type,
            material_type=item.material_type,
            size=item.size,
            quantity=item.quantity,
            quantity_allocated=item.quantity_allocated,
            available_quantity=compute_available(item.quantity, item.quantity_allocated),
            price_per_unit=item.price_per_unit,
        )

    def conflict_message(self, amount, current) -> str:
        return f"Requested {amount} units exceeds available quantity of {current.available_quantity}"

    async def get_page(
        self,
        db: AsyncSession,
        *,
        item_type: Optional[str] = None,
        material_type: Optional[str] = None,
        show_fully_allocated: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[inv_schemas.PackagingInventoryItem], Pagination]:
        item, header = self.item_model, self.header_model
        statement = self._base_statement()
        if item_type:
            statement = statement.where(func.lower(PackagingVariety.item_type) == item_type.lower())
        if material_type:
            statement = statement.where(func.lower(item.material_type) == material_type.lower())
        if not show_fully_allocated:
            statement = statement.where(item.quantity - item.quantity_allocated > 0)
        statement = statement.order_by(header.purchase_date.desc(), item.created_at.desc())

        rows, pagination = await paginate_select(db, statement, limit=limit, offset=offset, scalars=False)
        return [self.to_read(row) for row in rows], pagination

    async def allocate(
        self, db: AsyncSession, *, id: uuid.UUID, quantity: int, changed_by: Optional[int] = None, reason: Optional[str] = None
    ) -> inv_schemas.PackagingInventoryItem:
        return await self._allocate(
            db, id=id, amount=quantity, changed_by=changed_by, reason=reason or "Packaging allocated via API"
        )


juice_inventory = CRUDJuiceInventory()
packaging_inventory = CRUDPackagingInventory()
