# app/domains/inv/models.py

"""
ORM models for the 'inv' domain (PostgreSQL 'inv' schema).

Purchases are recorded per material: juice, packaging and base fruit. Each
purchase is a header (vendor, date, invoice, total) with one or more line
items. Juice and packaging items carry an allocated amount; what is still
available is derived per row (total minus allocated), never stored.
"""

import uuid
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, Numeric, Uuid

from app.core.lifecycle import SoftDeleteMixin, TimestampMixin


class PurchaseKind(str, Enum):
    JUICE = "juice"
    PACKAGING = "packaging"
    BASEFRUIT = "basefruit"


class FruitUnit(str, Enum):
    KG = "kg"
    LB = "lb"
    BUSHEL = "bushel"


# conversion factors to kilograms
KG_PER_UNIT = {
    FruitUnit.KG: Decimal("1"),
    FruitUnit.LB: Decimal("0.453592"),
    FruitUnit.BUSHEL: Decimal("18.14"),
}


# =============================================================================
# 0. Shared purchase header columns
# =============================================================================
class PurchaseHeaderBase(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    vendor_id: uuid.UUID = Field(foreign_key="ven.vendors.id", index=True, description="Vendor ID (FK)")
    purchase_date: date = Field(description="Purchase / delivery date")
    invoice_number: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None)


# =============================================================================
# 1. inv.juice_purchases / inv.juice_purchase_items
# =============================================================================
class JuicePurchase(PurchaseHeaderBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "juice_purchases"
    __table_args__ = {'schema': 'inv'}

    total_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))


class JuicePurchaseItem(TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "juice_purchase_items"
    __table_args__ = {'schema': 'inv'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    purchase_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("inv.juice_purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    juice_variety_id: Optional[uuid.UUID] = Field(default=None, foreign_key="var.juice_varieties.id")
    volume_l: Decimal = Field(sa_column=Column(Numeric(12, 3), nullable=False))
    volume_allocated_l: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 3), nullable=False))
    brix: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(5, 2)))
    container_type: Optional[str] = Field(default=None, max_length=50, description="tote, drum, tanker ...")
    price_per_liter: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 4)))
    total_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    notes: Optional[str] = Field(default=None)


# =============================================================================
# 2. inv.packaging_purchases / inv.packaging_purchase_items
# =============================================================================
class PackagingPurchase(PurchaseHeaderBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "packaging_purchases"
    __table_args__ = {'schema': 'inv'}

    total_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))


class PackagingPurchaseItem(TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "packaging_purchase_items"
    __table_args__ = {'schema': 'inv'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    purchase_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("inv.packaging_purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    packaging_variety_id: Optional[uuid.UUID] = Field(default=None, foreign_key="var.packaging_varieties.id")
    package_type: Optional[str] = Field(default=None, max_length=50)
    material_type: Optional[str] = Field(default=None, max_length=50)
    size: Optional[str] = Field(default=None, max_length=50, description="e.g. 750ml, 12oz, 1/6bbl")
    quantity: int = Field(ge=0)
    quantity_allocated: int = Field(default=0, ge=0)
    price_per_unit: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 4)))
    total_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    notes: Optional[str] = Field(default=None)


# =============================================================================
# 3. inv.basefruit_purchases / inv.basefruit_purchase_items
# =============================================================================
class BaseFruitPurchase(PurchaseHeaderBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "basefruit_purchases"
    __table_args__ = {'schema': 'inv'}

    total_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))


class BaseFruitPurchaseItem(TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "basefruit_purchase_items"
    __table_args__ = {'schema': 'inv'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    purchase_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("inv.basefruit_purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    fruit_variety_id: uuid.UUID = Field(foreign_key="var.base_fruit_varieties.id")
    quantity: Decimal = Field(sa_column=Column(Numeric(12, 3), nullable=False))
    unit: FruitUnit = Field(default=FruitUnit.KG)
    quantity_kg: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 3)))
    price_per_unit: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 4)))
    total_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    harvest_date: Optional[date] = Field(default=None)
    is_depleted: bool = Field(default=False)
    notes: Optional[str] = Field(default=None)
