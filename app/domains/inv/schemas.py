# app/domains/inv/schemas.py

"""
Pydantic schemas for the 'inv' domain (purchases and inventory availability).
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field
from sqlmodel import SQLModel

from app.core.pagination import Pagination
from .models import FruitUnit


# =============================================================================
# 1. Purchase line items
# =============================================================================
class JuicePurchaseItemCreate(SQLModel):
    juice_variety_id: Optional[uuid.UUID] = None
    volume_l: Decimal = Field(..., gt=0, description="Delivered volume in liters")
    brix: Optional[Decimal] = Field(None, ge=0, le=100)
    container_type: Optional[str] = Field(None, max_length=50)
    price_per_liter: Optional[Decimal] = Field(None, ge=0)
    total_cost: Optional[Decimal] = Field(None, ge=0, description="Defaults to volume_l x price_per_liter")
    notes: Optional[str] = None


class PackagingPurchaseItemCreate(SQLModel):
    packaging_variety_id: Optional[uuid.UUID] = None
    package_type: Optional[str] = Field(None, max_length=50)
    material_type: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=50)
    quantity: int = Field(..., gt=0)
    price_per_unit: Optional[Decimal] = Field(None, ge=0)
    total_cost: Optional[Decimal] = Field(None, ge=0, description="Defaults to quantity x price_per_unit")
    notes: Optional[str] = None


class BaseFruitPurchaseItemCreate(SQLModel):
    fruit_variety_id: uuid.UUID
    quantity: Decimal = Field(..., gt=0)
    unit: FruitUnit = FruitUnit.KG
    price_per_unit: Optional[Decimal] = Field(None, ge=0)
    total_cost: Optional[Decimal] = Field(None, ge=0, description="Defaults to quantity x price_per_unit")
    harvest_date: Optional[date] = None
    notes: Optional[str] = None


class JuicePurchaseItemRead(JuicePurchaseItemCreate):
    id: uuid.UUID
    purchase_id: uuid.UUID
    volume_allocated_l: Decimal
    total_cost: Decimal


class PackagingPurchaseItemRead(PackagingPurchaseItemCreate):
    id: uuid.UUID
    purchase_id: uuid.UUID
    quantity_allocated: int
    total_cost: Decimal


class BaseFruitPurchaseItemRead(BaseFruitPurchaseItemCreate):
    id: uuid.UUID
    purchase_id: uuid.UUID
    quantity_kg: Optional[Decimal] = None
    total_cost: Decimal
    is_depleted: bool


# =============================================================================
# 2. Purchase headers
# =============================================================================
class PurchaseCreateBase(SQLModel):
    vendor_id: uuid.UUID
    purchase_date: date
    invoice_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class JuicePurchaseCreate(PurchaseCreateBase):
    items: List[JuicePurchaseItemCreate] = Field(..., min_length=1)


class PackagingPurchaseCreate(PurchaseCreateBase):
    items: List[PackagingPurchaseItemCreate] = Field(..., min_length=1)


class BaseFruitPurchaseCreate(PurchaseCreateBase):
    items: List[BaseFruitPurchaseItemCreate] = Field(..., min_length=1)


class PurchaseSummary(PurchaseCreateBase):
    id: uuid.UUID
    vendor_name: Optional[str] = None
    total_cost: Decimal
    item_count: int = 0
    created_at: datetime


class PurchasePage(BaseModel):
    purchases: List[PurchaseSummary]
    pagination: Pagination


class JuicePurchaseRead(PurchaseSummary):
    items: List[JuicePurchaseItemRead]


class PackagingPurchaseRead(PurchaseSummary):
    items: List[PackagingPurchaseItemRead]


class BaseFruitPurchaseRead(PurchaseSummary):
    items: List[BaseFruitPurchaseItemRead]


# =============================================================================
# 3. Inventory availability
# =============================================================================
class InventoryItemBase(BaseModel):
    id: uuid.UUID
    purchase_id: uuid.UUID
    vendor_id: uuid.UUID
    vendor_name: Optional[str] = None
    purchase_date: date
    variety_id: Optional[uuid.UUID] = None
    variety_name: Optional[str] = None


class JuiceInventoryItem(InventoryItemBase):
    volume_l: Decimal
    volume_allocated_l: Decimal
    available_volume_l: Decimal
    brix: Optional[Decimal] = None
    container_type: Optional[str] = None
    price_per_liter: Optional[Decimal] = None


class PackagingInventoryItem(InventoryItemBase):
    item_type: Optional[str] = None
    package_type: Optional[str] = None
    material_type: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    quantity_allocated: int
    available_quantity: int
    price_per_unit: Optional[Decimal] = None


class JuiceInventoryPage(BaseModel):
    items: List[JuiceInventoryItem]
    pagination: Pagination


class PackagingInventoryPage(BaseModel):
    items: List[PackagingInventoryItem]
    pagination: Pagination


class JuiceAllocateRequest(BaseModel):
    volume_l: Decimal = Field(..., gt=0)
    reason: Optional[str] = None


class PackagingAllocateRequest(BaseModel):
    quantity: int = Field(..., gt=0)
    reason: Optional[str] = None


# =============================================================================
# 4. Base fruit purchase items
# =============================================================================
class BaseFruitItemRow(BaseModel):
    id: uuid.UUID
    purchase_id: uuid.UUID
    vendor_id: uuid.UUID
    vendor_name: Optional[str] = None
    variety_id: uuid.UUID
    variety_name: Optional[str] = None
    purchase_date: date
    harvest_date: Optional[date] = None
    quantity: Decimal
    unit: FruitUnit
    quantity_kg: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    total_cost: Decimal
    is_depleted: bool
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None


class BaseFruitItemPage(BaseModel):
    items: List[BaseFruitItemRow]
    pagination: Pagination


class BaseFruitPurchaseItemUpdate(BaseModel):
    """Only the fields sent are changed; purchase_date moves the whole purchase."""
    fruit_variety_id: Optional[uuid.UUID] = None
    quantity: Optional[Decimal] = Field(None, gt=0)
    unit: Optional[FruitUnit] = None
    price_per_unit: Optional[Decimal] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    harvest_date: Optional[date] = None
    notes: Optional[str] = None
    is_depleted: Optional[bool] = None
