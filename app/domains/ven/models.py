# app/domains/ven/models.py

"""
ORM models for the 'ven' domain (PostgreSQL 'ven' schema).

- ven.vendors: suppliers of fruit, juice, additives and packaging.
- ven.vendor_*_varieties: one link table per variety kind. At most one live
  link may exist per (vendor, variety); re-attaching after a detach inserts
  a new row, so soft-deleted links remain as history.
"""

import uuid
from typing import Dict, Optional, Type

from sqlalchemy import func
from sqlmodel import Field, SQLModel

from app.core.lifecycle import SoftDeleteMixin, TimestampMixin, live_unique_index
from app.domains.var.models import VarietyKind


# =============================================================================
# 1. ven.vendors
# =============================================================================
class VendorBase(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=100, description="Vendor name")
    contact_info: Optional[str] = Field(default=None, description="Free-form contact details")
    address: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = Field(default=True, description="Vendor can be used for new purchases and links")


class Vendor(VendorBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "vendors"
    __table_args__ = {'schema': 'ven'}


live_unique_index("uq_vendors_name_live", func.lower(Vendor.__table__.c.name))


# =============================================================================
# 2. ven.vendor_*_varieties (link tables)
# =============================================================================
class VendorVarietyLinkBase(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    vendor_id: uuid.UUID = Field(foreign_key="ven.vendors.id", index=True, description="Vendor ID (FK)")
    notes: Optional[str] = Field(default=None, description="Link notes, e.g. seasonal availability")


class VendorVariety(VendorVarietyLinkBase, TimestampMixin, SoftDeleteMixin, table=True):
    """Vendor <-> base fruit variety."""
    __tablename__ = "vendor_varieties"
    __table_args__ = (
        live_unique_index("uq_vendor_varieties_live", "vendor_id", "variety_id"),
        {'schema': 'ven'},
    )

    variety_id: uuid.UUID = Field(foreign_key="var.base_fruit_varieties.id", index=True)


class VendorAdditiveVariety(VendorVarietyLinkBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "vendor_additive_varieties"
    __table_args__ = (
        live_unique_index("uq_vendor_additive_varieties_live", "vendor_id", "variety_id"),
        {'schema': 'ven'},
    )

    variety_id: uuid.UUID = Field(foreign_key="var.additive_varieties.id", index=True)


class VendorJuiceVariety(VendorVarietyLinkBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "vendor_juice_varieties"
    __table_args__ = (
        live_unique_index("uq_vendor_juice_varieties_live", "vendor_id", "variety_id"),
        {'schema': 'ven'},
    )

    variety_id: uuid.UUID = Field(foreign_key="var.juice_varieties.id", index=True)


class VendorPackagingVariety(VendorVarietyLinkBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "vendor_packaging_varieties"
    __table_args__ = (
        live_unique_index("uq_vendor_packaging_varieties_live", "vendor_id", "variety_id"),
        {'schema': 'ven'},
    )

    variety_id: uuid.UUID = Field(foreign_key="var.packaging_varieties.id", index=True)


LINK_MODELS: Dict[VarietyKind, Type[SQLModel]] = {
    VarietyKind.BASE_FRUIT: VendorVariety,
    VarietyKind.ADDITIVE: VendorAdditiveVariety,
    VarietyKind.JUICE: VendorJuiceVariety,
    VarietyKind.PACKAGING: VendorPackagingVariety,
}
