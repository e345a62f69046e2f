# app/domains/prd/models.py

"""
ORM models for the 'prd' domain (PostgreSQL 'prd' schema).

Weights are stored in kilograms and volumes in liters. A press run carries the
totals of its loads once it is completed; extraction_rate is liters of juice
per kilogram of fruit.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Numeric, Uuid
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Column, Field

from app.core.lifecycle import SoftDeleteMixin, TimestampMixin, utcnow


class PressRunStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BatchStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    PACKAGED = "packaged"


class FermentationStage(str, Enum):
    EARLY = "early"
    MID = "mid"
    APPROACHING_DRY = "approaching_dry"
    TERMINAL = "terminal"
    UNKNOWN = "unknown"


# =============================================================================
# 1. prd.press_runs
# =============================================================================
class PressRun(TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "press_runs"
    __table_args__ = {'schema': 'prd'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    press_run_name: Optional[str] = Field(default=None, max_length=50, description="e.g. 2026/10/01-01")
    vendor_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ven.vendors.id")
    status: PressRunStatus = Field(default=PressRunStatus.DRAFT, index=True)
    date_completed: Optional[date] = Field(default=None, index=True)
    total_apple_weight_kg: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 3)))
    total_juice_volume_l: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 3)))
    extraction_rate: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(5, 4)))
    notes: Optional[str] = Field(default=None)


# =============================================================================
# 2. prd.press_run_loads
# =============================================================================
class PressRunLoad(TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "press_run_loads"
    __table_args__ = {'schema': 'prd'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    press_run_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("prd.press_runs.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    purchase_item_id: Optional[uuid.UUID] = Field(default=None, foreign_key="inv.basefruit_purchase_items.id")
    fruit_variety_id: uuid.UUID = Field(foreign_key="var.base_fruit_varieties.id", index=True)
    load_sequence: int = Field(default=1, ge=1)
    apple_weight_kg: Decimal = Field(sa_column=Column(Numeric(10, 3), nullable=False))
    juice_volume_l: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 3)))
    brix_measured: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(4, 2)))
    notes: Optional[str] = Field(default=None)


# =============================================================================
# 3. prd.batches
# =============================================================================
class Batch(TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "batches"
    __table_args__ = {'schema': 'prd'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    custom_name: Optional[str] = Field(default=None, max_length=100)
    batch_number: str = Field(max_length=50)
    origin_press_run_id: Optional[uuid.UUID] = Field(default=None, foreign_key="prd.press_runs.id")
    status: BatchStatus = Field(default=BatchStatus.ACTIVE, index=True)
    product_type: Optional[str] = Field(default=None, max_length=30, description="cider, perry, pommeau ...")
    fermentation_stage: Optional[FermentationStage] = Field(default=None)
    start_date: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP(timezone=True), index=True)
    end_date: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP(timezone=True))
    initial_volume_l: Decimal = Field(sa_column=Column(Numeric(10, 3), nullable=False))
    current_volume_l: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 3)))
    original_gravity: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(5, 4)))
    final_gravity: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(5, 4)))
