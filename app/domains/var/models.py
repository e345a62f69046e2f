# app/domains/var/models.py

"""
ORM models for the 'var' domain (PostgreSQL 'var' schema).

Each variety kind has its own table with the same core shape (UUID id, name,
active flag, timestamps, soft-delete timestamp). Live names are unique per
kind, case-insensitively, through a functional partial unique index on
lower(name) WHERE deleted_at IS NULL.
"""

import uuid
from enum import Enum
from typing import Dict, Optional, Type

from sqlalchemy import Index, func
from sqlmodel import Field, SQLModel

from app.core.lifecycle import SoftDeleteMixin, TimestampMixin, live_unique_index


class VarietyKind(str, Enum):
    BASE_FRUIT = "base_fruit"
    ADDITIVE = "additive"
    JUICE = "juice"
    PACKAGING = "packaging"


# =============================================================================
# 0. Shared columns
# =============================================================================
class VarietyBase(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=100, description="Variety name")
    is_active: bool = Field(default=True, description="Available for selection")


def _live_name_index(model) -> Index:
    table = model.__table__
    return live_unique_index(f"uq_{table.name}_name_live", func.lower(table.c.name))


# =============================================================================
# 1. var.base_fruit_varieties
# =============================================================================
class BaseFruitVariety(VarietyBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "base_fruit_varieties"
    __table_args__ = {'schema': 'var'}

    fruit_type: Optional[str] = Field(default="apple", max_length=20, description="apple | pear | plum ...")
    variety_notes: Optional[str] = Field(default=None)


# =============================================================================
# 2. var.additive_varieties
# =============================================================================
class AdditiveVariety(VarietyBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "additive_varieties"
    __table_args__ = {'schema': 'var'}

    item_type: str = Field(max_length=50, description="Category, e.g. enzyme, nutrient, sugar")


# =============================================================================
# 3. var.juice_varieties
# =============================================================================
class JuiceVariety(VarietyBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "juice_varieties"
    __table_args__ = {'schema': 'var'}


# =============================================================================
# 4. var.packaging_varieties
# =============================================================================
class PackagingVariety(VarietyBase, TimestampMixin, SoftDeleteMixin, table=True):
    __tablename__ = "packaging_varieties"
    __table_args__ = {'schema': 'var'}

    item_type: str = Field(max_length=50, description="Category, e.g. bottle, can, keg, label")


VARIETY_MODELS: Dict[VarietyKind, Type[SQLModel]] = {
    VarietyKind.BASE_FRUIT: BaseFruitVariety,
    VarietyKind.ADDITIVE: AdditiveVariety,
    VarietyKind.JUICE: JuiceVariety,
    VarietyKind.PACKAGING: PackagingVariety,
}

# kinds whose rows carry an item_type category
CATEGORIZED_KINDS = (VarietyKind.ADDITIVE, VarietyKind.PACKAGING)

for _model in VARIETY_MODELS.values():
    _live_name_index(_model)
