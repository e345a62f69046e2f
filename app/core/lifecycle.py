# app/core/lifecycle.py

"""
Soft-delete lifecycle shared by vendors, varieties, links and purchases.

A row is either Active or Deleted(at). Queries use `live(Model)` as the single
"not soft-deleted" predicate; ORM rows expose `.lifecycle` and `.mark_deleted()`.
"""

from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional, Union

from sqlalchemy import Index, text
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Active:
    pass


@dataclass(frozen=True)
class Deleted:
    at: datetime


LifecycleState = Union[Active, Deleted]

ACTIVE = Active()


def live(model):
    """WHERE clause selecting rows of `model` that are not soft-deleted."""
    return model.deleted_at.is_(None)


class TimestampMixin(SQLModel):
    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
        description="Record creation time"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "onupdate": utcnow},
        description="Record last update time"
    )


class SoftDeleteMixin(SQLModel):
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_type=TIMESTAMP(timezone=True),
        description="Soft-delete time (NULL while the row is live)"
    )

    @property
    def lifecycle(self) -> LifecycleState:
        if self.deleted_at is None:
            return ACTIVE
        return Deleted(at=self.deleted_at)

    @property
    def is_live(self) -> bool:
        return isinstance(self.lifecycle, Active)

    def mark_deleted(self, at: Optional[datetime] = None) -> Deleted:
        at = at or utcnow()
        self.deleted_at = at
        self.updated_at = at
        return Deleted(at=at)


def live_unique_index(name: str, *expressions) -> Index:
    """Unique index over live rows only (partial: WHERE deleted_at IS NULL)."""
    return Index(
        name,
        *expressions,
        unique=True,
        postgresql_where=text("deleted_at IS NULL"),
        sqlite_where=text("deleted_at IS NULL"),
    )
