# app/core/crud_base.py

"""
Base class for common async CRUD operations, plus the transaction helper
every multi-statement mutation runs in.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Generic, List, Optional, Type, TypeVar, Any, Dict
from datetime import date, timedelta

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

from app.core.exceptions import InternalError
from app.core.lifecycle import live

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


@asynccontextmanager
async def transaction(db: AsyncSession, *, action: str) -> AsyncGenerator[AsyncSession, None]:
    """
    Unit of work: commit once at the end, roll back everything on failure.

    HTTP/domain errors and IntegrityError propagate unchanged (callers map the
    latter); anything else is logged and re-raised as InternalError.
    """
    try:
        yield db
        await db.commit()
    except (HTTPException, IntegrityError):
        await db.rollback()
        raise
    except Exception as e:
        await db.rollback()
        logger.exception("Unexpected error while trying to %s", action)
        raise InternalError(f"Failed to {action}") from e


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Shared CRUD operations. Models with a `deleted_at` column are treated as
    soft-deletable: `get_live` hides deleted rows and `soft_delete` only stamps them.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    @property
    def soft_deletable(self) -> bool:
        return hasattr(self.model, "deleted_at")

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        return await db.get(self.model, id)

    async def get_live(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Single row by primary key, None if missing or soft-deleted."""
        statement = select(self.model).where(self.model.id == id)
        if self.soft_deletable:
            statement = statement.where(live(self.model))
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100, **kwargs: Any
    ) -> List[ModelType]:
        query = select(self.model).offset(skip).limit(limit)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,  # {"attribute_name": "value"}
        date_range_field: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        order_by_field: Optional[str] = None,
        order_desc: bool = True,
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        """
        Multi-row query with attribute filters and an inclusive date range.
        """
        query = select(self.model)
        conditions = []

        # 1. attribute filters
        if filters:
            for attribute, value in filters.items():
                if hasattr(self.model, attribute):
                    conditions.append(getattr(self.model, attribute) == value)
                else:
                    logger.warning("Model %s has no attribute '%s'", self.model.__name__, attribute)

        # 2. date range (end_date inclusive)
        if date_range_field and hasattr(self.model, date_range_field):
            date_field = getattr(self.model, date_range_field)
            if start_date is not None:
                conditions.append(date_field >= start_date)
            if end_date is not None:
                conditions.append(date_field < end_date + timedelta(days=1))

        if conditions:
            query = query.where(*conditions)

        # 3. ordering
        if order_by_field and hasattr(self.model, order_by_field):
            column = getattr(self.model, order_by_field)
            query = query.order_by(column.desc() if order_desc else column)

        query = query.offset(skip).limit(limit)

        result = await db.execute(query)
        return result.scalars().all()

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType, commit: bool = True) -> ModelType:
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: UpdateSchemaType, commit: bool = True
    ) -> ModelType:
        update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def soft_delete(self, db: AsyncSession, *, db_obj: ModelType, commit: bool = True) -> ModelType:
        db_obj.mark_deleted()
        db.add(db_obj)
        if commit:
            await db.commit()
        else:
            await db.flush()
        return db_obj
