# app/domains/ven/crud.py

"""
CRUD operations for ven.vendors. Every mutation is audited in the same transaction.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase, transaction
from app.core.exceptions import ConflictError, NotFoundError
from app.core.lifecycle import live
from app.core.pagination import Pagination, paginate_select
from app.domains.aud.crud import audit_writer
from app.domains.aud.models import AuditOperation

from . import models as ven_models
from . import schemas as ven_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. ven.vendors
# =============================================================================
class CRUDVendor(CRUDBase[ven_models.Vendor, ven_schemas.VendorCreate, ven_schemas.VendorUpdate]):
    def __init__(self):
        super().__init__(model=ven_models.Vendor)

    async def get_live_by_name(self, db: AsyncSession, *, name: str) -> Optional[ven_models.Vendor]:
        statement = select(self.model).where(
            func.lower(self.model.name) == name.strip().lower(),
            live(self.model),
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_active(self, db: AsyncSession, id: uuid.UUID) -> Optional[ven_models.Vendor]:
        """Live and active vendor, or None."""
        statement = select(self.model).where(
            self.model.id == id, live(self.model), self.model.is_active.is_(True)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_page(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        include_inactive: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[ven_models.Vendor], Pagination]:
        statement = select(self.model).where(live(self.model))
        if not include_inactive:
            statement = statement.where(self.model.is_active.is_(True))
        if search:
            statement = statement.where(
                func.lower(self.model.name).contains(search.strip().lower(), autoescape=True)
            )
        statement = statement.order_by(func.lower(self.model.name))
        return await paginate_select(db, statement, limit=limit, offset=offset)

    async def create(
        self, db: AsyncSession, *, obj_in: ven_schemas.VendorCreate, changed_by: Optional[int] = None
    ) -> ven_models.Vendor:
        if await self.get_live_by_name(db, name=obj_in.name):
            raise ConflictError(f"Vendor '{obj_in.name}' already exists")
        try:
            async with transaction(db, action="create vendor"):
                db_obj = await super().create(db, obj_in=obj_in, commit=False)
                await audit_writer.append(
                    db, self.model.__tablename__, db_obj.id, AuditOperation.CREATE,
                    new_data=db_obj, changed_by=changed_by, reason="Vendor created via API",
                )
        except IntegrityError:
            raise ConflictError(f"Vendor '{obj_in.name}' already exists")
        logger.info("Created vendor %s (%s)", db_obj.id, db_obj.name)
        return db_obj

    async def update(
        self, db: AsyncSession, *, id: uuid.UUID, obj_in: ven_schemas.VendorUpdate, changed_by: Optional[int] = None
    ) -> ven_models.Vendor:
        db_obj = await self.get_live(db, id)
        if db_obj is None:
            raise NotFoundError("Vendor not found")
        if obj_in.name and obj_in.name.lower() != db_obj.name.lower():
            if await self.get_live_by_name(db, name=obj_in.name):
                raise ConflictError(f"Vendor '{obj_in.name}' already exists")

        old_data = db_obj.model_dump()
        try:
            async with transaction(db, action="update vendor"):
                db_obj = await super().update(db, db_obj=db_obj, obj_in=obj_in, commit=False)
                await audit_writer.append(
                    db, self.model.__tablename__, db_obj.id, AuditOperation.UPDATE,
                    old_data=old_data, new_data=db_obj, changed_by=changed_by, reason="Vendor updated via API",
                )
        except IntegrityError:
            raise ConflictError(f"Vendor '{obj_in.name}' already exists")
        await db.refresh(db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, id: uuid.UUID, changed_by: Optional[int] = None) -> ven_models.Vendor:
        """Soft-delete a vendor. Existing links and purchases keep referencing it."""
        db_obj = await self.get_live(db, id)
        if db_obj is None:
            raise NotFoundError("Vendor not found")

        old_data = db_obj.model_dump()
        async with transaction(db, action="delete vendor"):
            db_obj = await self.soft_delete(db, db_obj=db_obj, commit=False)
            await audit_writer.append(
                db, self.model.__tablename__, db_obj.id, AuditOperation.DELETE,
                old_data=old_data, new_data={"deleted_at": db_obj.deleted_at}, changed_by=changed_by,
                reason="Vendor deleted via API",
            )
        logger.info("Soft-deleted vendor %s", db_obj.id)
        return db_obj


vendor = CRUDVendor()
