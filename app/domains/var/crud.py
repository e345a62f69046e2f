# app/domains/var/crud.py

"""
CRUD operations for the 'var' domain.

A single CRUDVariety class is instantiated once per kind. Every mutation runs
in one transaction together with its audit record.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase, transaction
from app.core.exceptions import ConflictError, NotFoundError
from app.core.lifecycle import live
from app.core.pagination import Pagination, apply_sorting, paginate_select
from app.domains.aud.crud import audit_writer
from app.domains.aud.models import AuditOperation

from . import schemas as var_schemas
from .models import CATEGORIZED_KINDS, VARIETY_MODELS, VarietyKind

logger = logging.getLogger(__name__)

DEFAULT_ITEM_TYPE = "other"

LABELS = {
    VarietyKind.BASE_FRUIT: "fruit variety",
    VarietyKind.ADDITIVE: "additive variety",
    VarietyKind.JUICE: "juice variety",
    VarietyKind.PACKAGING: "packaging variety",
}


def to_read(kind: VarietyKind, obj: SQLModel) -> var_schemas.VarietyRead:
    return var_schemas.VarietyRead(
        id=obj.id,
        kind=kind,
        name=obj.name,
        is_active=obj.is_active,
        fruit_type=getattr(obj, "fruit_type", None),
        variety_notes=getattr(obj, "variety_notes", None),
        item_type=getattr(obj, "item_type", None),
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


class CRUDVariety(CRUDBase):
    def __init__(self, kind: VarietyKind):
        super().__init__(model=VARIETY_MODELS[kind])
        self.kind = kind

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    @property
    def label(self) -> str:
        return LABELS[self.kind]

    @property
    def not_found_message(self) -> str:
        return f"{self.label.capitalize()} not found"

    def _columns(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Keep only the keys this kind actually has."""
        return {k: v for k, v in data.items() if k in self.model.model_fields}

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    async def find_live_by_name(self, db: AsyncSession, *, name: str) -> Optional[SQLModel]:
        """Case-insensitive exact match among live rows."""
        statement = select(self.model).where(
            func.lower(self.model.name) == name.strip().lower(),
            live(self.model),
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_page(
        self, db: AsyncSession, *, params: var_schemas.VarietyListParams
    ) -> Tuple[List[SQLModel], Pagination]:
        statement = select(self.model).where(live(self.model))
        if not params.include_inactive:
            statement = statement.where(self.model.is_active.is_(True))
        if params.search:
            statement = statement.where(
                func.lower(self.model.name).contains(params.search.strip().lower(), autoescape=True)
            )
        if params.sort_by == "name":
            statement = apply_sorting(statement, func.lower(self.model.name), params.sort_order)
        else:
            statement = apply_sorting(statement, self.model.created_at, params.sort_order)
        return await paginate_select(db, statement, limit=params.limit, offset=params.offset)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------
    async def add(
        self, db: AsyncSession, *, data: Dict[str, Any], changed_by: Optional[int], reason: str
    ) -> SQLModel:
        """
        Insert a variety and its audit record into the current transaction.
        Does not commit; used by create() and by vendor linking.
        """
        values = self._columns(data)
        if self.kind in CATEGORIZED_KINDS and not values.get("item_type"):
            values["item_type"] = DEFAULT_ITEM_TYPE
        db_obj = self.model(**values)
        db.add(db_obj)
        await db.flush()
        await audit_writer.append(
            db, self.table_name, db_obj.id, AuditOperation.CREATE,
            new_data=db_obj, changed_by=changed_by, reason=reason,
        )
        return db_obj

    async def create(
        self, db: AsyncSession, *, obj_in: var_schemas.VarietyCreate, changed_by: Optional[int] = None
    ) -> SQLModel:
        if await self.find_live_by_name(db, name=obj_in.name):
            raise ConflictError(f"A {self.label} named '{obj_in.name}' already exists")
        try:
            async with transaction(db, action=f"create {self.label}"):
                db_obj = await self.add(
                    db, data=obj_in.model_dump(), changed_by=changed_by, reason="Variety created via API"
                )
        except IntegrityError:
            # concurrent insert of the same name won the unique index
            raise ConflictError(f"A {self.label} named '{obj_in.name}' already exists")
        logger.info("Created %s %s (%s)", self.label, db_obj.id, db_obj.name)
        return db_obj

    async def update(
        self, db: AsyncSession, *, id: uuid.UUID, obj_in: var_schemas.VarietyUpdate, changed_by: Optional[int] = None
    ) -> SQLModel:
        db_obj = await self.get_live(db, id)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)

        update_data = self._columns(obj_in.model_dump(exclude_unset=True))
        if "name" in update_data and update_data["name"].lower() != db_obj.name.lower():
            if await self.find_live_by_name(db, name=update_data["name"]):
                raise ConflictError(f"A {self.label} named '{update_data['name']}' already exists")

        old_data = db_obj.model_dump()
        try:
            async with transaction(db, action=f"update {self.label}"):
                for key, value in update_data.items():
                    setattr(db_obj, key, value)
                db.add(db_obj)
                await db.flush()
                await audit_writer.append(
                    db, self.table_name, db_obj.id, AuditOperation.UPDATE,
                    old_data=old_data, new_data=db_obj, changed_by=changed_by, reason="Variety updated via API",
                )
        except IntegrityError:
            raise ConflictError(f"A {self.label} named '{update_data.get('name')}' already exists")
        await db.refresh(db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, id: uuid.UUID, changed_by: Optional[int] = None) -> SQLModel:
        db_obj = await self.get_live(db, id)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)

        old_data = db_obj.model_dump()
        async with transaction(db, action=f"delete {self.label}"):
            state = db_obj.mark_deleted()
            db.add(db_obj)
            await db.flush()
            await audit_writer.append(
                db, self.table_name, db_obj.id, AuditOperation.DELETE,
                old_data=old_data, new_data={"deleted_at": state.at}, changed_by=changed_by,
                reason="Variety deleted via API",
            )
        logger.info("Soft-deleted %s %s", self.label, db_obj.id)
        return db_obj


variety = {kind: CRUDVariety(kind) for kind in VarietyKind}
