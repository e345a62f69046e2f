# app/domains/ven/services.py

"""
Vendor-variety linking.

VarietyLinkService attaches varieties to vendors (creating the variety on
demand when it is referenced by a new name), detaches them, lists a vendor's
varieties across all four kinds and provides the variety autocomplete search.

Each mutation is a single transaction: the variety, the link and their audit
records are committed together or not at all.
"""

import logging
import re
import uuid
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.crud_base import transaction
from app.core.exceptions import InternalError, NotFoundError
from app.core.lifecycle import live
from app.core.security import RoleAuthorizer, authorizer as default_authorizer
from app.domains.aud.crud import AuditLogWriter, audit_writer as default_audit_writer
from app.domains.aud.models import AuditOperation
from app.domains.usr.models import User
from app.domains.var import crud as var_crud
from app.domains.var.models import BaseFruitVariety, CATEGORIZED_KINDS, VARIETY_MODELS, VarietyKind

from . import crud as ven_crud
from . import schemas as ven_schemas
from .models import LINK_MODELS, Vendor

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def looks_like_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


class VarietyLinkService:
    def __init__(
        self,
        db: AsyncSession,
        *,
        authorizer: Optional[RoleAuthorizer] = None,
        audit_writer: Optional[AuditLogWriter] = None,
    ):
        self.db = db
        self.authorizer = authorizer or default_authorizer
        self.audit_writer = audit_writer or default_audit_writer

    # =========================================================================
    # attach
    # =========================================================================
    async def attach(
        self,
        vendor_id: uuid.UUID,
        variety_name_or_id: str,
        acting_user: User,
        *,
        notes: Optional[str] = None,
        kind: VarietyKind = VarietyKind.BASE_FRUIT,
        item_type: Optional[str] = None,
    ) -> ven_schemas.AttachResult:
        """
        Link a variety to a vendor. Idempotent: an existing live link is
        reported with already_exists=True and nothing is written.
        """
        self.authorizer.ensure_allowed(acting_user, "update", "vendor")
        # rollbacks expire ORM state, keep plain values
        acting_user_id = acting_user.id

        # A concurrent attach of the same pair can win the live-link unique
        # index between our check and our insert; the rerun then sees its link.
        for attempt in range(2):
            try:
                return await self._attach_once(
                    vendor_id, variety_name_or_id, acting_user_id,
                    notes=notes, kind=kind, item_type=item_type,
                )
            except IntegrityError as e:
                if attempt:
                    logger.exception("Attach still conflicting after retry: vendor=%s variety=%s", vendor_id, variety_name_or_id)
                    raise InternalError("Failed to attach vendor variety") from e
                logger.warning("Unique conflict attaching %s to vendor %s, retrying", variety_name_or_id, vendor_id)

    async def _attach_once(
        self,
        vendor_id: uuid.UUID,
        variety_name_or_id: str,
        acting_user_id: Optional[int],
        *,
        notes: Optional[str],
        kind: VarietyKind,
        item_type: Optional[str],
    ) -> ven_schemas.AttachResult:
        link_model = LINK_MODELS[kind]

        async with transaction(self.db, action="attach vendor variety"):
            vendor = await ven_crud.vendor.get_active(self.db, vendor_id)
            if vendor is None:
                raise NotFoundError("Vendor not found")
            vendor_name = vendor.name

            variety = await self._resolve_variety(kind, variety_name_or_id, acting_user_id, item_type)
            variety_id, variety_name = variety.id, variety.name

            existing = await self.db.execute(
                select(link_model.id).where(
                    link_model.vendor_id == vendor_id,
                    link_model.variety_id == variety_id,
                    live(link_model),
                )
            )
            if existing.first() is not None:
                return ven_schemas.AttachResult(
                    already_exists=True,
                    variety_id=variety_id,
                    variety_name=variety_name,
                    message=f"{vendor_name} is already linked to {variety_name}",
                )

            link = link_model(vendor_id=vendor_id, variety_id=variety_id, notes=notes)
            self.db.add(link)
            await self.db.flush()
            link_id = link.id

            await self.audit_writer.append(
                self.db, link_model.__tablename__, link_id, AuditOperation.CREATE,
                new_data={
                    "vendor_id": vendor_id,
                    "variety_id": variety_id,
                    "vendor_name": vendor_name,
                    "variety_name": variety_name,
                    "notes": notes,
                },
                changed_by=acting_user_id,
                reason="Vendor-variety link created via API",
            )

        logger.info("Linked %s variety %s to vendor %s (link %s)", kind.value, variety_id, vendor_id, link_id)
        return ven_schemas.AttachResult(
            already_exists=False,
            variety_id=variety_id,
            variety_name=variety_name,
            link_id=link_id,
            message=f"{vendor_name} linked to {variety_name}",
        )

    async def _resolve_variety(
        self,
        kind: VarietyKind,
        variety_name_or_id: str,
        acting_user_id: Optional[int],
        item_type: Optional[str],
    ):
        crud = var_crud.variety[kind]

        # UUID-shaped input is always an id, never a name
        if looks_like_uuid(variety_name_or_id):
            variety = await crud.get_live(self.db, uuid.UUID(variety_name_or_id))
            if variety is None:
                raise NotFoundError(crud.not_found_message)
            return variety

        name = variety_name_or_id.strip()
        variety = await crud.find_live_by_name(self.db, name=name)
        if variety is not None:
            return variety

        data = {"name": name, "is_active": True}
        if kind in CATEGORIZED_KINDS:
            data["item_type"] = item_type
        variety = await crud.add(self.db, data=data, changed_by=acting_user_id, reason="Auto-created when linking to vendor")
        logger.info("Auto-created %s '%s' (%s)", crud.label, variety.name, variety.id)
        return variety

    # =========================================================================
    # detach
    # =========================================================================
    async def detach(
        self,
        vendor_id: uuid.UUID,
        variety_id: uuid.UUID,
        acting_user: User,
        *,
        kind: VarietyKind = VarietyKind.BASE_FRUIT,
    ) -> ven_schemas.DetachResult:
        self.authorizer.ensure_allowed(acting_user, "update", "vendor")
        acting_user_id = acting_user.id

        link_model = LINK_MODELS[kind]
        variety_model = VARIETY_MODELS[kind]

        async with transaction(self.db, action="detach vendor variety"):
            statement = (
                select(link_model, Vendor.name.label("vendor_name"), variety_model.name.label("variety_name"))
                .outerjoin(Vendor, Vendor.id == link_model.vendor_id)
                .outerjoin(variety_model, variety_model.id == link_model.variety_id)
                .where(
                    link_model.vendor_id == vendor_id,
                    link_model.variety_id == variety_id,
                    live(link_model),
                )
            )
            row = (await self.db.execute(statement)).first()
            if row is None:
                raise NotFoundError("Vendor-variety link not found")
            link, vendor_name, variety_name = row

            state = link.mark_deleted()
            self.db.add(link)
            await self.db.flush()

            await self.audit_writer.append(
                self.db, link_model.__tablename__, link.id, AuditOperation.DELETE,
                old_data={
                    "vendor_id": vendor_id,
                    "variety_id": variety_id,
                    "vendor_name": vendor_name,
                    "variety_name": variety_name,
                },
                new_data={"deleted_at": state.at},
                changed_by=acting_user_id,
                reason="Vendor-variety link removed via API",
            )

        logger.info("Detached %s variety %s from vendor %s", kind.value, variety_id, vendor_id)
        return ven_schemas.DetachResult(message=f"{vendor_name} detached from {variety_name}")

    # =========================================================================
    # list_for_vendor
    # =========================================================================
    async def list_for_vendor(self, vendor_id: uuid.UUID) -> ven_schemas.VendorVarietyList:
        """
        Every live link of the vendor across all kinds, sorted by variety name.
        Not paginated.
        """
        if await ven_crud.vendor.get_live(self.db, vendor_id) is None:
            raise NotFoundError("Vendor not found")

        entries: List[ven_schemas.VendorVarietyEntry] = []
        for kind, link_model in LINK_MODELS.items():
            variety_model = VARIETY_MODELS[kind]
            statement = (
                select(link_model, variety_model)
                .join(variety_model, variety_model.id == link_model.variety_id)
                .where(
                    link_model.vendor_id == vendor_id,
                    live(link_model),
                    live(variety_model),
                )
            )
            result = await self.db.execute(statement)
            for link, variety in result.all():
                entries.append(
                    ven_schemas.VendorVarietyEntry(
                        id=variety.id,
                        name=variety.name,
                        is_active=variety.is_active,
                        notes=link.notes,
                        linked_at=link.created_at,
                        link_id=link.id,
                        kind=kind,
                        category=getattr(variety, "item_type", None) if kind in CATEGORIZED_KINDS else None,
                    )
                )

        entries.sort(key=lambda entry: entry.name.casefold())
        return ven_schemas.VendorVarietyList(vendor_id=vendor_id, varieties=entries, count=len(entries))

    # =========================================================================
    # search
    # =========================================================================
    async def search(self, query: str, limit: int = 10) -> ven_schemas.VarietySearchResult:
        """
        Case-insensitive substring search over live, active base fruit
        varieties. LIKE wildcards in `query` match literally.
        """
        limit = max(1, min(limit, settings.VARIETY_SEARCH_MAX_LIMIT))
        statement = (
            select(BaseFruitVariety)
            .where(
                func.lower(BaseFruitVariety.name).contains(query.lower(), autoescape=True),
                live(BaseFruitVariety),
                BaseFruitVariety.is_active.is_(True),
            )
            .order_by(func.lower(BaseFruitVariety.name))
            .limit(limit)
        )
        result = await self.db.execute(statement)
        varieties = [
            ven_schemas.VarietySuggestion(id=v.id, name=v.name, fruit_type=v.fruit_type, is_active=v.is_active)
            for v in result.scalars().all()
        ]
        return ven_schemas.VarietySearchResult(varieties=varieties, count=len(varieties), search_query=query)
