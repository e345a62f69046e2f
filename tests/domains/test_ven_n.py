# tests/domains/test_ven_n.py

"""
Integration tests for the 'ven' domain.

- Vendor management:
    - `POST /ven/vendors`, `GET /ven/vendors`, `GET/PUT/DELETE /ven/vendors/{id}`
- Vendor-variety linking (VarietyLinkService and its endpoints):
    - `POST /ven/vendors/{vendor_id}/varieties` (attach, idempotent, auto-create)
    - `DELETE /ven/vendors/{vendor_id}/varieties/{variety_id}` (detach)
    - `GET /ven/vendors/{vendor_id}/varieties` (all kinds, sorted by name)
    - `GET /ven/varieties/search` (base fruit autocomplete)

Role checks cover ADMIN, OPERATOR, VIEWER and unauthenticated callers.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import ForbiddenError, InternalError, NotFoundError
from app.domains.aud.crud import AuditLogWriter
from app.domains.aud.models import AuditLog, AuditOperation
from app.domains.usr import models as usr_models
from app.domains.var.models import AdditiveVariety, BaseFruitVariety, VarietyKind
from app.domains.ven import models as ven_models
from app.domains.ven.services import VarietyLinkService, looks_like_uuid


async def _audit_rows(db: AsyncSession, table_name: str = None):
    statement = select(AuditLog).order_by(AuditLog.changed_at)
    if table_name:
        statement = statement.where(AuditLog.table_name == table_name)
    return list((await db.execute(statement)).scalars().all())


async def _links(db: AsyncSession, vendor_id: uuid.UUID, variety_id: uuid.UUID):
    statement = select(ven_models.VendorVariety).where(
        ven_models.VendorVariety.vendor_id == vendor_id,
        ven_models.VendorVariety.variety_id == variety_id,
    )
    return list((await db.execute(statement)).scalars().all())


# =============================================================================
# 1. Vendors
# =============================================================================
@pytest.mark.asyncio
async def test_create_vendor_success_admin(admin_client: AsyncClient, db_session: AsyncSession):
    """
    ADMIN creates a vendor; an audit 'create' record is written with it.
    """
    print("\n--- Running test_create_vendor_success_admin ---")
    vendor_data = {"name": "  Valley Fruit Co  ", "phone": "555-0199", "email": "orders@valleyfruit.com"}
    response = await admin_client.post("/api/v1/ven/vendors", json=vendor_data)
    print(f"Response status code: {response.status_code}")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Valley Fruit Co"
    assert created["is_active"] is True

    audits = await _audit_rows(db_session, "vendors")
    assert len(audits) == 1
    assert audits[0].operation == AuditOperation.CREATE
    assert audits[0].record_id == created["id"]
    assert audits[0].new_data["name"] == "Valley Fruit Co"
    print("test_create_vendor_success_admin passed.")


@pytest.mark.asyncio
async def test_create_vendor_duplicate_name_case_insensitive(admin_client: AsyncClient, test_vendor: ven_models.Vendor):
    """
    A live vendor with the same name in another case answers 409.
    """
    response = await admin_client.post("/api/v1/ven/vendors", json={"name": "HILLSIDE ORCHARDS"})
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 409
    assert response.json()["detail"] == "Vendor 'HILLSIDE ORCHARDS' already exists"


@pytest.mark.asyncio
async def test_deleted_vendor_name_can_be_reused(admin_client: AsyncClient, test_vendor: ven_models.Vendor):
    """
    Soft-deleting a vendor frees its name for a new live vendor.
    """
    response = await admin_client.delete(f"/api/v1/ven/vendors/{test_vendor.id}")
    assert response.status_code == 204

    response = await admin_client.get(f"/api/v1/ven/vendors/{test_vendor.id}")
    assert response.status_code == 404

    response = await admin_client.post("/api/v1/ven/vendors", json={"name": "Hillside Orchards"})
    assert response.status_code == 201
    assert response.json()["id"] != str(test_vendor.id)


@pytest.mark.asyncio
async def test_list_vendors_search_and_pagination(viewer_client: AsyncClient, vendor_factory):
    """
    Listing hides inactive vendors by default, searches by substring and paginates.
    """
    print("\n--- Running test_list_vendors_search_and_pagination ---")
    await vendor_factory("Apple Acres")
    await vendor_factory("Bottle Barn")
    await vendor_factory("Cork & Cap")
    await vendor_factory("Dormant Farms", is_active=False)

    response = await viewer_client.get("/api/v1/ven/vendors", params={"limit": 2, "offset": 0})
    assert response.status_code == 200
    page = response.json()
    assert [v["name"] for v in page["vendors"]] == ["Apple Acres", "Bottle Barn"]
    assert page["pagination"] == {"total": 3, "limit": 2, "offset": 0, "has_more": True}

    response = await viewer_client.get("/api/v1/ven/vendors", params={"include_inactive": True})
    assert response.json()["pagination"]["total"] == 4

    response = await viewer_client.get("/api/v1/ven/vendors", params={"search": "BARN"})
    assert [v["name"] for v in response.json()["vendors"]] == ["Bottle Barn"]
    print("test_list_vendors_search_and_pagination passed.")


@pytest.mark.asyncio
async def test_update_vendor_operator(operator_client: AsyncClient, test_vendor: ven_models.Vendor, db_session: AsyncSession):
    """
    OPERATOR updates a vendor; old and new values are audited.
    """
    response = await operator_client.put(
        f"/api/v1/ven/vendors/{test_vendor.id}", json={"phone": "555-0123", "address": "12 Orchard Lane"}
    )
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 200
    assert response.json()["phone"] == "555-0123"
    assert response.json()["name"] == "Hillside Orchards"

    audits = await _audit_rows(db_session, "vendors")
    assert [a.operation for a in audits] == [AuditOperation.UPDATE]
    assert audits[0].old_data["phone"] == "555-0100"
    assert audits[0].new_data["phone"] == "555-0123"


@pytest.mark.asyncio
async def test_delete_vendor_operator_forbidden(operator_client: AsyncClient, test_vendor: ven_models.Vendor):
    """
    OPERATOR cannot delete vendors.
    """
    response = await operator_client.delete(f"/api/v1/ven/vendors/{test_vendor.id}")
    assert response.status_code == 403
    assert response.json()["detail"] == "Not enough permissions to delete vendor."


@pytest.mark.asyncio
async def test_update_vendor_viewer_forbidden(viewer_client: AsyncClient, test_vendor: ven_models.Vendor):
    """
    VIEWER cannot modify vendors.
    """
    response = await viewer_client.put(f"/api/v1/ven/vendors/{test_vendor.id}", json={"phone": "1"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_vendor_unauthenticated(client: AsyncClient):
    response = await client.post("/api/v1/ven/vendors", json={"name": "Nobody"})
    assert response.status_code == 401


# =============================================================================
# 2. VarietyLinkService
# =============================================================================
def test_looks_like_uuid():
    assert looks_like_uuid(str(uuid.uuid4()))
    assert looks_like_uuid(str(uuid.uuid4()).upper())
    assert not looks_like_uuid("Gala")
    assert not looks_like_uuid("1234")


@pytest.mark.asyncio
async def test_attach_twice_is_idempotent(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    """
    Two attaches of the same name leave exactly one live link; the second
    reports already_exists.
    """
    print("\n--- Running test_attach_twice_is_idempotent ---")
    service = VarietyLinkService(db_session)

    first = await service.attach(test_vendor.id, "Gala", test_operator_user)
    second = await service.attach(test_vendor.id, "Gala", test_operator_user)
    print(f"First: {first}\nSecond: {second}")

    assert first.already_exists is False
    assert first.link_id is not None
    assert second.already_exists is True
    assert second.variety_id == first.variety_id
    assert second.message == "Hillside Orchards is already linked to Gala"

    links = await _links(db_session, test_vendor.id, first.variety_id)
    assert len(links) == 1
    assert links[0].deleted_at is None
    print("test_attach_twice_is_idempotent passed.")


@pytest.mark.asyncio
async def test_attach_detach_attach_keeps_history(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    """
    Re-attaching after a detach inserts a new row instead of reviving the old one.
    """
    service = VarietyLinkService(db_session)

    first = await service.attach(test_vendor.id, "Kingston Black", test_operator_user)
    detached = await service.detach(test_vendor.id, first.variety_id, test_operator_user)
    again = await service.attach(test_vendor.id, "Kingston Black", test_operator_user)

    assert detached.message == "Hillside Orchards detached from Kingston Black"
    assert again.already_exists is False
    assert again.link_id != first.link_id

    links = await _links(db_session, test_vendor.id, first.variety_id)
    assert len(links) == 2
    deleted = [link for link in links if link.deleted_at is not None]
    live_links = [link for link in links if link.deleted_at is None]
    assert [link.id for link in deleted] == [first.link_id]
    assert [link.id for link in live_links] == [again.link_id]


@pytest.mark.asyncio
async def test_attach_new_name_creates_variety_and_audits(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    """
    Attaching an unknown name creates an active variety, audited before the link.
    """
    print("\n--- Running test_attach_new_name_creates_variety_and_audits ---")
    service = VarietyLinkService(db_session)

    result = await service.attach(test_vendor.id, "  Gala ", test_operator_user, notes="early season")

    variety = (await db_session.execute(select(BaseFruitVariety).where(BaseFruitVariety.id == result.variety_id))).scalars().one()
    assert variety.name == "Gala"
    assert variety.is_active is True
    assert variety.deleted_at is None

    audits = await _audit_rows(db_session)
    assert [(a.table_name, a.operation) for a in audits] == [
        ("base_fruit_varieties", AuditOperation.CREATE),
        ("vendor_varieties", AuditOperation.CREATE),
    ]
    variety_audit, link_audit = audits
    assert variety_audit.record_id == str(variety.id)
    assert variety_audit.reason == "Auto-created when linking to vendor"
    assert variety_audit.changed_by == test_operator_user.id
    assert link_audit.record_id == str(result.link_id)
    assert link_audit.new_data["vendor_name"] == "Hillside Orchards"
    assert link_audit.new_data["variety_name"] == "Gala"
    assert link_audit.new_data["notes"] == "early season"
    assert link_audit.reason == "Vendor-variety link created via API"
    print("test_attach_new_name_creates_variety_and_audits passed.")


@pytest.mark.asyncio
async def test_attach_matches_existing_name_case_insensitively(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User, variety_factory
):
    """
    An existing live variety is reused regardless of case and surrounding spaces.
    """
    gala = await variety_factory("Gala")
    service = VarietyLinkService(db_session)

    result = await service.attach(test_vendor.id, " gALA ", test_operator_user)

    assert result.variety_id == gala.id
    assert result.variety_name == "Gala"
    count = (await db_session.execute(select(func.count()).select_from(BaseFruitVariety))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_detach_without_live_link_writes_nothing(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User, variety_factory
):
    """
    Detaching a pair with no live link fails with NotFound and leaves the audit trail untouched.
    """
    gala = await variety_factory("Gala")
    service = VarietyLinkService(db_session)

    with pytest.raises(NotFoundError) as exc_info:
        await service.detach(test_vendor.id, gala.id, test_operator_user)

    assert exc_info.value.detail == "Vendor-variety link not found"
    assert await _audit_rows(db_session) == []


@pytest.mark.asyncio
async def test_search_filters_and_orders(db_session: AsyncSession, variety_factory):
    """
    Search returns live, active varieties containing the query in any case, by name.
    """
    print("\n--- Running test_search_filters_and_orders ---")
    await variety_factory("Gala")
    await variety_factory("Golden Delicious")
    await variety_factory("Fuji")
    await variety_factory("Galarina", is_active=False)
    retired = await variety_factory("Royal Gala")
    retired.mark_deleted()
    db_session.add(retired)
    await db_session.commit()

    service = VarietyLinkService(db_session)
    result = await service.search("gal", limit=10)
    print(f"Search result: {result}")

    assert [v.name for v in result.varieties] == ["Gala"]
    assert result.count == 1
    assert result.search_query == "gal"

    result = await service.search("GOLDEN")
    assert [v.name for v in result.varieties] == ["Golden Delicious"]
    print("test_search_filters_and_orders passed.")


@pytest.mark.asyncio
async def test_search_limit_and_literal_wildcards(db_session: AsyncSession, variety_factory):
    """
    Results are capped by limit, sorted ascending, and '%' matches literally.
    """
    for name in ["Pippin C", "Pippin A", "Pippin B"]:
        await variety_factory(name)

    service = VarietyLinkService(db_session)
    result = await service.search("pippin", limit=2)
    assert [v.name for v in result.varieties] == ["Pippin A", "Pippin B"]

    result = await service.search("%")
    assert result.varieties == []


@pytest.mark.asyncio
async def test_list_for_vendor_merges_kinds(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    """
    One base fruit and one additive link come back together, sorted by name and tagged by kind.
    """
    print("\n--- Running test_list_for_vendor_merges_kinds ---")
    service = VarietyLinkService(db_session)
    await service.attach(test_vendor.id, "Yarlington Mill", test_operator_user)
    await service.attach(
        test_vendor.id, "Pectic Enzyme", test_operator_user, kind=VarietyKind.ADDITIVE, item_type="enzyme"
    )

    listing = await service.list_for_vendor(test_vendor.id)
    print(f"Listing: {listing}")

    assert listing.count == 2
    assert [(e.name, e.kind) for e in listing.varieties] == [
        ("Pectic Enzyme", VarietyKind.ADDITIVE),
        ("Yarlington Mill", VarietyKind.BASE_FRUIT),
    ]
    assert listing.varieties[0].category == "enzyme"
    assert listing.varieties[1].category is None

    additive = (await db_session.execute(select(AdditiveVariety))).scalars().one()
    assert additive.item_type == "enzyme"
    print("test_list_for_vendor_merges_kinds passed.")


@pytest.mark.asyncio
async def test_list_for_vendor_hides_detached_links(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    service = VarietyLinkService(db_session)
    kept = await service.attach(test_vendor.id, "Dabinett", test_operator_user)
    dropped = await service.attach(test_vendor.id, "Ashmead's Kernel", test_operator_user)
    await service.detach(test_vendor.id, dropped.variety_id, test_operator_user)

    listing = await service.list_for_vendor(test_vendor.id)
    assert [e.id for e in listing.varieties] == [kept.variety_id]


@pytest.mark.asyncio
async def test_list_for_unknown_vendor(db_session: AsyncSession, random_uuid: uuid.UUID):
    service = VarietyLinkService(db_session)
    with pytest.raises(NotFoundError):
        await service.list_for_vendor(random_uuid)


@pytest.mark.asyncio
async def test_attach_unknown_uuid_does_not_fall_back_to_name(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User, variety_factory
):
    """
    A UUID-shaped value is only ever an id: a variety whose name is that very
    string is not matched, and nothing is created or linked.
    """
    ghost_id = str(uuid.uuid4())
    await variety_factory(ghost_id)
    service = VarietyLinkService(db_session)

    with pytest.raises(NotFoundError) as exc_info:
        await service.attach(test_vendor.id, ghost_id, test_operator_user)

    assert exc_info.value.detail == "Fruit variety not found"
    count = (await db_session.execute(select(func.count()).select_from(BaseFruitVariety))).scalar_one()
    assert count == 1
    links = (await db_session.execute(select(ven_models.VendorVariety))).scalars().all()
    assert links == []
    assert await _audit_rows(db_session) == []


@pytest.mark.asyncio
async def test_attach_by_id(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User, variety_factory
):
    gala = await variety_factory("Gala")
    service = VarietyLinkService(db_session)

    result = await service.attach(test_vendor.id, str(gala.id), test_operator_user)

    assert result.variety_id == gala.id
    assert result.message == "Hillside Orchards linked to Gala"


@pytest.mark.asyncio
async def test_attach_to_inactive_vendor(
    db_session: AsyncSession, vendor_factory, test_operator_user: usr_models.User
):
    """
    Inactive vendors cannot receive new links, and no variety is auto-created.
    """
    dormant = await vendor_factory("Dormant Farms", is_active=False)
    service = VarietyLinkService(db_session)

    with pytest.raises(NotFoundError) as exc_info:
        await service.attach(dormant.id, "Gala", test_operator_user)

    assert exc_info.value.detail == "Vendor not found"
    count = (await db_session.execute(select(func.count()).select_from(BaseFruitVariety))).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_attach_and_detach_require_update_permission(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_viewer_user: usr_models.User, variety_factory
):
    gala = await variety_factory("Gala")
    service = VarietyLinkService(db_session)

    with pytest.raises(ForbiddenError):
        await service.attach(test_vendor.id, "Gala", test_viewer_user)
    with pytest.raises(ForbiddenError):
        await service.detach(test_vendor.id, gala.id, test_viewer_user)
    assert await _audit_rows(db_session) == []


class _RacingLinkService(VarietyLinkService):
    """Loses the unique-index race a fixed number of times before delegating."""

    def __init__(self, db, conflicts: int):
        super().__init__(db)
        self.conflicts = conflicts
        self.calls = 0

    async def _attach_once(self, *args, **kwargs):
        self.calls += 1
        if self.calls <= self.conflicts:
            raise IntegrityError("INSERT INTO vendor_varieties", {}, Exception("duplicate key value"))
        return await super()._attach_once(*args, **kwargs)


@pytest.mark.asyncio
async def test_attach_retries_once_after_unique_conflict(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    service = _RacingLinkService(db_session, conflicts=1)

    result = await service.attach(test_vendor.id, "Gala", test_operator_user)

    assert service.calls == 2
    assert result.already_exists is False


@pytest.mark.asyncio
async def test_attach_gives_up_after_second_conflict(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    service = _RacingLinkService(db_session, conflicts=2)

    with pytest.raises(InternalError) as exc_info:
        await service.attach(test_vendor.id, "Gala", test_operator_user)

    assert exc_info.value.status_code == 500
    assert service.calls == 2


@pytest.mark.asyncio
async def test_live_link_unique_index(db_session: AsyncSession, test_vendor: ven_models.Vendor, variety_factory):
    """
    A second live link for the same pair is rejected by the database; once the
    first is soft-deleted the pair can be linked again.
    """
    gala = await variety_factory("Gala")
    # rollbacks expire ORM state, keep plain values
    vendor_id, variety_id = test_vendor.id, gala.id

    first = ven_models.VendorVariety(vendor_id=vendor_id, variety_id=variety_id)
    db_session.add(first)
    await db_session.commit()
    first_id = first.id

    db_session.add(ven_models.VendorVariety(vendor_id=vendor_id, variety_id=variety_id))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()

    first = await db_session.get(ven_models.VendorVariety, first_id)
    first.mark_deleted()
    db_session.add(first)
    await db_session.commit()

    db_session.add(ven_models.VendorVariety(vendor_id=vendor_id, variety_id=variety_id))
    await db_session.commit()

    links = (
        await db_session.execute(
            select(ven_models.VendorVariety).where(ven_models.VendorVariety.vendor_id == vendor_id)
        )
    ).scalars().all()
    assert len(links) == 2
    assert len([link for link in links if link.deleted_at is None]) == 1


class _FailingLinkAudit(AuditLogWriter):
    """Fails when the link record is audited, after the variety was created."""

    async def append(self, db, table_name, *args, **kwargs):
        if table_name == ven_models.VendorVariety.__tablename__:
            raise RuntimeError("audit store unavailable")
        return await super().append(db, table_name, *args, **kwargs)


@pytest.mark.asyncio
async def test_attach_failure_rolls_back_auto_created_variety(
    db_session: AsyncSession, test_vendor: ven_models.Vendor, test_operator_user: usr_models.User
):
    vendor_id = test_vendor.id
    service = VarietyLinkService(db_session, audit_writer=_FailingLinkAudit())

    with pytest.raises(InternalError) as exc_info:
        await service.attach(vendor_id, "Jonagold", test_operator_user)
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to attach vendor variety"

    varieties = (
        await db_session.execute(select(BaseFruitVariety).where(BaseFruitVariety.name == "Jonagold"))
    ).scalars().all()
    assert varieties == []
    links = (
        await db_session.execute(
            select(ven_models.VendorVariety).where(ven_models.VendorVariety.vendor_id == vendor_id)
        )
    ).scalars().all()
    assert links == []
    assert await _audit_rows(db_session) == []


# =============================================================================
# 3. Link endpoints
# =============================================================================
@pytest.mark.asyncio
async def test_attach_endpoint_operator(operator_client: AsyncClient, test_vendor: ven_models.Vendor):
    """
    OPERATOR attaches through the API; a repeat call reports already_exists.
    """
    print("\n--- Running test_attach_endpoint_operator ---")
    url = f"/api/v1/ven/vendors/{test_vendor.id}/varieties"
    response = await operator_client.post(url, json={"variety_name_or_id": "Dabinett", "notes": "bittersweet"})
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["already_exists"] is False
    assert body["message"] == "Hillside Orchards linked to Dabinett"

    response = await operator_client.post(url, json={"variety_name_or_id": "dabinett"})
    assert response.status_code == 200
    assert response.json()["already_exists"] is True
    assert response.json()["variety_id"] == body["variety_id"]

    response = await operator_client.get(url)
    assert response.status_code == 200
    listing = response.json()
    assert listing["count"] == 1
    assert listing["varieties"][0]["notes"] == "bittersweet"
    assert listing["varieties"][0]["kind"] == "base_fruit"
    print("test_attach_endpoint_operator passed.")


@pytest.mark.asyncio
async def test_attach_endpoint_viewer_forbidden(viewer_client: AsyncClient, test_vendor: ven_models.Vendor):
    response = await viewer_client.post(
        f"/api/v1/ven/vendors/{test_vendor.id}/varieties", json={"variety_name_or_id": "Gala"}
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Not enough permissions to update vendor."


@pytest.mark.asyncio
async def test_attach_endpoint_rejects_blank_name(operator_client: AsyncClient, test_vendor: ven_models.Vendor):
    response = await operator_client.post(
        f"/api/v1/ven/vendors/{test_vendor.id}/varieties", json={"variety_name_or_id": "   "}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_detach_endpoint(operator_client: AsyncClient, test_vendor: ven_models.Vendor):
    """
    Detach through the API, then a second detach answers 404.
    """
    attach = await operator_client.post(
        f"/api/v1/ven/vendors/{test_vendor.id}/varieties",
        json={"variety_name_or_id": "Bulmer's Norman"},
    )
    variety_id = attach.json()["variety_id"]
    url = f"/api/v1/ven/vendors/{test_vendor.id}/varieties/{variety_id}"

    response = await operator_client.delete(url, params={"kind": "base_fruit"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Hillside Orchards detached from Bulmer's Norman"}

    response = await operator_client.delete(url)
    assert response.status_code == 404
    assert response.json()["detail"] == "Vendor-variety link not found"


@pytest.mark.asyncio
async def test_search_endpoint(viewer_client: AsyncClient, variety_factory):
    await variety_factory("Gala")
    await variety_factory("Golden Delicious")
    await variety_factory("Fuji")

    response = await viewer_client.get("/api/v1/ven/varieties/search", params={"q": "gal", "limit": 10})
    assert response.status_code == 200
    body = response.json()
    assert [v["name"] for v in body["varieties"]] == ["Gala"]
    assert body["count"] == 1
    assert body["search_query"] == "gal"

    response = await viewer_client.get("/api/v1/ven/varieties/search", params={"q": "gal", "limit": 500})
    assert response.status_code == 422
