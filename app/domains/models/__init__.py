# app/domains/models/__init__.py

"""
Central import of every domain's SQLModel table classes, so that
SQLModel.metadata knows all tables (create_all, Alembic autogenerate).
"""

# usr
from app.domains.usr.models import User, UserRole

# var
from app.domains.var.models import (
    VarietyKind, BaseFruitVariety, AdditiveVariety, JuiceVariety, PackagingVariety
)

# ven
from app.domains.ven.models import (
    Vendor, VendorVariety, VendorAdditiveVariety, VendorJuiceVariety, VendorPackagingVariety
)

# inv
from app.domains.inv.models import (
    JuicePurchase, JuicePurchaseItem,
    PackagingPurchase, PackagingPurchaseItem,
    BaseFruitPurchase, BaseFruitPurchaseItem,
)

# prd
from app.domains.prd.models import (
    PressRunStatus, BatchStatus, FermentationStage, PressRun, PressRunLoad, Batch,
)

# aud
from app.domains.aud.models import AuditLog, AuditOperation

__all__ = [
    "User", "UserRole",
    "VarietyKind", "BaseFruitVariety", "AdditiveVariety", "JuiceVariety", "PackagingVariety",
    "Vendor", "VendorVariety", "VendorAdditiveVariety", "VendorJuiceVariety", "VendorPackagingVariety",
    "JuicePurchase", "JuicePurchaseItem",
    "PackagingPurchase", "PackagingPurchaseItem",
    "BaseFruitPurchase", "BaseFruitPurchaseItem",
    "PressRunStatus", "BatchStatus", "FermentationStage", "PressRun", "PressRunLoad", "Batch",
    "AuditLog", "AuditOperation",
]
