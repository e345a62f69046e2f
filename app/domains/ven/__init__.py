# app/domains/ven/__init__.py

"""
'ven' domain package (PostgreSQL 'ven' schema).

Vendors and the links between vendors and the varieties they supply.

Submodules:
- `models.py`: Vendor and the four vendor-variety link tables.
- `schemas.py`: request/response models.
- `crud.py`: vendor CRUD with audit records.
- `services.py`: VarietyLinkService (attach, detach, list, search).
- `routers.py`: API endpoints.
"""

__title__ = "Cidery Vendor Domain"
__description__ = "Manages vendors and vendor-variety links."
__version__ = "0.1.0"
__all__ = []
