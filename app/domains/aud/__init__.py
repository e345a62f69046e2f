# app/domains/aud/__init__.py

"""
'aud' domain package (PostgreSQL 'aud' schema).

Append-only audit trail: every create/update/delete performed through the API
is recorded with the old and new data, the acting user and a reason.

Submodules:
- `models.py`: AuditLog table.
- `schemas.py`: read/filter DTOs.
- `crud.py`: AuditLogWriter (append inside the caller's transaction) and queries.
- `routers.py`: read-only endpoints.
"""

__title__ = "Cidery Audit Domain"
__description__ = "Append-only audit trail of data changes."
__version__ = "0.1.0"
__all__ = []
