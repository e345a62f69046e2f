# app/core/__init__.py

"""
Core components shared by every domain.

- `config.py`: settings loaded from the environment (pydantic-settings).
- `database.py`: async engine and session management (SQLModel / SQLAlchemy).
- `security.py`: password hashing, JWT, current-user resolution and the role matrix.
- `dependencies.py`: FastAPI dependencies used by the routers.
- `crud_base.py`: CRUDBase and the transaction helper.
- `lifecycle.py`: soft-delete state and the live-row predicate.
- `exceptions.py`, `pagination.py`, `logging_config.py`, `tasks.py`.
"""

__title__ = "Cidery Core"
__description__ = "Core components for the Cidery Production API."
__version__ = "0.1.0"
__all__ = []
