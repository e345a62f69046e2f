# app/domains/usr/__init__.py

"""
'usr' domain package (PostgreSQL 'usr' schema).

Users, their roles and authentication (OAuth2 password flow issuing JWTs).

Submodules:
- `models.py`: User table and the UserRole enum.
- `schemas.py`: request/response models, including the token response.
- `crud.py`: user CRUD and authentication.
- `routers.py`: login, current user and user management endpoints.
"""

__title__ = "Cidery User Domain"
__description__ = "Manages users and handles authentication."
__version__ = "0.1.0"
__all__ = []
