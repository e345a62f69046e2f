# app/core/dependencies.py

"""
Dependency injection entry points used by the routers.

- Database session (get_db_session).
- Current user resolution and role checks, re-exported from app.core.security.
"""

from typing import AsyncGenerator
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_session as get_main_app_session

# flake8: noqa
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    oauth2_scheme,
    get_current_user_from_token,
    get_current_active_user,
    get_current_admin_user,
    authorizer,
    require_permission,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Per-request async session; wraps app.core.database.get_session.
    """
    async for session in get_main_app_session():
        yield session
