# app/core/database.py

"""
Database connection and session management.

- Configures the async SQLAlchemy engine used by SQLModel.
- Provides the per-request session generator and a standalone session
  context for ARQ tasks and scripts.
- Contains the development helper that creates schemas and tables.
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

logger = logging.getLogger(__name__)

# One PostgreSQL schema per domain
SCHEMA = ["usr", "ven", "var", "inv", "prd", "aud"]


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL.get_secret_value(),
    echo=settings.DEBUG_MODE,  # SQL echo only in debug mode
    future=True,
    pool_recycle=3600,
    pool_size=10,
    max_overflow=20
)

AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata


# =============================================================================
# Schema / table creation (development only, Alembic otherwise)
# =============================================================================
async def create_db_and_tables() -> None:
    """
    Create every domain schema and table. Existing tables are left untouched.
    """
    # every SQLModel table class has to be registered on the metadata first
    from app.domains import models  # noqa: F401

    async with engine.begin() as conn:
        for schema_name in SCHEMA:
            await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
            logger.debug("Schema '%s' ready", schema_name)
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database schemas and tables created (or already present)")


# =============================================================================
# Session dependencies
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async session generator for FastAPI dependency injection.
    A new session is opened per request and closed afterwards.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Standalone session for ARQ tasks and scripts. Commits on success,
    rolls back on error.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
