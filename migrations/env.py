# migrations/env.py

import os
import sys
import asyncio
from logging.config import fileConfig

from alembic import context

from sqlalchemy import pool, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

# --- 1. Project root on sys.path ---
# lets env.py import the 'app' package wherever alembic is started from
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# --- 2. Settings and every table model ---
from app.core.config import settings        # noqa: E402
from app.core.database import SCHEMA        # noqa: E402

# registers all SQLModel table classes on SQLModel.metadata for autogenerate
import app.domains.models                   # noqa: F401, E402

# --- 3. Alembic configuration ---
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

if config.get_main_option("sqlalchemy.url") is None:
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.get_secret_value())


def include_object(object, name, type_, reflected, compare_to):
    if type_ == "table" and name == "alembic_version":
        return False
    return True


def do_run_migrations(connection) -> None:
    """
    Configure the Alembic context on a live connection and run the migrations.
    """
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_schemas=True,  # one schema per domain
        version_table_schema='public',
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Offline (SQL script) mode is not supported."""
    raise NotImplementedError("Offline mode is not supported in this configuration.")


async def run_migrations_online() -> None:
    """
    Run migrations against the configured database. Domain schemas are
    created first so that autogenerated revisions can target them.
    """
    engine: AsyncEngine = create_async_engine(
        settings.DATABASE_URL.get_secret_value(),
        echo=settings.DEBUG_MODE,
        future=True,
        poolclass=pool.NullPool,
    )

    # 1) schemas, committed on their own
    async with engine.connect() as connection:
        print("--- Ensuring all schemas exist before migration... ---")
        async with connection.begin():
            for schema_name in SCHEMA:
                await connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))
        print("--- Schema check/creation complete. ---")

    # 2) migrations
    async with engine.connect() as connection:
        print("\n--- Running Alembic migrations... ---")
        await connection.run_sync(do_run_migrations)

    await engine.dispose()
    print("\n--- Alembic migrations finished. ---")


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
