# app/core/tasks.py

"""
ARQ worker tasks and settings.

Run the worker with:  arq app.core.tasks.ArqWorkerSettings
"""

import logging

from arq import cron
from arq.connections import RedisSettings
from sqlmodel import select

from app.core.config import settings
from app.core.database import get_async_session_context
from app.core.logging_config import setup_logging
from app.domains.inv.crud import basefruit_purchase, juice_inventory, packaging_inventory

logger = logging.getLogger(__name__)


async def health_check_database_task(ctx):
    """
    Periodic database health check run by the ARQ worker.
    """
    logger.info("ARQ task: database health check")

    try:
        async with get_async_session_context() as db:
            result = await db.execute(select(1))
            if result.scalar_one_or_none() == 1:
                logger.info("Database health check: connection successful")
                return {"status": "success", "message": "Database connection successful."}
            error_msg = "Database health check failed: No result from test query."
            logger.error(error_msg)
            return {"status": "failed", "message": error_msg}
    except Exception as e:
        logger.exception("Database health check failed")
        return {"status": "failed", "message": f"Database connection error: {e}"}


async def inventory_snapshot_task(ctx):
    """
    Daily availability snapshot: purchased, allocated and free juice and
    packaging, and base fruit still on hand.
    """
    logger.info("ARQ task: inventory snapshot")

    try:
        async with get_async_session_context() as db:
            juice = await juice_inventory.totals(db)
            packaging = await packaging_inventory.totals(db)
            basefruit_kg = await basefruit_purchase.on_hand_kg(db)
    except Exception as e:
        logger.exception("Inventory snapshot failed")
        return {"status": "failed", "message": f"Inventory snapshot error: {e}"}

    logger.info(
        "Inventory snapshot: juice %s L free of %s L (%d items), packaging %s free of %s (%d items), base fruit %s kg",
        juice["available"], juice["purchased"], juice["items"],
        packaging["available"], packaging["purchased"], packaging["items"],
        basefruit_kg,
    )
    return {"status": "success", "juice": juice, "packaging": packaging, "basefruit_kg": basefruit_kg}


async def startup(ctx):
    setup_logging()


class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = [health_check_database_task, inventory_snapshot_task]
    on_startup = startup
    cron_jobs = [
        # daily at 00:00
        cron(health_check_database_task, hour={0}, minute={0}, timeout=300, keep_result=600),
        # daily at 06:00, before the cellar shift
        cron(inventory_snapshot_task, hour={6}, minute={0}, timeout=300, keep_result=86400),
    ]
