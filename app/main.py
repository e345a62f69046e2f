# app/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from app import API_PREFIX
from app.core.config import settings
from app.core.database import engine, get_session
from app.core.logging_config import setup_logging

# every table class registered on SQLModel.metadata before mappers are used
from app.domains import models  # noqa: F401

from app.domains.usr.routers import router as usr_router
from app.domains.ven.routers import router as ven_router
from app.domains.var.routers import router as var_router
from app.domains.inv.routers import router as inv_router
from app.domains.aud.routers import router as aud_router
from app.domains.rpt.routers import router as rpt_router

logger = logging.getLogger(__name__)


# -- Application lifespan --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup / shutdown. Schema changes go through Alembic; the ARQ worker runs
    as its own process (app.core.tasks.ArqWorkerSettings).
    """
    setup_logging()
    logger.info("Starting %s %s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)

    yield

    logger.info("Shutting down, disposing database connection pool")
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# -- CORS --
# Restrict allow_origins to the real frontend origins in production.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- Domain routers --
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr", tags=["User Management"])
app.include_router(ven_router, prefix=f"{API_PREFIX}/ven", tags=["Vendor Management"])
app.include_router(var_router, prefix=f"{API_PREFIX}/var", tags=["Variety Management"])
app.include_router(inv_router, prefix=f"{API_PREFIX}/inv", tags=["Purchasing & Inventory"])
app.include_router(aud_router, prefix=f"{API_PREFIX}/aud", tags=["Audit Log"])
app.include_router(rpt_router, prefix=f"{API_PREFIX}/rpt", tags=["Production Reports"])


@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Runs `SELECT 1` to confirm the database is reachable.
    """
    try:
        result = await session.execute(select(1))
        if result.scalar_one_or_none() == 1:
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        logger.exception("Health check query failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )


# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
