# app/domains/rpt/routers.py

"""
API endpoints for the production reports. All reports are read-only and
take a required, inclusive start_date / end_date range.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.exceptions import InvalidRequestError
from app.domains.usr.models import User

from . import crud as rpt_crud
from . import schemas as rpt_schemas

router = APIRouter(
    tags=["Production Reports"],
    responses={404: {"description": "Not found"}},
)


class DateRange:
    def __init__(
        self,
        start_date: date = Query(..., description="First day included"),
        end_date: date = Query(..., description="Last day included"),
    ):
        if end_date < start_date:
            raise InvalidRequestError("end_date must not be before start_date")
        self.start_date = start_date
        self.end_date = end_date


@router.get("/yield-analysis", response_model=rpt_schemas.YieldAnalysis, summary="Fruit to juice yield")
async def read_yield_analysis(
    period: DateRange = Depends(),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("read", "batch")),
):
    """
    Completed press runs in the range, totals and extraction rate per base
    fruit variety (juice liters per 100 kg of fruit).
    """
    return await rpt_crud.production_report.yield_analysis(
        db, start_date=period.start_date, end_date=period.end_date
    )


@router.get("/fermentation-metrics", response_model=rpt_schemas.FermentationMetrics, summary="Fermentation progress")
async def read_fermentation_metrics(
    period: DateRange = Depends(),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("read", "batch")),
):
    return await rpt_crud.production_report.fermentation_metrics(
        db, start_date=period.start_date, end_date=period.end_date
    )


@router.get("/production-summary", response_model=rpt_schemas.ProductionSummary, summary="Batches and volumes")
async def read_production_summary(
    period: DateRange = Depends(),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.require_permission("read", "batch")),
):
    return await rpt_crud.production_report.production_summary(
        db, start_date=period.start_date, end_date=period.end_date
    )
