# app/domains/rpt/crud.py

"""
Production report queries.

Every report takes an inclusive [start_date, end_date] range:
- yield analysis: completed press runs by completion date,
- fermentation metrics and production summary: batches by start date.
Soft-deleted rows are ignored throughout.
"""

import math
from collections import Counter, defaultdict
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.lifecycle import live, utcnow
from app.domains.prd.models import Batch, BatchStatus, FermentationStage, PressRun, PressRunLoad, PressRunStatus
from app.domains.var.models import BaseFruitVariety

from . import schemas as rpt_schemas

SECONDS_PER_DAY = 86400


def rate(juice_l, fruit_kg) -> float:
    """Extraction rate in percent; 0 when no fruit was pressed."""
    fruit_kg = float(fruit_kg or 0)
    return float(juice_l or 0) / fruit_kg * 100 if fruit_kg > 0 else 0.0


def as_float(value) -> Optional[float]:
    return None if value is None else float(value)


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back naive
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def days_between(start: datetime, end: datetime) -> int:
    return math.ceil((_aware(end) - _aware(start)).total_seconds() / SECONDS_PER_DAY)


def day_bounds(start_date: date, end_date: date):
    """[start 00:00, day after end 00:00) in UTC."""
    return (
        datetime.combine(start_date, time.min, tzinfo=UTC),
        datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=UTC),
    )


class CRUDProductionReport:
    # -------------------------------------------------------------------------
    # Yield analysis
    # -------------------------------------------------------------------------
    async def yield_analysis(self, db: AsyncSession, *, start_date: date, end_date: date) -> rpt_schemas.YieldAnalysis:
        in_range = (
            PressRun.date_completed >= start_date,
            PressRun.date_completed <= end_date,
            PressRun.status == PressRunStatus.COMPLETED,
            live(PressRun),
        )

        runs = (
            await db.execute(select(PressRun).where(*in_range).order_by(PressRun.date_completed.desc()))
        ).scalars().all()

        total_weight = func.coalesce(func.sum(PressRunLoad.apple_weight_kg), 0)
        total_juice = func.coalesce(func.sum(PressRunLoad.juice_volume_l), 0)
        variety_rows = (
            await db.execute(
                select(
                    BaseFruitVariety.id,
                    BaseFruitVariety.name,
                    total_weight.label("fruit_kg"),
                    total_juice.label("juice_l"),
                    func.count(PressRunLoad.id).label("load_count"),
                )
                .join(PressRun, PressRun.id == PressRunLoad.press_run_id)
                .join(BaseFruitVariety, BaseFruitVariety.id == PressRunLoad.fruit_variety_id)
                .where(*in_range, live(PressRunLoad))
                .group_by(BaseFruitVariety.id, BaseFruitVariety.name)
                .order_by(total_weight.desc())
            )
        ).all()

        total_fruit_kg = sum(float(run.total_apple_weight_kg or 0) for run in runs)
        total_juice_l = sum(float(run.total_juice_volume_l or 0) for run in runs)

        return rpt_schemas.YieldAnalysis(
            summary=rpt_schemas.YieldSummary(
                total_fruit_kg=total_fruit_kg,
                total_juice_l=total_juice_l,
                avg_extraction_rate=rate(total_juice_l, total_fruit_kg),
                press_run_count=len(runs),
            ),
            by_variety=[
                rpt_schemas.VarietyYield(
                    variety_id=variety_id,
                    variety_name=name or "Unknown",
                    fruit_kg=float(fruit_kg),
                    juice_l=float(juice_l),
                    extraction_rate=rate(juice_l, fruit_kg),
                    load_count=load_count,
                )
                for variety_id, name, fruit_kg, juice_l, load_count in variety_rows
            ],
            press_runs=[
                rpt_schemas.PressRunYield(
                    id=run.id,
                    name=run.press_run_name,
                    date_completed=run.date_completed,
                    fruit_kg=float(run.total_apple_weight_kg or 0),
                    juice_l=float(run.total_juice_volume_l or 0),
                    extraction_rate=float(run.extraction_rate or 0) * 100,
                )
                for run in runs
            ],
        )

    # -------------------------------------------------------------------------
    # Batches
    # -------------------------------------------------------------------------
    async def _batches(self, db: AsyncSession, start_date: date, end_date: date):
        lower, upper = day_bounds(start_date, end_date)
        statement = (
            select(Batch)
            .where(Batch.start_date >= lower, Batch.start_date < upper, live(Batch))
            .order_by(Batch.start_date.desc())
        )
        return (await db.execute(statement)).scalars().all()

    async def fermentation_metrics(
        self, db: AsyncSession, *, start_date: date, end_date: date
    ) -> rpt_schemas.FermentationMetrics:
        batches = await self._batches(db, start_date, end_date)
        now = utcnow()

        stages = {stage.value: 0 for stage in FermentationStage}
        completed = 0
        days_to_terminal = []
        original_gravities = []
        final_gravities = []
        details = []

        for batch in batches:
            stage = batch.fermentation_stage.value if batch.fermentation_stage else FermentationStage.UNKNOWN.value
            stages[stage] += 1

            if batch.status == BatchStatus.COMPLETED or stage == FermentationStage.TERMINAL.value:
                completed += 1
            if stage == FermentationStage.TERMINAL.value and batch.end_date is not None:
                days_to_terminal.append(days_between(batch.start_date, batch.end_date))
            if batch.original_gravity is not None:
                original_gravities.append(Decimal(batch.original_gravity))
            if batch.final_gravity is not None:
                final_gravities.append(Decimal(batch.final_gravity))

            details.append(
                rpt_schemas.BatchMetrics(
                    id=batch.id,
                    batch_name=batch.custom_name or batch.name,
                    start_date=batch.start_date,
                    end_date=batch.end_date,
                    original_gravity=as_float(batch.original_gravity),
                    current_gravity=as_float(batch.final_gravity),
                    fermentation_stage=stage,
                    days_active=days_between(batch.start_date, batch.end_date or now),
                    status=batch.status.value,
                    volume_l=float(batch.current_volume_l or 0),
                )
            )

        def mean(values):
            return float(sum(values) / len(values)) if values else None

        return rpt_schemas.FermentationMetrics(
            summary=rpt_schemas.FermentationSummary(
                batches_started=len(batches),
                batches_completed=completed,
                avg_days_to_terminal=round(sum(days_to_terminal) / len(days_to_terminal)) if days_to_terminal else None,
                avg_original_gravity=mean(original_gravities),
                avg_final_gravity=mean(final_gravities),
            ),
            stage_distribution=stages,
            batches=details,
        )

    async def production_summary(
        self, db: AsyncSession, *, start_date: date, end_date: date
    ) -> rpt_schemas.ProductionSummary:
        batches = await self._batches(db, start_date, end_date)

        initial_total = sum((Decimal(b.initial_volume_l or 0) for b in batches), Decimal("0"))
        current_total = sum((Decimal(b.current_volume_l or 0) for b in batches), Decimal("0"))

        type_counts: Counter = Counter()
        type_volumes = defaultdict(Decimal)
        statuses: Counter = Counter()
        for batch in batches:
            product_type = batch.product_type or "unspecified"
            type_counts[product_type] += 1
            type_volumes[product_type] += Decimal(batch.initial_volume_l or 0)
            statuses[batch.status.value if batch.status else "unknown"] += 1

        return rpt_schemas.ProductionSummary(
            summary=rpt_schemas.ProductionTotals(
                batches_created=len(batches),
                total_initial_volume_l=float(initial_total),
                total_current_volume_l=float(current_total),
                volume_loss_l=float(initial_total - current_total),
            ),
            by_product_type=[
                rpt_schemas.ProductTypeCount(product_type=name, count=type_counts[name], volume_l=float(type_volumes[name]))
                for name in sorted(type_counts)
            ],
            by_status=[rpt_schemas.StatusCount(status=name, count=statuses[name]) for name in sorted(statuses)],
        )


production_report = CRUDProductionReport()
