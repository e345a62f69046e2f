# app/domains/rpt/schemas.py

"""
Response models for the production reports.

Rates are percentages (liters of juice per 100 kg of fruit for extraction).
"""

import uuid
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


# =============================================================================
# 1. Yield analysis
# =============================================================================
class YieldSummary(BaseModel):
    total_fruit_kg: float
    total_juice_l: float
    avg_extraction_rate: float
    press_run_count: int


class VarietyYield(BaseModel):
    variety_id: uuid.UUID
    variety_name: str
    fruit_kg: float
    juice_l: float
    extraction_rate: float
    load_count: int


class PressRunYield(BaseModel):
    id: uuid.UUID
    name: Optional[str] = None
    date_completed: Optional[date] = None
    fruit_kg: float
    juice_l: float
    extraction_rate: float


class YieldAnalysis(BaseModel):
    summary: YieldSummary
    by_variety: List[VarietyYield]
    press_runs: List[PressRunYield]


# =============================================================================
# 2. Fermentation metrics
# =============================================================================
class FermentationSummary(BaseModel):
    batches_started: int
    batches_completed: int
    avg_days_to_terminal: Optional[int] = None
    avg_original_gravity: Optional[float] = None
    avg_final_gravity: Optional[float] = None


class BatchMetrics(BaseModel):
    id: uuid.UUID
    batch_name: str
    start_date: datetime
    end_date: Optional[datetime] = None
    original_gravity: Optional[float] = None
    current_gravity: Optional[float] = None
    fermentation_stage: str
    days_active: int
    status: str
    volume_l: float


class FermentationMetrics(BaseModel):
    summary: FermentationSummary
    stage_distribution: Dict[str, int]
    batches: List[BatchMetrics]


# =============================================================================
# 3. Production summary
# =============================================================================
class ProductionTotals(BaseModel):
    batches_created: int
    total_initial_volume_l: float
    total_current_volume_l: float
    volume_loss_l: float


class ProductTypeCount(BaseModel):
    product_type: str
    count: int
    volume_l: float


class StatusCount(BaseModel):
    status: str
    count: int


class ProductionSummary(BaseModel):
    summary: ProductionTotals
    by_product_type: List[ProductTypeCount]
    by_status: List[StatusCount]
