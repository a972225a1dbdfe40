"""Whole-dataset statistics endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Path

from app.dataset import get_dataset
from app.models import QuartileSummaryResponse
from charts.config import get_config as get_charts_config
from charts.models import Observation
from charts.statistics import quartile_outliers, require_metric

router = APIRouter(prefix="/api/v1/stats", tags=["stats"])


@router.get("/{metric}/quartiles", response_model=QuartileSummaryResponse)
async def get_quartiles(
    metric: str = Path(..., description="Metric to summarize"),
    dataset: List[Observation] = Depends(get_dataset)
) -> QuartileSummaryResponse:
    """
    Median, quartiles and IQR outliers of one metric over the whole dataset.
    
    Returns:
        Quartile summary
    """
    require_metric(dataset, metric)
    summary = quartile_outliers(
        dataset, metric, factor=get_charts_config().outlier_iqr_factor
    )
    return QuartileSummaryResponse(**summary.to_dict())
