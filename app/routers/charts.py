"""Chart payload endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from app.config import get_config
from app.dataset import get_dataset
from app.models import ChartResponse, MetricsResponse
from charts.builders import build_box_plot, build_histogram, build_timeline
from charts.config import get_config as get_charts_config
from charts.models import Observation
from charts.statistics import available_metrics

router = APIRouter(prefix="/api/v1/charts", tags=["charts"])
config = get_config()


@router.get("/metrics", response_model=MetricsResponse)
async def list_metrics(dataset: List[Observation] = Depends(get_dataset)) -> MetricsResponse:
    """
    List the numeric metrics present in the dataset.
    
    Returns:
        Metric names and the dataset date range
    """
    metrics = sorted(available_metrics(dataset))
    return MetricsResponse(
        metrics=metrics,
        total_metrics=len(metrics),
        first_date=dataset[0].date.isoformat() if dataset else None,
        last_date=dataset[-1].date.isoformat() if dataset else None,
    )


@router.get("/histogram/{metric}", response_model=ChartResponse)
async def get_histogram(
    metric: str = Path(..., description="Metric to bin"),
    thresholds: Optional[int] = Query(
        None,
        ge=1,
        le=config.max_histogram_thresholds,
        description="Number of equal-width bins (default: configured)"
    ),
    dataset: List[Observation] = Depends(get_dataset)
) -> ChartResponse:
    """
    Histogram of one metric.
    
    Path parameters:
    - **metric**: Metric name, e.g. windSpeed, humidity
    
    Query parameters:
    - **thresholds**: Number of bins
    
    Returns:
        Histogram payload with bars, mean marker and tooltip anchors
    """
    charts_config = get_charts_config()
    payload = build_histogram(
        dataset,
        metric,
        charts_config.dimensions("histogram"),
        thresholds=thresholds or charts_config.histogram_thresholds,
        bar_padding=charts_config.histogram_bar_padding,
    )
    return ChartResponse(**payload)


@router.get("/timeline/{metric}", response_model=ChartResponse)
async def get_timeline(
    metric: str = Path(..., description="Metric to plot over time"),
    dataset: List[Observation] = Depends(get_dataset)
) -> ChartResponse:
    """
    Seasonal timeline of one metric.
    
    Returns:
        Timeline payload with daily points, weekly means and season bands
    """
    payload = build_timeline(dataset, metric, get_charts_config().dimensions("timeline"))
    return ChartResponse(**payload)


@router.get("/boxplot/{metric}", response_model=ChartResponse)
async def get_box_plot(
    metric: str = Path(..., description="Metric to summarize per month"),
    dataset: List[Observation] = Depends(get_dataset)
) -> ChartResponse:
    """
    Monthly box plot of one metric.
    
    Returns:
        Box plot payload with quartile boxes, whiskers and outliers
    """
    charts_config = get_charts_config()
    payload = build_box_plot(
        dataset,
        metric,
        charts_config.dimensions("boxplot"),
        outlier_factor=charts_config.outlier_iqr_factor,
    )
    return ChartResponse(**payload)
