"""Pydantic response schemas."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    dataset: str
    observation_count: int
    message: str


class MetricsResponse(BaseModel):
    """Metrics available in the dataset."""
    metrics: List[str]
    total_metrics: int
    first_date: Optional[str] = None
    last_date: Optional[str] = None


class OutlierResponse(BaseModel):
    date: str
    value: float


class QuartileSummaryResponse(BaseModel):
    """Median, quartiles and IQR outliers of one metric."""
    metric: str
    median: float
    q1: float
    q3: float
    iqr: float
    count: int
    outliers: List[OutlierResponse] = Field(default_factory=list)


class ChartResponse(BaseModel):
    """
    Chart payload.
    
    Shapes differ per chart kind and are passed through as extra fields.
    """
    model_config = ConfigDict(extra="allow")
    
    kind: str
    metric: str
    title: str
    dimensions: Dict[str, Any]
    observation_count: int
