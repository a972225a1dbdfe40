"""Health check endpoint."""

from typing import List

from fastapi import APIRouter, Depends

from app.config import get_config
from app.dataset import get_dataset
from app.models import HealthResponse
from charts.models import Observation

router = APIRouter(tags=["health"])
config = get_config()


@router.get("/health", response_model=HealthResponse)
async def health_check(dataset: List[Observation] = Depends(get_dataset)) -> HealthResponse:
    """
    Health check endpoint.
    
    Verifies that the API is running and the dataset is loaded.
    A dataset that cannot be loaded yields 503.
    
    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy",
        dataset="loaded",
        observation_count=len(dataset),
        message="WeatherInsight Charts API is running"
    )


@router.get("/")
async def root() -> dict:
    """
    Root endpoint with API information.
    
    Returns:
        Basic API information
    """
    return {
        "service": config.api_title,
        "version": config.api_version,
        "documentation": "/docs",
        "health_check": "/health"
    }
