"""Dataset state shared by the API endpoints."""

import logging
from typing import List, Optional

from fastapi import HTTPException, status

from charts.config import get_config as get_charts_config
from charts.errors import DatasetLoadError
from charts.loader import create_loader
from charts.models import Observation

logger = logging.getLogger(__name__)

# Observations are loaded once per process
_observations: Optional[List[Observation]] = None


def load_dataset(source: Optional[str] = None) -> List[Observation]:
    """
    Load the dataset into the process-wide cache.
    
    Raises:
        DatasetLoadError: If the dataset cannot be loaded
    """
    global _observations
    loader = create_loader(get_charts_config())
    _observations = loader.load(source)
    return _observations


def reset_dataset() -> None:
    """Drop the cached dataset."""
    global _observations
    _observations = None


def get_dataset() -> List[Observation]:
    """
    Dependency for FastAPI endpoints to get the loaded observations.
    
    Loads the dataset on first use.
    
    Raises:
        HTTPException: 503 if the dataset cannot be loaded
    """
    if _observations is not None:
        return _observations
    
    try:
        return load_dataset()
    except DatasetLoadError as e:
        logger.error(f"Dataset unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Dataset unavailable: {e.reason}"
        )


def check_dataset() -> bool:
    """
    Check whether the dataset is loaded.
    
    Returns:
        True if observations are cached, False otherwise.
    """
    return _observations is not None
