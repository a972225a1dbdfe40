"""
Exceptions raised by the charts pipeline.
"""


class ChartsError(Exception):
    """Base class for charts pipeline errors."""


class DatasetLoadError(ChartsError):
    """The dataset could not be fetched or decoded."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load dataset from {source}: {reason}")


class NoDataError(ChartsError):
    """No usable observations for the requested computation."""


class UnknownMetricError(ChartsError):
    """The requested metric is not present in the dataset."""

    def __init__(self, metric: str, available=None):
        self.metric = metric
        self.available = sorted(available or [])
        super().__init__(
            f"Unknown metric: {metric}. Must be one of {self.available}"
        )
