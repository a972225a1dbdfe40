"""
Descriptive statistics over daily observations.

Binning for histograms, reducers over date windows, and quartile
summaries with IQR outlier detection. Every function is pure: the
same observations and boundaries always produce the same aggregates.
"""
import math
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

import numpy as np

from .errors import NoDataError, UnknownMetricError
from .models import Bin, Observation, PeriodAggregate, QuartileSummary


Reducer = Callable[[Sequence[float]], object]
Window = Tuple[date, date, List[Observation]]


def _finite(values: Iterable[Optional[float]]) -> List[float]:
    return [float(v) for v in values if v is not None and math.isfinite(v)]


def mean(values: Iterable[Optional[float]]) -> Optional[float]:
    """Arithmetic mean, or None when there is nothing to average."""
    vals = _finite(values)
    if not vals:
        return None
    return float(np.mean(vals))


def median(values: Iterable[Optional[float]]) -> Optional[float]:
    vals = _finite(values)
    if not vals:
        return None
    return float(np.median(vals))


def quantile(values: Iterable[Optional[float]], p: float) -> Optional[float]:
    """
    p-quantile by linear interpolation between order statistics.

    Args:
        values: Sample values; missing values are ignored
        p: Probability in [0, 1]

    Returns:
        Quantile value, or None for an empty sample
    """
    if not 0 <= p <= 1:
        raise ValueError(f"Quantile probability must be in [0, 1], got {p}")
    vals = _finite(values)
    if not vals:
        return None
    return float(np.quantile(vals, p))


def quartiles(values: Iterable[Optional[float]]) -> Optional[Tuple[float, float, float]]:
    """(q1, median, q3), or None for an empty sample."""
    vals = _finite(values)
    if not vals:
        return None
    q1, q2, q3 = np.quantile(vals, [0.25, 0.5, 0.75])
    return float(q1), float(q2), float(q3)


REDUCERS: Dict[str, Reducer] = {
    "mean": mean,
    "median": median,
    "quartiles": quartiles,
}


def get_reducer(reducer: Union[str, Reducer]) -> Reducer:
    if callable(reducer):
        return reducer
    if reducer not in REDUCERS:
        raise ValueError(
            f"Unknown reducer: {reducer}. Must be one of {list(REDUCERS.keys())}"
        )
    return REDUCERS[reducer]


def available_metrics(observations: Iterable[Observation]) -> Set[str]:
    """Names of every metric present in at least one observation."""
    names: Set[str] = set()
    for observation in observations:
        names.update(observation.metrics.keys())
    return names


def metric_values(observations: Sequence[Observation], metric: str) -> List[float]:
    """
    Values of one metric, in observation order.

    Raises:
        NoDataError: If there are no observations
        UnknownMetricError: If no observation carries the metric
    """
    require_metric(observations, metric)
    return _finite(o.value(metric) for o in observations)


def require_metric(observations: Sequence[Observation], metric: str) -> None:
    """
    Check that at least one observation carries a finite value for metric.

    Raises:
        NoDataError: If there are no observations
        UnknownMetricError: If no observation carries the metric
    """
    if not observations:
        raise NoDataError("No observations loaded")
    if not _finite(o.value(metric) for o in observations):
        raise UnknownMetricError(metric, available_metrics(observations))


def extent(values: Iterable[Optional[float]]) -> Optional[Tuple[float, float]]:
    vals = _finite(values)
    if not vals:
        return None
    return min(vals), max(vals)


def bin_values(
    values: Iterable[Optional[float]],
    domain: Tuple[float, float],
    threshold_count: int,
) -> List[Bin]:
    """
    Partition a domain into equal-width bins and count values per bin.

    Bins are half-open [x0, x1) except the last one, which also holds
    values equal to the domain maximum. Values outside the domain and
    missing values are not counted. A zero-width domain yields a single
    bin holding the values equal to it.

    Args:
        values: Metric values
        domain: (min, max) of the binned range
        threshold_count: Number of bins

    Returns:
        Bins in ascending order, empty bins included
    """
    if threshold_count < 1:
        raise ValueError(f"threshold_count must be >= 1, got {threshold_count}")
    lo, hi = float(domain[0]), float(domain[1])
    if lo > hi:
        raise ValueError(f"Invalid domain: {domain}")

    vals = _finite(values)

    if lo == hi:
        return [Bin(lo, hi, sum(1 for v in vals if v == lo))]

    counts, edges = np.histogram(
        np.asarray(vals, dtype=float), bins=threshold_count, range=(lo, hi)
    )
    return [
        Bin(float(edges[i]), float(edges[i + 1]), int(counts[i]))
        for i in range(threshold_count)
    ]


def partition_observations(
    observations: Sequence[Observation],
    boundaries: Sequence[date],
    end: Optional[date] = None,
) -> List[Window]:
    """
    Split observations into the windows (b[i], b[i+1]] of a boundary sequence.

    Args:
        observations: Observations in any order
        boundaries: Strictly ascending window boundaries
        end: Upper bound of one extra final window (b[-1], end]

    Returns:
        (start, end, members) per window; N boundaries give N-1 windows,
        plus one when end is given
    """
    bounds = list(boundaries)
    for previous, current in zip(bounds, bounds[1:]):
        if current <= previous:
            raise ValueError(
                f"Window boundaries must be strictly ascending: {previous} >= {current}"
            )
    if end is not None and bounds:
        if end <= bounds[-1]:
            raise ValueError(f"Final window end {end} must be after {bounds[-1]}")
        bounds.append(end)

    return [
        (start, stop, [o for o in observations if start < o.date <= stop])
        for start, stop in zip(bounds, bounds[1:])
    ]


def window_aggregate(
    observations: Sequence[Observation],
    boundaries: Sequence[date],
    metric: str,
    reducer: Union[str, Reducer] = "mean",
    end: Optional[date] = None,
) -> List[PeriodAggregate]:
    """
    Reduce one metric over consecutive date windows.

    Windows without values are kept, with count 0 and value None, so
    callers can see gaps instead of receiving NaN.
    """
    reduce = get_reducer(reducer)

    aggregates = []
    for start, stop, members in partition_observations(observations, boundaries, end):
        values = _finite(o.value(metric) for o in members)
        aggregates.append(
            PeriodAggregate(
                start=start,
                end=stop,
                count=len(values),
                value=reduce(values) if values else None,
            )
        )
    return aggregates


def quartile_outliers(
    observations: Sequence[Observation],
    metric: str,
    factor: float = 1.5,
) -> QuartileSummary:
    """
    Median, quartiles and outliers of one metric.

    An observation is an outlier when its value deviates from the median
    by more than factor * IQR.

    Raises:
        NoDataError: If no observation carries a value for the metric
    """
    pairs = [(o, o.value(metric)) for o in observations]
    pairs = [(o, v) for o, v in pairs if v is not None and math.isfinite(v)]
    if not pairs:
        raise NoDataError(f"No {metric} values to summarize")

    q1, med, q3 = quartiles(v for _, v in pairs)
    iqr = q3 - q1
    outliers = tuple(o for o, v in pairs if abs(v - med) > factor * iqr)

    return QuartileSummary(
        metric=metric,
        median=med,
        q1=q1,
        q3=q3,
        iqr=iqr,
        count=len(pairs),
        outliers=outliers,
    )
