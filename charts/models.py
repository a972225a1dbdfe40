"""
Immutable records produced and consumed by the statistics pipeline.
"""
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple


DATE_FORMAT = "%Y-%m-%d"

# Axis and tooltip labels for the metrics of the daily dataset
METRIC_LABELS = {
    "temperatureMin": "Minimum Temperature (°F)",
    "temperatureMax": "Maximum Temperature (°F)",
    "humidity": "relative humidity",
    "windSpeed": "wind speed",
    "dewPoint": "dew point",
    "uvIndex": "UV index",
    "moonPhase": "moon phase",
    "windBearing": "wind bearing",
}


def metric_label(metric: str) -> str:
    return METRIC_LABELS.get(metric, metric)


@dataclass(frozen=True)
class Observation:
    """One dated weather record with its numeric metrics."""
    date: date
    metrics: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Observation":
        """
        Build an observation from a raw JSON record.

        Numeric fields become metrics; null, boolean, non-numeric and
        non-finite fields are dropped.

        Raises:
            KeyError: If the record has no date field
            ValueError: If the date is not YYYY-MM-DD
        """
        if not isinstance(record, dict):
            raise TypeError(f"expected an object, got {type(record).__name__}")
        observed = datetime.strptime(record["date"], DATE_FORMAT).date()

        metrics = {}
        for name, value in record.items():
            if name == "date" or isinstance(value, bool):
                continue
            if isinstance(value, (int, float)) and math.isfinite(value):
                metrics[name] = float(value)

        return cls(date=observed, metrics=metrics)

    def value(self, metric: str) -> Optional[float]:
        return self.metrics.get(metric)

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), **self.metrics}


@dataclass(frozen=True)
class Bin:
    """Half-open interval [x0, x1) and the number of values inside it."""
    x0: float
    x1: float
    count: int

    @property
    def width(self) -> float:
        return self.x1 - self.x0


@dataclass(frozen=True)
class PeriodAggregate:
    """
    Reducer output over the observations dated in (start, end].

    Periods without observations carry value None.
    """
    start: date
    end: date
    count: int
    value: Any = None

    @property
    def has_data(self) -> bool:
        return self.count > 0 and self.value is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "count": self.count,
            "value": self.value,
            "has_data": self.has_data,
        }


@dataclass(frozen=True)
class QuartileSummary:
    """Median, quartiles and IQR outliers of one metric."""
    metric: str
    median: float
    q1: float
    q3: float
    iqr: float
    count: int
    outliers: Tuple[Observation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "median": self.median,
            "q1": self.q1,
            "q3": self.q3,
            "iqr": self.iqr,
            "count": self.count,
            "outliers": [
                {"date": o.date.isoformat(), "value": o.value(self.metric)}
                for o in self.outliers
            ],
        }
