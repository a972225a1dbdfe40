"""
Scale mappings and chart dimensions.

A chart's render context is its Dimensions plus the scales built
for it; builders pass them around explicitly.
"""
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class Dimensions:
    """Outer chart size plus margins around the plotting area."""
    width: float
    height: float
    margin: Margin

    @classmethod
    def from_margin(cls, width: float, height: float, margin: Sequence[float]) -> "Dimensions":
        top, right, bottom, left = margin
        return cls(width, height, Margin(top, right, bottom, left))

    @property
    def bounded_width(self) -> float:
        return self.width - (self.margin.left + self.margin.right)

    @property
    def bounded_height(self) -> float:
        return self.height - (self.margin.top + self.margin.bottom)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "margin": {
                "top": self.margin.top,
                "right": self.margin.right,
                "bottom": self.margin.bottom,
                "left": self.margin.left,
            },
            "bounded_width": self.bounded_width,
            "bounded_height": self.bounded_height,
        }


def _step_magnitude(start: float, stop: float, count: float) -> Tuple[int, int]:
    """Power of ten and 1-2-5-10 factor of the tick step for count ticks."""
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= E10 else 5 if error >= E5 else 2 if error >= E2 else 1
    return power, factor


def _tick_spec(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    power, factor = _step_magnitude(start, stop, count)
    if power < 0:
        inc = 10 ** -power / factor
        i1 = math.floor(start * inc + 0.5)
        i2 = math.floor(stop * inc + 0.5)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10 ** power * factor
        i1 = math.floor(start / inc + 0.5)
        i2 = math.floor(stop / inc + 0.5)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """
    Tick step for roughly count ticks between start and stop.

    Steps are 1, 2 or 5 times a power of ten. Sub-unit steps are
    returned as the negative inverse (-10 means 0.1) to keep them exact.
    """
    power, factor = _step_magnitude(start, stop, count)
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def ticks(start: float, stop: float, count: float = 10) -> List[float]:
    """Evenly spaced, human-friendly values between start and stop."""
    if not count > 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, count)
    if not i2 >= i1:
        return []
    n = i2 - i1 + 1
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(n)]
    else:
        values = [(i1 + i) * inc for i in range(n)]
    if reverse:
        values.reverse()
    return values


class LinearScale:
    """Linear map from a numeric domain onto a pixel range."""

    def __init__(self, domain: Tuple[float, float], range_: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, position: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (position - r0) / (r1 - r0) * (d1 - d0)

    def nice(self, count: int = 10) -> "LinearScale":
        """Return a copy whose domain is extended to round tick values."""
        start, stop = self.domain
        if start == stop or not (math.isfinite(start) and math.isfinite(stop)):
            return LinearScale(self.domain, self.range)

        reverse = stop < start
        if reverse:
            start, stop = stop, start

        previous: Optional[float] = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == previous:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            previous = step

        domain = (stop, start) if reverse else (start, stop)
        return LinearScale(domain, self.range)

    def ticks(self, count: int = 10) -> List[float]:
        return ticks(self.domain[0], self.domain[1], count)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "linear", "domain": list(self.domain), "range": list(self.range)}


class TimeScale:
    """Linear map from a date domain onto a pixel range."""

    def __init__(self, domain: Tuple[date, date], range_: Tuple[float, float]):
        self.domain = (domain[0], domain[1])
        self._linear = LinearScale(
            (domain[0].toordinal(), domain[1].toordinal()), range_
        )
        self.range = self._linear.range

    def __call__(self, value: date) -> float:
        return self._linear(value.toordinal())

    def invert(self, position: float) -> date:
        return date.fromordinal(round(self._linear.invert(position)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "time",
            "domain": [d.isoformat() for d in self.domain],
            "range": list(self.range),
        }


class BandScale:
    """
    Map discrete labels onto equal-width bands of a pixel range.

    Inner and outer padding are both the given fraction of a step,
    and the bands are centred in the range.
    """

    def __init__(self, labels: Sequence[str], range_: Tuple[float, float], padding: float = 0.0):
        if not 0 <= padding <= 1:
            raise ValueError(f"padding must be in [0, 1], got {padding}")
        self.labels: List[str] = list(dict.fromkeys(labels))
        self.range = (float(range_[0]), float(range_[1]))
        self.padding = padding

        n = len(self.labels)
        start, stop = self.range
        reverse = stop < start
        if reverse:
            start, stop = stop, start
        self.step = (stop - start) / max(1, n - padding + padding * 2)
        start += (stop - start - self.step * (n - padding)) * 0.5
        self.bandwidth = self.step * (1 - padding)

        positions = [start + self.step * i for i in range(n)]
        if reverse:
            positions.reverse()
        self._positions = dict(zip(self.labels, positions))

    def __call__(self, label: str) -> float:
        if label not in self._positions:
            raise KeyError(f"Unknown band: {label}")
        return self._positions[label]

    def center(self, label: str) -> float:
        return self(label) + self.bandwidth / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "band",
            "domain": list(self.labels),
            "range": list(self.range),
            "padding": self.padding,
            "bandwidth": self.bandwidth,
        }
