"""
Chart payload builders.

Each builder turns observations into a JSON-ready payload: the chart
dimensions, its scales, and every shape in pixel coordinates relative
to the plotting area (tooltip anchors are relative to the full chart).
"""
import logging
from typing import Any, Dict, List, Sequence

from .errors import NoDataError
from .models import Observation, metric_label
from .periods import DEFAULT_SEASONS, Season, month_boundaries, season_windows, week_boundaries
from .scales import BandScale, Dimensions, LinearScale, TimeScale
from .statistics import (
    bin_values,
    extent,
    mean,
    metric_values,
    partition_observations,
    require_metric,
    quartile_outliers,
    window_aggregate,
)

logger = logging.getLogger(__name__)


def _sorted_with_metric(observations: Sequence[Observation], metric: str) -> List[Observation]:
    require_metric(observations, metric)
    return sorted(
        (o for o in observations if o.value(metric) is not None),
        key=lambda o: o.date,
    )


def _axis_ticks(scale: LinearScale, count: int) -> List[Dict[str, float]]:
    return [{"value": value, "position": scale(value)} for value in scale.ticks(count)]


def build_histogram(
    observations: Sequence[Observation],
    metric: str,
    dimensions: Dimensions,
    thresholds: int = 12,
    bar_padding: float = 4.0,
) -> Dict[str, Any]:
    """
    Build a histogram of one metric.

    The x domain is the nice extent of the metric and is split into
    `thresholds` equal-width bins. A dashed marker shows the mean.

    Args:
        observations: Loaded observations
        metric: Metric to bin
        dimensions: Chart size and margins
        thresholds: Number of bins
        bar_padding: Horizontal gap between bars in pixels

    Returns:
        Histogram chart payload
    """
    values = metric_values(observations, metric)
    margin = dimensions.margin

    x_scale = LinearScale(extent(values), (0, dimensions.bounded_width)).nice()
    bins = bin_values(values, x_scale.domain, thresholds)
    y_scale = LinearScale(
        (0, max(b.count for b in bins)), (dimensions.bounded_height, 0)
    ).nice()

    bars = []
    for b in bins:
        left = x_scale(b.x0)
        right = x_scale(b.x1)
        center = left + (right - left) / 2
        top = y_scale(b.count)
        bars.append({
            "x0": b.x0,
            "x1": b.x1,
            "count": b.count,
            "x": left + bar_padding / 2,
            "y": top,
            "width": max(0.0, right - left - bar_padding),
            "height": dimensions.bounded_height - top,
            "label": {"x": center, "y": top - 5, "text": str(b.count)} if b.count else None,
            "aria_label": (
                f"The metric {metric} was observed between the values of "
                f"{b.x0:g} and {b.x1:g} for a total of {b.count} times"
            ),
            "tooltip": {
                "title": metric,
                "text": f"{b.count} times in the {b.x0:g} - {b.x1:g} range",
                "x": center + margin.left,
                "y": top + margin.top,
            },
        })

    mean_value = mean(values)
    logger.info(
        f"Built histogram for {metric}: {len(values)} values in {len(bins)} bins"
    )

    return {
        "kind": "histogram",
        "metric": metric,
        "title": f"Histogram plotting the distribution of {metric_label(metric)}",
        "dimensions": dimensions.to_dict(),
        "x_scale": x_scale.to_dict(),
        "y_scale": y_scale.to_dict(),
        "bars": bars,
        "mean": {"value": mean_value, "x": x_scale(mean_value)},
        "x_axis": {"label": metric, "ticks": _axis_ticks(x_scale, 10)},
        "observation_count": len(values),
    }


def build_timeline(
    observations: Sequence[Observation],
    metric: str,
    dimensions: Dimensions,
    seasons: Sequence[Season] = DEFAULT_SEASONS,
) -> Dict[str, Any]:
    """
    Build the seasonal timeline of one metric.

    Daily values are drawn as points, weekly means as the line, and each
    season overlapping the data as a band with its own mean. Weeks and
    seasons without observations are left out.
    """
    dataset = _sorted_with_metric(observations, metric)
    first, last = dataset[0].date, dataset[-1].date

    x_scale = TimeScale((first, last), (0, dimensions.bounded_width))
    y_scale = LinearScale(
        extent(o.value(metric) for o in dataset), (dimensions.bounded_height, 0)
    ).nice()

    points = [
        {
            "date": o.date.isoformat(),
            "value": o.value(metric),
            "cx": x_scale(o.date),
            "cy": y_scale(o.value(metric)),
        }
        for o in dataset
    ]

    weekly = window_aggregate(
        dataset, week_boundaries(first, last), metric, "mean", end=last
    )
    line = [
        {
            "date": week.start.isoformat(),
            "value": week.value,
            "x": x_scale(week.start),
            "y": y_scale(week.value),
        }
        for week in weekly
        if week.has_data
    ]

    windows = season_windows(first, last, seasons)
    season_means = window_aggregate(
        dataset, [w.start for w in windows], metric, "mean", end=windows[-1].end
    )
    bands = []
    for window, aggregate in zip(windows, season_means):
        if not aggregate.has_data:
            continue
        x = x_scale(window.start)
        width = x_scale(window.end) - x
        bands.append({
            "name": window.season.name,
            "color": window.season.color,
            "start": window.start.isoformat(),
            "end": window.end.isoformat(),
            "count": aggregate.count,
            "mean": aggregate.value,
            "x": x,
            "width": width,
            "height": dimensions.bounded_height,
            "opacity": 0.1,
            "mean_y": y_scale(aggregate.value),
            "label": {"x": x + width / 2, "y": dimensions.margin.bottom - 8},
        })

    logger.info(
        f"Built timeline for {metric}: {len(points)} points, "
        f"{len(line)} weeks, {len(bands)} seasons"
    )

    y_axis = {"label": metric_label(metric), "ticks": _axis_ticks(y_scale, 3)}
    if bands:
        y_axis["season_mean_label"] = {"text": "Season mean", "y": bands[0]["mean_y"]}

    return {
        "kind": "timeline",
        "metric": metric,
        "title": f"Weekly {metric_label(metric)} with seasonal means",
        "dimensions": dimensions.to_dict(),
        "x_scale": x_scale.to_dict(),
        "y_scale": y_scale.to_dict(),
        "clip": {
            "x": 0,
            "y": 10,
            "width": dimensions.bounded_width,
            "height": dimensions.bounded_height - 10,
        },
        "points": points,
        "line": line,
        "seasons": bands,
        "y_axis": y_axis,
        "observation_count": len(points),
    }


def build_box_plot(
    observations: Sequence[Observation],
    metric: str,
    dimensions: Dimensions,
    outlier_factor: float = 1.5,
) -> Dict[str, Any]:
    """
    Build a monthly box plot of one metric.

    Months run (first of month, first of next month]; the last month ends
    at the last observation date. Months without observations are dropped,
    as are observations on or before the first month boundary; both are
    logged. The y domain always includes zero.

    Raises:
        NoDataError: If no month holds any observation
    """
    dataset = _sorted_with_metric(observations, metric)
    first, last = dataset[0].date, dataset[-1].date

    months = month_boundaries(first, last)
    leading = [o for o in dataset if months and o.date <= months[0]]
    if leading:
        logger.warning(
            f"{len(leading)} {metric} observations on or before {months[0]} "
            f"precede the first month window, skipping them"
        )
    label_format = "%b" if first.year == last.year else "%b %Y"

    summaries = []
    for start, end, members in partition_observations(dataset, months, end=last):
        if not members:
            logger.warning(f"No {metric} observations between {start} and {end}, skipping month")
            continue
        summaries.append(
            (start, end, quartile_outliers(members, metric, factor=outlier_factor))
        )

    if not summaries:
        raise NoDataError(f"No complete month of {metric} observations")

    x_scale = BandScale(
        [start.strftime(label_format) for start, _, _ in summaries],
        (0, dimensions.bounded_width),
        padding=0.15,
    )
    low, high = extent(o.value(metric) for o in dataset)
    y_scale = LinearScale(
        (min(0.0, low), max(0.0, high)), (dimensions.bounded_height, 0)
    ).nice()
    bandwidth = x_scale.bandwidth

    boxes = []
    for start, end, summary in summaries:
        label = start.strftime(label_format)
        cx = x_scale.center(label)
        boxes.append({
            "label": label,
            "start": start.isoformat(),
            "end": end.isoformat(),
            "count": summary.count,
            "median": summary.median,
            "q1": summary.q1,
            "q3": summary.q3,
            "iqr": summary.iqr,
            "cx": cx,
            "box": {
                "x": cx - bandwidth / 2,
                "y": y_scale(summary.q3),
                "width": bandwidth,
                "height": y_scale(summary.q1) - y_scale(summary.q3),
            },
            "median_y": y_scale(summary.median),
            "whisker": {
                "top": y_scale(summary.median + summary.iqr),
                "bottom": y_scale(summary.median - summary.iqr),
                "half_width": bandwidth / 4,
            },
            "outliers": [
                {
                    "date": o.date.isoformat(),
                    "value": o.value(metric),
                    "cx": cx,
                    "cy": y_scale(o.value(metric)),
                }
                for o in summary.outliers
            ],
        })

    logger.info(f"Built box plot for {metric}: {len(boxes)} months")

    return {
        "kind": "boxplot",
        "metric": metric,
        "title": f"Monthly distribution of {metric_label(metric)}",
        "dimensions": dimensions.to_dict(),
        "x_scale": x_scale.to_dict(),
        "y_scale": y_scale.to_dict(),
        "boxes": boxes,
        "x_axis": {
            "ticks": [{"value": label, "position": x_scale.center(label)} for label in x_scale.labels],
        },
        "y_axis": {"label": metric_label(metric), "ticks": _axis_ticks(y_scale, 6)},
        "observation_count": sum(box["count"] for box in boxes),
    }


BUILDERS = {
    "histogram": build_histogram,
    "timeline": build_timeline,
    "boxplot": build_box_plot,
}
