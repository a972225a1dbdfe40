"""
Static SVG rendering of chart payloads.

Draws in the payload's own pixel space: the figure is exactly
width x height pixels with the y axis pointing down, and shapes are
offset by the chart margins.
"""
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

logger = logging.getLogger(__name__)

DPI = 100
FONT_FAMILY = "sans-serif"

SVG_NS = "http://www.w3.org/2000/svg"
XML_NAMESPACES = {
    "": SVG_NS,
    "xlink": "http://www.w3.org/1999/xlink",
    "dc": "http://purl.org/dc/elements/1.1/",
    "cc": "http://creativecommons.org/ns#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
}
for _prefix, _uri in XML_NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)

# {"label": list label, "items": {gid: item label}} for the shapes of one chart
AriaList = Dict[str, Any]


def _axes_for(payload: Dict[str, Any]):
    dims = payload["dimensions"]
    width, height = dims["width"], dims["height"]
    fig = plt.figure(figsize=(width / DPI, height / DPI), dpi=DPI)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis("off")
    return fig, ax, dims["margin"]["left"], dims["margin"]["top"]


def _draw_histogram(ax, payload: Dict[str, Any], ox: float, oy: float) -> AriaList:
    bounded_height = payload["dimensions"]["bounded_height"]

    items = {}
    for index, bar in enumerate(payload["bars"]):
        rect = Rectangle(
            (ox + bar["x"], oy + bar["y"]), bar["width"], bar["height"],
            facecolor="cornflowerblue", edgecolor="none",
        )
        rect.set_gid(f"bar-{index}")
        ax.add_patch(rect)
        items[rect.get_gid()] = bar["aria_label"]
        if bar["label"]:
            ax.text(
                ox + bar["label"]["x"], oy + bar["label"]["y"], bar["label"]["text"],
                ha="center", va="bottom", fontsize=9, color="darkslategrey",
                family=FONT_FAMILY,
            )

    mean_x = ox + payload["mean"]["x"]
    ax.plot([mean_x, mean_x], [oy, oy + bounded_height], color="maroon",
            linewidth=2, linestyle=(0, (6, 6)))
    ax.text(mean_x + 5, oy + 5, "Mean", color="maroon", fontsize=9,
            va="top", family=FONT_FAMILY)

    baseline = oy + bounded_height
    for tick in payload["x_axis"]["ticks"]:
        x = ox + tick["position"]
        ax.plot([x, x], [baseline, baseline + 6], color="black", linewidth=1)
        ax.text(x, baseline + 9, f"{tick['value']:g}", ha="center", va="top", fontsize=8)
    ax.plot([ox, ox + payload["dimensions"]["bounded_width"]], [baseline, baseline],
            color="black", linewidth=1)
    ax.text(ox + payload["dimensions"]["bounded_width"] / 2,
            oy + bounded_height + payload["dimensions"]["margin"]["bottom"] - 10,
            payload["x_axis"]["label"], ha="center", va="bottom", fontsize=11)

    return {"label": "Histogram bars", "items": items}


def _draw_timeline(ax, payload: Dict[str, Any], ox: float, oy: float) -> AriaList:
    clip = payload["clip"]
    clip_box = Rectangle((ox + clip["x"], oy + clip["y"]), clip["width"], clip["height"],
                         transform=ax.transData, facecolor="none", edgecolor="none")
    ax.add_patch(clip_box)

    items = {}
    for index, band in enumerate(payload["seasons"]):
        rect = Rectangle((ox + band["x"], oy), band["width"], band["height"],
                         facecolor=band["color"], alpha=band["opacity"], edgecolor="none")
        rect.set_gid(f"season-{index}")
        ax.add_patch(rect)
        items[rect.get_gid()] = (
            f"{band['name']} from {band['start']} to {band['end']}: "
            f"mean {band['mean']:g} over {band['count']} days"
        )
        rect.set_clip_path(clip_box)
        (mean_line,) = ax.plot([ox + band["x"], ox + band["x"] + band["width"]],
                               [oy + band["mean_y"]] * 2, color="black", linewidth=1)
        mean_line.set_clip_path(clip_box)

    ax.plot([ox + p["cx"] for p in payload["points"]],
            [oy + p["cy"] for p in payload["points"]],
            linestyle="none", marker="o", markersize=2, color="#8395a7")
    ax.plot([ox + p["x"] for p in payload["line"]],
            [oy + p["y"] for p in payload["line"]],
            color="black", linewidth=2)

    baseline = oy + payload["dimensions"]["bounded_height"]
    for band in payload["seasons"]:
        ax.text(ox + band["label"]["x"], baseline + band["label"]["y"], band["name"],
                ha="center", va="baseline", fontsize=12)

    for tick in payload["y_axis"]["ticks"]:
        ax.text(ox - 5, oy + tick["position"], f"{tick['value']:g}",
                ha="right", va="center", fontsize=10)
    ax.text(ox, oy + 5, payload["y_axis"]["label"], ha="left", va="center", fontsize=10)
    season_mean = payload["y_axis"].get("season_mean_label")
    if season_mean:
        ax.text(ox - 10, oy + season_mean["y"], season_mean["text"], ha="right",
                va="center", fontsize=8, alpha=0.5)

    return {"label": "Seasons", "items": items}


def _draw_box_plot(ax, payload: Dict[str, Any], ox: float, oy: float) -> AriaList:
    items = {}
    for index, box in enumerate(payload["boxes"]):
        cx = ox + box["cx"]
        whisker = box["whisker"]
        half = whisker["half_width"]
        ax.plot([cx - half, cx + half], [oy + whisker["top"]] * 2, color="black", linewidth=1)
        ax.plot([cx, cx], [oy + whisker["top"], oy + whisker["bottom"]], color="black", linewidth=1)
        ax.plot([cx - half, cx + half], [oy + whisker["bottom"]] * 2, color="black", linewidth=1)

        rect = box["box"]
        patch = Rectangle((ox + rect["x"], oy + rect["y"]), rect["width"], rect["height"],
                          facecolor="cornflowerblue", edgecolor="none")
        patch.set_gid(f"box-{index}")
        ax.add_patch(patch)
        items[patch.get_gid()] = (
            f"{box['label']}: median {box['median']:g}, quartiles {box['q1']:g} to "
            f"{box['q3']:g}, {len(box['outliers'])} outliers"
        )
        ax.plot([ox + rect["x"], ox + rect["x"] + rect["width"]], [oy + box["median_y"]] * 2,
                color="black", linewidth=2)

        if box["outliers"]:
            ax.plot([ox + o["cx"] for o in box["outliers"]],
                    [oy + o["cy"] for o in box["outliers"]],
                    linestyle="none", marker="o", markersize=2, color="black")

    for tick in payload["x_axis"]["ticks"]:
        ax.text(ox + tick["position"], oy - 10, tick["value"], ha="center", va="bottom",
                fontsize=9, fontweight="bold")
    for tick in payload["y_axis"]["ticks"]:
        ax.text(ox - 5, oy + tick["position"], f"{tick['value']:g}", ha="right",
                va="center", fontsize=9)
    ax.text(8, oy + payload["dimensions"]["bounded_height"] / 2, payload["y_axis"]["label"],
            rotation=90, ha="center", va="center", fontsize=12)

    return {"label": "Monthly boxes", "items": items}


def _annotate_svg(path: Path, title: str, aria: AriaList) -> None:
    """
    Add static ARIA markup to a rendered SVG.

    The root becomes a figure titled by a <title> element, and the
    labelled shapes are gathered into a list group of list items.
    """
    tree = ET.parse(path)
    root = tree.getroot()

    title_element = ET.Element(f"{{{SVG_NS}}}title", {"id": "chart-title"})
    title_element.text = title
    root.insert(0, title_element)
    root.set("role", "figure")
    root.set("aria-labelledby", "chart-title")

    items = aria["items"]
    parents = {child: parent for parent in root.iter() for child in parent}
    shapes: List[ET.Element] = [el for el in root.iter() if el.get("id") in items]
    if shapes:
        anchor = parents[shapes[0]]
        group = ET.Element(f"{{{SVG_NS}}}g", {"role": "list", "aria-label": aria["label"]})
        anchor.insert(list(anchor).index(shapes[0]), group)
        for shape in shapes:
            parents[shape].remove(shape)
            shape.set("role", "listitem")
            shape.set("aria-label", items[shape.get("id")])
            group.append(shape)

    tree.write(path, encoding="utf-8", xml_declaration=True)


RENDERERS: Dict[str, Callable] = {
    "histogram": _draw_histogram,
    "timeline": _draw_timeline,
    "boxplot": _draw_box_plot,
}


def render_svg(payload: Dict[str, Any], path: Union[str, Path]) -> Path:
    """
    Render a chart payload to an SVG file.

    Args:
        payload: Chart payload from one of the builders
        path: Output file path (parent directories are created)

    Returns:
        Path of the written file
    """
    kind = payload.get("kind")
    if kind not in RENDERERS:
        raise ValueError(
            f"Unknown chart kind: {kind}. Must be one of {list(RENDERERS.keys())}"
        )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax, ox, oy = _axes_for(payload)
    try:
        aria = RENDERERS[kind](ax, payload, ox, oy)
        fig.savefig(path, format="svg", metadata={"Title": payload["title"]})
    finally:
        plt.close(fig)

    _annotate_svg(path, payload["title"], aria)

    logger.info(f"Rendered {kind} chart for {payload['metric']} to {path}")
    return path
