from __future__ import annotations
from typing import Any, List, Optional, Sequence
import io
import math
import logging
import matplotlib
matplotlib.use("Agg")  # safe headless backend
from matplotlib import pyplot as plt

from .core.constants import _DEFAULT_CHART_DPI
from .core.types import ChartData, ChartMode, PieChartData, SeriesChartData

logger = logging.getLogger(__name__)

_FIGSIZE = (10, 4.5)


def _figure_bytes(fig, dpi: int) -> bytes:
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=dpi)
    plt.close(fig)
    buffer.seek(0)
    return buffer.getvalue()


def _plot_values(values: Sequence[Optional[float]]) -> List[float]:
    # gaps and infinities are drawn as breaks in the line
    plotted = [float("nan") if value is None else float(value) for value in values]
    return [value if math.isfinite(value) else float("nan") for value in plotted]


def _label_text(value: Any) -> str:
    return "" if value is None else str(value)


def _style_axes(ax, chart: SeriesChartData) -> None:
    positions = range(len(chart.labels))
    ax.set_xticks(list(positions))
    rotation = 45 if len(chart.labels) > 12 else 0
    ax.set_xticklabels(
        [_label_text(label) for label in chart.labels],
        rotation=rotation,
        ha="right" if rotation else "center",
    )
    ax.set_xlabel(chart.category_column or "row")
    ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.5)
    if chart.series:
        ax.legend(loc="best")


def _render_line(chart: SeriesChartData, dpi: int) -> bytes:
    fig, ax = plt.subplots(figsize=_FIGSIZE)
    positions = list(range(len(chart.labels)))
    for series in chart.series:
        ax.plot(
            positions,
            _plot_values(series.values),
            color=series.color,
            linewidth=2,
            marker="o",
            markersize=4,
            label=series.name,
        )
    _style_axes(ax, chart)
    fig.tight_layout()
    return _figure_bytes(fig, dpi)


def _render_bar(chart: SeriesChartData, dpi: int) -> bytes:
    fig, ax = plt.subplots(figsize=_FIGSIZE)
    count = max(1, len(chart.series))
    width = 0.8 / count
    for index, series in enumerate(chart.series):
        offset = (index - (count - 1) / 2.0) * width
        positions = [position + offset for position in range(len(chart.labels))]
        ax.bar(
            positions,
            _plot_values(series.values),
            width=width,
            color=series.color,
            label=series.name,
        )
    _style_axes(ax, chart)
    ax.axhline(0, color="#64748b", linewidth=0.8)
    fig.tight_layout()
    return _figure_bytes(fig, dpi)


def _render_pie(chart: PieChartData, dpi: int) -> bytes:
    total = float(sum(item.value for item in chart.slices))
    labels = [f"{item.name}: {item.value / total * 100:.0f}%" for item in chart.slices]

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.pie(
        [item.value for item in chart.slices],
        labels=labels,
        colors=[item.color for item in chart.slices],
        startangle=90,
        counterclock=False,
        wedgeprops={"edgecolor": "white"},
    )
    ax.legend([item.name for item in chart.slices], loc="lower right", fontsize="small")
    ax.set_aspect("equal")
    fig.tight_layout()
    return _figure_bytes(fig, dpi)


def render_chart(chart: ChartData, *, dpi: int = _DEFAULT_CHART_DPI) -> Optional[bytes]:
    """Render chart input to PNG bytes, or None when there is nothing to draw."""
    if chart.is_empty:
        return None
    logger.debug("rendering chart", extra={"mode": chart.mode.value, "dpi": dpi})
    if isinstance(chart, PieChartData):
        return _render_pie(chart, dpi)
    if chart.mode is ChartMode.BAR:
        return _render_bar(chart, dpi)
    return _render_line(chart, dpi)
