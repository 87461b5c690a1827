from __future__ import annotations
import math
from typing import Any, Dict, Iterable, List, MutableMapping, Optional, Union
from ..core.types import ChartData, ChartMode, PieChartData, PieSlice, Schema, Series, SeriesChartData, Table
from ..core.state import _with_phase, _emit_callback
from ..core.constants import COLORS


def _color_for(index: int) -> str:
    return COLORS[index % len(COLORS)]


def build_pie_data(table: Table, schema: Schema) -> PieChartData:
    """One slice per numeric column, sized by the absolute value found in the last record."""
    last = table.last
    if last is None or not schema.numeric_columns:
        return PieChartData(slices=[])

    slices: List[PieSlice] = []
    for name in schema.numeric_columns:
        cell = last.get(name)
        value = abs(cell.value) if cell is not None and cell.is_number else 0
        # NaN compares false and is dropped along with zero and infinity
        if not 0 < value < math.inf:
            continue
        slices.append(PieSlice(name=name, value=value, color=_color_for(len(slices))))
    return PieChartData(slices=slices)


def build_series_data(
    table: Table, schema: Schema, mode: ChartMode, selected_metrics: Iterable[str]
) -> SeriesChartData:
    category = schema.category_column
    if category is not None:
        labels: List[Any] = [cell.value for cell in table.column_cells(category)]
    else:
        labels = list(range(1, len(table) + 1))

    numeric = set(schema.numeric_columns)
    series: List[Series] = []
    for name in selected_metrics:
        if name not in numeric:
            continue
        values: List[Optional[float]] = [
            cell.value if cell.is_number else None for cell in table.column_cells(name)
        ]
        series.append(Series(name=name, values=values, color=_color_for(len(series))))
    return SeriesChartData(mode=mode, category_column=category, labels=labels, series=series)


def build_chart_data(
    table: Table, schema: Schema, mode: Union[ChartMode, str], selected_metrics: Iterable[str]
) -> ChartData:
    mode = ChartMode(mode)
    if mode is ChartMode.PIE:
        return build_pie_data(table, schema)
    return build_series_data(table, schema, mode, selected_metrics)


def _selected_metrics(state: MutableMapping[str, Any]) -> List[str]:
    selected = state.get("selected_metrics")
    if selected is None:
        return list(state["schema"].numeric_columns)
    return list(selected)


def chart_data_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    chart = build_chart_data(
        state["table"],
        state["schema"],
        state.get("chart_mode") or ChartMode.LINE,
        _selected_metrics(state),
    )
    payload = chart.to_dict()
    update = _with_phase(state, "chart_data", payload, chart=chart)
    _emit_callback(state, "chart_data", payload)
    return update
