import math

from datadeck.analysis import ChartMode, Table, build_chart_data, infer_schema, sample_table
from datadeck.analysis.core.constants import COLORS
from datadeck.analysis.core.types import PieChartData, SeriesChartData


def _chart(table, mode, selected=None):
    schema = infer_schema(table)
    if selected is None:
        selected = schema.numeric_columns
    return build_chart_data(table, schema, mode, selected)


def test_pie_uses_absolute_last_values_and_skips_zero():
    table = Table.from_records([{"a": 1, "b": 1, "c": 1}, {"a": 5, "b": 0, "c": -3}])
    chart = _chart(table, "pie")
    assert isinstance(chart, PieChartData)
    assert [(item.name, item.value) for item in chart.slices] == [("a", 5), ("c", 3)]
    assert [item.color for item in chart.slices] == COLORS[:2]


def test_pie_treats_missing_or_non_numeric_last_value_as_zero():
    table = Table.from_records([{"a": 1, "b": 2, "c": 3}, {"a": "x", "c": 4}])
    chart = _chart(table, "pie")
    assert [item.name for item in chart.slices] == ["c"]


def test_pie_ignores_selection():
    table = sample_table()
    chart = _chart(table, ChartMode.PIE, selected=["sales"])
    assert [item.name for item in chart.slices] == ["sales", "expenses", "profit"]
    assert [item.value for item in chart.slices] == [7200, 3500, 3700]


def test_pie_of_empty_table():
    chart = _chart(Table(), "pie")
    assert chart.is_empty
    assert chart.to_dict() == {"mode": "pie", "slices": []}


def test_line_series_follow_selection_order():
    chart = _chart(sample_table(), "line", selected=["profit", "sales"])
    assert isinstance(chart, SeriesChartData)
    assert chart.mode is ChartMode.LINE
    assert chart.category_column == "month"
    assert chart.labels[0] == "Jan" and chart.labels[-1] == "Dec"
    assert chart.series_names() == ["profit", "sales"]
    assert chart.series[0].color == COLORS[0]
    assert chart.series[1].values[0] == 4000


def test_toggling_a_metric_off_keeps_rows_and_other_series():
    table = sample_table()
    full = _chart(table, "bar")
    reduced = _chart(table, "bar", selected=["sales", "profit"])

    assert reduced.labels == full.labels
    assert reduced.series_names() == ["sales", "profit"]
    full_values = {series.name: series.values for series in full.series}
    for series in reduced.series:
        assert series.values == full_values[series.name]
    assert len(table) == 12


def test_series_gaps_for_non_numeric_cells():
    table = Table.from_records([{"t": "a", "v": 1}, {"t": "b", "v": "bad"}, {"t": "c"}, {"t": "d", "v": 2.5}])
    chart = _chart(table, "line")
    assert chart.series[0].values == [1, None, None, 2.5]


def test_unknown_selected_metrics_are_ignored():
    chart = _chart(sample_table(), "line", selected=["month", "nope", "sales"])
    assert chart.series_names() == ["sales"]


def test_row_position_labels_without_category_column():
    table = Table.from_records([{"x": 1}, {"x": 2}, {"x": 3}])
    chart = _chart(table, "line")
    assert chart.category_column is None
    assert chart.labels == [1, 2, 3]


def test_palette_cycles():
    columns = [f"m{index}" for index in range(10)]
    table = Table.from_records([{name: 1 for name in columns}])
    chart = _chart(table, "line")
    assert chart.series[8].color == COLORS[0]
    assert chart.series[9].color == COLORS[1]


def test_nan_last_value_is_not_a_slice():
    table = Table.from_records([{"a": math.nan, "b": 2}])
    chart = _chart(table, "pie")
    assert [item.name for item in chart.slices] == ["b"]
