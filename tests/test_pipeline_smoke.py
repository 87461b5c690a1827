# tests/test_pipeline_smoke.py
import pytest

from datadeck.analysis import ChartMode, load_dataset, run_analysis, sample_table
from datadeck.analysis.core.types import PieChartData, SeriesChartData


CSV_SMALL = (
    b"species,sepal_length,sepal_width,petal_length,petal_width\n"
    b"setosa,5.1,3.5,1.4,0.2\n"
    b"setosa,4.9,3.0,1.4,0.2\n"
)

PHASES_EXPECTED = [
    "schema",
    "statistics",
    "chart_data",
]


def _assert_view(view):
    # Phases present & ordered
    assert list(view.phases.keys()) == PHASES_EXPECTED

    assert view.schema.category_column == "species"
    assert view.schema.numeric_columns == ["sepal_length", "sepal_width", "petal_length", "petal_width"]
    assert view.row_count == 2
    assert set(view.statistics) == set(view.schema.numeric_columns)


def test_pipeline_line_mode():
    table = load_dataset("iris.csv", CSV_SMALL)
    view = run_analysis(table, ChartMode.LINE)

    _assert_view(view)
    assert isinstance(view.chart, SeriesChartData)
    assert view.chart.labels == ["setosa", "setosa"]
    assert view.chart.series_names() == view.schema.numeric_columns
    assert view.phases["statistics"]["numericColumns"] == 4


def test_pipeline_pie_mode_ignores_selection():
    table = load_dataset("iris.csv", CSV_SMALL)
    view = run_analysis(table, "pie", selected_metrics=["sepal_length"])

    _assert_view(view)
    assert isinstance(view.chart, PieChartData)
    assert [item.name for item in view.chart.slices] == view.schema.numeric_columns


def test_pipeline_reports_each_phase():
    seen = []

    def on_phase(phase, payload, index, total):
        seen.append((phase, index, total))

    run_analysis(sample_table(), "bar", on_phase=on_phase)

    assert seen == [("schema", 0, 3), ("statistics", 1, 3), ("chart_data", 2, 3)]


def test_pipeline_empty_table():
    view = run_analysis(load_dataset("empty.json", b"[]"), "line")

    assert view.row_count == 0
    assert view.schema.numeric_columns == []
    assert view.schema.category_column is None
    assert view.statistics == {}
    assert view.chart.is_empty


def test_pipeline_rejects_unknown_mode():
    with pytest.raises(ValueError):
        run_analysis(sample_table(), "scatter")
