import json
from datetime import datetime, timezone

import pytest

from datadeck.analysis import ChartMode, ParseError, UnsupportedFormatError
from datadeck.api.session import AnalysisSession


@pytest.fixture()
def session():
    return AnalysisSession()


def test_initial_state_is_sample(session):
    snap = session.snapshot()
    assert len(snap.table) == 12
    assert snap.chart_mode is ChartMode.LINE
    assert snap.selected_metrics == ["sales", "expenses", "profit"]
    assert snap.file_name is None


def test_load_file_resets_selection_to_new_numeric_columns(session):
    session.toggle_metric("sales")
    session.load_file("scores.json", b'[{"who": "a", "score": 3, "bonus": 1}]')

    snap = session.snapshot()
    assert snap.file_name == "scores.json"
    assert snap.selected_metrics == ["score", "bonus"]


def test_failed_loads_leave_state_untouched(session):
    session.load_file("first.csv", b"k,v\na,1\n")
    session.toggle_metric("v")
    before = session.snapshot()

    with pytest.raises(ParseError):
        session.load_file("broken.json", b"{")
    with pytest.raises(UnsupportedFormatError):
        session.load_file("sheet.xlsx", b"")

    assert session.snapshot() == before


def test_last_completed_load_wins(session):
    session.load_file("a.json", b'[{"a": 1}]')
    session.load_file("b.json", b'[{"b": 2}, {"b": 3}]')
    snap = session.snapshot()
    assert snap.file_name == "b.json"
    assert snap.table.to_records() == [{"b": 2}, {"b": 3}]


def test_toggle_metric(session):
    assert session.toggle_metric("expenses") == ["sales", "profit"]
    assert session.toggle_metric("expenses") == ["sales", "profit", "expenses"]
    with pytest.raises(KeyError):
        session.toggle_metric("month")


def test_chart_mode(session):
    assert session.set_chart_mode("bar") is ChartMode.BAR
    assert session.view().chart.mode is ChartMode.BAR
    with pytest.raises(ValueError):
        session.set_chart_mode("area")
    assert session.snapshot().chart_mode is ChartMode.BAR


def test_view_reflects_selection(session):
    session.toggle_metric("profit")
    view = session.view()
    assert view.chart.series_names() == ["sales", "expenses"]
    assert set(view.statistics) == {"sales", "expenses", "profit"}


def test_load_sample_clears_file_name(session):
    session.load_file("x.csv", b"x\n1\n")
    session.load_sample()
    snap = session.snapshot()
    assert snap.file_name is None
    assert len(snap.table) == 12


def test_export_report(session):
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    session.load_file("vals.csv", b"n\n1\n2\n3\n4\n")
    filename, body = session.export_report(now=now)

    assert filename == f"report-{int(now.timestamp() * 1000)}.json"
    report = json.loads(body.decode("utf-8"))
    assert report["fileName"] == "vals.csv"
    assert report["date"] == "2024-01-02T03:04:05.000Z"
    assert report["dataCount"] == 4
    assert report["statistics"]["n"]["median"] == 3
    assert report["data"] == [{"n": 1}, {"n": 2}, {"n": 3}, {"n": 4}]
