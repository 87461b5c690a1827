"""Tabular analysis core: loading, schema inference, statistics and chart input."""
from .app import build_graph, run_analysis
from .core.constants import SAMPLE_DATA, SAMPLE_SOURCE_NAME
from .core.errors import DatasetError, ParseError, UnsupportedFormatError
from .core.types import AnalysisView, Cell, CellKind, ChartMode, Schema, Statistic, Table
from .io.ingest import load_dataset, parse_csv, parse_json
from .nodes.charts import build_chart_data
from .nodes.schema import infer_schema
from .nodes.statistics import compute_column_statistic, compute_statistics


def sample_table() -> Table:
    return Table.from_records(SAMPLE_DATA)


__all__ = [
    "AnalysisView",
    "Cell",
    "CellKind",
    "ChartMode",
    "DatasetError",
    "ParseError",
    "SAMPLE_SOURCE_NAME",
    "Schema",
    "Statistic",
    "Table",
    "UnsupportedFormatError",
    "build_chart_data",
    "build_graph",
    "compute_column_statistic",
    "compute_statistics",
    "infer_schema",
    "load_dataset",
    "parse_csv",
    "parse_json",
    "run_analysis",
    "sample_table",
]
