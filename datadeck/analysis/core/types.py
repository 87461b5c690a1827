from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
import math

from .constants import _MAX_SAFE_INTEGER


def _int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


class CellKind(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    NULL = "null"


class ChartMode(str, Enum):
    LINE = "line"
    BAR = "bar"
    PIE = "pie"


@dataclass(frozen=True)
class Cell:
    """One value of a record, tagged with its kind."""

    kind: CellKind
    value: Any = None

    @classmethod
    def of(cls, value: Any) -> "Cell":
        # bool is a subclass of int and must be checked first
        if value is None:
            return cls(CellKind.NULL, None)
        if isinstance(value, bool):
            return cls(CellKind.BOOLEAN, value)
        if isinstance(value, int) and not -_MAX_SAFE_INTEGER <= value <= _MAX_SAFE_INTEGER:
            return cls(CellKind.NUMBER, _int_to_float(value))
        if isinstance(value, (int, float)):
            return cls(CellKind.NUMBER, value)
        return cls(CellKind.TEXT, value)

    @property
    def is_number(self) -> bool:
        return self.kind is CellKind.NUMBER

    @property
    def is_blank(self) -> bool:
        return self.kind is CellKind.NULL or (self.kind is CellKind.TEXT and self.value == "")


NULL_CELL = Cell(CellKind.NULL, None)

Record = Dict[str, Cell]


@dataclass(frozen=True)
class Table:
    """Ordered, immutable sequence of records. Row order is the chart x-axis order."""

    records: Tuple[Record, ...] = ()

    @classmethod
    def from_records(cls, rows: Iterable[Mapping[str, Any]]) -> "Table":
        return cls(tuple({str(key): Cell.of(value) for key, value in row.items()} for row in rows))

    def to_records(self) -> List[Dict[str, Any]]:
        return [{key: cell.value for key, cell in record.items()} for record in self.records]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def columns(self) -> List[str]:
        if not self.records:
            return []
        return list(self.records[0].keys())

    @property
    def last(self) -> Optional[Record]:
        return self.records[-1] if self.records else None

    def cell(self, index: int, column: str) -> Cell:
        return self.records[index].get(column, NULL_CELL)

    def column_cells(self, column: str) -> List[Cell]:
        return [record.get(column, NULL_CELL) for record in self.records]

    def numeric_values(self, column: str) -> List[Union[int, float]]:
        return [cell.value for cell in self.column_cells(column) if cell.is_number]


@dataclass(frozen=True)
class Schema:
    numeric_columns: List[str] = field(default_factory=list)
    category_column: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numericColumns": list(self.numeric_columns),
            "categoryColumn": self.category_column,
        }


@dataclass(frozen=True)
class Statistic:
    average: float
    median: float
    min_value: float
    max_value: float
    total: float
    trend: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average": self.average,
            "median": self.median,
            "min": self.min_value,
            "max": self.max_value,
            "sum": self.total,
            "trend": self.trend,
        }

    @property
    def trend_direction(self) -> str:
        if math.isnan(self.trend):
            return "flat"
        return "up" if self.trend >= 0 else "down"


@dataclass(frozen=True)
class Series:
    name: str
    values: List[Optional[float]]
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "values": list(self.values), "color": self.color}


@dataclass(frozen=True)
class SeriesChartData:
    """Input for line and bar charts."""

    mode: ChartMode
    category_column: Optional[str]
    labels: List[Any]
    series: List[Series]

    @property
    def is_empty(self) -> bool:
        return not self.labels

    def series_names(self) -> List[str]:
        return [item.name for item in self.series]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "categoryColumn": self.category_column,
            "labels": list(self.labels),
            "series": [item.to_dict() for item in self.series],
        }


@dataclass(frozen=True)
class PieSlice:
    name: str
    value: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "color": self.color}


@dataclass(frozen=True)
class PieChartData:
    slices: List[PieSlice]
    mode: ChartMode = ChartMode.PIE

    @property
    def is_empty(self) -> bool:
        return not self.slices

    def to_dict(self) -> Dict[str, Any]:
        return {"mode": self.mode.value, "slices": [item.to_dict() for item in self.slices]}


ChartData = Union[SeriesChartData, PieChartData]


@dataclass
class AnalysisView:
    schema: Schema
    statistics: Dict[str, Statistic]
    chart: ChartData
    row_count: int
    phases: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def statistics_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: stat.to_dict() for name, stat in self.statistics.items()}
