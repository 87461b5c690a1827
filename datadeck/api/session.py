from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple, Union

from datadeck.analysis import (
    AnalysisView,
    ChartMode,
    Table,
    infer_schema,
    load_dataset,
    run_analysis,
    sample_table,
)
from datadeck.analysis.core.utils import TextInput
from datadeck.common.report import build_report, report_bytes, report_filename

logger = logging.getLogger("datadeck.session")


@dataclass(frozen=True)
class SessionSnapshot:
    table: Table
    chart_mode: ChartMode
    selected_metrics: List[str] = field(default_factory=list)
    file_name: Optional[str] = None


class AnalysisSession:
    """
    In-memory UI state for one user: the current table, chart mode, selected
    metrics and the name of the last loaded file.

    Loads replace the table wholesale. Parsing runs outside the lock, so when
    two uploads overlap the one that finishes last wins.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._table = Table()
        self._chart_mode = ChartMode.LINE
        self._selected: List[str] = []
        self._file_name: Optional[str] = None
        self.load_sample()

    def _replace_table(self, table: Table, file_name: Optional[str]) -> None:
        with self._lock:
            self._table = table
            self._file_name = file_name
            self._selected = list(infer_schema(table).numeric_columns)

    def load_sample(self) -> Table:
        table = sample_table()
        self._replace_table(table, None)
        logger.info("sample data loaded", extra={"rows": len(table)})
        return table

    def load_file(self, file_name: str, body: TextInput) -> Table:
        # raises before any state is touched
        table = load_dataset(file_name, body)
        self._replace_table(table, file_name)
        return table

    def set_chart_mode(self, mode: Union[ChartMode, str]) -> ChartMode:
        chart_mode = ChartMode(mode)
        with self._lock:
            self._chart_mode = chart_mode
        return chart_mode

    def toggle_metric(self, name: str) -> List[str]:
        with self._lock:
            numeric = infer_schema(self._table).numeric_columns
            if name not in numeric:
                raise KeyError(name)
            if name in self._selected:
                self._selected = [metric for metric in self._selected if metric != name]
            else:
                self._selected = self._selected + [name]
            return list(self._selected)

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                table=self._table,
                chart_mode=self._chart_mode,
                selected_metrics=list(self._selected),
                file_name=self._file_name,
            )

    def current(self) -> Tuple[SessionSnapshot, AnalysisView]:
        """Snapshot plus the view derived from that same snapshot."""
        snap = self.snapshot()
        return snap, run_analysis(snap.table, snap.chart_mode, snap.selected_metrics)

    def view(self) -> AnalysisView:
        return self.current()[1]

    def export_report(self, now: Optional[datetime] = None) -> Tuple[str, bytes]:
        now = now or datetime.now(timezone.utc)
        snap, view = self.current()
        report = build_report(
            snap.table,
            view.statistics,
            file_name=snap.file_name,
            generated_at=now,
        )
        return report_filename(now), report_bytes(report)
