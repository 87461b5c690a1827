from __future__ import annotations
from typing import Any, Callable, Dict, List, Mapping, Optional, TypedDict
from .constants import PHASE_ORDER
from .types import ChartData, Schema, Statistic, Table


class AnalysisState(TypedDict, total=False):
    table: Table
    chart_mode: str
    selected_metrics: List[str]
    schema: Schema
    statistics: Dict[str, Statistic]
    chart: ChartData
    phase_outputs: Dict[str, Dict[str, Any]]
    _callback: Optional[Callable[..., None]]


def _with_phase(state: Mapping[str, Any], phase: str, payload: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
    phases = dict(state.get("phase_outputs", {}) or {})
    phases[phase] = payload
    update: Dict[str, Any] = {"phase_outputs": phases}
    update.update(extra)
    return update

def _emit_callback(state: Mapping[str, Any], phase: str, payload: Mapping[str, Any]) -> None:
    callback = state.get("_callback")
    if not callable(callback):
        return
    index = PHASE_ORDER.index(phase)
    callback(phase, payload, index, len(PHASE_ORDER))
