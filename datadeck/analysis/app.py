from __future__ import annotations

from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Optional, Union

from langgraph.graph import END, StateGraph

from .nodes import schema_node, statistics_node, chart_data_node
from .core.state import AnalysisState
from .core.types import AnalysisView, ChartMode, Table


PhaseCallback = Optional[Callable[..., None]]


@lru_cache(maxsize=1)
def build_graph():
    g = StateGraph(AnalysisState)
    g.add_node("schema", schema_node)
    g.add_node("statistics", statistics_node)
    g.add_node("chart_data", chart_data_node)

    g.set_entry_point("schema")
    g.add_edge("schema", "statistics")
    g.add_edge("statistics", "chart_data")
    g.add_edge("chart_data", END)
    return g.compile()


def run_analysis(
    table: Table,
    chart_mode: Union[ChartMode, str] = ChartMode.LINE,
    selected_metrics: Optional[Iterable[str]] = None,
    *,
    on_phase: PhaseCallback = None,
) -> AnalysisView:
    """
    Derive schema, statistics and chart input for one table/selection state.

    ``selected_metrics=None`` selects every numeric column. Nothing is cached:
    callers run this again after every dataset, mode or selection change.
    """
    mode = ChartMode(chart_mode)
    initial_state: Dict[str, Any] = {
        "table": table,
        "chart_mode": mode.value,
        "phase_outputs": {},
    }
    if selected_metrics is not None:
        initial_state["selected_metrics"] = list(selected_metrics)
    if on_phase:
        initial_state["_callback"] = on_phase

    final_state = build_graph().invoke(initial_state)

    return AnalysisView(
        schema=final_state["schema"],
        statistics=final_state.get("statistics", {}) or {},
        chart=final_state["chart"],
        row_count=len(table),
        phases=final_state.get("phase_outputs", {}) or {},
    )
