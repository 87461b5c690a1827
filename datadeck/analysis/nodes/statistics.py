from __future__ import annotations
from typing import Any, Dict, List, MutableMapping, Optional, Sequence
import logging
import math
from ..core.types import Schema, Statistic, Table
from ..core.state import _with_phase, _emit_callback

logger = logging.getLogger(__name__)


def compute_column_statistic(values: Sequence[float]) -> Optional[Statistic]:
    """
    Aggregate one column's numeric values, given in table order.

    The median is the order statistic at index n // 2 of the sorted values,
    so even-length inputs yield the upper middle element rather than a mean
    of the two middle elements. Returns None for an empty sequence.
    """
    count = len(values)
    if count == 0:
        return None

    total = sum(values)
    ordered = sorted(values)
    try:
        average = total / count
    except OverflowError:
        average = math.inf if total > 0 else -math.inf
    return Statistic(
        average=average,
        median=ordered[count // 2],
        min_value=ordered[0],
        max_value=ordered[-1],
        total=total,
        trend=values[-1] - values[0],
    )


def compute_statistics(table: Table, numeric_columns: Sequence[str]) -> Dict[str, Statistic]:
    statistics: Dict[str, Statistic] = {}
    for name in numeric_columns:
        stat = compute_column_statistic(table.numeric_values(name))
        if stat is None:
            logger.debug("skipping column without numeric values", extra={"column": name})
            continue
        statistics[name] = stat
    return statistics


def statistics_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    schema: Schema = state["schema"]
    statistics = compute_statistics(state["table"], schema.numeric_columns)
    payload = {
        "numericColumns": len(statistics),
        "statistics": {name: stat.to_dict() for name, stat in statistics.items()},
    }
    update = _with_phase(state, "statistics", payload, statistics=statistics)
    _emit_callback(state, "statistics", payload)
    return update
