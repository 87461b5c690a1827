from __future__ import annotations
from typing import Any, Dict, List, MutableMapping, Optional
from ..core.types import Schema, Table
from ..core.state import _with_phase, _emit_callback


def infer_schema(table: Table) -> Schema:
    """Classify columns by looking at the first record only.

    Later rows are not consulted; cells that disagree with the first row's
    type are simply skipped by the statistics and chart code.
    """
    first = table.records[0] if len(table) else None
    if first is None:
        return Schema()

    numeric: List[str] = []
    category: Optional[str] = None
    for name, cell in first.items():
        if cell.is_number:
            numeric.append(name)
        elif category is None:
            category = name
    return Schema(numeric_columns=numeric, category_column=category)


def schema_node(state: MutableMapping[str, Any]) -> Dict[str, Any]:
    schema = infer_schema(state["table"])
    payload = schema.to_dict()
    update = _with_phase(state, "schema", payload, schema=schema)
    _emit_callback(state, "schema", payload)
    return update
