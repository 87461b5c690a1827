"""Helpers for exporting the current table and its statistics as a JSON report."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from datadeck.analysis.core.constants import SAMPLE_SOURCE_NAME
from datadeck.analysis.core.types import Statistic, Table
from datadeck.analysis.core.utils import _json_safe


REPORT_CONTENT_TYPE = "application/json"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def _epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def _json_bytes(data: Any) -> bytes:
    return json.dumps(_json_safe(data), indent=2, ensure_ascii=False, default=str).encode("utf-8")


def report_filename(moment: Optional[datetime] = None) -> str:
    return f"report-{_epoch_millis(moment or _utcnow())}.json"


def build_report(
    table: Table,
    statistics: Mapping[str, Statistic],
    *,
    file_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    return {
        "fileName": file_name or SAMPLE_SOURCE_NAME,
        "date": _iso_timestamp(generated_at or _utcnow()),
        "dataCount": len(table),
        "statistics": {name: stat.to_dict() for name, stat in statistics.items()},
        "data": table.to_records(),
    }


def report_bytes(report: Mapping[str, Any]) -> bytes:
    """UTF-8, pretty-printed JSON; NaN and infinities become null."""
    return _json_bytes(dict(report))
