# datadeck/api/app.py
from __future__ import annotations

import logging
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from datadeck.analysis import ChartMode, ParseError, UnsupportedFormatError
from datadeck.analysis.core.constants import CHART_MODES, SAMPLE_SOURCE_NAME, _DEFAULT_CHART_DPI
from datadeck.analysis.core.utils import _format_number, _json_safe
from datadeck.analysis.viz import render_chart
from datadeck.common.report import REPORT_CONTENT_TYPE

from .session import AnalysisSession

# ---- Env ----
LOG_LEVEL = os.environ.get("DATADECK_LOG_LEVEL", "INFO").upper()
MAX_UPLOAD_BYTES = int(os.environ.get("DATADECK_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
CHART_DPI = int(os.environ.get("DATADECK_CHART_DPI", str(_DEFAULT_CHART_DPI)))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "DATADECK_CORS_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000"
    ).split(",")
    if origin.strip()
]

# ---- Logging ----
logger = logging.getLogger("datadeck.api")
if not logger.handlers:
    logging.basicConfig(level=LOG_LEVEL)
logger.setLevel(LOG_LEVEL)

# ---- Templates ----
_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
_DASHBOARD_TEMPLATE_NAME = "dashboard.html.j2"
_JINJA_ENV = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml", "j2"]),
)
_JINJA_ENV.filters["fmt"] = _format_number

# ---- App ----
app = FastAPI(title="datadeck")
app.state.session = AnalysisSession()

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["content-disposition", "x-request-id"],
    allow_credentials=False,
)


# ---- Models ----
class ChartModeUpdate(BaseModel):
    """Request payload for switching the chart type."""
    mode: ChartMode


def get_session() -> AnalysisSession:
    return app.state.session


def reset_session() -> AnalysisSession:
    app.state.session = AnalysisSession()
    return app.state.session


def _session_payload(session: AnalysisSession) -> Dict[str, Any]:
    snap, view = session.current()
    return _json_safe({
        "fileName": snap.file_name or SAMPLE_SOURCE_NAME,
        "chartMode": snap.chart_mode.value,
        "selectedMetrics": snap.selected_metrics,
        "schema": view.schema.to_dict(),
        "rowCount": view.row_count,
        "statistics": view.statistics_dict(),
    })


# ---- Routes ----
@app.get("/health")
def health():
    return {"ok": True}


@app.get("/", response_class=HTMLResponse)
def dashboard():
    session = get_session()
    snap, view = session.current()
    columns: List[str] = snap.table.columns
    rows = [[record.get(name).value if name in record else None for name in columns] for record in snap.table]
    context = {
        "file_name": snap.file_name,
        "chart_mode": snap.chart_mode.value,
        "chart_modes": CHART_MODES,
        "numeric_columns": view.schema.numeric_columns,
        "selected_metrics": snap.selected_metrics,
        "statistics": list(view.statistics.items()),
        "columns": columns,
        "rows": rows,
        "row_count": view.row_count,
        "chart_available": not view.chart.is_empty,
        "cache_token": uuid.uuid4().hex,
    }
    template = _JINJA_ENV.get_template(_DASHBOARD_TEMPLATE_NAME)
    return HTMLResponse(template.render(context))


@app.get("/session")
def get_session_state():
    return _session_payload(get_session())


@app.post("/datasets")
async def upload_dataset(
    request: Request,
    filename: str = Query(..., description="Name of the uploaded file; its extension selects the parser"),
):
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"File exceeds the {MAX_UPLOAD_BYTES} byte upload limit")
    body = await request.body()
    if len(body) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"File exceeds the {MAX_UPLOAD_BYTES} byte upload limit")

    session = get_session()
    try:
        table = session.load_file(filename, body)
    except UnsupportedFormatError as exc:
        logger.warning("rejected upload", extra={"file_name": filename, "reason": "unsupported_format"})
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except ParseError as exc:
        logger.warning("rejected upload", extra={"file_name": filename, "reason": "parse_error"})
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info("dataset replaced", extra={"file_name": filename, "rows": len(table)})
    return _session_payload(session)


@app.post("/datasets/sample")
def load_sample_dataset():
    session = get_session()
    session.load_sample()
    return _session_payload(session)


@app.put("/chart-mode")
def set_chart_mode(body: ChartModeUpdate):
    session = get_session()
    session.set_chart_mode(body.mode)
    return _session_payload(session)


@app.post("/metrics/toggle/{name:path}")
def toggle_metric(name: str):
    session = get_session()
    try:
        session.toggle_metric(name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown metric: {name}") from exc
    return _session_payload(session)


@app.get("/chart-data")
def get_chart_data():
    view = get_session().view()
    return _json_safe(view.chart.to_dict())


@app.get("/chart.png")
def get_chart_image():
    view = get_session().view()
    rendered = render_chart(view.chart, dpi=CHART_DPI)
    if rendered is None:
        raise HTTPException(status_code=404, detail="No chart available for the current data")
    return Response(content=rendered, media_type="image/png", headers={"Cache-Control": "no-store"})


@app.get("/table")
def get_table():
    table = get_session().snapshot().table
    return _json_safe({"columns": table.columns, "rows": table.to_records()})


@app.get("/report")
def download_report():
    filename, body = get_session().export_report()
    logger.info("report exported", extra={"report_file": filename, "bytes": len(body)})
    return Response(
        content=body,
        media_type=REPORT_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---- Middleware ----
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    try:
        response = await call_next(request)
        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            "request completed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "request_id": request_id,
            },
        )
        response.headers.setdefault("x-request-id", request_id)
        return response
    except Exception:
        duration_ms = int((time.time() - start) * 1000)
        logger.exception(
            "request failed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "request_id": request_id,
                "duration_ms": duration_ms,
            },
        )
        raise
