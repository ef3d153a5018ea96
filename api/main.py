from __future__ import annotations

import logging
import math
import os
from typing import Callable, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import ComparisonFiltersModel, LeaderboardFiltersModel, MetaListResponse
from insights.data import LOAD_ERROR_MESSAGE, DataLoadError, load_agency_data, load_agent_data
from insights.filters import normalize_comparison_filters, normalize_leaderboard_filters, normalize_metric
from insights.metrics_agency import compute_agency_dashboard
from insights.metrics_agent import agent_names, compute_agent_dashboard
from insights.metrics_classifications import compute_classifications
from insights.metrics_comparison import compute_comparison
from insights.metrics_debug import compute_debug
from insights.metrics_leaderboard import compute_leaderboard
from insights.metrics_overview import compute_overview

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = FastAPI(title="Agent Insights API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8501"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                float: _safe_float,
                np.integer: int,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _handle(name: str, build: Callable[[], object]) -> JSONResponse:
    try:
        return _json(build())
    except DataLoadError:
        logger.exception("%s: data load failed", name)
        return JSONResponse(status_code=503, content={"error": LOAD_ERROR_MESSAGE, "type": "DataLoadError"})
    except Exception as exc:
        logger.exception("%s failed", name)
        return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/meta/agents", response_model=MetaListResponse)
def meta_agents():
    return _handle("meta_agents", lambda: {"values": agent_names(load_agent_data())})


@app.get("/meta/agencies", response_model=MetaListResponse)
def meta_agencies():
    return _handle("meta_agencies", lambda: {"values": [a.name for a in load_agency_data()]})


@app.get("/overview")
def overview():
    return _handle("overview", lambda: compute_overview(load_agent_data(), load_agency_data()))


@app.post("/leaderboard")
def leaderboard(filters: LeaderboardFiltersModel):
    def build():
        f = normalize_leaderboard_filters(filters.model_dump())
        return compute_leaderboard(f, load_agent_data())

    return _handle("leaderboard", build)


@app.get("/classifications")
def classifications(metric: str = Query(default="dollar-index")):
    return _handle("classifications", lambda: compute_classifications(load_agent_data(), normalize_metric(metric)))


@app.get("/agents/dashboard")
def agent_dashboard(agent: Optional[str] = Query(default=None)):
    return _handle("agent_dashboard", lambda: compute_agent_dashboard(load_agent_data(), agent or None))


@app.get("/agencies/dashboard")
def agency_dashboard(agency: Optional[str] = Query(default=None)):
    return _handle(
        "agency_dashboard",
        lambda: compute_agency_dashboard(load_agency_data(), load_agent_data(), agency or None),
    )


@app.post("/comparison")
def comparison(filters: ComparisonFiltersModel):
    def build():
        f = normalize_comparison_filters(filters.model_dump())
        return compute_comparison(f, load_agent_data())

    return _handle("comparison", build)


@app.get("/debug")
def debug():
    return _handle("debug", lambda: compute_debug(load_agent_data(), load_agency_data()))


def export_frame(page: str) -> pd.DataFrame:
    if page == "agents":
        return pd.DataFrame([a.to_dict() for a in load_agent_data().agents])
    if page == "ranks":
        return pd.DataFrame([a.to_dict() for a in load_agent_data().ranks])
    if page == "agencies":
        return pd.DataFrame([a.to_dict() for a in load_agency_data()])
    if page == "players":
        return pd.DataFrame([p.to_dict() for p in load_agent_data().player_investments])
    return pd.DataFrame()


@app.get("/export/{page}")
def export_page(page: str):
    try:
        export_df = export_frame(page)
    except DataLoadError:
        logger.exception("export %s: data load failed", page)
        return JSONResponse(status_code=503, content={"error": LOAD_ERROR_MESSAGE, "type": "DataLoadError"})
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={page}.csv"},
    )


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("api.main:app", host="0.0.0.0", port=port, reload=True)
