"""Tick metrics endpoints."""

from __future__ import annotations

from typing import Any

import numpy as np
from fastapi import APIRouter, HTTPException, Query, Request

from segnet.api.schemas import SummaryResponse, TimeSeriesResponse
from segnet.api.serializers import serialize_metrics

router = APIRouter()


def _get_session(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


@router.get("/{session_id}/ticks")
def get_ticks(
    session_id: str,
    request: Request,
    from_tick: int = Query(0, ge=0),
    to_tick: int | None = Query(None),
) -> list[dict[str, Any]]:
    session = _get_session(request, session_id)
    metrics = list(session.collector.metrics_history)
    return [
        serialize_metrics(m) for m in metrics
        if m.tick >= from_tick and (to_tick is None or m.tick < to_tick)
    ]


@router.get("/{session_id}/time-series/{field_name}", response_model=TimeSeriesResponse)
def get_time_series(session_id: str, field_name: str, request: Request):
    session = _get_session(request, session_id)

    collector = session.collector
    try:
        values = collector.get_time_series(field_name)
    except AttributeError:
        raise HTTPException(status_code=400, detail=f"Unknown metric field: '{field_name}'")

    # Convert numpy types to Python scalars
    safe_values = []
    for v in values:
        if isinstance(v, np.ndarray):
            safe_values.append(v.tolist())
        elif isinstance(v, (np.integer, np.floating)):
            safe_values.append(v.item())
        else:
            safe_values.append(v)

    return {
        "field": field_name,
        "ticks": collector.get_time_series("tick"),
        "values": safe_values,
    }


@router.get("/{session_id}/summary", response_model=SummaryResponse)
def get_summary(session_id: str, request: Request):
    session = _get_session(request, session_id)
    engine = session.engine
    latest = engine.latest

    return {
        "ticks": engine.ticks,
        "state": engine.state.value,
        "converged": engine.is_converged,
        "percent_similar": latest.percent_similar if latest else 0.0,
        "percent_unhappy": latest.percent_unhappy if latest else 0.0,
        "global_average_link_distance": (
            latest.global_average_link_distance if latest else 0.0
        ),
        "max_allowed_distance": session.config.max_allowed_distance,
        "total_moves": sum(a.moves for a in engine.agents),
    }
