"""Simulation session management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from segnet.api.schemas import (
    CreateSessionRequest,
    RunRequest,
    SessionResponse,
    SessionSummary,
    StepRequest,
)
from segnet.core.config import SimulationConfig
from segnet.experiment.presets import get_preset

router = APIRouter()


def _session_response(session) -> dict:
    d = session.summary()
    d["config"] = session.config.to_dict()
    return d


@router.post("/sessions", response_model=SessionResponse)
def create_session(req: CreateSessionRequest, request: Request):
    mgr = request.app.state.session_manager

    config = None
    if req.preset:
        try:
            config = get_preset(req.preset)
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=str(exc.args[0]))
    elif req.config:
        try:
            config = SimulationConfig.from_dict(req.config)
        except TypeError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    try:
        session = mgr.create_session(config=config, name=req.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _session_response(session)


@router.get("/sessions", response_model=list[SessionSummary])
def list_sessions(request: Request):
    mgr = request.app.state.session_manager
    return mgr.list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _session_response(session)


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        mgr.delete_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {"deleted": True}


@router.post("/sessions/{session_id}/run", response_model=SessionResponse)
def run_session(session_id: str, req: RunRequest, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.run_full_async(session_id, ticks=req.ticks)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _session_response(session)


@router.post("/sessions/{session_id}/step", response_model=SessionResponse)
def step_session(session_id: str, req: StepRequest, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.step(session_id, req.n)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _session_response(session)


@router.post("/sessions/{session_id}/stop", response_model=SessionResponse)
def stop_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.stop(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _session_response(session)


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
def reset_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    if mgr.is_running(session_id):
        raise HTTPException(status_code=409, detail="Cannot reset while running")
    try:
        session = mgr.reset_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _session_response(session)
