"""Agent list, detail and movement-radius highlight endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from segnet.api.schemas import AgentDetailResponse, HighlightResponse, PaginatedAgentList
from segnet.api.serializers import serialize_agent_detail, serialize_agent_summary

router = APIRouter()


def _get_session(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


def _get_agent(session, agent_id: int):
    try:
        return session.engine.agent(agent_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Agent {agent_id} not found")


@router.get("/{session_id}", response_model=PaginatedAgentList)
def list_agents(
    session_id: str,
    request: Request,
    category: str | None = Query(None),
    satisfied: bool | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
) -> dict[str, Any]:
    session = _get_session(request, session_id)
    config = session.config

    agents = session.engine.agents
    if category is not None:
        agents = [a for a in agents if config.category_name(a.category) == category]
    if satisfied is not None:
        agents = [a for a in agents if a.satisfied == satisfied]

    total = len(agents)
    start = (page - 1) * page_size
    page_agents = agents[start:start + page_size]

    return {
        "agents": [serialize_agent_summary(a, config) for a in page_agents],
        "total": total,
        "page": page,
        "page_size": page_size,
    }


@router.get("/{session_id}/{agent_id}", response_model=AgentDetailResponse)
def get_agent_detail(session_id: str, agent_id: int, request: Request) -> dict[str, Any]:
    session = _get_session(request, session_id)
    agent = _get_agent(session, agent_id)
    return serialize_agent_detail(agent, session.config, session.engine.graph)


@router.get("/{session_id}/{agent_id}/highlight", response_model=HighlightResponse)
def get_agent_highlight(session_id: str, agent_id: int, request: Request) -> dict[str, Any]:
    """Cells within the movement radius of an agent and of its network neighbors."""
    session = _get_session(request, session_id)
    _get_agent(session, agent_id)

    engine = session.engine
    cells = sorted(engine.highlighted_cells(agent_id))
    empty = sum(1 for x, y in cells if not engine.grid.is_occupied(x, y))
    return {
        "agent_id": agent_id,
        "movement_radius": session.config.movement_radius,
        "cells": [[x, y] for x, y in cells],
        "empty_cells": empty,
    }
