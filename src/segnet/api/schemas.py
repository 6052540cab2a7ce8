"""
Pydantic models for API request/response validation.
"""

from __future__ import annotations

from pydantic import BaseModel
from typing import Any


# === Simulation ===

class CreateSessionRequest(BaseModel):
    config: dict[str, Any] | None = None
    preset: str | None = None
    name: str | None = None


class RunRequest(BaseModel):
    ticks: int | None = None


class StepRequest(BaseModel):
    n: int = 1


class SessionSummary(BaseModel):
    id: str
    name: str
    status: str
    state: str
    ticks: int
    max_ticks: int | None
    agent_count: int
    percent_unhappy: float


class SessionResponse(SessionSummary):
    config: dict[str, Any]


# === Agents ===

class AgentSummaryResponse(BaseModel):
    id: int
    category: str
    position: list[int] | None
    satisfied: bool
    spatially_satisfied: bool
    socially_satisfied: bool
    average_link_distance: float


class AgentDetailResponse(AgentSummaryResponse):
    similarity_threshold: float
    difference_threshold: float
    closeness_threshold: float
    similar_nearby: int
    other_nearby: int
    total_nearby: int
    network_neighbors: list[int]
    moves: int


class PaginatedAgentList(BaseModel):
    agents: list[AgentSummaryResponse]
    total: int
    page: int
    page_size: int


class HighlightResponse(BaseModel):
    agent_id: int
    movement_radius: float
    cells: list[list[int]]
    empty_cells: int


# === Metrics ===

class SummaryResponse(BaseModel):
    ticks: int
    state: str
    converged: bool
    percent_similar: float
    percent_unhappy: float
    global_average_link_distance: float
    max_allowed_distance: float
    total_moves: int


class TimeSeriesResponse(BaseModel):
    field: str
    ticks: list[int]
    values: list[Any]
