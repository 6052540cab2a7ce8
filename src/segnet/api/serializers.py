"""
Serializers for converting simulation objects to JSON-safe dicts.

Handles numpy scalars, tuples and Agent dataclass fields.
"""

from __future__ import annotations

from typing import Any

from segnet.core.agent import Agent
from segnet.core.config import SimulationConfig
from segnet.core.social_graph import SocialGraph
from segnet.metrics.collector import TickMetrics


def _position(agent: Agent) -> list[int] | None:
    return [int(agent.position[0]), int(agent.position[1])] if agent.position else None


def serialize_agent_summary(agent: Agent, config: SimulationConfig) -> dict[str, Any]:
    """Lightweight agent summary for list views."""
    return {
        "id": int(agent.id),
        "category": config.category_name(agent.category),
        "position": _position(agent),
        "satisfied": agent.satisfied,
        "spatially_satisfied": agent.spatially_satisfied,
        "socially_satisfied": agent.socially_satisfied,
        "average_link_distance": round(float(agent.average_link_distance), 4),
    }


def serialize_agent_detail(
    agent: Agent, config: SimulationConfig, graph: SocialGraph,
) -> dict[str, Any]:
    """Full agent detail for the inspection panel."""
    d = serialize_agent_summary(agent, config)
    d.update({
        "similarity_threshold": round(float(agent.similarity_threshold), 4),
        "difference_threshold": float(agent.difference_threshold),
        "closeness_threshold": float(agent.closeness_threshold),
        "similar_nearby": int(agent.similar_nearby),
        "other_nearby": int(agent.other_nearby),
        "total_nearby": int(agent.total_nearby),
        "network_neighbors": [int(n) for n in graph.neighbors(agent.id)],
        "moves": int(agent.moves),
    })
    return d


def serialize_metrics(m: TickMetrics) -> dict[str, Any]:
    """Convert TickMetrics to a JSON-safe dict."""
    return {
        "tick": int(m.tick),
        "moved": int(m.moved),
        "percent_similar": round(float(m.percent_similar), 4),
        "percent_unhappy": round(float(m.percent_unhappy), 4),
        "unhappy_count": int(m.unhappy_count),
        "spatially_unhappy": int(m.spatially_unhappy),
        "socially_unhappy": int(m.socially_unhappy),
        "global_average_link_distance": round(float(m.global_average_link_distance), 4),
        "max_allowed_distance": round(float(m.max_allowed_distance), 4),
        "category_counts": dict(m.category_counts),
        "unhappy_by_category": {k: round(float(v), 4) for k, v in m.unhappy_by_category.items()},
        "similarity_by_category": {
            k: round(float(v), 4) for k, v in m.similarity_by_category.items()
        },
        "total_moves": int(m.total_moves),
        "mean_moves": round(float(m.mean_moves), 4),
        "isolated_agents": int(m.isolated_agents),
    }
