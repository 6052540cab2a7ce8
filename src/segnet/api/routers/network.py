"""Social network graph endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/{session_id}/graph")
def get_network_graph(session_id: str, request: Request) -> dict[str, Any]:
    """Nodes with category and position, plus each link and its current length."""
    mgr = request.app.state.session_manager
    try:
        session = mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")

    engine = session.engine
    config = session.config
    graph = engine.graph

    nodes: list[dict[str, Any]] = []
    for agent in engine.agents:
        nodes.append({
            "id": agent.id,
            "category": config.category_name(agent.category),
            "position": list(agent.position) if agent.position else None,
            "satisfied": agent.satisfied,
        })

    edges: list[dict[str, Any]] = []
    same_category = 0
    for a, b in graph.edges():
        agent_a = engine.agents[a]
        agent_b = engine.agents[b]
        if agent_a.category == agent_b.category:
            same_category += 1
        edges.append({
            "source": a,
            "target": b,
            "length": round(engine.grid.distance(agent_a.position, agent_b.position), 4),
        })

    total_edges = len(edges)
    return {
        "nodes": nodes,
        "edges": edges,
        "stats": {
            "total_nodes": len(nodes),
            "total_edges": total_edges,
            "avg_degree": round(graph.average_degree, 2),
            "same_category_edge_fraction": (
                round(same_category / total_edges, 4) if total_edges else 0.0
            ),
        },
    }
