"""
Population bootstrap: categories, thresholds and initial placement.

Categories can be correlated with the social network so that linked agents
tend to share a category, while placement is uniformly random so the run
starts with no relationship between social and spatial structure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from segnet.core.agent import Agent

if TYPE_CHECKING:
    from segnet.core.config import SimulationConfig
    from segnet.core.grid import ToroidalGrid
    from segnet.core.social_graph import SocialGraph


def assign_categories(
    graph: SocialGraph,
    n_categories: int,
    correlation: float,
    rng: np.random.Generator,
) -> list[int]:
    """
    Assign a category to every node.

    Nodes are visited in random order. With probability ``correlation`` a
    node copies the category of a random already-assigned neighbor;
    otherwise (or when no neighbor is assigned yet) it draws uniformly.
    """
    n = len(graph)
    categories: list[int | None] = [None] * n
    for node in rng.permutation(n):
        node = int(node)
        assigned = [nb for nb in graph.neighbors(node) if categories[nb] is not None]
        if assigned and rng.random() < correlation:
            source = assigned[int(rng.integers(len(assigned)))]
            categories[node] = categories[source]
        else:
            categories[node] = int(rng.integers(n_categories))
    return [int(c) for c in categories]


def create_agents(
    config: SimulationConfig,
    graph: SocialGraph,
    rng: np.random.Generator,
) -> list[Agent]:
    """Create one agent per graph node with categories and thresholds."""
    categories = assign_categories(
        graph,
        config.number_of_categories,
        config.category_network_correlation,
        rng,
    )
    thresholds = rng.uniform(0.0, config.similarity_threshold_cap, size=len(graph))
    return [
        Agent(
            id=i,
            category=categories[i],
            similarity_threshold=float(thresholds[i]),
            difference_threshold=config.difference_threshold,
            closeness_threshold=config.closeness_threshold,
        )
        for i in range(len(graph))
    ]


def place_randomly(
    grid: ToroidalGrid, agents: list[Agent], rng: np.random.Generator,
) -> None:
    """Scatter agents onto distinct uniformly random empty cells."""
    empty = grid.empty_cells()
    if len(agents) > len(empty):
        raise ValueError(
            f"Cannot place {len(agents)} agents on {len(empty)} empty cells"
        )
    chosen = rng.choice(len(empty), size=len(agents), replace=False)
    for agent, idx in zip(agents, chosen):
        x, y = empty[int(idx)]
        grid.place(x, y, agent.id)
        agent.position = (x, y)
