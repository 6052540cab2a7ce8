"""
Shared test configuration.

Provides small-world configs so engine and API tests stay fast, and a
helper for hand-built worlds with a fixed layout.
"""

import pytest

from segnet.core.agent import Agent
from segnet.core.config import SimulationConfig
from segnet.core.grid import ToroidalGrid
from segnet.core.social_graph import SocialGraph


def build_world(
    width: int,
    height: int,
    layout: dict[tuple[int, int], int],
    edges: list[tuple[int, int]] = (),
    similarity: float = 50.0,
    difference: float = 0.0,
    closeness: float = 0.0,
) -> tuple[ToroidalGrid, SocialGraph, list[Agent]]:
    """Place one agent per layout entry; agent ids follow layout order."""
    grid = ToroidalGrid(width, height)
    agents: list[Agent] = []
    for i, (cell, category) in enumerate(layout.items()):
        agent = Agent(
            id=i,
            category=category,
            similarity_threshold=similarity,
            difference_threshold=difference,
            closeness_threshold=closeness,
            position=cell,
        )
        grid.place(cell[0], cell[1], i)
        agents.append(agent)
    graph = SocialGraph.from_edges(len(agents), edges)
    return grid, graph, agents


@pytest.fixture
def small_config() -> SimulationConfig:
    return SimulationConfig(
        experiment_name="small",
        random_seed=42,
        world_width=20,
        world_height=20,
        number_of_agents=300,
        max_ticks=30,
    )


@pytest.fixture
def make_world():
    """Factory fixture wrapping ``build_world``."""
    return build_world
