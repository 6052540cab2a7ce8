"""
Relocation search for unsatisfied agents.

Candidates are the empty cells within the movement radius of the agent
and of each of its network neighbors, so unhappy agents drift toward
their social contacts rather than jumping anywhere on the map.

Moves are applied one agent at a time with the occupancy index updated
immediately, so two agents can never land on the same cell in one tick.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

import numpy as np

if TYPE_CHECKING:
    from segnet.core.agent import Agent
    from segnet.core.grid import Cell, ToroidalGrid
    from segnet.core.social_graph import SocialGraph


class RelocationPlanner:
    """Chooses and applies destinations for unsatisfied agents."""

    def __init__(
        self,
        grid: ToroidalGrid,
        graph: SocialGraph,
        agents: Sequence[Agent],
        movement_radius: float,
        rng: np.random.Generator,
    ):
        self.grid = grid
        self.graph = graph
        self.agents = agents
        self.movement_radius = movement_radius
        self.rng = rng

    def highlighted_cells(self, agent: Agent) -> set[Cell]:
        """Cells within the movement radius of the agent or any network neighbor.

        Occupied cells are included; this is a pure query over the grid
        and the graph.
        """
        cells = self.grid.cells_within_radius(agent.position, self.movement_radius)
        for nid in self.graph.neighbors(agent.id):
            cells |= self.grid.cells_within_radius(
                self.agents[nid].position, self.movement_radius,
            )
        return cells

    def candidate_cells(self, agent: Agent) -> list[Cell]:
        """Empty highlighted cells, sorted so a seeded choice is reproducible."""
        return sorted(
            cell for cell in self.highlighted_cells(agent)
            if not self.grid.is_occupied(*cell)
        )

    def relocate(self, agent: Agent) -> bool:
        """Move one agent to a random candidate cell.

        Returns:
            True if the agent moved, False if no empty candidate exists.
        """
        candidates = self.candidate_cells(agent)
        if not candidates:
            return False

        destination = candidates[int(self.rng.integers(len(candidates)))]
        if not self.grid.move(agent.position, destination, agent.id):
            return False
        agent.position = destination
        agent.moves += 1
        return True

    def relocate_all(self, unhappy: Iterable[Agent]) -> int:
        """Relocate agents sequentially; return how many moved."""
        moved = 0
        for agent in unhappy:
            if self.relocate(agent):
                moved += 1
        return moved
