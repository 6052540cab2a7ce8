"""
Per-tick satisfaction evaluation.

An agent is satisfied when two conditions hold at once:

- Spatial: among the occupied cells of its wrapped Moore neighborhood, the
  same-category share reaches its similarity threshold and the
  other-category share reaches the difference threshold.
- Social: the mean toroidal distance to its network neighbors does not
  exceed ``diagonal * (1 - closeness_threshold / 100)``.

Both conditions hold vacuously for an agent with no occupied neighbors or
no network links. Evaluation only writes derived fields; positions are
never touched and no randomness is involved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from segnet.core.agent import Agent
    from segnet.core.grid import ToroidalGrid
    from segnet.core.social_graph import SocialGraph


def allowed_link_distance(closeness_threshold: float, diagonal: float) -> float:
    """Largest average link distance allowed by a closeness threshold."""
    return diagonal * (1.0 - closeness_threshold / 100.0)


class SatisfactionEvaluator:
    """Recomputes spatial and social satisfaction for every agent."""

    def __init__(
        self,
        grid: ToroidalGrid,
        graph: SocialGraph,
        agents: Sequence[Agent],
    ):
        self.grid = grid
        self.graph = graph
        # Indexed by agent id
        self.agents = agents

    def count_neighbors(self, agent: Agent) -> tuple[int, int]:
        """Return (similar, other) counts over the occupied adjacent cells."""
        similar = 0
        other = 0
        x, y = agent.position
        for cx, cy in self.grid.adjacent_cells(x, y):
            occupant_id = self.grid.occupant(cx, cy)
            if occupant_id is None:
                continue
            if self.agents[occupant_id].category == agent.category:
                similar += 1
            else:
                other += 1
        return similar, other

    def average_link_distance(self, agent: Agent) -> float:
        """Mean toroidal distance to network neighbors; 0 with no links."""
        neighbor_ids = self.graph.neighbors(agent.id)
        if not neighbor_ids:
            return 0.0
        total = 0.0
        for nid in neighbor_ids:
            total += self.grid.distance(agent.position, self.agents[nid].position)
        return total / len(neighbor_ids)

    def evaluate(self, agent: Agent) -> bool:
        """Recompute one agent's derived fields and return ``satisfied``."""
        similar, other = self.count_neighbors(agent)
        total = similar + other
        agent.similar_nearby = similar
        agent.other_nearby = other
        agent.spatially_satisfied = (
            similar >= agent.similarity_threshold * total / 100.0
            and other >= agent.difference_threshold * total / 100.0
        )

        agent.average_link_distance = self.average_link_distance(agent)
        if self.graph.degree(agent.id) == 0:
            agent.socially_satisfied = True
        else:
            allowed = allowed_link_distance(
                agent.closeness_threshold, self.grid.diagonal,
            )
            agent.socially_satisfied = agent.average_link_distance <= allowed

        return agent.satisfied

    def evaluate_all(self) -> list[Agent]:
        """Evaluate all held agents and return the unsatisfied ones in id order."""
        unhappy: list[Agent] = []
        for agent in self.agents:
            if not self.evaluate(agent):
                unhappy.append(agent)
        return unhappy
