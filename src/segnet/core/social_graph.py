"""
Static social network over agents.

The graph is generated once per run (small-world topology via networkx)
and frozen into a plain adjacency index. Nothing mutates it afterwards,
so it can be shared freely between the evaluator, the planner and the API.
"""

from __future__ import annotations

from typing import Iterable, Iterator

import networkx as nx
import numpy as np


class SocialGraph:
    """Undirected adjacency index keyed by agent id.

    Neighbor tuples are sorted so iteration order never depends on how the
    graph was built.
    """

    def __init__(self, adjacency: dict[int, tuple[int, ...]]):
        self._adjacency = adjacency

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_edges(cls, n: int, edges: Iterable[tuple[int, int]]) -> SocialGraph:
        """Build from an edge list over nodes ``0..n-1``. Self-loops are ignored."""
        links: dict[int, set[int]] = {i: set() for i in range(n)}
        for a, b in edges:
            if a == b:
                continue
            links[a].add(b)
            links[b].add(a)
        return cls({i: tuple(sorted(nbrs)) for i, nbrs in links.items()})

    @classmethod
    def from_networkx(cls, graph: nx.Graph) -> SocialGraph:
        return cls.from_edges(graph.number_of_nodes(), graph.edges())

    @classmethod
    def empty(cls, n: int) -> SocialGraph:
        return cls({i: () for i in range(n)})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def neighbors(self, agent_id: int) -> tuple[int, ...]:
        return self._adjacency.get(agent_id, ())

    def degree(self, agent_id: int) -> int:
        return len(self.neighbors(agent_id))

    def edges(self) -> Iterator[tuple[int, int]]:
        """Yield each undirected edge once as (low, high)."""
        for a, nbrs in self._adjacency.items():
            for b in nbrs:
                if a < b:
                    yield (a, b)

    @property
    def node_count(self) -> int:
        return len(self._adjacency)

    @property
    def edge_count(self) -> int:
        return sum(len(n) for n in self._adjacency.values()) // 2

    @property
    def average_degree(self) -> float:
        if not self._adjacency:
            return 0.0
        return 2.0 * self.edge_count / len(self._adjacency)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)


def small_world(
    n: int,
    average_degree: int,
    rewiring_probability: float,
    rng: np.random.Generator,
) -> SocialGraph:
    """Generate a Watts-Strogatz small-world graph over ``n`` agents.

    Starts from a ring lattice where each node links to its ``k`` nearest
    ring neighbors, then rewires each edge with the given probability. The
    lattice links ``k // 2`` neighbors on each side, so an odd
    ``average_degree`` is rounded up to the next even value. ``k`` is
    clamped to ``n - 1``; when rounding reaches ``n`` the graph is complete.
    The networkx seed is drawn from ``rng`` so a run seed reproduces the
    same graph.
    """
    if n < 2 or average_degree <= 0:
        return SocialGraph.empty(max(n, 0))

    k = min(int(average_degree), n - 1)
    if k % 2:
        k += 1
    seed = int(rng.integers(0, 2**31))
    graph = nx.watts_strogatz_graph(n, k, rewiring_probability, seed=seed)
    return SocialGraph.from_networkx(graph)
