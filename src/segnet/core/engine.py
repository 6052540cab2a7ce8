"""
Main simulation engine.

Owns the grid, the social graph and the agents, and drives the tick loop:
evaluate satisfaction, relocate unsatisfied agents one by one, re-evaluate,
then record aggregate statistics. The run converges when an evaluation
finds every agent satisfied; it may never converge, in which case it runs
until the tick cap or an external stop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

import numpy as np

from segnet.core.agent import Agent
from segnet.core.config import SimulationConfig
from segnet.core.grid import Cell, ToroidalGrid
from segnet.core.population import create_agents, place_randomly
from segnet.core.relocation import RelocationPlanner
from segnet.core.satisfaction import SatisfactionEvaluator, allowed_link_distance
from segnet.core.social_graph import SocialGraph, small_world

logger = logging.getLogger(__name__)


class SimulationState(str, Enum):
    """Lifecycle of a run."""
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"


# ---------------------------------------------------------------------------
# Tick metrics (lightweight snapshot)
# ---------------------------------------------------------------------------
@dataclass
class TickSnapshot:
    """Aggregate statistics after a tick (tick 0 = right after setup)."""
    tick: int
    moved: int

    # Spatial mixing
    percent_similar: float

    # Satisfaction
    percent_unhappy: float
    unhappy_count: int
    spatially_unhappy: int
    socially_unhappy: int

    # Social distances
    global_average_link_distance: float
    max_allowed_distance: float

    events: dict[str, Any] = field(default_factory=dict)


def compute_snapshot(
    tick: int,
    moved: int,
    agents: list[Agent],
    graph: SocialGraph,
    config: SimulationConfig,
) -> TickSnapshot:
    """Aggregate the derived agent fields into one snapshot.

    Zero denominators yield 0 rather than failing.
    """
    similar = sum(a.similar_nearby for a in agents)
    total = sum(a.total_nearby for a in agents)
    unhappy = [a for a in agents if not a.satisfied]
    linked = [a.average_link_distance for a in agents if graph.degree(a.id) > 0]

    return TickSnapshot(
        tick=tick,
        moved=moved,
        percent_similar=(similar / total * 100.0) if total else 0.0,
        percent_unhappy=(len(unhappy) / len(agents) * 100.0) if agents else 0.0,
        unhappy_count=len(unhappy),
        spatially_unhappy=sum(1 for a in agents if not a.spatially_satisfied),
        socially_unhappy=sum(1 for a in agents if not a.socially_satisfied),
        global_average_link_distance=float(np.mean(linked)) if linked else 0.0,
        max_allowed_distance=allowed_link_distance(
            config.closeness_threshold, config.diagonal,
        ),
    )


# ---------------------------------------------------------------------------
# Simulation Engine
# ---------------------------------------------------------------------------
class SimulationEngine:
    """
    Tick loop for the social-network segregation model.

    Per tick:
    1. Evaluate satisfaction (halt here if everyone is satisfied)
    2. Relocate unsatisfied agents sequentially, in random order
    3. Re-evaluate satisfaction
    4. Record aggregate statistics
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.rng = np.random.default_rng(config.random_seed)

        # World (built by setup)
        self.grid: ToroidalGrid | None = None
        self.graph: SocialGraph | None = None
        self.agents: list[Agent] = []
        self.evaluator: SatisfactionEvaluator | None = None
        self.planner: RelocationPlanner | None = None

        # State
        self.state = SimulationState.IDLE
        self.ticks = 0
        self.history: list[TickSnapshot] = []
        self._stop_requested = False

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def setup(self) -> TickSnapshot:
        """Build a fresh world from the config seed and evaluate it."""
        cfg = self.config
        self.rng = np.random.default_rng(cfg.random_seed)

        grid = ToroidalGrid(cfg.world_width, cfg.world_height)
        graph = small_world(
            cfg.number_of_agents, cfg.average_degree,
            cfg.rewiring_probability, self.rng,
        )
        agents = create_agents(cfg, graph, self.rng)
        place_randomly(grid, agents, self.rng)

        logger.info(
            "Setup %s: %d agents on %dx%d grid, %d links",
            cfg.experiment_name, len(agents), grid.width, grid.height,
            graph.edge_count,
        )
        return self._attach(grid, graph, agents)

    @classmethod
    def from_world(
        cls,
        config: SimulationConfig,
        grid: ToroidalGrid,
        graph: SocialGraph,
        agents: list[Agent],
    ) -> SimulationEngine:
        """Start an engine on a prebuilt world (agents already placed on ``grid``)."""
        engine = cls(config)
        engine._attach(grid, graph, agents)
        return engine

    def _attach(
        self, grid: ToroidalGrid, graph: SocialGraph, agents: list[Agent],
    ) -> TickSnapshot:
        self.grid = grid
        self.graph = graph
        self.agents = agents
        self.evaluator = SatisfactionEvaluator(grid, graph, agents)
        self.planner = RelocationPlanner(
            grid, graph, agents, self.config.movement_radius, self.rng,
        )

        self.ticks = 0
        self.history = []
        self._stop_requested = False
        self.state = SimulationState.RUNNING

        self.evaluator.evaluate_all()
        snapshot = compute_snapshot(0, 0, self.agents, graph, self.config)
        self.history.append(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------
    def step(self) -> TickSnapshot | None:
        """Advance one tick.

        Returns:
            The new snapshot, or None if the engine is not running or the
            evaluation found every agent satisfied (the run converged).
        """
        if self.state != SimulationState.RUNNING:
            return None

        unhappy = self.evaluator.evaluate_all()
        if not unhappy:
            self.state = SimulationState.CONVERGED
            logger.info(
                "%s converged after %d ticks", self.config.experiment_name, self.ticks,
            )
            return None

        order = self.rng.permutation(len(unhappy))
        moved = self.planner.relocate_all(unhappy[int(i)] for i in order)

        self.evaluator.evaluate_all()
        self.ticks += 1
        snapshot = compute_snapshot(
            self.ticks, moved, self.agents, self.graph, self.config,
        )
        self.history.append(snapshot)

        logger.debug(
            "tick %d: moved=%d unhappy=%.1f%% similar=%.1f%%",
            self.ticks, moved, snapshot.percent_unhappy, snapshot.percent_similar,
        )
        return snapshot

    def run(
        self,
        max_ticks: int | None = None,
        on_tick: Callable[[TickSnapshot], None] | None = None,
    ) -> list[TickSnapshot]:
        """Run until convergence, the tick cap, or an external stop.

        Args:
            max_ticks: Ticks to execute in this call; defaults to
                ``config.max_ticks``. None or 0 means no cap.
            on_tick: Called with each new snapshot.

        Returns:
            The full snapshot history, including tick 0.
        """
        if self.state == SimulationState.IDLE:
            self.setup()
        limit = max_ticks if max_ticks is not None else self.config.max_ticks

        executed = 0
        try:
            while self.state == SimulationState.RUNNING:
                if self._stop_requested:
                    logger.info("Stop requested at tick %d", self.ticks)
                    break
                if limit and executed >= limit:
                    break
                snapshot = self.step()
                if snapshot is None:
                    break
                if on_tick is not None:
                    on_tick(snapshot)
                executed += 1
        finally:
            # A stop only applies to the run it arrived during
            self._stop_requested = False

        return self.history

    def request_stop(self) -> None:
        """Ask a running loop to stop before its next tick."""
        self._stop_requested = True

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_converged(self) -> bool:
        return self.state == SimulationState.CONVERGED

    @property
    def latest(self) -> TickSnapshot | None:
        return self.history[-1] if self.history else None

    def agent(self, agent_id: int) -> Agent:
        """Look up an agent by id. Raises KeyError if unknown."""
        if not 0 <= agent_id < len(self.agents):
            raise KeyError(f"Agent {agent_id} not found")
        return self.agents[agent_id]

    def highlighted_cells(self, agent_id: int) -> set[Cell]:
        """Cells within the movement radius of an agent and its network neighbors."""
        return self.planner.highlighted_cells(self.agent(agent_id))
