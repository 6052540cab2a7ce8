"""
Metrics Collector: per-tick statistics beyond the engine snapshot.

Extends TickSnapshot with per-category breakdowns (population, unhappiness,
same-category neighbor share) and movement totals. Provides time series
extraction and export for visualization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from segnet.core.agent import Agent
from segnet.core.config import SimulationConfig
from segnet.core.engine import TickSnapshot


@dataclass
class TickMetrics:
    """Extended metrics for a single tick."""

    # Base snapshot data
    tick: int
    moved: int
    percent_similar: float
    percent_unhappy: float
    unhappy_count: int
    spatially_unhappy: int
    socially_unhappy: int
    global_average_link_distance: float
    max_allowed_distance: float

    # Category analysis
    category_counts: dict[str, int]
    unhappy_by_category: dict[str, float]  # percent of each category
    similarity_by_category: dict[str, float]  # mean same-category share

    # Movement
    total_moves: int
    mean_moves: float

    # Isolation
    isolated_agents: int  # no occupied adjacent cell

    events: dict[str, Any] = field(default_factory=dict)


class MetricsCollector:
    """
    Collects and aggregates metrics across ticks.

    Works alongside the simulation engine to provide richer analytics
    than the base TickSnapshot.
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.metrics_history: list[TickMetrics] = []

    def collect(
        self,
        agents: list[Agent],
        snapshot: TickSnapshot,
    ) -> TickMetrics:
        """Collect enhanced metrics for a tick."""
        names = [
            self.config.category_name(c)
            for c in range(self.config.number_of_categories)
        ]
        counts = {name: 0 for name in names}
        unhappy = {name: 0 for name in names}
        fractions: dict[str, list[float]] = {name: [] for name in names}

        for a in agents:
            name = self.config.category_name(a.category)
            counts[name] = counts.get(name, 0) + 1
            if not a.satisfied:
                unhappy[name] = unhappy.get(name, 0) + 1
            if a.total_nearby:
                fractions.setdefault(name, []).append(a.similar_fraction)

        unhappy_pct = {
            name: (unhappy.get(name, 0) / count * 100.0) if count else 0.0
            for name, count in counts.items()
        }
        similarity = {
            name: (float(np.mean(vals)) * 100.0 if vals else 0.0)
            for name, vals in fractions.items()
        }

        total_moves = sum(a.moves for a in agents)

        metrics = TickMetrics(
            tick=snapshot.tick,
            moved=snapshot.moved,
            percent_similar=snapshot.percent_similar,
            percent_unhappy=snapshot.percent_unhappy,
            unhappy_count=snapshot.unhappy_count,
            spatially_unhappy=snapshot.spatially_unhappy,
            socially_unhappy=snapshot.socially_unhappy,
            global_average_link_distance=snapshot.global_average_link_distance,
            max_allowed_distance=snapshot.max_allowed_distance,
            category_counts=counts,
            unhappy_by_category=unhappy_pct,
            similarity_by_category=similarity,
            total_moves=total_moves,
            mean_moves=total_moves / len(agents) if agents else 0.0,
            isolated_agents=sum(1 for a in agents if a.total_nearby == 0),
            events=dict(snapshot.events),
        )

        self.metrics_history.append(metrics)
        return metrics

    def get_time_series(self, field_name: str) -> list[Any]:
        """Extract a time series for a specific metric field."""
        return [getattr(m, field_name) for m in self.metrics_history]

    def export_for_visualization(self) -> list[dict[str, Any]]:
        """Export all metrics as a list of JSON-serializable dicts."""
        result = []
        for m in self.metrics_history:
            result.append({
                "tick": m.tick,
                "moved": m.moved,
                "percent_similar": m.percent_similar,
                "percent_unhappy": m.percent_unhappy,
                "unhappy_count": m.unhappy_count,
                "spatially_unhappy": m.spatially_unhappy,
                "socially_unhappy": m.socially_unhappy,
                "global_average_link_distance": m.global_average_link_distance,
                "max_allowed_distance": m.max_allowed_distance,
                "category_counts": m.category_counts,
                "unhappy_by_category": m.unhappy_by_category,
                "similarity_by_category": m.similarity_by_category,
                "total_moves": m.total_moves,
                "mean_moves": m.mean_moves,
                "isolated_agents": m.isolated_agents,
            })
        return result
