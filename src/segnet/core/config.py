"""
Master configuration for a segregation run.

ALL tunable parameters live here. Thresholds are percentages in [0, 100).
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any


DEFAULT_CATEGORY_NAMES = ["red", "green", "blue", "orange", "violet"]


@dataclass
class SimulationConfig:
    """
    Master configuration: every parameter is a tunable slider.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int | None = None

    # === World ===
    world_width: int = 51
    world_height: int = 51
    number_of_agents: int = 2000

    # === Categories ===
    number_of_categories: int = 2
    category_names: list[str] = field(
        default_factory=lambda: list(DEFAULT_CATEGORY_NAMES)
    )

    # === Spatial preferences ===
    # Each agent draws its own similarity threshold uniformly below the cap.
    similarity_threshold_cap: float = 30.0
    difference_threshold: float = 0.0

    # === Social preferences ===
    # 100 means linked agents must share a cell; 0 means anywhere on the map.
    closeness_threshold: float = 50.0

    # === Movement ===
    movement_radius: float = 5.0

    # === Social network (small world) ===
    average_degree: int = 4
    rewiring_probability: float = 0.1
    # Probability an agent copies an already-assigned neighbor's category
    category_network_correlation: float = 0.0

    # === Run length ===
    max_ticks: int | None = 500  # None or 0 = run until converged or stopped

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------
    @property
    def diagonal(self) -> float:
        """Length of the world diagonal, the normalizer for link distances."""
        return math.sqrt(self.world_width ** 2 + self.world_height ** 2)

    @property
    def max_allowed_distance(self) -> float:
        """Largest average link distance a socially satisfied agent may have."""
        return self.diagonal * (1.0 - self.closeness_threshold / 100.0)

    def category_name(self, category: int) -> str:
        if category < len(self.category_names):
            return self.category_names[category]
        return f"category_{category}"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        d: dict[str, Any] = {}
        for k, v in self.__dict__.items():
            if k.startswith("_"):
                continue
            d[k] = list(v) if isinstance(v, list) else v
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SimulationConfig:
        """Deserialize from a dict."""
        return cls(**{k: v for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> SimulationConfig:
        return cls.from_dict(json.loads(s))

    def diff(self, other: SimulationConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
