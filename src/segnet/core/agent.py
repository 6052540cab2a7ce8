"""
Core agent dataclass.

An agent belongs to one category, occupies one grid cell, and carries the
per-tick satisfaction state written by the evaluator. Derived fields are
overwritten every tick, never updated incrementally.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Agent:
    """A mobile agent embedded in the grid and the social network."""

    # === Identity ===
    id: int
    category: int

    # === Preferences (percentages in [0, 100)) ===
    similarity_threshold: float
    difference_threshold: float = 0.0
    closeness_threshold: float = 0.0

    # === Location (mutated only through relocation) ===
    position: tuple[int, int] | None = None

    # === Derived each tick ===
    similar_nearby: int = 0
    other_nearby: int = 0
    spatially_satisfied: bool = True
    socially_satisfied: bool = True
    average_link_distance: float = 0.0

    # === Bookkeeping ===
    moves: int = 0

    @property
    def total_nearby(self) -> int:
        return self.similar_nearby + self.other_nearby

    @property
    def satisfied(self) -> bool:
        return self.spatially_satisfied and self.socially_satisfied

    @property
    def similar_fraction(self) -> float:
        """Share of occupied adjacent cells holding the same category."""
        total = self.total_nearby
        return self.similar_nearby / total if total else 0.0

    def __repr__(self) -> str:
        status = "satisfied" if self.satisfied else "unsatisfied"
        return (
            f"Agent(id={self.id}, category={self.category}, "
            f"position={self.position}, {status})"
        )
