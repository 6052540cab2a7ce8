"""
Toroidal square grid for the segregation model.

Cells are addressed as (x, y) with 0 <= x < width and 0 <= y < height.
Both axes wrap, so adjacency and distance never see an edge. Each cell
holds at most one agent; occupancy is an explicit numpy index from cell
to agent id (-1 = empty).
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

EMPTY = -1

Cell = tuple[int, int]


def wrap(coordinate: int, dimension: int) -> int:
    """Wrap a coordinate onto [0, dimension)."""
    return coordinate % dimension


def wrapped_delta(a: float, b: float, dimension: int) -> float:
    """Shortest displacement magnitude between two coordinates on a ring."""
    d = abs(a - b) % dimension
    return min(d, dimension - d)


def toroidal_distance(
    a: tuple[float, float], b: tuple[float, float], width: int, height: int,
) -> float:
    """Euclidean distance on a torus.

    Each axis uses the shorter of the direct and the wrapped displacement,
    which is the minimum over the four wrap/no-wrap combinations.

    Args:
        a: First position as (x, y).
        b: Second position as (x, y).
        width: Torus width.
        height: Torus height.

    Returns:
        Distance in cell units.
    """
    dx = wrapped_delta(a[0], b[0], width)
    dy = wrapped_delta(a[1], b[1], height)
    return math.hypot(dx, dy)


class ToroidalGrid:
    """A fixed-size wrapping grid with single-occupancy cells.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        occupancy: ``(width, height)`` int64 array of agent ids, -1 if empty.
    """

    # Moore neighborhood offsets (8 neighbors).
    MOORE_OFFSETS: list[tuple[int, int]] = [
        (-1, -1), (0, -1), (1, -1),
        (-1, 0),           (1, 0),
        (-1, 1),  (0, 1),  (1, 1),
    ]

    def __init__(self, width: int, height: int) -> None:
        self.width: int = width
        self.height: int = height
        self.occupancy: np.ndarray = np.full((width, height), EMPTY, dtype=np.int64)

    def __len__(self) -> int:
        """Number of cells in the grid."""
        return self.width * self.height

    @property
    def diagonal(self) -> float:
        return math.sqrt(self.width ** 2 + self.height ** 2)

    # ---- Coordinates ----

    def wrap_cell(self, x: int, y: int) -> Cell:
        return (wrap(x, self.width), wrap(y, self.height))

    def distance(self, a: tuple[float, float], b: tuple[float, float]) -> float:
        """Toroidal Euclidean distance between two positions."""
        return toroidal_distance(a, b, self.width, self.height)

    # ---- Neighbor queries ----

    def adjacent_cells(self, x: int, y: int) -> list[Cell]:
        """Return the wrapped Moore neighbors of a cell.

        On grids narrower than 3 cells several offsets wrap onto the same
        cell (or onto the cell itself); those are collapsed so each distinct
        neighbor is counted once and the cell never neighbors itself.

        Args:
            x: Column coordinate.
            y: Row coordinate.

        Returns:
            List of distinct (x, y) neighbor cells.
        """
        origin = self.wrap_cell(x, y)
        seen: set[Cell] = set()
        result: list[Cell] = []
        for dx, dy in self.MOORE_OFFSETS:
            cell = self.wrap_cell(x + dx, y + dy)
            if cell == origin or cell in seen:
                continue
            seen.add(cell)
            result.append(cell)
        return result

    def cells_within_radius(self, center: Cell, radius: float) -> set[Cell]:
        """Return every cell whose toroidal distance to ``center`` is <= radius.

        The center cell itself is included.

        Args:
            center: Reference cell (x, y).
            radius: Maximum distance (inclusive).

        Returns:
            Set of wrapped (x, y) cells.
        """
        cx, cy = center
        reach = int(math.floor(radius))
        r2 = radius * radius
        # Offsets beyond half the grid wrap onto cells already enumerated
        reach_x = min(reach, self.width // 2)
        reach_y = min(reach, self.height // 2)
        result: set[Cell] = set()
        for dx in range(-reach_x, reach_x + 1):
            for dy in range(-reach_y, reach_y + 1):
                if dx * dx + dy * dy <= r2:
                    result.add(self.wrap_cell(cx + dx, cy + dy))
        return result

    # ---- Occupancy ----

    def occupant(self, x: int, y: int) -> int | None:
        """Agent id at a cell, or None if empty."""
        agent_id = int(self.occupancy[wrap(x, self.width), wrap(y, self.height)])
        return None if agent_id == EMPTY else agent_id

    def is_occupied(self, x: int, y: int) -> bool:
        return self.occupancy[wrap(x, self.width), wrap(y, self.height)] != EMPTY

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.occupancy != EMPTY))

    def empty_cells(self) -> list[Cell]:
        """All unoccupied cells in row-major (x, y) order."""
        xs, ys = np.nonzero(self.occupancy == EMPTY)
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    def place(self, x: int, y: int, agent_id: int) -> bool:
        """Place an agent on an empty cell.

        Returns:
            True if placed, False if the cell is already occupied.
        """
        x, y = self.wrap_cell(x, y)
        if self.occupancy[x, y] != EMPTY:
            return False
        self.occupancy[x, y] = agent_id
        return True

    def remove(self, x: int, y: int, agent_id: int) -> bool:
        """Clear a cell if ``agent_id`` is its occupant."""
        x, y = self.wrap_cell(x, y)
        if self.occupancy[x, y] != agent_id:
            return False
        self.occupancy[x, y] = EMPTY
        return True

    def move(self, source: Cell, destination: Cell, agent_id: int) -> bool:
        """Move an agent between cells in one step.

        Returns:
            True if the move succeeded, False if the agent is not at
            ``source`` or ``destination`` is occupied.
        """
        if self.is_occupied(*destination):
            return False
        if not self.remove(source[0], source[1], agent_id):
            return False
        self.place(destination[0], destination[1], agent_id)
        return True

    # ---- Serialization ----

    def to_dict(self) -> dict[str, Any]:
        """Serialize the occupancy map to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "occupancy": self.occupancy.tolist(),
        }
