"""
Tests for the toroidal grid.

Covers wrap arithmetic, toroidal distance, Moore adjacency, radius
queries and single-occupancy bookkeeping.
"""

import math

import numpy as np
import pytest

from segnet.core.grid import EMPTY, ToroidalGrid, toroidal_distance, wrap


class TestWrap:
    def test_wrap_inside(self):
        assert wrap(3, 10) == 3

    def test_wrap_negative(self):
        assert wrap(-1, 10) == 9

    def test_wrap_overflow(self):
        assert wrap(12, 10) == 2


class TestToroidalDistance:
    def test_edge_to_edge_is_one(self):
        """(0,0) and (W-1,0) are adjacent across the seam."""
        assert toroidal_distance((0, 0), (9, 0), 10, 6) == pytest.approx(1.0)

    def test_vertical_wrap(self):
        assert toroidal_distance((2, 0), (2, 5), 10, 6) == pytest.approx(1.0)

    def test_symmetric(self):
        a, b = (1, 4), (8, 0)
        assert toroidal_distance(a, b, 10, 6) == toroidal_distance(b, a, 10, 6)

    def test_minimum_over_wrap_combinations(self):
        w, h = 10, 6
        a, b = (1, 1), (8, 4)
        candidates = [
            math.hypot(b[0] - a[0] + sx * w, b[1] - a[1] + sy * h)
            for sx in (-1, 0, 1) for sy in (-1, 0, 1)
        ]
        assert toroidal_distance(a, b, w, h) == pytest.approx(min(candidates))

    def test_unwrapped_when_closer(self):
        assert toroidal_distance((0, 0), (3, 4), 20, 20) == pytest.approx(5.0)

    def test_grid_distance_matches_function(self):
        grid = ToroidalGrid(7, 5)
        assert grid.distance((0, 0), (6, 4)) == toroidal_distance((0, 0), (6, 4), 7, 5)

    def test_diagonal(self):
        grid = ToroidalGrid(3, 4)
        assert grid.diagonal == pytest.approx(5.0)


class TestAdjacency:
    def test_eight_neighbors(self):
        grid = ToroidalGrid(5, 5)
        cells = grid.adjacent_cells(2, 2)
        assert len(cells) == 8
        assert (2, 2) not in cells

    def test_corner_wraps(self):
        grid = ToroidalGrid(4, 4)
        cells = set(grid.adjacent_cells(0, 0))
        assert cells == {
            (3, 3), (0, 3), (1, 3),
            (3, 0), (1, 0),
            (3, 1), (0, 1), (1, 1),
        }

    def test_tiny_grid_deduplicates(self):
        grid = ToroidalGrid(2, 2)
        cells = grid.adjacent_cells(0, 0)
        assert sorted(cells) == [(0, 1), (1, 0), (1, 1)]


class TestRadius:
    def test_radius_one(self):
        grid = ToroidalGrid(10, 10)
        cells = grid.cells_within_radius((0, 0), 1.0)
        assert cells == {(0, 0), (1, 0), (9, 0), (0, 1), (0, 9)}

    def test_radius_one_and_half_includes_diagonals(self):
        grid = ToroidalGrid(10, 10)
        assert len(grid.cells_within_radius((5, 5), 1.5)) == 9

    def test_radius_zero_is_center(self):
        grid = ToroidalGrid(10, 10)
        assert grid.cells_within_radius((3, 3), 0.0) == {(3, 3)}

    def test_radius_larger_than_grid_covers_all(self):
        grid = ToroidalGrid(4, 3)
        assert len(grid.cells_within_radius((0, 0), 50.0)) == 12

    def test_every_cell_within_radius(self):
        grid = ToroidalGrid(9, 7)
        center = (1, 6)
        cells = grid.cells_within_radius(center, 3.2)
        for x in range(9):
            for y in range(7):
                inside = grid.distance(center, (x, y)) <= 3.2
                assert ((x, y) in cells) == inside


class TestOccupancy:
    def test_new_grid_is_empty(self):
        grid = ToroidalGrid(3, 3)
        assert grid.occupied_count() == 0
        assert len(grid.empty_cells()) == 9
        assert np.all(grid.occupancy == EMPTY)

    def test_place_and_occupant(self):
        grid = ToroidalGrid(3, 3)
        assert grid.place(1, 2, 7)
        assert grid.occupant(1, 2) == 7
        assert grid.is_occupied(1, 2)
        assert grid.occupant(0, 0) is None

    def test_place_on_occupied_fails(self):
        grid = ToroidalGrid(3, 3)
        grid.place(1, 1, 0)
        assert not grid.place(1, 1, 1)
        assert grid.occupant(1, 1) == 0

    def test_move(self):
        grid = ToroidalGrid(3, 3)
        grid.place(0, 0, 5)
        assert grid.move((0, 0), (2, 2), 5)
        assert grid.occupant(2, 2) == 5
        assert not grid.is_occupied(0, 0)

    def test_move_onto_occupied_fails(self):
        grid = ToroidalGrid(3, 3)
        grid.place(0, 0, 1)
        grid.place(1, 1, 2)
        assert not grid.move((0, 0), (1, 1), 1)
        assert grid.occupant(0, 0) == 1
        assert grid.occupant(1, 1) == 2

    def test_move_wrong_agent_fails(self):
        grid = ToroidalGrid(3, 3)
        grid.place(0, 0, 1)
        assert not grid.move((0, 0), (2, 2), 9)
        assert grid.occupant(0, 0) == 1

    def test_remove(self):
        grid = ToroidalGrid(3, 3)
        grid.place(2, 1, 4)
        assert grid.remove(2, 1, 4)
        assert grid.occupied_count() == 0

    def test_to_dict(self):
        grid = ToroidalGrid(2, 3)
        grid.place(1, 2, 0)
        d = grid.to_dict()
        assert d["width"] == 2
        assert d["height"] == 3
        assert d["occupancy"][1][2] == 0
