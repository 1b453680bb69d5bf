"""Tests for spatial utility functions."""

import pytest

from wallmesh.geometry.spatial_utils import (
    calculate_center,
    dedupe_consecutive,
    distance,
    is_simple_loop,
    localize_points,
    polygon_area,
    polygon_problem,
    snap_to_grid,
    split_loop_rings,
)


class TestPolygonArea:
    """Tests for polygon_area function."""

    def test_unit_square(self):
        square = [(0, 0), (1, 0), (1, 1), (0, 1)]
        assert polygon_area(square) == pytest.approx(1.0)

    def test_triangle(self):
        tri = [(0, 0), (4, 0), (2, 3)]
        assert polygon_area(tri) == pytest.approx(6.0)

    def test_clockwise_same_as_counterclockwise(self):
        cw = [(0, 0), (0, 1), (1, 1), (1, 0)]
        ccw = [(0, 0), (1, 0), (1, 1), (0, 1)]
        assert polygon_area(cw) == pytest.approx(polygon_area(ccw))

    def test_degenerate_polygon(self):
        assert polygon_area([(0, 0), (1, 1)]) == 0.0


class TestLoopChecks:
    """Tests for is_simple_loop and polygon_problem."""

    def test_square_is_simple(self):
        assert is_simple_loop([(0, 0), (1, 0), (1, 1), (0, 1)]) is True

    def test_bowtie_is_not_simple(self):
        assert is_simple_loop([(0, 0), (1, 1), (1, 0), (0, 1)]) is False

    def test_too_few_points_is_not_simple(self):
        assert is_simple_loop([(0, 0), (1, 0)]) is False

    def test_valid_polygon_has_no_problem(self):
        assert polygon_problem([(0, 0), (1, 0), (1, 1), (0, 1)]) is None

    def test_bowtie_problem_is_explained(self):
        problem = polygon_problem([(0, 0), (1, 1), (1, 0), (0, 1)])
        assert "Self-intersection" in problem


class TestDedupeConsecutive:
    """Tests for dedupe_consecutive function."""

    def test_removes_repeats(self):
        pts = [(0, 0), (0, 0), (1, 0), (1, 0), (1, 1)]
        assert dedupe_consecutive(pts) == [(0, 0), (1, 0), (1, 1)]

    def test_tolerance(self):
        pts = [(0, 0), (1e-9, 0), (1, 0)]
        assert dedupe_consecutive(pts, tolerance=1e-6) == [(0, 0), (1, 0)]

    def test_keeps_non_consecutive_repeats(self):
        pts = [(0, 0), (1, 0), (0, 0)]
        assert dedupe_consecutive(pts) == pts

    def test_closed_drops_wraparound_repeat(self):
        pts = [(0, 0), (1, 0), (1, 1), (0, 0)]
        assert dedupe_consecutive(pts, closed=True) == [(0, 0), (1, 0), (1, 1)]


class TestEditorHelpers:
    """Tests for grid snapping and point localisation."""

    @pytest.mark.parametrize(
        "value,expected", [(0.2, 0.0), (0.3, 0.5), (1.74, 1.5), (-0.8, -1.0)]
    )
    def test_snap_to_grid(self, value, expected):
        assert snap_to_grid(value) == pytest.approx(expected)

    def test_snap_to_custom_grid(self):
        assert snap_to_grid(0.26, grid_size=0.25) == pytest.approx(0.25)

    def test_calculate_center(self):
        pts = [(0, 0), (4, 1), (2, 6)]
        assert calculate_center(pts) == (2.0, 3.0)

    def test_calculate_center_empty(self):
        assert calculate_center([]) == (0.0, 0.0)

    def test_localize_points(self):
        pts = [(1, 1), (3, 5)]
        assert localize_points(pts, (2, 3)) == [(-1, -2), (1, 2)]

    def test_distance(self):
        assert distance((0, 0), (3, 4)) == pytest.approx(5.0)


class TestSplitLoopRings:
    """Tests for split_loop_rings function."""

    def test_simple_loop_is_one_ring(self):
        square = [(0, 0), (1, 0), (1, 1), (0, 1)]
        rings = split_loop_rings(square)
        assert rings == [[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]]

    def test_slit_separates_outer_and_inner_rings(self):
        outer = [(0, 0), (4, 0), (4, 4), (0, 4)]
        inner = [(1, 1), (3, 1), (3, 3), (1, 3)]
        loop = outer + [outer[0], inner[0]] + inner[::-1]

        rings = split_loop_rings(loop)

        assert len(rings) == 2
        assert sorted(len(r) for r in rings) == [4, 4]
        assert {polygon_area(r) for r in rings} == {16.0, 4.0}

    def test_collinear_loop_has_no_rings(self):
        assert split_loop_rings([(0, 0), (1, 0)]) == []
