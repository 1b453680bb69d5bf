"""Tests for boundary loop assembly."""

import numpy as np
import pytest

from wallmesh.geometry.spatial_utils import is_simple_loop, polygon_area
from wallmesh.model_gen import OffsetPair, OffsetPathBuilder, ShapeAssembler, to_shape_coords


@pytest.fixture
def assembler():
    return ShapeAssembler()


@pytest.fixture
def pair():
    return OffsetPair(
        outer=[(0.0, 1.0), (2.0, 1.0), (4.0, 1.0)],
        inner=[(0.0, -1.0), (2.0, -1.0), (4.0, -1.0)],
    )


class TestShapeCoords:
    """The second plan axis is inverted in shape space."""

    def test_negates_second_axis(self):
        result = to_shape_coords([(1.0, 2.0), (-3.0, -4.0)])
        assert np.allclose(result, [[1.0, -2.0], [-3.0, 4.0]])


class TestOpenLoops:
    """Open walls walk outer forward then inner backward."""

    def test_loop_order(self, assembler, pair):
        loop = assembler.assemble(pair, closed=False)

        expected = [
            (0.0, -1.0), (2.0, -1.0), (4.0, -1.0),
            (4.0, 1.0), (2.0, 1.0), (0.0, 1.0),
        ]
        assert len(loop) == 6
        assert np.allclose(loop.points, expected)

    def test_right_angle_wall_loop_is_simple(self, assembler):
        pts = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0)]
        offsets = OffsetPathBuilder().build(pts, 0.2)
        loop = assembler.assemble(offsets, closed=False)

        assert is_simple_loop(loop.as_tuples())

    def test_straight_wall_area(self, assembler):
        offsets = OffsetPathBuilder().build([(0.0, 0.0), (2.0, 0.0)], 0.1)
        loop = assembler.assemble(offsets, closed=False)
        assert polygon_area(loop.as_tuples()) == pytest.approx(0.4)


class TestClosedLoops:
    """Closed walls join both rings through a zero-width slit."""

    def test_loop_order(self, assembler):
        offsets = OffsetPair(
            outer=[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)],
            inner=[(0.2, 0.2), (0.8, 0.2), (0.8, 0.8)],
        )
        loop = assembler.assemble(offsets, closed=True)
        shape_outer = to_shape_coords(offsets.outer)
        shape_inner = to_shape_coords(offsets.inner)

        assert len(loop) == 2 * 3 + 2
        assert np.allclose(loop.points[:3], shape_outer)
        assert np.allclose(loop.points[3], shape_outer[0])
        assert np.allclose(loop.points[4], shape_inner[0])
        assert np.allclose(loop.points[5:], shape_inner[::-1])

    def test_square_ring_area(self, assembler):
        square = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]
        offsets = OffsetPathBuilder().build(square, 0.1, closed=True)
        loop = assembler.assemble(offsets, closed=True)

        # perimeter * thickness
        assert polygon_area(loop.as_tuples()) == pytest.approx(16 * 0.2)
