"""Tests for Catmull-Rom sampling and curved-wall offsets."""

import numpy as np
import pytest

from wallmesh.errors import DegenerateSegmentError, InsufficientPointsError
from wallmesh.model_gen import SAMPLES_PER_POINT, CatmullRomCurve, SplineOffsetBuilder


@pytest.fixture
def arc_points():
    """Five points on a semicircle of radius 5."""
    angles = np.linspace(0.0, np.pi, 5)
    return [(5 * np.cos(a), 5 * np.sin(a)) for a in angles]


@pytest.fixture
def builder():
    return SplineOffsetBuilder()


# ============================================================================
# CatmullRomCurve Tests
# ============================================================================


class TestCatmullRomCurve:
    """Tests for the interpolating curve."""

    def test_passes_through_control_points(self):
        pts = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0)]
        curve = CatmullRomCurve(pts, tension=0.5)
        samples = curve.get_points(12)

        for i, expected in enumerate(pts):
            assert np.allclose(samples[i * 4], expected, atol=1e-9)

    def test_get_points_count(self):
        curve = CatmullRomCurve([(0.0, 0.0), (1.0, 0.0), (2.0, 1.0)])
        assert curve.get_points(10).shape == (11, 2)

    def test_open_curve_ends_on_last_point(self):
        curve = CatmullRomCurve([(0.0, 0.0), (1.0, 2.0), (3.0, 1.0)])
        assert curve.get_point(0.0) == pytest.approx((0.0, 0.0))
        assert curve.get_point(1.0) == pytest.approx((3.0, 1.0))

    def test_closed_curve_wraps_to_first_point(self):
        pts = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)]
        curve = CatmullRomCurve(pts, closed=True)
        assert curve.get_point(0.0) == pytest.approx((0.0, 0.0))
        assert curve.get_point(1.0) == pytest.approx((0.0, 0.0))
        assert curve.get_point(0.5) == pytest.approx((2.0, 2.0))

    def test_collinear_points_stay_on_line(self):
        curve = CatmullRomCurve([(0.0, 0.0), (1.0, 0.0), (3.0, 0.0), (4.0, 0.0)])
        samples = curve.get_points(48)
        assert np.allclose(samples[:, 1], 0.0)

    def test_lower_tension_hugs_the_chord(self):
        pts = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)]
        tight = CatmullRomCurve(pts, tension=0.2).get_point(0.25)
        loose = CatmullRomCurve(pts, tension=0.8).get_point(0.25)

        # Midpoint of the first segment sits 0.25 * tension above the chord.
        assert tight == pytest.approx((0.5, 0.55))
        assert loose == pytest.approx((0.5, 0.7))

    def test_needs_two_points(self):
        with pytest.raises(InsufficientPointsError):
            CatmullRomCurve([(0.0, 0.0)])


# ============================================================================
# SplineOffsetBuilder Tests
# ============================================================================


class TestSplineOffsetBuilder:
    """Tests for dense curved offsets."""

    def test_open_sample_count(self, builder):
        pair = builder.build([(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)], 0.1)
        assert len(pair) == 3 * SAMPLES_PER_POINT + 1
        assert builder.sample_count(3, closed=False) == len(pair)

    def test_closed_sample_count(self, builder):
        pts = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)]
        pair = builder.build(pts, 0.1, closed=True)
        assert len(pair) == 4 * SAMPLES_PER_POINT
        assert builder.sample_count(4, closed=True) == len(pair)

    def test_custom_samples_per_point(self):
        builder = SplineOffsetBuilder(samples_per_point=4)
        pair = builder.build([(0.0, 0.0), (1.0, 1.0)], 0.1)
        assert len(pair) == 9

    def test_offsets_are_thickness_apart(self, builder, arc_points):
        pair = builder.build(arc_points, 0.1, tension=0.5)
        widths = np.linalg.norm(pair.outer - pair.inner, axis=1)
        assert np.allclose(widths, 0.2)

    def test_offsets_are_centered_on_samples(self, builder, arc_points):
        pair = builder.build(arc_points, 0.1, tension=0.5)
        samples = builder.sample(arc_points, closed=False, tension=0.5)
        assert np.allclose((pair.outer + pair.inner) / 2, samples)

    def test_offsets_do_not_backtrack(self, builder, arc_points):
        pair = builder.build(arc_points, 0.1, tension=0.5)
        center_steps = np.diff((pair.outer + pair.inner) / 2, axis=0)

        for side in (pair.outer, pair.inner):
            steps = np.diff(side, axis=0)
            assert np.all(np.einsum("ij,ij->i", steps, center_steps) > 0)

    def test_sample_spacing_is_bounded(self, builder, arc_points):
        samples = builder.sample(arc_points, closed=False, tension=0.5)
        spacing = np.linalg.norm(np.diff(samples, axis=0), axis=1)
        chord = np.linalg.norm(np.diff(np.array(arc_points), axis=0), axis=1).max()

        assert spacing.min() > 0
        assert spacing.max() < chord / 4

    def test_closed_offsets_are_thickness_apart(self, builder):
        pts = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]
        pair = builder.build(pts, 0.1, closed=True, tension=0.5)
        widths = np.linalg.norm(pair.outer - pair.inner, axis=1)
        assert np.allclose(widths, 0.2)

    def test_coincident_points_raise(self, builder):
        with pytest.raises(DegenerateSegmentError):
            builder.build([(1.0, 1.0), (1.0, 1.0)], 0.1)
