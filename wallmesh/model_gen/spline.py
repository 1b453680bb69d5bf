"""Catmull-Rom sampling and normal offsets for curved walls."""

from typing import Sequence

import numpy as np

from wallmesh.errors import DegenerateSegmentError, InsufficientPointsError
from wallmesh.geometry.elements import Point2D

from .offsets import left_normals
from .types import OffsetPair

SAMPLES_PER_POINT = 12

_EPS = 1e-12


class CatmullRomCurve:
    """Interpolating cubic curve through every control point.

    Segment tangents are ``tension * (p[i+1] - p[i-1])``, so lower tension
    pulls the curve tighter through the points. Open curves extrapolate a
    phantom point past each end; closed curves wrap around.
    """

    def __init__(self, points: Sequence[Point2D], closed: bool = False, tension: float = 0.5):
        self.points = np.asarray(points, dtype=float).reshape(-1, 2)
        if len(self.points) < 2:
            raise InsufficientPointsError(
                f"Curve needs at least 2 points, got {len(self.points)}"
            )
        self.closed = closed
        self.tension = tension

    def get_point(self, t: float) -> Point2D:
        x, z = self.evaluate(np.array([t]))[0]
        return (float(x), float(z))

    def get_points(self, divisions: int) -> np.ndarray:
        """Sample ``divisions + 1`` points at uniform parameter steps over [0, 1]."""
        return self.evaluate(np.linspace(0.0, 1.0, divisions + 1))

    def evaluate(self, t: np.ndarray) -> np.ndarray:
        pts = self.points
        count = len(pts)
        t = np.clip(np.asarray(t, dtype=float), 0.0, 1.0)

        p = (count if self.closed else count - 1) * t
        seg = np.floor(p).astype(int)
        weight = p - seg

        if self.closed:
            seg = seg % count
            p0 = pts[(seg - 1) % count]
            p3 = pts[(seg + 2) % count]
        else:
            # t == 1 lands on the last point as the end of the final segment.
            at_end = seg >= count - 1
            seg[at_end] = count - 2
            weight[at_end] = 1.0
            start = 2 * pts[0] - pts[1]
            end = 2 * pts[-1] - pts[-2]
            p0 = np.where((seg > 0)[:, None], pts[np.maximum(seg - 1, 0)], start)
            p3 = np.where((seg + 2 < count)[:, None], pts[np.minimum(seg + 2, count - 1)], end)

        p1 = pts[seg % count]
        p2 = pts[(seg + 1) % count]

        t0 = self.tension * (p2 - p0)
        t1 = self.tension * (p3 - p1)
        c2 = -3 * p1 + 3 * p2 - 2 * t0 - t1
        c3 = 2 * p1 - 2 * p2 + t0 + t1

        w = weight[:, None]
        return p1 + t0 * w + c2 * w ** 2 + c3 * w ** 3


class SplineOffsetBuilder:
    """Samples a curve through the centerline and offsets every sample."""

    def __init__(self, samples_per_point: int = SAMPLES_PER_POINT):
        self.samples_per_point = samples_per_point

    def sample_count(self, point_count: int, closed: bool) -> int:
        divisions = point_count * self.samples_per_point
        return divisions if closed else divisions + 1

    def sample(self, points: Sequence[Point2D], closed: bool, tension: float) -> np.ndarray:
        """Dense centerline samples; closed loops drop the repeated end sample."""
        curve = CatmullRomCurve(points, closed=closed, tension=tension)
        samples = curve.get_points(len(curve.points) * self.samples_per_point)
        return samples[:-1] if closed else samples

    def build(
        self,
        points: Sequence[Point2D],
        half_thickness: float,
        closed: bool = False,
        tension: float = 0.5,
    ) -> OffsetPair:
        """Offset the sampled curve by ``half_thickness`` on each side.

        Args:
            points: Control points, at least two, no coincident neighbours
            half_thickness: Offset distance from the curve
            closed: Treat the control points as a loop
            tension: Curve tension in (0, 1]

        Returns:
            OffsetPair with ``sample_count(len(points), closed)`` points per side
        """
        samples = self.sample(points, closed, tension)
        offsets = left_normals(self._tangents(samples, closed)) * half_thickness
        return OffsetPair(outer=samples + offsets, inner=samples - offsets)

    def _tangents(self, samples: np.ndarray, closed: bool) -> np.ndarray:
        if closed:
            following = np.roll(samples, -1, axis=0)
            central = following - np.roll(samples, 1, axis=0)
            forward = following - samples
        else:
            central = np.gradient(samples, axis=0)
            forward = np.vstack([np.diff(samples, axis=0), samples[-1:] - samples[-2:-1]])

        lengths = np.linalg.norm(central, axis=1)
        flat = lengths < _EPS
        central[flat] = forward[flat]
        lengths[flat] = np.linalg.norm(central[flat], axis=1)
        if np.any(lengths < _EPS):
            bad = int(np.argmin(lengths))
            raise DegenerateSegmentError(f"Curve has no tangent at sample {bad}")
        return central / lengths[:, None]
