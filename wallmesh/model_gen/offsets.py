"""Mitered offsets for straight-segment walls."""

from typing import Sequence

import numpy as np

from wallmesh.errors import DegenerateSegmentError, InsufficientPointsError
from wallmesh.geometry.elements import Point2D

from .types import OffsetPair

# Miters are never longer than this many half thicknesses.
MITER_LIMIT = 3.0

# Turns whose normals have a dot product at or below this are treated as
# reversals; the miter length falls back to the half thickness.
REFLEX_COS_THRESHOLD = -0.99

_EPS = 1e-12


def left_normals(directions: np.ndarray) -> np.ndarray:
    """Left-hand perpendiculars (-dz, dx) of unit direction vectors."""
    return np.column_stack([-directions[:, 1], directions[:, 0]])


def segment_directions(points: np.ndarray, closed: bool) -> np.ndarray:
    """Unit direction of every segment; the closing segment is last when closed."""
    ends = np.roll(points, -1, axis=0) if closed else points[1:]
    starts = points if closed else points[:-1]
    deltas = ends - starts
    lengths = np.linalg.norm(deltas, axis=1)
    if np.any(lengths < _EPS):
        bad = int(np.argmin(lengths))
        raise DegenerateSegmentError(f"Zero-length segment starting at point {bad}")
    return deltas / lengths[:, None]


class OffsetPathBuilder:
    """Offsets a polyline centerline to both sides with miter joins."""

    def __init__(
        self,
        miter_limit: float = MITER_LIMIT,
        reflex_cos_threshold: float = REFLEX_COS_THRESHOLD,
    ):
        self.miter_limit = miter_limit
        self.reflex_cos_threshold = reflex_cos_threshold

    def build(
        self, points: Sequence[Point2D], half_thickness: float, closed: bool = False
    ) -> OffsetPair:
        """Offset the centerline by ``half_thickness`` on each side.

        Args:
            points: Centerline, at least two points, no coincident neighbours
            half_thickness: Offset distance from the centerline
            closed: Treat the centerline as a loop

        Returns:
            OffsetPair with one outer and one inner point per input point
        """
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        n = len(pts)
        if n < 2:
            raise InsufficientPointsError(f"Need at least 2 points, got {n}")

        seg_normals = left_normals(segment_directions(pts, closed))

        if closed:
            # Segment i runs from point i to i + 1.
            n_in = np.roll(seg_normals, 1, axis=0)
            n_out = seg_normals
        else:
            # End points only have one segment: plain perpendicular, no miter.
            n_in = np.vstack([seg_normals[:1], seg_normals])
            n_out = np.vstack([seg_normals, seg_normals[-1:]])

        offsets = self._miter_offsets(n_in, n_out, half_thickness)
        return OffsetPair(outer=pts + offsets, inner=pts - offsets)

    def _miter_offsets(
        self, n_in: np.ndarray, n_out: np.ndarray, half_thickness: float
    ) -> np.ndarray:
        miter = n_in + n_out
        miter_len = np.linalg.norm(miter, axis=1)
        # Exact reversal: the normals cancel, keep the incoming one.
        cancelled = miter_len < _EPS
        miter[cancelled] = n_in[cancelled]
        miter_len[cancelled] = 1.0
        miter = miter / miter_len[:, None]

        cos_angle = np.einsum("ij,ij->i", n_in, n_out)
        half_cos = np.clip((1.0 + cos_angle) / 2.0, _EPS, None)
        length = np.where(
            cos_angle > self.reflex_cos_threshold,
            half_thickness / np.sqrt(half_cos),
            half_thickness,
        )
        length = np.minimum(length, half_thickness * self.miter_limit)
        return miter * length[:, None]
