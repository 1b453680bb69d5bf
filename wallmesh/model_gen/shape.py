"""Assembly of offset sequences into a single boundary loop."""

import numpy as np

from .types import BoundaryLoop, OffsetPair


def to_shape_coords(points: np.ndarray) -> np.ndarray:
    """Map plan (x, z) to wall shape space (x, -z).

    Paired with the -90 degree X rotation applied after extrusion, which
    sends shape (x, -z, d) back to world (x, d, z).
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    return np.column_stack([pts[:, 0], -pts[:, 1]])


class ShapeAssembler:
    """Stitches an outer and inner offset sequence into one closed loop."""

    def assemble(self, pair: OffsetPair, closed: bool = False) -> BoundaryLoop:
        """Walk outer forward, then inner backward.

        Open walls give a simple polygon. Closed walls close each side back
        to its first point, so the outer and inner rings are joined by a
        zero-width slit at index 0 and the enclosed area is exactly the
        area between them.
        """
        outer = to_shape_coords(pair.outer)
        inner = to_shape_coords(pair.inner)

        if closed:
            parts = [outer, outer[:1], inner[:1], inner[::-1]]
        else:
            parts = [outer, inner[::-1]]
        return BoundaryLoop(points=np.vstack(parts))
