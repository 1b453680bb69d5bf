"""Extrusion of boundary loops into solid wall and floor meshes."""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import trimesh
from shapely.errors import GEOSException
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry.polygon import orient

from wallmesh.errors import ExtrusionError, InsufficientPointsError, InvalidParameterError
from wallmesh.geometry.elements import MIN_FLOOR_POINTS, Point2D
from wallmesh.geometry.spatial_utils import polygon_area, polygon_problem, split_loop_rings

from .types import BoundaryLoop, Mesh3D

logger = logging.getLogger(__name__)

# Shape space is extruded along +Z. Walls stand up (shape Z -> world +Y),
# floors lie flat (shape Z -> world -Y, so the slab hangs below y = 0).
WALL_TRANSFORM = trimesh.transformations.rotation_matrix(-np.pi / 2, [1, 0, 0])
FLOOR_TRANSFORM = trimesh.transformations.rotation_matrix(np.pi / 2, [1, 0, 0])

# Rings enclosing less than this (square units) are treated as slivers.
MIN_AREA = 1e-9


class Extruder:
    """Sweeps a closed 2D boundary along a fixed axis into a solid."""

    def __init__(self, engine: Optional[str] = "earcut"):
        self.engine = engine

    def polygons(self, loop: BoundaryLoop) -> List[ShapelyPolygon]:
        """Cross-section polygons of a loop, shells counter-clockwise.

        The largest ring is a shell; smaller rings inside a shell become
        its holes. Rings without area are dropped.
        """
        try:
            rings = [r for r in split_loop_rings(loop.as_tuples()) if polygon_area(r) > MIN_AREA]
            if not rings:
                raise ExtrusionError(f"Boundary loop of {len(loop)} points encloses no area")

            rings.sort(key=polygon_area, reverse=True)
            shells: List[Tuple[List[Point2D], List[List[Point2D]]]] = []
            for ring in rings:
                probe = ShapelyPolygon(ring).representative_point()
                for shell, holes in shells:
                    if ShapelyPolygon(shell).contains(probe):
                        holes.append(ring)
                        break
                else:
                    shells.append((ring, []))

            return [orient(ShapelyPolygon(shell, holes), sign=1.0) for shell, holes in shells]
        except (GEOSException, ValueError) as e:
            raise ExtrusionError(f"Invalid boundary loop: {e}") from e

    def extrude(
        self,
        loop: BoundaryLoop,
        depth: float,
        transform: Optional[np.ndarray] = None,
        material_id: str = "default",
        element_type: str = "generic",
        source_id: str = "",
    ) -> Mesh3D:
        """Extrude a loop by ``depth``: two flat caps joined by side quads.

        Args:
            loop: Closed cross-section in shape coordinates
            depth: Extrusion distance along shape +Z
            transform: Optional 4x4 matrix applied to the result

        Returns:
            Mesh3D of the solid
        """
        if not (np.isfinite(depth) and depth > 0):
            raise InvalidParameterError(f"Extrusion depth must be positive and finite, got {depth}")

        parts = []
        for polygon in self.polygons(loop):
            try:
                parts.append(
                    trimesh.creation.extrude_polygon(polygon, height=depth, engine=self.engine)
                )
            except Exception as e:
                raise ExtrusionError(f"Failed to extrude boundary loop: {e}") from e

        solid = parts[0] if len(parts) == 1 else trimesh.util.concatenate(parts)
        if len(solid.faces) == 0:
            raise ExtrusionError("Extrusion produced no faces")
        if transform is not None:
            solid.apply_transform(transform)

        return Mesh3D.from_trimesh(
            solid,
            material_id=material_id,
            element_type=element_type,
            source_id=source_id,
        )


class FloorMeshBuilder:
    """Extrudes a drawn floor polygon into a thin slab."""

    def __init__(self, extruder: Optional[Extruder] = None):
        self.extruder = extruder or Extruder()

    def build(self, points: Sequence[Point2D], depth: float, source_id: str = "") -> Mesh3D:
        """Create a floor slab of thickness ``depth`` below y = 0."""
        if len(points) < MIN_FLOOR_POINTS:
            raise InsufficientPointsError(
                f"Floor needs at least {MIN_FLOOR_POINTS} points, got {len(points)}"
            )

        if not np.all(np.isfinite(np.asarray(points, dtype=float))):
            raise InvalidParameterError(f"Floor {source_id or '<unnamed>'} has non-finite points")

        problem = polygon_problem(points)
        if problem:
            logger.warning(f"Floor {source_id or '<unnamed>'} polygon is invalid: {problem}")

        return self.extruder.extrude(
            BoundaryLoop.from_polygon(points),
            depth,
            transform=FLOOR_TRANSFORM,
            material_id="floor_default",
            element_type="floors",
            source_id=source_id,
        )
