"""Wall and floor mesh generation module.

This module converts WallSpec and FloorSpec control points into solid
meshes: mitered or spline offsets, a boundary loop, then an extrusion.

Usage:
    from wallmesh.geometry import WallSpec
    from wallmesh.model_gen import MeshGenerator

    generator = MeshGenerator()
    mesh = generator.generate(WallSpec(points=[(0, 0), (4, 0), (4, 4)]))
    if mesh is not None:
        trimesh_mesh = mesh.to_trimesh()
"""

from .extruder import FLOOR_TRANSFORM, WALL_TRANSFORM, Extruder, FloorMeshBuilder
from .generator import MeshCache, MeshGenerator
from .offsets import MITER_LIMIT, REFLEX_COS_THRESHOLD, OffsetPathBuilder
from .shape import ShapeAssembler, to_shape_coords
from .spline import SAMPLES_PER_POINT, CatmullRomCurve, SplineOffsetBuilder
from .types import BoundaryLoop, Mesh3D, OffsetPair, Scene3D

__all__ = [
    # Main API
    "MeshGenerator",
    "MeshCache",
    "Mesh3D",
    "Scene3D",
    # Pipeline stages (for advanced usage)
    "OffsetPathBuilder",
    "SplineOffsetBuilder",
    "CatmullRomCurve",
    "ShapeAssembler",
    "Extruder",
    "FloorMeshBuilder",
    "OffsetPair",
    "BoundaryLoop",
    "to_shape_coords",
    # Constants
    "MITER_LIMIT",
    "REFLEX_COS_THRESHOLD",
    "SAMPLES_PER_POINT",
    "WALL_TRANSFORM",
    "FLOOR_TRANSFORM",
]
