"""Footprint geometry module

Immutable wall/floor specifications and the planar helpers used to clean
and measure them before meshing.
"""

from .elements import FloorSpec, Point2D, WallSpec, as_point, as_points
from .spatial_utils import (
    calculate_center,
    dedupe_consecutive,
    is_simple_loop,
    localize_points,
    polygon_area,
    snap_to_grid,
    split_loop_rings,
)

__all__ = [
    "WallSpec",
    "FloorSpec",
    "Point2D",
    "as_point",
    "as_points",
    "calculate_center",
    "dedupe_consecutive",
    "is_simple_loop",
    "localize_points",
    "polygon_area",
    "snap_to_grid",
    "split_loop_rings",
]
