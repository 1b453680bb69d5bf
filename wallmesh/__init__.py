"""wallmesh: procedural wall and floor meshes from drawn control points."""

from .config import MeshConfig, configure_logging
from .errors import (
    DegenerateSegmentError,
    ExtrusionError,
    InsufficientPointsError,
    InvalidParameterError,
    MeshGenerationError,
)
from .geometry import FloorSpec, WallSpec
from .model_gen import Mesh3D, MeshCache, MeshGenerator, Scene3D

__version__ = "0.1.0"

__all__ = [
    "MeshGenerator",
    "MeshCache",
    "MeshConfig",
    "configure_logging",
    "WallSpec",
    "FloorSpec",
    "Mesh3D",
    "Scene3D",
    "MeshGenerationError",
    "InsufficientPointsError",
    "DegenerateSegmentError",
    "InvalidParameterError",
    "ExtrusionError",
]
