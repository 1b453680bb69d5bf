"""Data types passed between the mesh generation stages."""

import itertools
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import trimesh

from wallmesh.geometry.elements import Point2D, Point3D

_ORIGIN: Point3D = (0.0, 0.0, 0.0)


@dataclass
class OffsetPair:
    """Outer and inner offset sequences of a centerline, in plan coordinates."""

    outer: np.ndarray
    inner: np.ndarray

    def __post_init__(self):
        self.outer = np.asarray(self.outer, dtype=float).reshape(-1, 2)
        self.inner = np.asarray(self.inner, dtype=float).reshape(-1, 2)
        if len(self.outer) != len(self.inner):
            raise ValueError(
                f"Offset sequences differ in length: {len(self.outer)} != {len(self.inner)}"
            )

    def __len__(self) -> int:
        return len(self.outer)


@dataclass
class BoundaryLoop:
    """Closed 2D cross-section fed to the extruder.

    Points are in shape coordinates; the edge from the last point back to
    the first is implied.
    """

    points: np.ndarray

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=float).reshape(-1, 2)

    def __len__(self) -> int:
        return len(self.points)

    @classmethod
    def from_polygon(cls, polygon: Sequence[Point2D]) -> "BoundaryLoop":
        """Use a drawn polygon as the loop unchanged."""
        return cls(points=np.array(polygon, dtype=float))

    def as_tuples(self) -> List[Point2D]:
        return [(float(x), float(y)) for x, y in self.points]


@dataclass
class Mesh3D:
    """Triangle mesh of one wall or floor, tagged with where it came from."""

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    vertices: np.ndarray = field(default_factory=lambda: np.empty((0, 3)))
    faces: np.ndarray = field(default_factory=lambda: np.empty((0, 3), dtype=int))
    normals: Optional[np.ndarray] = None
    material_id: str = "default"
    element_type: str = "generic"  # walls, floors
    source_id: str = ""  # id of the WallSpec/FloorSpec

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) == 0 or len(self.faces) == 0

    @property
    def bounds(self) -> Tuple[Point3D, Point3D]:
        """Axis-aligned bounding box as (min, max)."""
        if len(self.vertices) == 0:
            return (_ORIGIN, _ORIGIN)
        return (tuple(self.vertices.min(axis=0)), tuple(self.vertices.max(axis=0)))

    @property
    def tags(self) -> dict:
        return {
            "material_id": self.material_id,
            "element_type": self.element_type,
            "source_id": self.source_id,
        }

    def to_trimesh(self) -> trimesh.Trimesh:
        """Trimesh copy of this mesh carrying the tags as metadata."""
        if self.is_empty:
            return trimesh.Trimesh()
        return trimesh.Trimesh(vertices=self.vertices, faces=self.faces, metadata=self.tags)

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, **tags) -> "Mesh3D":
        """Wrap a trimesh; keyword arguments set material_id, element_type, source_id."""
        has_faces = len(mesh.faces) > 0
        return cls(
            vertices=np.array(mesh.vertices, dtype=float),
            faces=np.array(mesh.faces, dtype=int),
            normals=np.array(mesh.vertex_normals) if has_faces else None,
            **tags,
        )


@dataclass
class Scene3D:
    """Generated meshes grouped by element type."""

    meshes: Dict[str, List[Mesh3D]] = field(default_factory=dict)
    metadata: dict = field(default_factory=dict)

    def __iter__(self) -> Iterator[Mesh3D]:
        return itertools.chain.from_iterable(self.meshes.values())

    def __len__(self) -> int:
        return sum(len(group) for group in self.meshes.values())

    def add_mesh(self, mesh: Mesh3D) -> None:
        self.meshes.setdefault(mesh.element_type, []).append(mesh)

    def get_by_type(self, element_type: str) -> List[Mesh3D]:
        return list(self.meshes.get(element_type, ()))

    @property
    def bounds(self) -> Tuple[Point3D, Point3D]:
        """Bounding box of every non-empty mesh."""
        boxes = [mesh.bounds for mesh in self if not mesh.is_empty]
        if not boxes:
            return (_ORIGIN, _ORIGIN)
        lows, highs = zip(*boxes)
        return (tuple(np.min(lows, axis=0)), tuple(np.max(highs, axis=0)))

    def to_trimesh_scene(self) -> trimesh.Scene:
        """One merged geometry per element type, named after it."""
        scene = trimesh.Scene()
        for element_type, group in self.meshes.items():
            parts = [mesh.to_trimesh() for mesh in group if not mesh.is_empty]
            if parts:
                scene.add_geometry(
                    trimesh.util.concatenate(parts),
                    node_name=element_type,
                    geom_name=element_type,
                )
        return scene
