"""Mesh generator that turns wall and floor specs into solids."""

import logging
import threading
from collections import OrderedDict
from dataclasses import replace
from typing import Callable, Iterable, Optional, Tuple, TypeVar, Union

from wallmesh.config import MeshConfig
from wallmesh.errors import (
    InsufficientPointsError,
    InvalidParameterError,
    MeshGenerationError,
)
from wallmesh.geometry.elements import MIN_WALL_POINTS, FloorSpec, Point2D, WallSpec
from wallmesh.geometry.spatial_utils import dedupe_consecutive

from .extruder import WALL_TRANSFORM, Extruder, FloorMeshBuilder
from .offsets import OffsetPathBuilder
from .shape import ShapeAssembler
from .spline import SplineOffsetBuilder
from .types import BoundaryLoop, Mesh3D, OffsetPair, Scene3D

logger = logging.getLogger(__name__)

Spec = Union[WallSpec, FloorSpec]
T = TypeVar("T")


class MeshGenerator:
    """
    Generates wall and floor meshes from editor specs.

    Pipeline:
    1. Validate the spec and drop coincident consecutive points
    2. Offset the centerline (mitered when tension == 0, spline otherwise)
    3. Assemble the offsets into one boundary loop
    4. Extrude the loop and rotate it into world space

    Floors skip steps 2 and 3. Every ``generate*`` call returns None instead
    of raising when the spec cannot produce geometry.
    """

    def __init__(self, config: Optional[MeshConfig] = None):
        self.config = config or MeshConfig()

        # Initialize sub-processors
        self.offset_builder = OffsetPathBuilder(
            miter_limit=self.config.miter_limit,
            reflex_cos_threshold=self.config.reflex_cos_threshold,
        )
        self.spline_builder = SplineOffsetBuilder(
            samples_per_point=self.config.spline_samples_per_point,
        )
        self.assembler = ShapeAssembler()
        self.extruder = Extruder(engine=self.config.triangulation_engine)
        self.floor_builder = FloorMeshBuilder(self.extruder)

    # ------------------------------------------------------------------
    # Spec construction and preparation
    # ------------------------------------------------------------------

    def wall_spec(
        self,
        points: Iterable[Point2D],
        thickness: Optional[float] = None,
        height: Optional[float] = None,
        tension: float = 0.0,
        closed: bool = False,
        id: str = "",
    ) -> WallSpec:
        """WallSpec with omitted dimensions taken from the config."""
        return WallSpec(
            points=tuple(points),
            thickness=self.config.default_thickness if thickness is None else thickness,
            height=self.config.default_height if height is None else height,
            tension=tension,
            closed=closed,
            id=id,
        )

    def floor_spec(
        self, points: Iterable[Point2D], depth: Optional[float] = None, id: str = ""
    ) -> FloorSpec:
        """FloorSpec with the configured slab depth unless one is given."""
        return FloorSpec(
            points=tuple(points),
            depth=self.config.floor_depth if depth is None else depth,
            id=id,
        )

    def prepare_wall(self, spec: WallSpec) -> WallSpec:
        """Validated copy of a wall spec with coincident points removed.

        Closed walls with fewer than three distinct points are built open.
        """
        try:
            spec.validate()
        except InvalidParameterError:
            if not self.config.clamp_parameters:
                raise
            spec = replace(
                spec,
                thickness=max(spec.thickness, self.config.min_dimension),
                height=max(spec.height, self.config.min_dimension),
                tension=min(max(spec.tension, 0.0), 1.0),
            )
            # Non-finite values cannot be clamped.
            spec.validate()

        points = dedupe_consecutive(spec.points, self.config.dedupe_tolerance, closed=spec.closed)
        if len(points) < MIN_WALL_POINTS:
            raise InsufficientPointsError(
                f"Wall has {len(points)} distinct points, needs {MIN_WALL_POINTS}"
            )
        closed = spec.closed and len(points) >= 3
        return replace(spec, points=points, closed=closed)

    def prepare_floor(self, spec: FloorSpec) -> FloorSpec:
        """Validated copy of a floor spec with coincident points removed."""
        try:
            spec.validate()
        except InvalidParameterError:
            if not self.config.clamp_parameters:
                raise
            spec = replace(spec, depth=max(spec.depth, self.config.min_dimension))
            spec.validate()

        points = dedupe_consecutive(spec.points, self.config.dedupe_tolerance, closed=True)
        if len(points) < 3:
            raise InsufficientPointsError(f"Floor has {len(points)} distinct points, needs 3")
        return replace(spec, points=points)

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def wall_offsets(self, spec: WallSpec) -> Optional[OffsetPair]:
        """Outer/inner offsets of a wall, or None if it has no geometry."""
        return self._guarded(spec, lambda s: self._offsets(self.prepare_wall(s)))

    def wall_boundary(self, spec: WallSpec) -> Optional[BoundaryLoop]:
        """Boundary loop of a wall in shape coordinates, or None."""
        return self._guarded(spec, lambda s: self._boundary(self.prepare_wall(s)))

    def generate_wall(self, spec: WallSpec) -> Optional[Mesh3D]:
        """Extrude a wall spec into a standing solid, or None."""
        return self._guarded(spec, self._build_wall)

    def generate_floor(self, spec: FloorSpec) -> Optional[Mesh3D]:
        """Extrude a floor spec into a flat slab, or None."""
        return self._guarded(spec, self._build_floor)

    def generate(self, spec: Spec) -> Optional[Mesh3D]:
        """Generate a mesh for any supported spec."""
        if isinstance(spec, WallSpec):
            return self.generate_wall(spec)
        if isinstance(spec, FloorSpec):
            return self.generate_floor(spec)
        raise TypeError(f"Unsupported spec type: {type(spec).__name__}")

    def generate_scene(self, specs: Iterable[Spec]) -> Scene3D:
        """
        Generate meshes for many specs and group them by element type.

        Args:
            specs: Wall and floor specs

        Returns:
            Scene3D holding every mesh that could be built
        """
        scene = Scene3D()
        skipped = 0
        for spec in specs:
            mesh = self.generate(spec)
            if mesh is None:
                skipped += 1
                continue
            scene.add_mesh(mesh)

        built = len(scene)
        scene.metadata = {"built": built, "skipped": skipped}
        logger.info(f"Generated scene with {built} meshes ({skipped} specs skipped)")
        return scene

    def _offsets(self, wall: WallSpec) -> OffsetPair:
        half_thickness = wall.thickness / 2
        if wall.is_curved:
            return self.spline_builder.build(
                wall.points, half_thickness, closed=wall.closed, tension=wall.tension
            )
        return self.offset_builder.build(wall.points, half_thickness, closed=wall.closed)

    def _boundary(self, wall: WallSpec) -> BoundaryLoop:
        return self.assembler.assemble(self._offsets(wall), closed=wall.closed)

    def _build_wall(self, spec: WallSpec) -> Mesh3D:
        wall = self.prepare_wall(spec)
        return self.extruder.extrude(
            self._boundary(wall),
            wall.height,
            transform=WALL_TRANSFORM,
            material_id="wall_curved" if wall.is_curved else "wall_straight",
            element_type="walls",
            source_id=wall.id,
        )

    def _build_floor(self, spec: FloorSpec) -> Mesh3D:
        floor = self.prepare_floor(spec)
        return self.floor_builder.build(floor.points, floor.depth, source_id=floor.id)

    def _guarded(self, spec: Spec, build: Callable[[Spec], T]) -> Optional[T]:
        """Run a build step, turning generation errors into None."""
        kind = type(spec).__name__
        try:
            return build(spec)
        except InsufficientPointsError as e:
            logger.debug(f"No geometry for {kind} {spec.id or '<unnamed>'}: {e}")
        except MeshGenerationError as e:
            logger.warning(
                f"Rejected {kind} {spec.id or '<unnamed>'} ({e.error_type}): {e}"
            )
        return None


class MeshCache:
    """LRU cache of generated meshes keyed by spec value.

    Specs are immutable, so an equal spec means an identical mesh. Cached
    meshes have read-only arrays and are shared between callers.
    """

    def __init__(self, generator: Optional[MeshGenerator] = None, maxsize: Optional[int] = None):
        self.generator = generator or MeshGenerator()
        self.maxsize = self.generator.config.cache_size if maxsize is None else maxsize
        self._entries: "OrderedDict[Tuple[Spec, str], Optional[Mesh3D]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, spec: Spec) -> Optional[Mesh3D]:
        """Return the mesh for a spec, generating it on a cache miss."""
        key = (spec, spec.id)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                logger.debug(f"Cache hit for {type(spec).__name__} {spec.id or '<unnamed>'}")
                return self._entries[key]

        mesh = self.generator.generate(spec)
        if mesh is not None:
            mesh.vertices.flags.writeable = False
            mesh.faces.flags.writeable = False

        with self._lock:
            self.misses += 1
            if self.maxsize > 0:
                self._entries[key] = mesh
                self._entries.move_to_end(key)
                while len(self._entries) > self.maxsize:
                    self._entries.popitem(last=False)
        return mesh

    def invalidate(self, spec: Optional[Spec] = None) -> None:
        """Drop one spec's entry, or everything when no spec is given."""
        with self._lock:
            if spec is None:
                self._entries.clear()
            else:
                self._entries.pop((spec, spec.id), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, spec: Spec) -> bool:
        with self._lock:
            return (spec, spec.id) in self._entries
