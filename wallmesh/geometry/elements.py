"""Wall and floor specifications drawn in the editor."""

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Tuple

from wallmesh.errors import InsufficientPointsError, InvalidParameterError

# (x, z) on the ground plane; world Y is up.
Point2D = Tuple[float, float]
Point3D = Tuple[float, float, float]

MIN_WALL_POINTS = 2
MIN_FLOOR_POINTS = 3


def as_point(value: Any) -> Point2D:
    """Normalise a tuple/list or an ``{"x", "z"}`` mapping to a Point2D."""
    if isinstance(value, Mapping):
        return (float(value["x"]), float(value["z"]))
    x, z = value
    return (float(x), float(z))


def as_points(values: Iterable[Any]) -> Tuple[Point2D, ...]:
    """Normalise a sequence of control points to a tuple of Point2D."""
    return tuple(as_point(v) for v in values)


def _check_dimension(kind: str, name: str, value: float) -> None:
    # NaN fails every comparison, so test finiteness explicitly.
    if not (math.isfinite(value) and value > 0):
        raise InvalidParameterError(f"{kind} {name} must be positive and finite, got {value}")


def _check_points(kind: str, points: Tuple[Point2D, ...]) -> None:
    for i, (x, z) in enumerate(points):
        if not (math.isfinite(x) and math.isfinite(z)):
            raise InvalidParameterError(f"{kind} point {i} is not finite: {(x, z)}")


@dataclass(frozen=True)
class WallSpec:
    """A wall drawn along a centerline.

    ``tension == 0`` builds a straight wall with mitered corners,
    ``tension > 0`` builds a curved wall through the control points.
    Specs are immutable and compare by value so callers can use them as
    cache keys; ``id`` does not take part in equality.
    """

    points: Tuple[Point2D, ...] = ()
    thickness: float = 0.2  # meters
    height: float = 3.0  # meters
    tension: float = 0.0
    closed: bool = False
    id: str = field(default="", compare=False)

    def __post_init__(self):
        object.__setattr__(self, "points", as_points(self.points))
        object.__setattr__(self, "thickness", float(self.thickness))
        object.__setattr__(self, "height", float(self.height))
        object.__setattr__(self, "tension", float(self.tension))
        object.__setattr__(self, "closed", bool(self.closed))

    @property
    def is_curved(self) -> bool:
        return self.tension > 0

    @property
    def length(self) -> float:
        """Total centerline length, including the closing segment."""
        if len(self.points) < 2:
            return 0.0
        pts = list(self.points)
        if self.closed:
            pts.append(pts[0])
        total = 0.0
        for i in range(len(pts) - 1):
            dx = pts[i + 1][0] - pts[i][0]
            dz = pts[i + 1][1] - pts[i][1]
            total += (dx ** 2 + dz ** 2) ** 0.5
        return total

    def validate(self) -> None:
        """Raise if the spec cannot produce a wall."""
        if len(self.points) < MIN_WALL_POINTS:
            raise InsufficientPointsError(
                f"Wall needs at least {MIN_WALL_POINTS} points, got {len(self.points)}"
            )
        _check_points("Wall", self.points)
        _check_dimension("Wall", "thickness", self.thickness)
        _check_dimension("Wall", "height", self.height)
        if not 0.0 <= self.tension <= 1.0:
            raise InvalidParameterError(f"Wall tension must be in [0, 1], got {self.tension}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "points": [list(p) for p in self.points],
            "thickness": self.thickness,
            "height": self.height,
            "tension": self.tension,
            "closed": self.closed,
            "length": self.length,
        }


@dataclass(frozen=True)
class FloorSpec:
    """A floor slab whose boundary is the drawn polygon."""

    points: Tuple[Point2D, ...] = ()
    depth: float = 0.1  # meters
    id: str = field(default="", compare=False)

    def __post_init__(self):
        object.__setattr__(self, "points", as_points(self.points))
        object.__setattr__(self, "depth", float(self.depth))

    def validate(self) -> None:
        """Raise if the spec cannot produce a floor."""
        if len(self.points) < MIN_FLOOR_POINTS:
            raise InsufficientPointsError(
                f"Floor needs at least {MIN_FLOOR_POINTS} points, got {len(self.points)}"
            )
        _check_points("Floor", self.points)
        _check_dimension("Floor", "depth", self.depth)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "points": [list(p) for p in self.points],
            "depth": self.depth,
        }
