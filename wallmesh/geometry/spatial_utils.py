"""Spatial utility functions for footprint geometry.

Uses Shapely for robust polygon predicates and measurements.
"""

from collections import Counter, defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from shapely.geometry import LinearRing, Polygon as ShapelyPolygon
from shapely.validation import explain_validity

from .elements import Point2D


def distance(p1: Point2D, p2: Point2D) -> float:
    """Calculate Euclidean distance between two points."""
    return ((p2[0] - p1[0]) ** 2 + (p2[1] - p1[1]) ** 2) ** 0.5


def polygon_area(polygon: Sequence[Point2D]) -> float:
    """Calculate the area enclosed by a polygon.

    Args:
        polygon: List of vertices, closing edge implied

    Returns:
        Area in square units (always positive)
    """
    if len(polygon) < 3:
        return 0.0
    poly = ShapelyPolygon([tuple(p) for p in polygon])
    return abs(poly.area)


def is_simple_loop(loop: Sequence[Point2D]) -> bool:
    """Check that a closed loop does not cross or touch itself."""
    if len(loop) < 3:
        return False
    return LinearRing([tuple(p) for p in loop]).is_simple


def polygon_problem(polygon: Sequence[Point2D]) -> Optional[str]:
    """Describe why a polygon is invalid, or None if it is valid."""
    poly = ShapelyPolygon([tuple(p) for p in polygon])
    if poly.is_valid:
        return None
    return explain_validity(poly)


def dedupe_consecutive(
    points: Sequence[Point2D], tolerance: float = 1e-6, closed: bool = False
) -> List[Point2D]:
    """Drop points that coincide with their predecessor.

    Args:
        points: Ordered control points
        tolerance: Points closer than this are treated as coincident
        closed: Also drop a last point that coincides with the first

    Returns:
        Points with no zero-length segments between neighbours
    """
    result: List[Point2D] = []
    for p in points:
        if result and distance(result[-1], p) <= tolerance:
            continue
        result.append(p)
    if closed:
        while len(result) > 1 and distance(result[-1], result[0]) <= tolerance:
            result.pop()
    return result


def snap_to_grid(value: float, grid_size: float = 0.5) -> float:
    """Round a coordinate to the nearest grid line."""
    return round(value / grid_size) * grid_size


def calculate_center(points: Sequence[Point2D]) -> Point2D:
    """Center of the axis-aligned bounding box of the points."""
    if not points:
        return (0.0, 0.0)
    xs = [p[0] for p in points]
    zs = [p[1] for p in points]
    return ((min(xs) + max(xs)) / 2, (min(zs) + max(zs)) / 2)


def localize_points(points: Sequence[Point2D], center: Point2D) -> List[Point2D]:
    """Express points relative to a center."""
    return [(p[0] - center[0], p[1] - center[1]) for p in points]


def split_loop_rings(loop: Sequence[Point2D]) -> List[List[Point2D]]:
    """Split a boundary loop into simple rings.

    Edge pairs that run along the same segment in opposite directions
    (the zero-width slit joining the outer and inner ring of a closed
    wall) cancel out; the remaining edges are chained into rings.

    Args:
        loop: Closed point sequence, closing edge implied

    Returns:
        Rings of at least three points, closing point not repeated
    """
    pts = [(float(p[0]), float(p[1])) for p in loop]
    n = len(pts)
    edges: List[Tuple[Point2D, Point2D]] = []
    for i in range(n):
        a, b = pts[i], pts[(i + 1) % n]
        if a != b:
            edges.append((a, b))

    counts = Counter(edges)
    for a, b in list(counts):
        cancelled = min(counts[(a, b)], counts[(b, a)]) if (a, b) != (b, a) else 0
        if cancelled:
            counts[(a, b)] -= cancelled
            counts[(b, a)] -= cancelled

    outgoing: Dict[Point2D, List[Point2D]] = defaultdict(list)
    for a, b in edges:
        if counts[(a, b)] > 0:
            counts[(a, b)] -= 1
            outgoing[a].append(b)

    rings: List[List[Point2D]] = []
    for a, b in edges:
        if b not in outgoing[a]:
            continue
        ring = [a]
        current = a
        while outgoing[current]:
            nxt = outgoing[current].pop(0)
            if nxt == a:
                break
            ring.append(nxt)
            current = nxt
        if len(ring) >= 3:
            rings.append(ring)
    return rings
