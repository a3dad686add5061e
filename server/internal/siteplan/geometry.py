"""
Planar geometry utilities for site planning.

Polygons are open loops: an ordered list of (x, y) tuples where the last
vertex implicitly connects back to the first. Segments are (start, end)
pairs of points. Everything here is pure and works on plain tuples so it
can be used without the shapely kernel.
"""

import math
from typing import Iterable, List, Sequence, Tuple

import shapely.geometry as sg

Point = Tuple[float, float]
Polygon = List[Point]
Segment = Tuple[Point, Point]

# Constants
AREA_EPSILON = 1e-6  # Loops at or below this area are degenerate
EDGE_TOLERANCE = 1e-3  # Endpoint distance under which two edges are the same edge
PERPENDICULAR_TOLERANCE = 1e-3  # |cos| below which two edges count as perpendicular


class InvalidBoundary(ValueError):
    """Raised when a site boundary cannot be subdivided."""


def as_point(value: Sequence[float]) -> Point:
    """Convert [x, y] or [x, y, z] into a planar (x, y) tuple."""
    if len(value) < 2:
        raise ValueError(f"Point needs at least 2 coordinates, got {list(value)}")
    return (float(value[0]), float(value[1]))


def normalize_polygon(coords: Iterable[Sequence[float]]) -> Polygon:
    """
    Flatten coordinates to 2D and drop repeated vertices.

    Accepts both open and closed (GeoJSON style) rings. Consecutive duplicate
    vertices are collapsed and a trailing copy of the first vertex is removed.
    """
    polygon: Polygon = []
    for coord in coords:
        point = as_point(coord)
        if polygon and points_equal(polygon[-1], point, 0.0):
            continue
        polygon.append(point)
    while len(polygon) > 1 and points_equal(polygon[0], polygon[-1], 0.0):
        polygon.pop()
    return polygon


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def points_equal(a: Point, b: Point, tolerance: float = EDGE_TOLERANCE) -> bool:
    if tolerance <= 0.0:
        return a[0] == b[0] and a[1] == b[1]
    return distance(a, b) < tolerance


def polygon_area(polygon: Sequence[Point]) -> float:
    """
    Absolute area of a loop using the shoelace formula.

    Only each edge's start vertex is used, so the loop must be closed
    conceptually (last vertex connects to first).
    """
    n = len(polygon)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        x1, y1 = polygon[i][0], polygon[i][1]
        x2, y2 = polygon[(i + 1) % n][0], polygon[(i + 1) % n][1]
        total += x1 * y2 - x2 * y1
    return abs(total) / 2.0


def polygon_centroid(polygon: Sequence[Point]) -> Point:
    """Arithmetic mean of the vertices (not area weighted)."""
    if not polygon:
        return (0.0, 0.0)
    sx = sum(p[0] for p in polygon)
    sy = sum(p[1] for p in polygon)
    return (sx / len(polygon), sy / len(polygon))


def bounding_box(polygon: Sequence[Point]) -> Tuple[float, float, float, float]:
    """Return (min_x, min_y, max_x, max_y), same order as shapely bounds."""
    xs = [p[0] for p in polygon]
    ys = [p[1] for p in polygon]
    return (min(xs), min(ys), max(xs), max(ys))


def polygon_edges(polygon: Sequence[Point]) -> List[Segment]:
    n = len(polygon)
    return [(polygon[i], polygon[(i + 1) % n]) for i in range(n)]


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """
    Ray casting test: count crossings of a ray going in +x from point.

    Points exactly on an edge may be classified either way.
    """
    x, y = point
    inside = False
    n = len(polygon)
    for i in range(n):
        x1, y1 = polygon[i]
        x2, y2 = polygon[(i + 1) % n]
        if (y1 > y) != (y2 > y):
            intersect_x = x1 + (x2 - x1) * (y - y1) / (y2 - y1)
            if intersect_x > x:
                inside = not inside
    return inside


def project_parameter(point: Point, segment: Segment) -> float:
    """Parameter of the orthogonal projection of point onto segment, clamped to [0, 1]."""
    (ax, ay), (bx, by) = segment
    abx, aby = bx - ax, by - ay
    length_sq = abx * abx + aby * aby
    if length_sq == 0.0:
        return 0.0
    t = ((point[0] - ax) * abx + (point[1] - ay) * aby) / length_sq
    return max(0.0, min(1.0, t))


def project_point_on_segment(point: Point, segment: Segment) -> Point:
    t = project_parameter(point, segment)
    (ax, ay), (bx, by) = segment
    return (ax + t * (bx - ax), ay + t * (by - ay))


def point_segment_distance(point: Point, segment: Segment) -> float:
    return distance(point, project_point_on_segment(point, segment))


def segment_length(segment: Segment) -> float:
    return distance(segment[0], segment[1])


def segment_direction(segment: Segment) -> Point:
    """Unit direction from start to end; (0, 0) for a zero-length segment."""
    length = segment_length(segment)
    if length == 0.0:
        return (0.0, 0.0)
    (ax, ay), (bx, by) = segment
    return ((bx - ax) / length, (by - ay) / length)


def left_perpendicular(segment: Segment) -> Point:
    """Unit normal obtained by rotating the segment direction 90° counter-clockwise."""
    dx, dy = segment_direction(segment)
    return (-dy, dx)


def segments_equal(first: Segment, second: Segment, tolerance: float = EDGE_TOLERANCE) -> bool:
    """True when both endpoints match, in either orientation."""
    same = points_equal(first[0], second[0], tolerance) and points_equal(
        first[1], second[1], tolerance
    )
    reversed_ = points_equal(first[0], second[1], tolerance) and points_equal(
        first[1], second[0], tolerance
    )
    return same or reversed_


def validate_boundary(coords: Iterable[Sequence[float]]) -> Polygon:
    """
    Normalize and validate a site boundary.

    Returns:
        The normalized open loop

    Raises:
        InvalidBoundary: fewer than 3 distinct vertices, NaN or infinite coordinates,
            no area, or self-intersecting
    """
    try:
        polygon = normalize_polygon(coords)
    except (TypeError, ValueError) as e:
        raise InvalidBoundary(f"Boundary coordinates are malformed: {e}") from e

    if len(polygon) < 3:
        raise InvalidBoundary(
            f"Boundary needs at least 3 distinct vertices, got {len(polygon)}"
        )

    if not all(math.isfinite(x) and math.isfinite(y) for x, y in polygon):
        raise InvalidBoundary("Boundary has non-finite coordinates")

    area = polygon_area(polygon)
    if area <= AREA_EPSILON:
        raise InvalidBoundary(f"Boundary has no area ({area:.3g})")

    if not sg.LinearRing(polygon).is_simple:
        raise InvalidBoundary("Boundary self-intersects")

    return polygon


def detect_boundary_shape(polygon: Sequence[Point]) -> str:
    """
    Classify a boundary as "rectangular" or "irregular".

    Only the first two edges of a 4-edge loop are compared, which is enough
    for boundaries drawn as rectangles.
    """
    if len(polygon) != 4:
        return "irregular"
    first, second = polygon_edges(polygon)[:2]
    d1 = segment_direction(first)
    d2 = segment_direction(second)
    if abs(d1[0] * d2[0] + d1[1] * d2[1]) < PERPENDICULAR_TOLERANCE:
        return "rectangular"
    return "irregular"
