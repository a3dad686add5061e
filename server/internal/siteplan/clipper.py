"""
Polygon boolean operations backed by shapely.

Loops go in as lists of (x, y) tuples (or shapely geometries) and come
back as lists of open loops. Empty or zero-area results are returned as
an empty list / None rather than raised.
"""

import math
from typing import Iterable, List, Optional, Sequence, Union

import shapely.geometry as sg
import shapely.ops as so
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from .geometry import AREA_EPSILON, Point, Polygon, Segment

Shape = Union[Sequence[Point], BaseGeometry]

# Segments used per quarter circle when buffering road centerlines
BUFFER_QUAD_SEGS = 16


def to_shape(loop: Shape) -> BaseGeometry:
    """Build a valid shapely geometry from a loop (shapely input passes through)."""
    if isinstance(loop, BaseGeometry):
        shape = loop
    else:
        shape = sg.Polygon(loop)
    if not shape.is_valid:
        shape = make_valid(shape)
    return shape


def to_loops(geom: Optional[BaseGeometry]) -> List[Polygon]:
    """
    Extract the exterior rings of every polygonal part as open loops.

    Lines and points produced by touching inputs are dropped.
    """
    if geom is None or geom.is_empty:
        return []

    if geom.geom_type == "Polygon":
        if geom.area <= 0.0:
            return []
        coords = [(float(x), float(y)) for x, y in geom.exterior.coords[:-1]]
        return [coords]

    if geom.geom_type in ("MultiPolygon", "GeometryCollection"):
        loops = []
        for part in geom.geoms:
            loops.extend(to_loops(part))
        return loops

    return []


def intersect(a: Shape, b: Shape) -> List[Polygon]:
    """
    Boolean intersection of two shapes.

    A loop that lies entirely inside the other shape comes back unchanged,
    keeping its original vertex order.
    """
    shape_a = to_shape(a)
    shape_b = to_shape(b)
    if not shape_a.intersects(shape_b):
        return []
    if not isinstance(a, BaseGeometry) and shape_b.covers(shape_a):
        return [[(float(p[0]), float(p[1])) for p in a]]
    return to_loops(shape_a.intersection(shape_b))


def union(a: Shape, b: Shape) -> Optional[Polygon]:
    """
    Boolean union of two shapes as a single loop.

    Returns None when the result is empty or not one connected polygon
    (the inputs do not overlap or touch along an edge).
    """
    merged = to_shape(a).union(to_shape(b))
    if merged.is_empty or merged.geom_type != "Polygon":
        return None
    loops = to_loops(merged)
    return loops[0] if loops else None


def union_all(loops: Iterable[Shape]) -> Optional[BaseGeometry]:
    """Union of any number of shapes, kept as a shapely geometry for reuse as a clip region."""
    shapes = [to_shape(loop) for loop in loops]
    if not shapes:
        return None
    merged = so.unary_union(shapes)
    if merged.is_empty:
        return None
    return merged


def subtract(a: Shape, b: Optional[Shape]) -> List[Polygon]:
    """Boolean difference a - b."""
    shape_a = to_shape(a)
    if b is None:
        return to_loops(shape_a)
    return to_loops(shape_a.difference(to_shape(b)))


def clearance_zone(segments: Iterable[Segment], clearance: float) -> Optional[BaseGeometry]:
    """
    Region closer than `clearance` to any of the segments.

    The buffer radius is enlarged so the polygonal approximation of each
    round cap lies outside the true circle.
    """
    if clearance <= 0.0:
        return None
    radius = clearance / math.cos(math.pi / (4 * BUFFER_QUAD_SEGS))
    zones = []
    for start, end in segments:
        if start == end:
            line = sg.Point(start)
        else:
            line = sg.LineString([start, end])
        zones.append(line.buffer(radius, quad_segs=BUFFER_QUAD_SEGS))
    if not zones:
        return None
    return so.unary_union(zones)


def largest_loop(loops: List[Polygon]) -> Optional[Polygon]:
    """Loop with the largest area above AREA_EPSILON, if any."""
    best = None
    best_area = AREA_EPSILON
    for loop in loops:
        area = sg.Polygon(loop).area
        if area > best_area:
            best = loop
            best_area = area
    return best
