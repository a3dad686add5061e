"""
Sub-parcel type and the subdivision strategy interface.
"""

import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import clipper
from .geometry import AREA_EPSILON, Point, Polygon, polygon_area, polygon_centroid, polygon_edges


class SubParcel:
    """A planning unit: one clipped polygon and its shoelace area."""

    def __init__(self, polygon: Sequence[Point], area: Optional[float] = None):
        """
        Initialize sub-parcel.

        Args:
            polygon: Open loop of (x, y) vertices
            area: Precomputed area (computed from the loop if omitted)
        """
        self.polygon: Tuple[Point, ...] = tuple((float(x), float(y)) for x, y in polygon)
        self.area = polygon_area(self.polygon) if area is None else area

    @property
    def centroid(self) -> Point:
        return polygon_centroid(self.polygon)

    @property
    def edges(self):
        return polygon_edges(self.polygon)

    def to_dict(self, parcel_id: str) -> Dict[str, Any]:
        """Emission format: polygon plus outline edges for drawing."""
        return {
            "id": parcel_id,
            "type": "parcel",
            "polygon": [list(p) for p in self.polygon],
            "area": self.area,
            "centroid": list(self.centroid),
            "outline": [[list(start), list(end)] for start, end in self.edges],
        }

    def __iter__(self):
        # Unpacks as (polygon, area)
        return iter((self.polygon, self.area))

    def __repr__(self):
        return f"SubParcel(vertices={len(self.polygon)}, area={self.area:.2f})"


class SubdivisionStrategy:
    """
    Splits a boundary into sub-parcels with areas near a target range.

    Implementations must return polygons contained in the boundary that only
    touch each other along shared edges.
    """

    name = "base"

    def subdivide(
        self,
        boundary: Polygon,
        area_range: Tuple[float, float],
        rng: Optional[random.Random] = None,
    ) -> List[SubParcel]:
        raise NotImplementedError


def clip_cell(cell: Sequence[Point], boundary: Any) -> List[SubParcel]:
    """Intersect one cell with the boundary and keep every non-degenerate piece."""
    result = []
    for loop in clipper.intersect(cell, boundary):
        area = polygon_area(loop)
        if area > AREA_EPSILON:
            result.append(SubParcel(loop, area))
    return result
