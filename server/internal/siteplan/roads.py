"""
Access road network generation.

The spine follows boundaries shared between sub-parcels; every sub-parcel
then gets a branch from the nearest spine segment to its centroid. Road
footprints are fixed-width rectangles clipped to the union of the
sub-parcels.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from . import clipper
from .geometry import (
    AREA_EPSILON,
    EDGE_TOLERANCE,
    Point,
    Polygon,
    Segment,
    as_point,
    left_perpendicular,
    point_segment_distance,
    polygon_area,
    project_point_on_segment,
    segment_length,
    segments_equal,
)
from .parcels import SubParcel

logger = logging.getLogger(__name__)

# Constants
ROAD_WIDTH = 6.0  # Road footprint width in meters

SPINE = "spine"
BRANCH = "branch"

ParcelLike = Union[SubParcel, Tuple[Sequence[Point], float]]


class RoadSegment:
    """A road centerline with its width and clipped footprint."""

    def __init__(
        self,
        start: Point,
        end: Point,
        width: float = ROAD_WIDTH,
        kind: str = SPINE,
        footprint: Optional[List[Polygon]] = None,
    ):
        self.start = start
        self.end = end
        self.width = width
        self.kind = kind
        self.footprint = footprint if footprint is not None else []

    @property
    def centerline(self) -> Segment:
        return (self.start, self.end)

    @property
    def length(self) -> float:
        return segment_length(self.centerline)

    def to_dict(self, road_id: str) -> Dict[str, Any]:
        return {
            "id": road_id,
            "type": "road",
            "kind": self.kind,
            "centerline": [list(self.start), list(self.end)],
            "width": self.width,
            "footprint": [[list(p) for p in loop] for loop in self.footprint],
        }

    def __repr__(self):
        return f"RoadSegment({self.kind}, {self.start} -> {self.end})"


class RoadNetwork:
    """
    Append-only collection of the road segments generated in one run.

    Segments keep generation order: every spine segment precedes every branch.
    """

    def __init__(self, entry_point: Optional[Point] = None):
        self.entry_point = entry_point
        self._segments: List[RoadSegment] = []

    def add(self, segment: RoadSegment) -> None:
        if segment.kind == SPINE and self.branches:
            raise ValueError("Spine segments must be added before branches")
        self._segments.append(segment)

    @property
    def segments(self) -> Tuple[RoadSegment, ...]:
        return tuple(self._segments)

    @property
    def spine(self) -> List[RoadSegment]:
        return [s for s in self._segments if s.kind == SPINE]

    @property
    def branches(self) -> List[RoadSegment]:
        return [s for s in self._segments if s.kind == BRANCH]

    def centerlines(self) -> List[Segment]:
        return [s.centerline for s in self._segments]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[RoadSegment]:
        return iter(self._segments)


def _as_parcel(parcel: ParcelLike) -> SubParcel:
    if isinstance(parcel, SubParcel):
        return parcel
    polygon, area = parcel
    return SubParcel(polygon, area)


def find_shared_boundaries(
    parcels: Sequence[ParcelLike], tolerance: float = EDGE_TOLERANCE
) -> List[Segment]:
    """
    Edges that appear in two different sub-parcels.

    Every pair of parcels is compared edge by edge, so the cost grows with
    the square of both parcel count and edge count. Duplicates are dropped.
    """
    loops = [_as_parcel(p) for p in parcels]
    shared: List[Segment] = []

    for i in range(len(loops)):
        edges_i = [e for e in loops[i].edges if segment_length(e) >= tolerance]
        for j in range(i + 1, len(loops)):
            edges_j = loops[j].edges
            for edge in edges_i:
                if not any(segments_equal(edge, other, tolerance) for other in edges_j):
                    continue
                if any(segments_equal(edge, known, tolerance) for known in shared):
                    continue
                shared.append(edge)

    logger.debug("Found %d shared boundaries between %d parcels", len(shared), len(loops))
    return shared


def road_footprint(segment: Segment, width: float = ROAD_WIDTH) -> Optional[Polygon]:
    """
    Rectangle of the given width centered on the segment.

    Returns None for a zero-length segment.
    """
    if segment_length(segment) == 0.0:
        return None
    px, py = left_perpendicular(segment)
    half = width / 2.0
    (ax, ay), (bx, by) = segment
    return [
        (ax + px * half, ay + py * half),
        (bx + px * half, by + py * half),
        (bx - px * half, by - py * half),
        (ax - px * half, ay - py * half),
    ]


def clip_road(segment: Segment, width: float, region: Any) -> List[Polygon]:
    """Footprint of a road clipped to region; empty when nothing remains."""
    footprint = road_footprint(segment, width)
    if footprint is None or region is None:
        return []
    return [loop for loop in clipper.intersect(footprint, region) if polygon_area(loop) > AREA_EPSILON]


def find_nearest_road(point: Point, roads: Iterable[Segment]) -> Optional[Segment]:
    """Road with the smallest point-to-segment distance; the first one wins ties."""
    nearest = None
    min_distance = float("inf")
    for road in roads:
        d = point_segment_distance(point, road)
        if d < min_distance:
            min_distance = d
            nearest = road
    return nearest


def build_network(
    entry_point: Sequence[float],
    parcels: Sequence[ParcelLike],
    road_width: float = ROAD_WIDTH,
    tolerance: float = EDGE_TOLERANCE,
) -> RoadNetwork:
    """
    Generate spine and branch roads for a set of sub-parcels.

    Args:
        entry_point: Site entry point (recorded on the network, does not
            influence the layout)
        parcels: SubParcel objects or (polygon, area) pairs
        road_width: Footprint width of every road
        tolerance: Endpoint tolerance for shared-edge detection

    Returns:
        RoadNetwork holding spine segments followed by branches
    """
    loops = [_as_parcel(p) for p in parcels]
    network = RoadNetwork(as_point(entry_point))

    region = clipper.union_all(p.polygon for p in loops)

    spine_lines = find_shared_boundaries(loops, tolerance)
    for line in spine_lines:
        network.add(
            RoadSegment(
                line[0], line[1], road_width, SPINE, clip_road(line, road_width, region)
            )
        )

    for index, parcel in enumerate(loops):
        centroid = parcel.centroid
        nearest = find_nearest_road(centroid, spine_lines)
        if nearest is None:
            # No spine to connect to
            continue

        projected = project_point_on_segment(centroid, nearest)
        branch = (projected, centroid)
        if segment_length(branch) == 0.0:
            logger.debug("Parcel %d centroid lies on the spine, no branch needed", index)
            continue

        network.add(
            RoadSegment(
                projected, centroid, road_width, BRANCH, clip_road(branch, road_width, region)
            )
        )

    logger.info(
        "Road network: %d spine segments, %d branches",
        len(network.spine),
        len(network.branches),
    )
    return network
