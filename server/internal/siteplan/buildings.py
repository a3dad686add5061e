"""
Building placement for sub-parcels.
Places one square footprint per sub-parcel, shifting it away from roads
until it keeps the minimum clearance, then clips it to the parcel.
"""

import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from shapely.geometry.base import BaseGeometry

from . import clipper
from .geometry import (
    Point,
    Polygon,
    Segment,
    left_perpendicular,
    point_in_polygon,
    point_segment_distance,
    polygon_area,
)
from .parcels import SubParcel
from .roads import RoadNetwork, RoadSegment
from .seeds import get_parcel_seed, seeded_random

logger = logging.getLogger(__name__)

# Constants
MIN_ROAD_BUILDING_DISTANCE = 2.0  # Clearance between road centerline and building
MAX_SHIFT_ATTEMPTS = 10  # Scans allowed before giving up on a parcel
SHIFT_STEP = 0.5  # Extra distance added to every shift
BUILDING_AREA_RANGE = (807, 1615)  # Target footprint area in m², upper bound exclusive
BUILDING_HEIGHT = 10.0  # Building height in meters

RoadsLike = Union[RoadNetwork, Iterable[Union[RoadSegment, Segment]]]


def _centerlines(roads: RoadsLike) -> List[Segment]:
    if isinstance(roads, RoadNetwork):
        return roads.centerlines()
    lines = []
    for road in roads:
        if isinstance(road, RoadSegment):
            lines.append(road.centerline)
        else:
            lines.append((tuple(road[0]), tuple(road[1])))
    return lines


def square_footprint(center: Point, side: float) -> Polygon:
    """Axis-aligned square centered on center."""
    x, y = center
    half = side / 2.0
    return [
        (x - half, y - half),
        (x + half, y - half),
        (x + half, y + half),
        (x - half, y + half),
    ]


def adjust_building_position(
    parcel_polygon: Sequence[Point],
    center: Point,
    roads: Sequence[Segment],
    clearance: float = MIN_ROAD_BUILDING_DISTANCE,
    shift_step: float = SHIFT_STEP,
    max_attempts: int = MAX_SHIFT_ATTEMPTS,
) -> Optional[Point]:
    """
    Move a building center until it is at least `clearance` from every road.

    Each attempt scans the roads in order. On the first road that is too
    close the center is pushed along that road's left normal by the missing
    distance plus `shift_step`; if that leaves the parcel it is pushed the
    same distance the other way instead, and if that leaves the parcel too
    the placement fails. After a shift the scan restarts from the first road.

    Returns:
        The validated center, or None when the parcel cannot host the building
    """
    current = center

    for attempt in range(max_attempts):
        violation = False

        for road in roads:
            d = point_segment_distance(current, road)
            if d >= clearance:
                continue

            violation = True
            px, py = left_perpendicular(road)
            shift = (clearance - d) + shift_step

            candidate = (current[0] + px * shift, current[1] + py * shift)
            if not point_in_polygon(candidate, parcel_polygon):
                candidate = (candidate[0] - px * 2 * shift, candidate[1] - py * 2 * shift)
                if not point_in_polygon(candidate, parcel_polygon):
                    return None

            current = candidate
            break

        if not violation:
            return current

    return None


def place_building(
    parcel: Union[SubParcel, Tuple[Sequence[Point], float]],
    roads: RoadsLike,
    rng: Optional[random.Random] = None,
    clearance: float = MIN_ROAD_BUILDING_DISTANCE,
    shift_step: float = SHIFT_STEP,
    max_attempts: int = MAX_SHIFT_ATTEMPTS,
    area_range: Tuple[int, int] = BUILDING_AREA_RANGE,
    building_height: float = BUILDING_HEIGHT,
    zone: Optional[BaseGeometry] = None,
    parcel_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Place a building footprint inside one sub-parcel.

    Args:
        parcel: SubParcel or (polygon, area) pair
        roads: Road network (or bare centerlines) generated for the whole site
        rng: Random source for the footprint area
        clearance: Minimum distance between footprint and any road centerline
        shift_step: Extra distance added to every shift
        max_attempts: Clearance scans allowed
        area_range: (min, max) target area, integers, max exclusive
        building_height: Height reported with the footprint
        zone: Precomputed clearance zone for the roads (built when omitted)
        parcel_id: Parcel name used in log messages

    Returns:
        Building dictionary, or None when the parcel is infeasible or the
        clipped footprint is degenerate
    """
    if not isinstance(parcel, SubParcel):
        parcel = SubParcel(parcel[0], parcel[1])
    if rng is None:
        rng = random.Random()

    lines = _centerlines(roads)

    target_area = float(rng.randrange(area_range[0], area_range[1]))
    side = math.sqrt(target_area)

    centroid = parcel.centroid
    center = adjust_building_position(
        parcel.polygon, centroid, lines, clearance, shift_step, max_attempts
    )
    if center is None:
        logger.warning(
            "Cannot place building on parcel %s (centroid %.2f, %.2f) "
            "while keeping %.2f m from every road",
            parcel_id or "?",
            centroid[0],
            centroid[1],
            clearance,
        )
        return None

    corners = square_footprint(center, side)

    # Clip to the parcel, then carve out the clearance zone around every road
    if zone is None:
        zone = clipper.clearance_zone(lines, clearance)
    pieces: List[Polygon] = []
    for loop in clipper.intersect(corners, parcel.polygon):
        pieces.extend(clipper.subtract(loop, zone))
    footprint = clipper.largest_loop(pieces)

    if footprint is None:
        logger.debug(
            "Building footprint at (%.2f, %.2f) vanished after clipping", center[0], center[1]
        )
        return None

    return {
        "type": "building",
        "position": [center[0], center[1]],
        "dimensions": {
            "width": side,
            "depth": side,
            "height": building_height,
        },
        "corners": [list(p) for p in corners],
        "footprint": [list(p) for p in footprint],
        "properties": {
            "target_area": target_area,
            "footprint_area": polygon_area(footprint),
            "shifted": center != centroid,
        },
    }


def place_buildings(
    parcels: Sequence[SubParcel],
    roads: RoadsLike,
    run_seed: int,
    max_workers: int = 1,
    **placement_options: Any,
) -> List[Optional[Dict[str, Any]]]:
    """
    Place one building per parcel.

    Each parcel draws from its own generator seeded by (run_seed, index), so
    results do not depend on placement order and parcels can be processed on
    a thread pool. The road network is only read.

    Returns:
        One entry per parcel, in parcel order; None marks a skipped parcel
    """
    lines = _centerlines(roads)
    clearance = placement_options.get("clearance", MIN_ROAD_BUILDING_DISTANCE)
    zone = clipper.clearance_zone(lines, clearance)

    def _place(index: int) -> Optional[Dict[str, Any]]:
        rng = seeded_random(get_parcel_seed(run_seed, index))
        building = place_building(
            parcels[index],
            lines,
            rng,
            zone=zone,
            parcel_id=f"parcel_{index}",
            **placement_options,
        )
        if building is not None:
            building["properties"]["seed"] = get_parcel_seed(run_seed, index)
        return building

    indexes = range(len(parcels))
    if max_workers > 1 and len(parcels) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(_place, indexes))
    return [_place(i) for i in indexes]
