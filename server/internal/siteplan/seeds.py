"""
Seed generation utilities for deterministic site planning.
"""

import logging
import math
import random
from typing import List, Sequence

import shapely.geometry as sg

from .geometry import Point, bounding_box, point_in_polygon

logger = logging.getLogger(__name__)

# Rejection-sampling attempts allowed per requested seed point
MAX_SEED_ATTEMPTS = 1000
# Jitter attempts around the representative point once sampling gives up
FALLBACK_SEED_ATTEMPTS = 1000
# Parcel streams use indexes >= 0, so the subdivision stream sits below them
SUBDIVISION_STREAM = -1


class SeedingFailed(RuntimeError):
    """Raised when seed points cannot be placed inside a boundary."""


def seeded_random(seed: int) -> random.Random:
    """
    Create deterministic random number generator.

    Args:
        seed: Seed value

    Returns:
        Seeded Random instance
    """
    return random.Random(seed)


def get_subdivision_seed(run_seed: int) -> int:
    """Deterministic seed for the subdivision stage of a run."""
    return hash((run_seed, SUBDIVISION_STREAM)) % (2**31)


def get_parcel_seed(run_seed: int, parcel_index: int) -> int:
    """
    Generate deterministic seed for one parcel's building placement.

    Args:
        run_seed: Seed of the planning run
        parcel_index: Index of the parcel in subdivision order

    Returns:
        Deterministic parcel seed
    """
    return hash((run_seed, parcel_index)) % (2**31)


def sample_points_in_polygon(
    polygon: Sequence[Point],
    count: int,
    rng: random.Random,
    max_attempts_per_point: int = MAX_SEED_ATTEMPTS,
) -> List[Point]:
    """
    Draw `count` points strictly inside a polygon.

    Points are sampled uniformly in the bounding box and kept when they fall
    inside. Sampling stops after `count * max_attempts_per_point` draws; the
    missing points are then jittered around the polygon's representative
    point with a shrinking radius.

    Raises:
        SeedingFailed: neither pass could supply enough points
    """
    if count <= 0:
        return []

    min_x, min_y, max_x, max_y = bounding_box(polygon)
    points: List[Point] = []
    attempts = 0
    max_attempts = count * max_attempts_per_point

    while len(points) < count and attempts < max_attempts:
        attempts += 1
        x = min_x + rng.random() * (max_x - min_x)
        y = min_y + rng.random() * (max_y - min_y)
        if point_in_polygon((x, y), polygon):
            points.append((x, y))

    logger.debug("Sampled %d/%d seed points in %d attempts", len(points), count, attempts)

    if len(points) < count:
        logger.warning(
            "Seed sampling gave up after %d attempts with %d/%d points, using jitter fallback",
            attempts,
            len(points),
            count,
        )
        points.extend(_jitter_points(polygon, count - len(points), rng))

    return points


def _jitter_points(polygon: Sequence[Point], count: int, rng: random.Random) -> List[Point]:
    anchor = sg.Polygon(polygon).representative_point()
    min_x, min_y, max_x, max_y = bounding_box(polygon)
    radius = math.hypot(max_x - min_x, max_y - min_y) / 2.0

    points: List[Point] = []
    for attempt in range(FALLBACK_SEED_ATTEMPTS):
        if len(points) == count:
            break
        angle = rng.uniform(0.0, 2.0 * math.pi)
        offset = rng.uniform(0.0, radius)
        candidate = (anchor.x + offset * math.cos(angle), anchor.y + offset * math.sin(angle))
        if point_in_polygon(candidate, polygon):
            points.append(candidate)
        else:
            radius /= 2.0

    if len(points) < count:
        raise SeedingFailed(
            f"Could only place {len(points)} of {count} fallback seed points inside the boundary"
        )
    return points
