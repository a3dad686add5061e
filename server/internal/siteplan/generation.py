"""
Site plan generation pipeline.

Runs subdivision, road network generation and building placement in that
order and assembles the result as plain dictionaries for the host to
persist: parcels (with outlines), road footprints and building footprints.
"""

import logging
import math
import random
from typing import Any, Dict, Optional, Sequence

from . import buildings
from . import roads
from . import seeds
from . import subdivision
from .config import Config
from .geometry import as_point, detect_boundary_shape, polygon_area, polygon_centroid, validate_boundary
from .voronoi import VoronoiStrategy

logger = logging.getLogger(__name__)

# Bump when the layout logic changes so hosts can tell plans apart
PLAN_ALGORITHM_VERSION = 1


def describe_boundary(boundary: Sequence[Sequence[float]]) -> Dict[str, Any]:
    """Shape classification and area of a (valid) boundary."""
    polygon = validate_boundary(boundary)
    return {
        "shape": detect_boundary_shape(polygon),
        "area": polygon_area(polygon),
        "vertex_count": len(polygon),
    }


def _make_strategy(name: str, cfg: Config):
    strategy = subdivision.get_strategy(name)
    if isinstance(strategy, VoronoiStrategy):
        strategy.max_seed_attempts = cfg.max_seed_attempts
    return strategy


def generate_site_plan(
    boundary: Sequence[Sequence[float]],
    entry_point: Sequence[float],
    strategy: Optional[str] = None,
    seed: Optional[int] = None,
    cfg: Optional[Config] = None,
) -> Dict[str, Any]:
    """
    Plan a site: sub-parcels, access roads and one building per parcel.

    Args:
        boundary: Site boundary coordinates (open or closed ring)
        entry_point: Site entry point, echoed back but not used for layout
        strategy: Subdivision strategy name (defaults to config)
        seed: Run seed; a random one is drawn (and reported) when omitted
        cfg: Configuration (defaults to environment)

    Returns:
        Dictionary with boundary summary, parcels, roads, buildings and metadata

    Raises:
        InvalidBoundary: boundary rejected before subdivision
        SeedingFailed: Voronoi seeds could not be placed
        ValueError: unknown strategy, bad area range or non-finite entry point
    """
    if cfg is None:
        cfg = Config()
    if seed is None:
        seed = random.SystemRandom().randrange(2**31)
    strategy_name = strategy or cfg.subdivision_strategy

    boundary_info = describe_boundary(boundary)
    entry = as_point(entry_point)
    if not all(math.isfinite(c) for c in entry):
        raise ValueError(f"Entry point has non-finite coordinates: {list(entry)}")

    # 1. Subdivision
    subdivision_rng = seeds.seeded_random(seeds.get_subdivision_seed(seed))
    parcels = subdivision.subdivide(
        boundary,
        cfg.parcel_area_range,
        _make_strategy(strategy_name, cfg),
        subdivision_rng,
    )

    # 2. Roads, complete before any placement reads them
    network = roads.build_network(entry, parcels, cfg.road_width, cfg.edge_tolerance)

    # 3. Buildings
    placed = buildings.place_buildings(
        parcels,
        network,
        seed,
        max_workers=cfg.max_parallel_placements,
        clearance=cfg.min_road_building_distance,
        shift_step=cfg.shift_step,
        max_attempts=cfg.max_shift_attempts,
        area_range=cfg.building_area_range,
        building_height=cfg.building_height,
    )

    parcel_dicts = []
    building_dicts = []
    skipped = []
    for index, (parcel, building) in enumerate(zip(parcels, placed)):
        parcel_id = f"parcel_{index}"
        parcel_dicts.append(parcel.to_dict(parcel_id))
        if building is None:
            skipped.append(parcel_id)
            continue
        building["id"] = f"building_{index}"
        building["parcel_id"] = parcel_id
        building_dicts.append(building)

    road_dicts = [
        segment.to_dict(f"road_{index}") for index, segment in enumerate(network)
    ]

    site_centroid = None
    if parcels:
        site_centroid = list(polygon_centroid([p.centroid for p in parcels]))

    logger.info(
        "Site plan (seed %d, %s): %d parcels, %d roads, %d buildings, %d skipped",
        seed,
        strategy_name,
        len(parcel_dicts),
        len(road_dicts),
        len(building_dicts),
        len(skipped),
    )

    return {
        "boundary": boundary_info,
        "entry_point": list(entry),
        "parcels": parcel_dicts,
        "roads": road_dicts,
        "buildings": building_dicts,
        "skipped_parcels": skipped,
        "metadata": {
            "seed": seed,
            "strategy": strategy_name,
            "algorithm_version": PLAN_ALGORITHM_VERSION,
            "parcel_area_range": list(cfg.parcel_area_range),
            "road_width": cfg.road_width,
            "clearance": cfg.min_road_building_distance,
            "site_centroid": site_centroid,
            "parcel_count": len(parcel_dicts),
            "road_count": len(road_dicts),
            "building_count": len(building_dicts),
        },
    }
