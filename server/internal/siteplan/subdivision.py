"""
Parcel subdivision entry point and strategy registry.
"""

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Type, Union

from .geometry import validate_boundary
from .grid import GridStrategy
from .parcels import SubdivisionStrategy, SubParcel
from .voronoi import VoronoiStrategy

logger = logging.getLogger(__name__)

STRATEGIES: Dict[str, Type[SubdivisionStrategy]] = {
    GridStrategy.name: GridStrategy,
    VoronoiStrategy.name: VoronoiStrategy,
}


def register_strategy(strategy_cls: Type[SubdivisionStrategy]) -> Type[SubdivisionStrategy]:
    """Make a strategy available by its `name`. Usable as a class decorator."""
    STRATEGIES[strategy_cls.name] = strategy_cls
    return strategy_cls


def get_strategy(name: str, **kwargs) -> SubdivisionStrategy:
    key = (name or "").lower().strip()
    if key not in STRATEGIES:
        raise ValueError(
            f"Unknown subdivision strategy '{name}', expected one of {sorted(STRATEGIES)}"
        )
    return STRATEGIES[key](**kwargs)


def subdivide(
    boundary: Iterable[Sequence[float]],
    area_range: Tuple[float, float],
    strategy: Union[str, SubdivisionStrategy] = "grid",
    rng: Optional[random.Random] = None,
) -> List[SubParcel]:
    """
    Split a site boundary into sub-parcels.

    Args:
        boundary: Boundary coordinates, open or closed ring
        area_range: (min_area, max_area) targeted for each sub-parcel
        strategy: Strategy instance or registered name ("grid", "voronoi")
        rng: Random source for strategies that need one

    Returns:
        List of SubParcel objects

    Raises:
        InvalidBoundary: the boundary is rejected before any strategy runs
        SeedingFailed: the Voronoi strategy could not place its seeds
    """
    polygon = validate_boundary(boundary)

    min_area, max_area = area_range
    if min_area <= 0 or max_area < min_area:
        raise ValueError(f"Invalid parcel area range: {area_range}")

    if isinstance(strategy, str):
        strategy = get_strategy(strategy)

    parcels = strategy.subdivide(polygon, (min_area, max_area), rng)
    logger.info("%s subdivision produced %d sub-parcels", strategy.name, len(parcels))
    return parcels
