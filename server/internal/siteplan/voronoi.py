"""
Voronoi-based sub-parcel generation.
Scatters one seed per target parcel inside the boundary, builds the Voronoi
diagram of the seeds and clips every cell to the boundary.
"""

import logging
import random
from typing import List, Optional, Tuple

import shapely.geometry as sg
import shapely.ops as so

from . import clipper
from .geometry import Polygon, polygon_area
from .parcels import SubdivisionStrategy, SubParcel, clip_cell
from .seeds import MAX_SEED_ATTEMPTS, sample_points_in_polygon

logger = logging.getLogger(__name__)


def target_parcel_count(boundary_area: float, area_range: Tuple[float, float]) -> int:
    """Number of seeds: boundary area over the middle of the range, at least 1."""
    target_area = (area_range[0] + area_range[1]) / 2.0
    return max(1, int(round(boundary_area / target_area)))


class VoronoiStrategy(SubdivisionStrategy):
    """Voronoi with clipping. Reproducible only with a seeded random source."""

    name = "voronoi"

    def __init__(self, max_seed_attempts: int = MAX_SEED_ATTEMPTS):
        self.max_seed_attempts = max_seed_attempts

    def subdivide(
        self,
        boundary: Polygon,
        area_range: Tuple[float, float],
        rng: Optional[random.Random] = None,
    ) -> List[SubParcel]:
        if rng is None:
            rng = random.Random()

        count = target_parcel_count(polygon_area(boundary), area_range)
        seeds = sample_points_in_polygon(boundary, count, rng, self.max_seed_attempts)
        logger.debug("Voronoi subdivision with %d seeds", len(seeds))

        boundary_shape = clipper.to_shape(boundary)
        envelope = sg.box(*boundary_shape.bounds)

        if len(seeds) == 1:
            # A single site owns the whole envelope
            cells = [envelope]
        else:
            diagram = so.voronoi_diagram(sg.MultiPoint(seeds), envelope=envelope)
            cells = [cell for cell in diagram.geoms if cell.geom_type == "Polygon"]

        parcels: List[SubParcel] = []
        for cell in cells:
            cell_loop = list(cell.exterior.coords)[:-1]
            parcels.extend(clip_cell(cell_loop, boundary_shape))

        return parcels
