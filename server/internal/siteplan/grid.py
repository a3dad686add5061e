"""
Grid-based sub-parcel generation.
Lays a column × row grid of rectangular cells over the boundary's bounding
box and clips every cell to the boundary.
"""

import logging
import math
import random
from typing import List, Optional, Tuple

from . import clipper
from .geometry import Polygon, bounding_box
from .parcels import SubdivisionStrategy, SubParcel, clip_cell

logger = logging.getLogger(__name__)

# Constants
MAX_GRID_DIVISIONS = 999  # Column/row cap for the correction loop


def compute_grid_dimensions(
    width: float, height: float, area_range: Tuple[float, float]
) -> Tuple[int, int]:
    """
    Pick column and row counts so each cell's area falls inside area_range.

    Starts from width / sqrt(target) and height / sqrt(target), where target is
    the middle of the range, then removes columns (then rows) while cells are
    too small and adds columns (then rows) while they are too large.

    Args:
        width: Bounding box width
        height: Bounding box height
        area_range: (min_area, max_area) for one cell

    Returns:
        Tuple of (columns, rows), each at least 1
    """
    min_area, max_area = area_range
    target_area = (min_area + max_area) / 2.0
    side = math.sqrt(target_area)

    columns = max(1, int(math.floor(width / side)))
    rows = max(1, int(math.floor(height / side)))

    def cell_area() -> float:
        return (width / columns) * (height / rows)

    # Cells too small: merge columns first, then rows
    while cell_area() < min_area and (columns > 1 or rows > 1):
        if columns > 1:
            columns -= 1
        else:
            rows -= 1

    # Cells too large: split columns first, then rows
    while cell_area() > max_area and (columns < MAX_GRID_DIVISIONS or rows < MAX_GRID_DIVISIONS):
        if columns < MAX_GRID_DIVISIONS:
            columns += 1
        else:
            rows += 1

    return columns, rows


def generate_grid_cells(
    bounds: Tuple[float, float, float, float], columns: int, rows: int
) -> List[Polygon]:
    """Rectangular cells covering bounds, row by row from (min_x, min_y)."""
    min_x, min_y, max_x, max_y = bounds
    cell_width = (max_x - min_x) / columns
    cell_height = (max_y - min_y) / rows

    cells = []
    for i in range(rows):
        for j in range(columns):
            x1 = min_x + j * cell_width
            y1 = min_y + i * cell_height
            x2 = x1 + cell_width
            y2 = y1 + cell_height
            cells.append([(x1, y1), (x2, y1), (x2, y2), (x1, y2)])
    return cells


class GridStrategy(SubdivisionStrategy):
    """Grid with clipping. Deterministic, ignores the random source."""

    name = "grid"

    def subdivide(
        self,
        boundary: Polygon,
        area_range: Tuple[float, float],
        rng: Optional[random.Random] = None,
    ) -> List[SubParcel]:
        bounds = bounding_box(boundary)
        width = bounds[2] - bounds[0]
        height = bounds[3] - bounds[1]

        columns, rows = compute_grid_dimensions(width, height, area_range)
        logger.debug(
            "Grid %d x %d over %.2f x %.2f bounding box", columns, rows, width, height
        )

        boundary_shape = clipper.to_shape(boundary)
        parcels: List[SubParcel] = []
        for cell in generate_grid_cells(bounds, columns, rows):
            # Non-convex boundaries can split a cell into several pieces
            parcels.extend(clip_cell(cell, boundary_shape))

        return parcels
