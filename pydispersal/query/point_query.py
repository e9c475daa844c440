"""
Point and local-area queries on a density grid.

Used to answer "what is the release density here?" for a pixel of the
heatmap: the raw and normalized density of the pixel, the approximate
number of insects it represents, and the insects per square meter averaged
over a small sample area around it.

Pixel coordinates are canvas cells: x is the column (west to east), y the
row (north to south). Fractional coordinates are floored to the containing
cell.
"""

import math
from dataclasses import dataclass

import numpy as np

from .. import constants as cte
from ..geo.canvas import gps_to_grid, grid_to_gps


@dataclass(frozen=True)
class DensitySample:
    """Density of one grid cell."""

    density: float
    normalized_density: float
    approximate_insects: int


@dataclass(frozen=True)
class PointQuery:
    """
    Everything shown for one hovered pixel.

    Attributes:
        x, y: Canvas cell
        latitude, longitude: GPS position of the cell
        density: Raw density of the cell
        normalized_density: density / max_density (0 for an empty map)
        approximate_insects: round(density * insects_per_drop)
        insects_per_square_meter: Local-area average around the cell
        sample_area_meters: Area the average was taken over (m^2)
    """

    x: int
    y: int
    latitude: float
    longitude: float
    density: float
    normalized_density: float
    approximate_insects: int
    insects_per_square_meter: float
    sample_area_meters: float


def _cell(x, y):
    return int(math.floor(x)), int(math.floor(y))


def _inside(x: int, y: int, density_map) -> bool:
    return 0 <= x < density_map.canvas_width and 0 <= y < density_map.canvas_height


def _insects_per_drop(density_map, insects_per_drop):
    if insects_per_drop is not None:
        return insects_per_drop
    if density_map.parameters is not None:
        return density_map.parameters.insects_per_drop
    return cte.DEFAULT_INSECTS_PER_DROP


def density_at_point(x, y, density_map, insects_per_drop=None) -> DensitySample:
    """
    Density of the cell containing (x, y).

    Args:
        x, y: Canvas coordinates
        density_map: DensityMapData
        insects_per_drop: Insects per drop point. Default: the value of the
            map's parameters

    Returns:
        DensitySample: all zeros outside the grid
    """
    cx, cy = _cell(x, y)
    if not _inside(cx, cy, density_map):
        return DensitySample(0.0, 0.0, 0)

    density = float(density_map.density_data[cy, cx])
    normalized = density / density_map.max_density if density_map.max_density > 0 else 0.0
    insects = _insects_per_drop(density_map, insects_per_drop)

    return DensitySample(
        density=density,
        normalized_density=normalized,
        approximate_insects=int(math.floor(density * insects + 0.5)),
    )


def local_area_density(x, y, density_map, insects_per_drop=None,
                       sample_area_sq_meters: float = cte.DEFAULT_SAMPLE_AREA) -> float:
    """
    Average insects per square meter in a circular sample area around a cell.

    The circle has the given area, its radius sqrt(area / pi) meters is
    converted to cells with the map's pixels_per_meter. The centre cell is
    always part of the sample, the circle is clipped to the grid.

    Args:
        x, y: Canvas coordinates of the centre
        density_map: DensityMapData
        insects_per_drop: Insects per drop point. Default: the value of the
            map's parameters
        sample_area_sq_meters: Area of the sample circle (m^2). Default: 1

    Returns:
        float: mean density * insects_per_drop / area, 0.0 when no cell of
            the circle lies in the grid

    Raises:
        ValueError: If the sample area is not positive
    """
    if sample_area_sq_meters <= 0:
        raise ValueError(f"sample_area_sq_meters must be > 0, got {sample_area_sq_meters}")

    cx, cy = _cell(x, y)
    radius_px = math.sqrt(sample_area_sq_meters / math.pi) * density_map.pixels_per_meter
    reach = int(math.floor(radius_px))

    h, w = density_map.canvas_height, density_map.canvas_width
    y0, y1 = max(0, cy - reach), min(h, cy + reach + 1)
    x0, x1 = max(0, cx - reach), min(w, cx + reach + 1)
    if y0 >= y1 or x0 >= x1:
        return 0.0

    dy = np.arange(y0, y1)[:, None] - cy
    dx = np.arange(x0, x1)[None, :] - cx
    # reach is 0 for sub-pixel radii, leaving only the centre cell
    inside = (dx * dx + dy * dy) <= radius_px * radius_px
    inside |= (dx == 0) & (dy == 0)

    values = density_map.density_data[y0:y1, x0:x1][inside]
    if values.size == 0:
        return 0.0

    insects = _insects_per_drop(density_map, insects_per_drop)
    return float(values.mean(dtype=np.float64)) * insects / sample_area_sq_meters


def query_point(x, y, density_map, insects_per_drop=None,
                sample_area_sq_meters: float = cte.DEFAULT_SAMPLE_AREA) -> PointQuery:
    """
    Hover information for the cell containing (x, y).

    Returns:
        PointQuery
    """
    cx, cy = _cell(x, y)
    sample = density_at_point(cx, cy, density_map, insects_per_drop)
    per_m2 = local_area_density(cx, cy, density_map, insects_per_drop, sample_area_sq_meters)
    bounds = density_map.bounds
    if bounds.is_degenerate:
        # Coincident drops: the whole raster is a single location
        lat, lng = bounds.min_lat, bounds.min_lng
    else:
        lat, lng = grid_to_gps(cx, cy, bounds, density_map.dims)

    return PointQuery(
        x=cx,
        y=cy,
        latitude=lat,
        longitude=lng,
        density=sample.density,
        normalized_density=sample.normalized_density,
        approximate_insects=sample.approximate_insects,
        insects_per_square_meter=per_m2,
        sample_area_meters=sample_area_sq_meters,
    )


def query_location(latitude: float, longitude: float, density_map, insects_per_drop=None,
                   sample_area_sq_meters: float = cte.DEFAULT_SAMPLE_AREA) -> PointQuery:
    """query_point for a GPS location instead of a canvas cell."""
    if density_map.bounds.is_degenerate:
        x, y = 0, 0
    else:
        x, y = gps_to_grid(latitude, longitude, density_map.bounds, density_map.dims)
    return query_point(x, y, density_map, insects_per_drop, sample_area_sq_meters)
