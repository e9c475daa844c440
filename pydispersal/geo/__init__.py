"""
Geographic and raster mapping for PyDispersal.

This submodule turns a cloud of GPS drop points into the geometry every
other component works on: a padded bounding box, a raster size that keeps
the field's aspect ratio, and the conversions between GPS coordinates,
grid indices and meters.

Core Types:
- Point: GPS location of a drop point
- FieldBounds: tight and padded bounds with the field aspect ratio
- CanvasDimensions: display and canvas raster sizes
- MeterScale: metric field extent and pixels per meter

Grid Convention:
Row 0 is the northern edge of the padded field and column 0 its western
edge. Cell (x, y) is located at
    lng = bounded_min_lng + x / W * bounded_lng_range
    lat = bounded_max_lat - y / H * bounded_lat_range
Both density engines and the query helpers rely on this convention.

Usage:
    import pydispersal as pd

    points = pd.geo.filter_valid_points(raw_points)
    bounds = pd.geo.compute_field_bounds(points)
    dims = pd.geo.compute_canvas_dimensions(bounds.field_aspect_ratio, 750, 600, 2)

    x, y = pd.geo.gps_to_grid(points[0].latitude, points[0].longitude, bounds, dims)
    lat, lng = pd.geo.grid_to_gps(x, y, bounds, dims)
"""

from .points import (
    Point,
    as_point,
    filter_valid_points,
    points_to_array,
    haversine_from_offsets,
    haversine_distance,
    meters_per_degree_longitude,
)
from .canvas import (
    FieldBounds,
    CanvasDimensions,
    MeterScale,
    compute_field_bounds,
    compute_canvas_dimensions,
    gps_to_grid,
    grid_to_gps,
    meters_to_pixels,
    cell_offsets,
    point_offsets,
)

__all__ = [
    "Point",
    "as_point",
    "filter_valid_points",
    "points_to_array",
    "haversine_from_offsets",
    "haversine_distance",
    "meters_per_degree_longitude",
    "FieldBounds",
    "CanvasDimensions",
    "MeterScale",
    "compute_field_bounds",
    "compute_canvas_dimensions",
    "gps_to_grid",
    "grid_to_gps",
    "meters_to_pixels",
    "cell_offsets",
    "point_offsets",
]
