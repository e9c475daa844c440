"""
Density queries for PyDispersal.

Read-only lookups on a DensityMapData, as needed by a map tooltip.

Core Functions:
- density_at_point: raw / normalized density and insect count of a cell
- local_area_density: insects per square meter over a circular sample area
- query_point: everything above plus the GPS position of the cell
- query_location: query_point addressed by latitude / longitude

Usage:
    from pydispersal.query import query_point

    info = query_point(120, 80, density_map)
    print(info.insects_per_square_meter, info.latitude, info.longitude)
"""

from .point_query import (
    DensitySample,
    PointQuery,
    density_at_point,
    local_area_density,
    query_point,
    query_location,
)

__all__ = [
    "DensitySample",
    "PointQuery",
    "density_at_point",
    "local_area_density",
    "query_point",
    "query_location",
]
