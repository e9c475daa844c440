"""
Drop points and geodesic distances.

Defines the Point type consumed by every PyDispersal component, the validity
filter applied before points enter the density engines, and the haversine
distance used to measure how far a raster cell is from a drop point.

Distance Formulation:
    d = 2 R atan2(sqrt(a), sqrt(1 - a))
    a = sin^2(dphi / 2) + cos(phi1) cos(phi2) sin^2(dlambda / 2)

The engines evaluate the formula from coordinate *differences*
(haversine_from_offsets) rather than from absolute coordinates. Differences
between a cell and a drop point are small and keep their precision in
float32, which is what the Taichi kernels compute in.
"""

from dataclasses import dataclass
import math

import numpy as np

from .. import constants as cte


@dataclass(frozen=True)
class Point:
    """
    GPS location of a drop point.

    Attributes:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
    """

    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        """
        True when the point is usable by the engines.

        Exactly 0 on either axis marks an unset coordinate in flight logs, so
        those points are rejected along with out-of-range values.
        """
        return (
            self.latitude != 0 and self.longitude != 0
            and -90.0 < self.latitude < 90.0
            and -180.0 < self.longitude < 180.0
        )


def as_point(obj) -> Point:
    """
    Coerce a drop point description into a Point.

    Accepts Point instances, any object exposing latitude/longitude
    attributes, mappings with 'latitude'/'longitude' keys and (lat, lng)
    pairs.
    """
    if isinstance(obj, Point):
        return obj
    if hasattr(obj, "latitude") and hasattr(obj, "longitude"):
        return Point(float(obj.latitude), float(obj.longitude))
    if isinstance(obj, dict):
        return Point(float(obj["latitude"]), float(obj["longitude"]))
    lat, lng = obj
    return Point(float(lat), float(lng))


def filter_valid_points(points) -> list:
    """
    Keep only the drop points the engines can use.

    Args:
        points: Iterable of point-like objects (see as_point)

    Returns:
        list[Point]: Valid points, in input order
    """
    valid = []
    for p in points:
        point = as_point(p)
        if point.is_valid:
            valid.append(point)
    return valid


def points_to_array(points) -> np.ndarray:
    """Return an (n, 2) float64 array of [latitude, longitude] rows."""
    arr = np.empty((len(points), 2), dtype=np.float64)
    for i, p in enumerate(points):
        arr[i, 0] = p.latitude
        arr[i, 1] = p.longitude
    return arr


def haversine_from_offsets(dlat_deg, dlng_deg, lat1_deg, lat2_deg):
    """
    Haversine distance in meters from coordinate differences.

    Works on floats and on broadcastable numpy arrays.

    Args:
        dlat_deg: Latitude difference (degrees)
        dlng_deg: Longitude difference (degrees)
        lat1_deg: Latitude of the first location (degrees)
        lat2_deg: Latitude of the second location (degrees)

    Returns:
        Distance(s) in meters
    """
    half_dphi = np.multiply(dlat_deg, 0.5 * cte.DEG_TO_RAD)
    half_dlam = np.multiply(dlng_deg, 0.5 * cte.DEG_TO_RAD)
    sin_dphi = np.sin(half_dphi)
    sin_dlam = np.sin(half_dlam)
    a = (sin_dphi * sin_dphi
         + np.cos(np.multiply(lat1_deg, cte.DEG_TO_RAD))
         * np.cos(np.multiply(lat2_deg, cte.DEG_TO_RAD))
         * sin_dlam * sin_dlam)
    # Rounding can push a marginally above 1 for antipodal inputs
    a = np.clip(a, 0.0, 1.0)
    return 2.0 * cte.EARTH_RADIUS * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two GPS locations."""
    return float(haversine_from_offsets(lat2 - lat1, lng2 - lng1, lat1, lat2))


def meters_per_degree_longitude(latitude: float) -> float:
    return cte.METERS_PER_DEGREE * math.cos(latitude * cte.DEG_TO_RAD)
