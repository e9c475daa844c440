"""
Field bounds, raster sizing and GPS/grid conversions.

compute_field_bounds pads the drop points' bounding box, and
compute_canvas_dimensions fits that box into a display raster. The remaining
helpers convert between GPS coordinates, grid cells and meters on that
raster.
"""

import math
from dataclasses import dataclass

import numpy as np

from .. import constants as cte
from .points import meters_per_degree_longitude


@dataclass(frozen=True)
class FieldBounds:
	"""
	Geographic extent of a set of drop points.

	The tight bounds enclose the points; the bounded_* values extend them by
	a padding fraction on every side and define the geographic extent of the
	density raster.

	Attributes:
		min_lat, max_lat, min_lng, max_lng: Tight bounds (degrees)
		bounded_min_lat, bounded_max_lat, bounded_min_lng, bounded_max_lng:
			Padded bounds (degrees)
		bounded_lat_range, bounded_lng_range: Padded extent (degrees)
		field_aspect_ratio: bounded_lng_range / bounded_lat_range, 1.0 when the
			latitude range is zero
	"""

	min_lat: float
	max_lat: float
	min_lng: float
	max_lng: float
	bounded_min_lat: float
	bounded_max_lat: float
	bounded_min_lng: float
	bounded_max_lng: float
	bounded_lat_range: float
	bounded_lng_range: float
	field_aspect_ratio: float

	@property
	def center_lat(self) -> float:
		return (self.min_lat + self.max_lat) / 2.0

	@property
	def is_degenerate(self) -> bool:
		"""True when the padded field has no extent, i.e. all points coincide."""
		return self.bounded_lat_range <= 0.0 or self.bounded_lng_range <= 0.0


@dataclass(frozen=True)
class CanvasDimensions:
	"""
	Raster size for a field.

	Attributes:
		display_width, display_height: Size in display pixels
		canvas_width, canvas_height: Size of the density grid, display size
			times the resolution multiplier
	"""

	display_width: int
	display_height: int
	canvas_width: int
	canvas_height: int

	@property
	def shape(self):
		"""Numpy shape (rows, columns) of the density grid."""
		return (self.canvas_height, self.canvas_width)


@dataclass(frozen=True)
class MeterScale:
	"""Metric size of the padded field and the pixel density of its raster."""

	field_width_meters: float
	field_height_meters: float
	pixels_per_meter_x: float
	pixels_per_meter_y: float
	pixels_per_meter: float


def _round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


def compute_field_bounds(points, padding_fraction: float = cte.DEFAULT_PADDING) -> FieldBounds:
	"""
	Compute the tight and padded bounding box of drop points.

	Args:
		points: Non-empty sequence of Point (or objects with latitude/longitude)
		padding_fraction: Fraction of the tight range added on each side.
			Default: 0.1 (10%)

	Returns:
		FieldBounds: Bounds and aspect ratio

	Raises:
		ValueError: If points is empty or the padding is negative

	Note:
		Coincident points give zero ranges. The aspect ratio is then reported
		as 1.0 rather than dividing by zero; engines treat such bounds as
		degenerate and return an all-zero grid.

		Points spread along one axis only (a straight east-west or
		north-south pass) are padded across it to the same metric extent,
		so such fields are never degenerate.
	"""
	if len(points) == 0:
		raise ValueError("compute_field_bounds needs at least one point")
	if padding_fraction < 0:
		raise ValueError(f"padding_fraction must be >= 0, got {padding_fraction}")

	lats = [p.latitude for p in points]
	lngs = [p.longitude for p in points]

	min_lat, max_lat = min(lats), max(lats)
	min_lng, max_lng = min(lngs), max(lngs)

	lat_pad = (max_lat - min_lat) * padding_fraction
	lng_pad = (max_lng - min_lng) * padding_fraction

	bounded_min_lat = min_lat - lat_pad
	bounded_max_lat = max_lat + lat_pad
	bounded_min_lng = min_lng - lng_pad
	bounded_max_lng = max_lng + lng_pad

	bounded_lat_range = bounded_max_lat - bounded_min_lat
	bounded_lng_range = bounded_max_lng - bounded_min_lng

	# A pass along a single parallel or meridian gets a square field
	m_per_deg_lng = meters_per_degree_longitude((min_lat + max_lat) / 2.0)
	if bounded_lat_range <= 0.0 < bounded_lng_range:
		half = bounded_lng_range * m_per_deg_lng / cte.METERS_PER_DEGREE / 2.0
		bounded_min_lat -= half
		bounded_max_lat += half
		bounded_lat_range = bounded_max_lat - bounded_min_lat
	elif bounded_lng_range <= 0.0 < bounded_lat_range and m_per_deg_lng > 0.0:
		half = bounded_lat_range * cte.METERS_PER_DEGREE / m_per_deg_lng / 2.0
		bounded_min_lng -= half
		bounded_max_lng += half
		bounded_lng_range = bounded_max_lng - bounded_min_lng

	aspect = bounded_lng_range / bounded_lat_range if bounded_lat_range > 0 else 1.0

	return FieldBounds(
		min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng,
		bounded_min_lat=bounded_min_lat, bounded_max_lat=bounded_max_lat,
		bounded_min_lng=bounded_min_lng, bounded_max_lng=bounded_max_lng,
		bounded_lat_range=bounded_lat_range, bounded_lng_range=bounded_lng_range,
		field_aspect_ratio=aspect,
	)


def compute_canvas_dimensions(aspect_ratio: float, max_width: int = cte.DEFAULT_MAX_WIDTH,
		max_height: int = cte.DEFAULT_MAX_HEIGHT,
		resolution_multiplier: int = cte.DEFAULT_RESOLUTION) -> CanvasDimensions:
	"""
	Fit the field into a display box while keeping its aspect ratio.

	Wide fields are clamped on width, tall fields on height. Display sizes are
	rounded to whole pixels before the resolution multiplier is applied, so
	canvas sizes are always integer multiples of the multiplier.

	Args:
		aspect_ratio: Field width / height
		max_width, max_height: Display box in pixels. Default: 750 x 600
		resolution_multiplier: Canvas pixels per display pixel. Default: 2

	Returns:
		CanvasDimensions
	"""
	if max_width <= 0 or max_height <= 0:
		raise ValueError("display box must have a positive size")
	if resolution_multiplier < 1 or int(resolution_multiplier) != resolution_multiplier:
		raise ValueError(f"resolution_multiplier must be a positive integer, got {resolution_multiplier}")

	if aspect_ratio > max_width / max_height:
		display_width = max_width
		display_height = max_width / aspect_ratio
	else:
		display_height = max_height
		display_width = max_height * aspect_ratio

	# A sliver of a field still needs one pixel
	display_width = max(1, _round_half_up(display_width))
	display_height = max(1, _round_half_up(display_height))

	resolution_multiplier = int(resolution_multiplier)
	return CanvasDimensions(
		display_width=display_width,
		display_height=display_height,
		canvas_width=display_width * resolution_multiplier,
		canvas_height=display_height * resolution_multiplier,
	)


def _check_extent(bounds: FieldBounds):
	if bounds.is_degenerate:
		raise ValueError("field bounds have zero extent, no grid mapping exists")


def gps_to_grid(lat: float, lng: float, bounds: FieldBounds, dims: CanvasDimensions):
	"""
	Convert a GPS location to fractional grid coordinates.

	Row 0 is the northern edge of the padded field: y grows southwards.

	Returns:
		tuple: (x, y) in canvas pixels
	"""
	_check_extent(bounds)
	x = (lng - bounds.bounded_min_lng) / bounds.bounded_lng_range * dims.canvas_width
	y = (bounds.bounded_max_lat - lat) / bounds.bounded_lat_range * dims.canvas_height
	return x, y


def grid_to_gps(x: float, y: float, bounds: FieldBounds, dims: CanvasDimensions):
	"""
	Convert grid coordinates back to a GPS location (inverse of gps_to_grid).

	Returns:
		tuple: (lat, lng) in degrees
	"""
	_check_extent(bounds)
	lng = bounds.bounded_min_lng + (x / dims.canvas_width) * bounds.bounded_lng_range
	lat = bounds.bounded_min_lat + ((dims.canvas_height - y) / dims.canvas_height) * bounds.bounded_lat_range
	return lat, lng


def meters_to_pixels(bounds: FieldBounds, dims: CanvasDimensions) -> MeterScale:
	"""
	Metric extent of the padded field and pixels per meter of its raster.

	Longitude degrees are scaled at the latitude of the field centre. The
	reported pixels_per_meter is the mean of both axes.
	"""
	m_per_deg_lng = cte.METERS_PER_DEGREE * math.cos(bounds.center_lat * cte.DEG_TO_RAD)

	width_m = bounds.bounded_lng_range * m_per_deg_lng
	height_m = bounds.bounded_lat_range * cte.METERS_PER_DEGREE

	ppm_x = dims.canvas_width / width_m if width_m > 0 else 0.0
	ppm_y = dims.canvas_height / height_m if height_m > 0 else 0.0

	return MeterScale(
		field_width_meters=width_m,
		field_height_meters=height_m,
		pixels_per_meter_x=ppm_x,
		pixels_per_meter_y=ppm_y,
		pixels_per_meter=(ppm_x + ppm_y) / 2.0,
	)


def cell_offsets(bounds: FieldBounds, dims: CanvasDimensions):
	"""
	Positions of the grid cells relative to the south-west padded corner.

	Cell (x, y) sits at longitude bounded_min_lng + col[x] and latitude
	bounded_min_lat + row[y]. Both density engines place cells this way.

	Returns:
		tuple: (row_lat_offsets (H,), col_lng_offsets (W,)) float64 degrees
	"""
	h, w = dims.canvas_height, dims.canvas_width
	rows = bounds.bounded_lat_range * (h - np.arange(h, dtype=np.float64)) / h
	cols = bounds.bounded_lng_range * np.arange(w, dtype=np.float64) / w
	return rows, cols


def point_offsets(points_array: np.ndarray, bounds: FieldBounds) -> np.ndarray:
	"""Drop point coordinates relative to the south-west padded corner, (n, 2) degrees."""
	offsets = np.empty_like(points_array, dtype=np.float64)
	offsets[:, 0] = points_array[:, 0] - bounds.bounded_min_lat
	offsets[:, 1] = points_array[:, 1] - bounds.bounded_min_lng
	return offsets
