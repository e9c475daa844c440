"""
Tests for drop points, field bounds, canvas sizing and GPS/grid mapping.
"""

import math

import numpy as np
import pytest

from pydispersal import constants as cte
from pydispersal.geo import (
	CanvasDimensions,
	Point,
	as_point,
	compute_canvas_dimensions,
	compute_field_bounds,
	filter_valid_points,
	gps_to_grid,
	grid_to_gps,
	haversine_distance,
	haversine_from_offsets,
	meters_to_pixels,
	points_to_array,
)

from conftest import square_field


def test_filter_valid_points_drops_unset_and_out_of_range():
	raw = [
		Point(45.1, 4.9),
		Point(0.0, 4.9),
		Point(45.1, 0.0),
		Point(95.0, 4.9),
		Point(45.1, -181.0),
		{"latitude": 45.2, "longitude": 4.8},
		(45.3, 4.7),
	]
	valid = filter_valid_points(raw)
	assert valid == [Point(45.1, 4.9), Point(45.2, 4.8), Point(45.3, 4.7)]


def test_as_point_accepts_attribute_objects():
	class Drop:
		latitude = 10.5
		longitude = -3.25

	assert as_point(Drop()) == Point(10.5, -3.25)


def test_points_to_array_layout():
	arr = points_to_array([Point(1.0, 2.0), Point(3.0, 4.0)])
	assert arr.shape == (2, 2)
	assert arr.dtype == np.float64
	np.testing.assert_array_equal(arr, [[1.0, 2.0], [3.0, 4.0]])


def test_field_bounds_padding():
	points = [Point(45.0, 4.0), Point(45.2, 4.4)]
	b = compute_field_bounds(points, 0.1)

	assert b.min_lat == 45.0 and b.max_lat == 45.2
	assert b.bounded_min_lat == pytest.approx(44.98)
	assert b.bounded_max_lat == pytest.approx(45.22)
	assert b.bounded_min_lng == pytest.approx(3.96)
	assert b.bounded_max_lng == pytest.approx(4.44)
	assert b.bounded_lat_range == pytest.approx(0.24)
	assert b.bounded_lng_range == pytest.approx(0.48)
	assert b.field_aspect_ratio == pytest.approx(2.0)
	assert not b.is_degenerate


def test_field_bounds_contain_tight_bounds():
	points = [Point(45.0 + 0.001 * i, 4.0 - 0.002 * i) for i in range(10)]
	b = compute_field_bounds(points)
	assert b.bounded_min_lat <= b.min_lat and b.bounded_max_lat >= b.max_lat
	assert b.bounded_min_lng <= b.min_lng and b.bounded_max_lng >= b.max_lng


def test_field_bounds_empty_raises():
	with pytest.raises(ValueError):
		compute_field_bounds([])


def test_field_bounds_coincident_points():
	b = compute_field_bounds([Point(45.0, 4.0), Point(45.0, 4.0)])
	assert b.bounded_lat_range == 0.0
	assert b.bounded_lng_range == 0.0
	assert b.field_aspect_ratio == 1.0
	assert b.is_degenerate


def test_field_bounds_east_west_pass_is_padded_square():
	points = [Point(45.1, 4.9 + i * 1e-4) for i in range(10)]
	b = compute_field_bounds(points)

	assert not b.is_degenerate
	assert b.min_lat == b.max_lat == 45.1
	assert b.bounded_min_lat < 45.1 < b.bounded_max_lat
	assert b.bounded_max_lat - 45.1 == pytest.approx(45.1 - b.bounded_min_lat)

	dims = CanvasDimensions(100, 100, 100, 100)
	scale = meters_to_pixels(b, dims)
	assert scale.field_height_meters == pytest.approx(scale.field_width_meters, rel=1e-6)


def test_field_bounds_north_south_pass_is_padded_square():
	points = [Point(45.1 + i * 1e-4, 4.9) for i in range(10)]
	b = compute_field_bounds(points)

	assert not b.is_degenerate
	assert b.bounded_min_lng < 4.9 < b.bounded_max_lng

	dims = CanvasDimensions(100, 100, 100, 100)
	scale = meters_to_pixels(b, dims)
	assert scale.field_width_meters == pytest.approx(scale.field_height_meters, rel=1e-6)


def test_canvas_wide_field_clamps_width():
	dims = compute_canvas_dimensions(2.0, 750, 600, 2)
	assert (dims.display_width, dims.display_height) == (750, 375)
	assert (dims.canvas_width, dims.canvas_height) == (1500, 750)
	assert dims.shape == (750, 1500)


def test_canvas_tall_field_clamps_height():
	dims = compute_canvas_dimensions(0.5, 750, 600, 2)
	assert (dims.display_width, dims.display_height) == (300, 600)
	assert (dims.canvas_width, dims.canvas_height) == (600, 1200)


def test_canvas_keeps_one_pixel_for_slivers():
	dims = compute_canvas_dimensions(10000.0, 750, 600, 1)
	assert dims.display_height == 1
	assert dims.canvas_width == 750


def test_canvas_is_multiple_of_resolution():
	for aspect in (0.3, 0.77, 1.0, 1.25, 1.9, 3.3):
		dims = compute_canvas_dimensions(aspect, 750, 600, 3)
		assert dims.canvas_width == 3 * dims.display_width
		assert dims.canvas_height == 3 * dims.display_height
		assert dims.display_width <= 750 and dims.display_height <= 600


def test_canvas_rejects_bad_arguments():
	with pytest.raises(ValueError):
		compute_canvas_dimensions(1.0, 0, 600, 2)
	with pytest.raises(ValueError):
		compute_canvas_dimensions(1.0, 750, 600, 0)


def test_gps_grid_corners_and_round_trip():
	bounds, dims = square_field(cells=50)

	x, y = gps_to_grid(bounds.bounded_max_lat, bounds.bounded_min_lng, bounds, dims)
	assert x == pytest.approx(0.0, abs=1e-9)
	assert y == pytest.approx(0.0, abs=1e-9)

	x, y = gps_to_grid(bounds.bounded_min_lat, bounds.bounded_max_lng, bounds, dims)
	assert x == pytest.approx(50.0)
	assert y == pytest.approx(50.0)

	lat, lng = grid_to_gps(12.0, 31.0, bounds, dims)
	x, y = gps_to_grid(lat, lng, bounds, dims)
	assert x == pytest.approx(12.0)
	assert y == pytest.approx(31.0)


def test_grid_mapping_degenerate_bounds_raise():
	b = compute_field_bounds([Point(45.0, 4.0)])
	dims = CanvasDimensions(10, 10, 10, 10)
	with pytest.raises(ValueError):
		gps_to_grid(45.0, 4.0, b, dims)
	with pytest.raises(ValueError):
		grid_to_gps(1, 1, b, dims)


def test_meters_to_pixels():
	points = [Point(45.0, 4.0), Point(45.001, 4.002)]
	b = compute_field_bounds(points, 0.0)
	dims = CanvasDimensions(100, 50, 200, 100)
	scale = meters_to_pixels(b, dims)

	assert scale.field_height_meters == pytest.approx(0.001 * cte.METERS_PER_DEGREE)
	expected_w = 0.002 * cte.METERS_PER_DEGREE * math.cos(45.0005 * cte.DEG_TO_RAD)
	assert scale.field_width_meters == pytest.approx(expected_w)
	assert scale.pixels_per_meter_x == pytest.approx(200 / expected_w)
	assert scale.pixels_per_meter == pytest.approx((scale.pixels_per_meter_x + scale.pixels_per_meter_y) / 2)


def test_haversine_one_degree_latitude():
	d = haversine_distance(45.0, 4.0, 46.0, 4.0)
	assert d == pytest.approx(cte.EARTH_RADIUS * cte.DEG_TO_RAD, rel=1e-9)


def test_haversine_from_offsets_matches_absolute_form():
	lat1, lng1, lat2, lng2 = 45.1, 4.9, 45.1003, 4.9004
	d_abs = haversine_distance(lat1, lng1, lat2, lng2)
	d_off = haversine_from_offsets(lat2 - lat1, lng2 - lng1, lat1, lat2)
	assert float(d_off) == pytest.approx(d_abs, rel=1e-12)
	assert 30.0 < d_abs < 60.0


def test_haversine_from_offsets_broadcasts():
	dlat = np.zeros((3, 1))
	dlng = np.array([[0.0, 1e-4, 2e-4]])
	d = haversine_from_offsets(dlat, dlng, 45.0, 45.0)
	assert d.shape == (3, 3)
	assert d[0, 0] == 0.0
	assert d[0, 2] == pytest.approx(2 * d[0, 1], rel=1e-9)
