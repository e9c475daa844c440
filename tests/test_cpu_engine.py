"""
Tests for the NumPy density engine.
"""

import asyncio
import math

import numpy as np
import pytest

from pydispersal import ComputationCancelled
from pydispersal import constants as cte
from pydispersal.density import CancellationToken, CPUDensityEngine, DensityMapData
from pydispersal.density.cpu import row_batch_size
from pydispersal.geo import (
	Point,
	cell_offsets,
	compute_canvas_dimensions,
	compute_field_bounds,
	grid_to_gps,
	haversine_from_offsets,
)
from pydispersal.kernels import HeatmapParameters, evaluate_kernel, kernel_arguments

from conftest import meters_to_lng, random_points, square_field


def center_point(bounds, dims):
	"""Drop point sitting on the centre cell of an even-sized canvas."""
	lat, lng = grid_to_gps(dims.canvas_width // 2, dims.canvas_height // 2, bounds, dims)
	return Point(lat, lng)


def brute_force(points, bounds, dims, params):
	rows, cols = cell_offsets(bounds, dims)
	args = kernel_arguments(params)
	acc = np.zeros(dims.shape, dtype=np.float64)
	for p in points:
		plat = p.latitude - bounds.bounded_min_lat
		plng = p.longitude - bounds.bounded_min_lng
		d = haversine_from_offsets(rows[:, None] - plat, cols[None, :] - plng,
			(bounds.bounded_min_lat + rows)[:, None], p.latitude)
		acc += evaluate_kernel(d, args)
	return acc.astype(np.float32)


def test_single_point_centre_and_cutoff(field, params):
	bounds, dims = field
	p = center_point(bounds, dims)

	result = CPUDensityEngine().compute_sync([p], bounds, dims, params)
	grid = result.density_data

	assert grid[dims.canvas_height // 2, dims.canvas_width // 2] == pytest.approx(1.0, abs=1e-6)
	assert result.max_density == pytest.approx(1.0, abs=1e-6)

	rows, cols = cell_offsets(bounds, dims)
	d = haversine_from_offsets(rows[:, None] - (p.latitude - bounds.bounded_min_lat),
		cols[None, :] - (p.longitude - bounds.bounded_min_lng),
		(bounds.bounded_min_lat + rows)[:, None], p.latitude)

	assert np.all(grid[d > 30.0 + 1e-6] == 0.0)
	assert np.all(grid[d < 29.9] > 0.0)


def test_two_points_add_at_midpoint(field, params):
	bounds, dims = field
	mid = center_point(bounds, dims)
	offset = meters_to_lng(2.5, mid.latitude)
	points = [Point(mid.latitude, mid.longitude - offset), Point(mid.latitude, mid.longitude + offset)]

	result = CPUDensityEngine().compute_sync(points, bounds, dims, params)
	value = result.density_data[dims.canvas_height // 2, dims.canvas_width // 2]

	assert value == pytest.approx(2 * math.exp(-(2.5 ** 2) / (2 * 8.0 ** 2)), rel=1e-5)


def test_matches_brute_force_sum():
	points = random_points(25)
	bounds = compute_field_bounds(points)
	dims = compute_canvas_dimensions(bounds.field_aspect_ratio, 80, 60, 2)

	for method in ("gaussian", "levy-flight", "exponential"):
		p = HeatmapParameters(distribution_method=method)
		result = CPUDensityEngine().compute_sync(points, bounds, dims, p)
		np.testing.assert_allclose(result.density_data, brute_force(points, bounds, dims, p), rtol=1e-6, atol=1e-9)


def test_result_invariants(scattered_points, params):
	bounds = compute_field_bounds(scattered_points)
	dims = compute_canvas_dimensions(bounds.field_aspect_ratio, 60, 60, 2)

	result = CPUDensityEngine().compute_sync(scattered_points, bounds, dims, params)

	assert isinstance(result, DensityMapData)
	assert result.engine == "cpu"
	assert result.parameters is params
	assert result.density_data.dtype == np.float32
	assert result.density_data.shape == (dims.canvas_height, dims.canvas_width)
	assert np.all(result.density_data >= 0.0)
	assert result.max_density == float(result.density_data.max())
	assert result.max_density > 0.0
	assert result.bounds is bounds
	assert result.pixels_per_meter > 0.0


def test_idempotent(scattered_points, params):
	bounds = compute_field_bounds(scattered_points)
	dims = compute_canvas_dimensions(bounds.field_aspect_ratio, 50, 50, 1)
	engine = CPUDensityEngine()

	a = engine.compute_sync(scattered_points, bounds, dims, params)
	b = engine.compute_sync(scattered_points, bounds, dims, params)

	assert np.array_equal(a.density_data, b.density_data)
	assert a.density_data is not b.density_data


def test_result_is_read_only(field, params):
	bounds, dims = field
	result = CPUDensityEngine().compute_sync([center_point(bounds, dims)], bounds, dims, params)
	with pytest.raises(ValueError):
		result.density_data[0, 0] = 5.0


def test_empty_points_give_zero_grid(field, params):
	bounds, dims = field
	result = CPUDensityEngine().compute_sync([], bounds, dims, params)
	assert result.max_density == 0.0
	assert not result.density_data.any()


def test_degenerate_bounds_give_zero_grid(params):
	points = [Point(45.1, 4.9), Point(45.1, 4.9)]
	bounds = compute_field_bounds(points)
	dims = compute_canvas_dimensions(bounds.field_aspect_ratio, 20, 20, 1)

	result = CPUDensityEngine().compute_sync(points, bounds, dims, params)

	assert result.density_data.shape == (20, 20)
	assert result.max_density == 0.0
	assert not result.density_data.any()


def test_progress_reports_every_batch(params):
	bounds, dims = square_field(cells=250)
	progress = []

	CPUDensityEngine().compute_sync([Point(bounds.bounded_min_lat + bounds.bounded_lat_range / 2,
		bounds.bounded_min_lng + bounds.bounded_lng_range / 2)], bounds, dims, params,
		on_progress=lambda done, total: progress.append((done, total)))

	batch = row_batch_size(250)
	assert batch == 2
	assert len(progress) == math.ceil(250 / batch)
	assert progress[-1] == (250, 250)
	assert all(total == 250 for _, total in progress)
	assert [done for done, _ in progress] == sorted(done for done, _ in progress)


def test_row_batch_size():
	assert row_batch_size(1) == 1
	assert row_batch_size(99) == 1
	assert row_batch_size(cte.TARGET_ROW_BATCHES * 7) == 7


def test_yields_to_event_loop(field, params):
	bounds, dims = field
	p = center_point(bounds, dims)

	async def scenario():
		ticks = 0
		done = False

		async def ticker():
			nonlocal ticks
			while not done:
				ticks += 1
				await asyncio.sleep(0)

		task = asyncio.create_task(ticker())
		await CPUDensityEngine().compute([p], bounds, dims, params)
		done = True
		await task
		return ticks

	assert asyncio.run(scenario()) > 10


def test_cancellation_stops_computation(field, params):
	bounds, dims = field
	token = CancellationToken()
	progress = []

	def on_progress(done, total):
		progress.append(done)
		token.cancel()

	with pytest.raises(ComputationCancelled):
		CPUDensityEngine().compute_sync([center_point(bounds, dims)], bounds, dims, params,
			on_progress=on_progress, cancel_token=token)

	assert len(progress) == 1
	assert token.cancelled


def test_cancelled_before_start(field, params):
	bounds, dims = field
	token = CancellationToken()
	token.cancel()
	with pytest.raises(ComputationCancelled):
		CPUDensityEngine().compute_sync([], bounds, dims, params, cancel_token=token)


def test_inputs_not_mutated(scattered_points, params):
	before = list(scattered_points)
	bounds = compute_field_bounds(scattered_points)
	dims = compute_canvas_dimensions(bounds.field_aspect_ratio, 30, 30, 1)
	CPUDensityEngine().compute_sync(scattered_points, bounds, dims, params)
	assert scattered_points == before


def test_image_bounds(field, params):
	bounds, dims = field
	result = CPUDensityEngine().compute_sync([], bounds, dims, params)
	assert result.image_bounds() == (
		(bounds.bounded_min_lat, bounds.bounded_min_lng),
		(bounds.bounded_max_lat, bounds.bounded_max_lng),
	)
	assert result.bounded_lat_range == bounds.bounded_lat_range
