"""
Shared fixtures for the PyDispersal tests.

GPU engine tests run the Taichi pipeline on whatever arch Taichi initialises,
Taichi's CPU arch included, through ComputeDevice(allow_cpu_arch=True).
"""

import math

import numpy as np
import pytest

import pydispersal as pd
from pydispersal import constants as cte
from pydispersal.geo import CanvasDimensions, FieldBounds, Point


LAT0 = 45.1
LNG0 = 4.9


def square_field(size_m=100.0, cells=100, lat0=LAT0, lng0=LNG0):
	"""
	Bounds of a square field whose south-west corner is (lat0, lng0).

	Cells are size_m / cells meters on both axes (haversine meters along the
	latitude axis, parallel meters at mid-field along the longitude axis).
	"""
	lat_range = size_m / (cte.EARTH_RADIUS * cte.DEG_TO_RAD)
	mid_lat = lat0 + lat_range / 2
	lng_range = size_m / (cte.EARTH_RADIUS * cte.DEG_TO_RAD * math.cos(mid_lat * cte.DEG_TO_RAD))

	bounds = FieldBounds(
		min_lat=lat0, max_lat=lat0 + lat_range, min_lng=lng0, max_lng=lng0 + lng_range,
		bounded_min_lat=lat0, bounded_max_lat=lat0 + lat_range,
		bounded_min_lng=lng0, bounded_max_lng=lng0 + lng_range,
		bounded_lat_range=lat_range, bounded_lng_range=lng_range,
		field_aspect_ratio=lng_range / lat_range,
	)
	dims = CanvasDimensions(cells, cells, cells, cells)
	return bounds, dims


def meters_to_lng(meters, lat):
	return meters / (cte.EARTH_RADIUS * cte.DEG_TO_RAD * math.cos(lat * cte.DEG_TO_RAD))


def random_points(n, size_m=200.0, seed=42):
	rng = np.random.default_rng(seed)
	bounds, _ = square_field(size_m)
	lats = bounds.bounded_min_lat + rng.uniform(0.1, 0.9, n) * bounds.bounded_lat_range
	lngs = bounds.bounded_min_lng + rng.uniform(0.1, 0.9, n) * bounds.bounded_lng_range
	return [Point(float(a), float(b)) for a, b in zip(lats, lngs)]


@pytest.fixture
def field():
	return square_field()


@pytest.fixture
def params():
	return pd.kernels.HeatmapParameters()


@pytest.fixture
def scattered_points():
	return random_points(60)


@pytest.fixture
def device():
	"""Taichi runtime accepted whatever arch it landed on."""
	return pd.backend.ComputeDevice(allow_cpu_arch=True).acquire()


class FailingDevice:
	"""Stand-in device whose acquisition always fails."""

	arch_name = "none"

	def __init__(self):
		self.acquire_calls = 0
		self.lost = []

	def acquire(self):
		self.acquire_calls += 1
		raise pd.GPUUnavailableError("no GPU in this test")

	def mark_lost(self, reason):
		self.lost.append(reason)


class RecordingDevice(pd.backend.ComputeDevice):
	"""Real device that records mark_lost calls instead of flagging the runtime."""

	def __init__(self):
		super().__init__(allow_cpu_arch=True)
		self.lost = []

	def mark_lost(self, reason):
		self.lost.append(reason)
