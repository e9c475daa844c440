"""
Reference density engine evaluated with NumPy.

The grid is filled one batch of rows at a time. For every batch the engine
accumulates the kernel of each drop point over the whole batch, then reports
progress and yields to the event loop so that a UI stays responsive during
long computations.
"""

import asyncio
import logging

import numpy as np

from .. import constants as cte
from ..geo.canvas import cell_offsets, point_offsets
from ..geo.points import haversine_from_offsets
from ..kernels.numpy_kernels import evaluate_kernel
from ..kernels.params import kernel_arguments
from .data import DensityMapData
from .engine import DensityEngine, check_cancelled


logger = logging.getLogger(__name__)

# Meters per radian of latitude, lower bound factor of the haversine distance
_METERS_PER_RAD = cte.EARTH_RADIUS


def row_batch_size(height: int) -> int:
	return max(1, height // cte.TARGET_ROW_BATCHES)


class CPUDensityEngine(DensityEngine):
	"""
	Density engine running on the host with NumPy.

	Always available and used as the fallback of the GPU engine. Results are
	deterministic: two runs with the same inputs give bit-identical grids.
	"""

	name = "cpu"

	async def _compute(self, points_array, bounds, dims, params, on_progress, cancel_token):
		args = kernel_arguments(params)
		h, w = dims.shape

		rows, cols = cell_offsets(bounds, dims)
		pts = point_offsets(points_array, bounds)
		origin_lat = bounds.bounded_min_lat
		n_points = pts.shape[0]

		grid = np.zeros((h, w), dtype=np.float32)
		batch = row_batch_size(h)

		logger.debug("CPU engine: %d points on %dx%d grid, %d rows per batch", n_points, w, h, batch)

		for start in range(0, h, batch):
			check_cancelled(cancel_token)
			stop = min(start + batch, h)

			row_lat = rows[start:stop]
			# rows decrease southwards
			band_top, band_bottom = row_lat[0], row_lat[-1]
			lat1 = (origin_lat + row_lat)[:, None]

			acc = np.zeros((stop - start, w), dtype=np.float64)
			for k in range(n_points):
				plat, plng = pts[k, 0], pts[k, 1]

				# Great-circle distance is at least R * |dlat|
				gap = max(0.0, band_bottom - plat, plat - band_top)
				if gap * cte.DEG_TO_RAD * _METERS_PER_RAD > args.cutoff:
					continue

				d = haversine_from_offsets(
					row_lat[:, None] - plat,
					cols[None, :] - plng,
					lat1,
					origin_lat + plat,
				)
				acc += evaluate_kernel(d, args)

			grid[start:stop] = acc

			if on_progress is not None:
				on_progress(stop, h)
			await asyncio.sleep(0)

		check_cancelled(cancel_token)
		return DensityMapData.from_grid(grid, bounds, dims, params, self.name)
