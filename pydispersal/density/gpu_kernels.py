"""
Taichi kernels of the GPU density engine.

accumulate_density fills the output grid tile by tile: the grid is cut into
TILE_SIZE x TILE_SIZE tiles and every tile is dispatched as one GPU block, one
thread per cell. Each thread loops over all drop points and sums their kernel
weights, so the result of a cell does not depend on the order threads run in.

Grid and kernel parameters travel in one float32 buffer laid out as:

    [lat_range, lng_range, origin_lat, p0, p1, cutoff]

Drop points are (n, 2) float32 [lat, lng] offsets from the south-west corner
of the padded field.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from ..kernels import taichi_kernels as tk


# Indices into the parameter buffer
P_LAT_RANGE = 0
P_LNG_RANGE = 1
P_ORIGIN_LAT = 2
P_P0 = 3
P_P1 = 4
P_CUTOFF = 5
N_PARAMS = 6


def pack_params(bounds, args) -> np.ndarray:
	"""Parameter buffer content for one computation."""
	params = np.zeros(N_PARAMS, dtype=np.float32)
	params[P_LAT_RANGE] = bounds.bounded_lat_range
	params[P_LNG_RANGE] = bounds.bounded_lng_range
	params[P_ORIGIN_LAT] = bounds.bounded_min_lat
	params[P_P0] = args.p0
	params[P_P1] = args.p1
	params[P_CUTOFF] = args.cutoff
	return params


@ti.kernel
def accumulate_density(points: ti.template(), params: ti.template(), out: ti.template(),
		n_points: ti.i32, method: ti.template()):
	"""
	Sum the kernel weights of every drop point into each grid cell.

	Args:
		points: (n, 2) point offsets field
		params: Parameter field (see module docstring)
		out: (H, W) output field, fully overwritten
		n_points: Number of valid rows in points
		method: Distribution method id (compile-time)
	"""
	h = out.shape[0]
	w = out.shape[1]
	tiles_y = (h + cte.TILE_SIZE - 1) // cte.TILE_SIZE
	tiles_x = (w + cte.TILE_SIZE - 1) // cte.TILE_SIZE

	lat_range = params[P_LAT_RANGE]
	lng_range = params[P_LNG_RANGE]
	origin_lat = params[P_ORIGIN_LAT]
	p0 = params[P_P0]
	p1 = params[P_P1]
	cutoff = params[P_CUTOFF]

	ti.loop_config(block_dim=cte.TILE_SIZE * cte.TILE_SIZE)
	for ty, tx, ly, lx in ti.ndrange(tiles_y, tiles_x, cte.TILE_SIZE, cte.TILE_SIZE):
		y = ty * cte.TILE_SIZE + ly
		x = tx * cte.TILE_SIZE + lx

		# Edge tiles overhang the grid
		if y < h and x < w:
			cell_lat:ti.f32 = lat_range * ti.cast(h - y, ti.f32) / h
			cell_lng:ti.f32 = lng_range * ti.cast(x, ti.f32) / w

			total:ti.f32 = 0.
			for k in range(n_points):
				d = tk.haversine_from_offsets(cell_lat - points[k, 0], cell_lng - points[k, 1],
					origin_lat + cell_lat, origin_lat + points[k, 0])
				total += tk.kernel_weight(d, method, p0, p1, cutoff)

			out[y, x] = total


@ti.kernel
def copy_grid(src: ti.template(), dst: ti.template()):
	for I in ti.grouped(src):
		dst[I] = src[I]
