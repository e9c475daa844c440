"""
Heatmap rasters: normalization, RGBA export and quick-look plots.
"""

import logging

import matplotlib.image as mpimg
import numpy as np

from .thermal import apply_thermal_colors


logger = logging.getLogger(__name__)


def normalize(grid, max_density: float) -> np.ndarray:
	"""
	Scale a density grid to [0, 1].

	Args:
		grid: 2D density array
		max_density: Value mapped to 1

	Returns:
		np.ndarray: float32 array, all zeros when max_density is 0
	"""
	grid = np.asarray(grid, dtype=np.float32)
	if max_density <= 0:
		return np.zeros(grid.shape, dtype=np.float32)
	out = grid / np.float32(max_density)
	return np.clip(out, 0., 1., out=out)


def to_rgba(density_map) -> np.ndarray:
	"""Thermal RGBA raster (H, W, 4) uint8 of a DensityMapData."""
	return apply_thermal_colors(normalize(density_map.density_data, density_map.max_density))


def save_heatmap_png(density_map, path):
	"""
	Write the thermal raster of a density map to a PNG file.

	Row 0 of the grid is the top (north) row of the image. Use
	density_map.image_bounds() to place the image on a map.

	Returns:
		np.ndarray: The RGBA raster that was written
	"""
	rgba = to_rgba(density_map)
	mpimg.imsave(path, rgba, format="png")
	logger.info("Heatmap %dx%d written to %s", density_map.canvas_width, density_map.canvas_height, path)
	return rgba


def plot_heatmap(density_map, points=None, ax=None):
	"""
	Show a density map in geographic coordinates with matplotlib.

	Args:
		density_map: DensityMapData
		points: Optional drop points drawn on top
		ax: Matplotlib axes. Default: current axes

	Returns:
		The AxesImage of the heatmap
	"""
	import matplotlib.pyplot as plt

	if ax is None:
		ax = plt.gca()

	(south, west), (north, east) = density_map.image_bounds()
	image = ax.imshow(to_rgba(density_map), extent=(west, east, south, north),
		origin="upper", interpolation="nearest")

	if points:
		ax.scatter([p.longitude for p in points], [p.latitude for p in points], s=4, c="k")

	ax.set_xlabel("Longitude")
	ax.set_ylabel("Latitude")
	return image
