"""
End-to-end heatmap generation.

generate_heatmap chains the whole computation for a list of raw drop
points: filtering, field bounds, canvas size, engine selection and the
density computation itself.
"""

import asyncio
import logging

from . import constants as cte
from .density import select_engine
from .geo import filter_valid_points, compute_field_bounds, compute_canvas_dimensions
from .kernels import HeatmapParameters


logger = logging.getLogger(__name__)


def _as_parameters(params) -> HeatmapParameters:
	if params is None:
		return HeatmapParameters()
	if isinstance(params, HeatmapParameters):
		return params
	return HeatmapParameters.model_validate(params)


async def generate_heatmap(points, params=None, *, gpu_available=None, use_gpu=True, device=None,
		max_width=cte.DEFAULT_MAX_WIDTH, max_height=cte.DEFAULT_MAX_HEIGHT,
		padding_fraction=cte.DEFAULT_PADDING, on_progress=None, cancel_token=None):
	"""
	Compute the density heatmap of a set of drop points.

	Args:
		points: Raw drop points (Point, objects with latitude/longitude,
			dicts or (lat, lng) pairs). Invalid points are dropped
		params: HeatmapParameters, or a mapping validated into one.
			Default: HeatmapParameters()
		gpu_available: Host capability signal, None to probe
		use_gpu: User preference for the GPU engine
		device: Optional pre-acquired ComputeDevice
		max_width, max_height: Display box. Default: 750 x 600
		padding_fraction: Padding around the drop points. Default: 0.1
		on_progress: Optional callback(rows_done, total_rows)
		cancel_token: Optional CancellationToken

	Returns:
		DensityMapData, or None when no valid drop point remains

	Raises:
		pydantic.ValidationError: If params are invalid
		ComputationCancelled: If cancel_token was triggered
	"""
	params = _as_parameters(params)

	valid = filter_valid_points(points)
	if not valid:
		logger.info("No valid drop points, no heatmap generated")
		return None

	bounds = compute_field_bounds(valid, padding_fraction)
	dims = compute_canvas_dimensions(bounds.field_aspect_ratio, max_width, max_height,
		params.resolution_multiplier)

	logger.info("Heatmap for %d drop points on a %dx%d canvas (%s)", len(valid),
		dims.canvas_width, dims.canvas_height, params.distribution_method.value)

	engine = select_engine(gpu_available, len(valid), use_gpu, device)
	return await engine.compute(valid, bounds, dims, params, on_progress, cancel_token)


def generate_heatmap_sync(points, params=None, **kwargs):
	"""Blocking generate_heatmap for scripts without an event loop."""
	return asyncio.run(generate_heatmap(points, params, **kwargs))
