"""
Choice between the CPU and GPU density engines.
"""

import logging

from .. import constants as cte
from ..backend import gpu_available as probe_gpu
from .cpu import CPUDensityEngine
from .gpu import GPUDensityEngine


logger = logging.getLogger(__name__)


def should_use_gpu(gpu_available, n_points: int, use_gpu: bool = True) -> bool:
	"""
	Decide whether a computation goes to the GPU engine.

	The GPU is used only when the host allows it, a device is available and
	there are more than GPU_MIN_POINTS drop points; below that the setup cost
	outweighs the gain.

	Args:
		gpu_available: Capability signal from the host. None probes the
			Taichi runtime (only when the other conditions hold)
		n_points: Number of valid drop points
		use_gpu: User preference

	Returns:
		bool
	"""
	if not use_gpu or n_points <= cte.GPU_MIN_POINTS:
		return False
	if gpu_available is None:
		gpu_available = probe_gpu()
	return bool(gpu_available)


def select_engine(gpu_available, n_points: int, use_gpu: bool = True, device=None):
	"""
	Build the density engine for a computation.

	Args:
		gpu_available: Capability signal (True, False or None to probe)
		n_points: Number of valid drop points
		use_gpu: User preference
		device: Optional pre-acquired ComputeDevice; it counts as available
			when gpu_available is None

	Returns:
		DensityEngine: GPUDensityEngine or CPUDensityEngine
	"""
	if gpu_available is None and device is not None:
		gpu_available = True

	if should_use_gpu(gpu_available, n_points, use_gpu):
		logger.info("Using GPU density engine for %d points", n_points)
		return GPUDensityEngine(device=device)

	logger.info("Using CPU density engine for %d points", n_points)
	return CPUDensityEngine()
