"""
Density engine running the tile kernel on a Taichi GPU device.

One computation walks through a fixed sequence of states:

    UNINITIALIZED -> DEVICE_ACQUIRED -> BUFFERS_ALLOCATED -> DISPATCHED
        -> RESULTS_COPIED -> BUFFERS_RELEASED -> DONE

Any failure (no GPU, acquisition failure, allocation failure, execution
failure) moves it to ABORTED_TO_FALLBACK: the buffers allocated so far are
released, the failure is logged, and the CPU engine computes the grid with
the same arguments. GPU failures never reach the caller.

Cancellation is not a failure: ComputationCancelled is raised as is, after
the buffers have been released.

The Taichi runtime is process-wide, so computations on it are serialised by
an asyncio lock (one per event loop).
"""

import asyncio
import enum
import logging
import weakref

import numpy as np
import taichi as ti

from ..backend import ComputeDevice
from ..buffers import BufferSet, POINTS, PARAMS, OUTPUT, READBACK
from ..errors import ComputationCancelled
from ..geo.canvas import point_offsets
from ..kernels.params import kernel_arguments
from . import gpu_kernels as gk
from .cpu import CPUDensityEngine
from .data import DensityMapData
from .engine import DensityEngine, check_cancelled


logger = logging.getLogger(__name__)


class GPUState(enum.Enum):
	UNINITIALIZED = 0
	DEVICE_ACQUIRED = 1
	BUFFERS_ALLOCATED = 2
	DISPATCHED = 3
	RESULTS_COPIED = 4
	BUFFERS_RELEASED = 5
	DONE = 6
	ABORTED_TO_FALLBACK = 7


_locks = weakref.WeakKeyDictionary()


def _runtime_lock() -> asyncio.Lock:
	loop = asyncio.get_running_loop()
	lock = _locks.get(loop)
	if lock is None:
		lock = asyncio.Lock()
		_locks[loop] = lock
	return lock


class GPUDensityEngine(DensityEngine):
	"""
	Density engine backed by Taichi.

	Attributes:
		device: ComputeDevice acquired at every computation. Default: a
			ComputeDevice on the default GPU archs
		fallback: Engine used when the GPU path fails. Default: CPUDensityEngine
		last_state: GPUState the most recent computation ended in

	Example:
		engine = GPUDensityEngine(ComputeDevice(allow_cpu_arch=True))
		result = await engine.compute(points, bounds, dims, params)
		result.engine  # "gpu", or "cpu" after a fallback
	"""

	name = "gpu"

	def __init__(self, device=None, fallback=None):
		self.device = ComputeDevice() if device is None else device
		self.fallback = CPUDensityEngine() if fallback is None else fallback
		self.last_state = GPUState.UNINITIALIZED

	async def _compute(self, points_array, bounds, dims, params, on_progress, cancel_token):
		async with _runtime_lock():
			grid, state, error = await self._run(points_array, bounds, dims, params, on_progress, cancel_token)

		if error is None:
			self.last_state = state
			return DensityMapData.from_grid(grid, bounds, dims, params, self.name)

		logger.warning("GPU density computation aborted in state %s (%s: %s), falling back to %s engine",
			state.name, type(error).__name__, error, self.fallback.name)
		self.last_state = GPUState.ABORTED_TO_FALLBACK
		return await self.fallback.compute(points_array, bounds, dims, params, on_progress, cancel_token)

	async def _run(self, points_array, bounds, dims, params, on_progress, cancel_token):
		"""
		Execute the GPU path.

		Returns:
			tuple: (grid, state, error); error is None on success, otherwise
				state is the last state reached before the failure

		Raises:
			ComputationCancelled: If cancel_token was triggered
		"""
		state = GPUState.UNINITIALIZED
		args = kernel_arguments(params)
		h, w = dims.shape
		n_points = points_array.shape[0]
		loop = asyncio.get_running_loop()

		try:
			self.device.acquire()
			state = GPUState.DEVICE_ACQUIRED
			logger.debug("GPU engine: %d points on %dx%d grid, device %s", n_points, w, h, self.device.arch_name)

			with BufferSet() as buffers:
				pts = buffers.allocate(POINTS, ti.f32, (n_points, 2))
				prm = buffers.allocate(PARAMS, ti.f32, (gk.N_PARAMS,))
				out = buffers.allocate(OUTPUT, ti.f32, (h, w))
				readback = buffers.allocate(READBACK, ti.f32, (h, w))
				state = GPUState.BUFFERS_ALLOCATED

				pts.from_numpy(point_offsets(points_array, bounds).astype(np.float32))
				prm.from_numpy(gk.pack_params(bounds, args))
				check_cancelled(cancel_token)

				gk.accumulate_density(pts.field, prm.field, out.field, n_points, args.method_id)
				state = GPUState.DISPATCHED
				if on_progress is not None:
					on_progress(0, h)

				await loop.run_in_executor(None, ti.sync)
				check_cancelled(cancel_token)

				gk.copy_grid(out.field, readback.field)
				await loop.run_in_executor(None, ti.sync)
				grid = readback.to_numpy()
				state = GPUState.RESULTS_COPIED

			state = GPUState.BUFFERS_RELEASED
			if on_progress is not None:
				on_progress(h, h)

		except ComputationCancelled:
			logger.debug("GPU computation cancelled in state %s", state.name)
			raise
		except Exception as e:
			if state.value >= GPUState.DISPATCHED.value:
				self.device.mark_lost(e)
			return None, state, e

		return grid, GPUState.DONE, None
