"""
Compute device acquisition and loss handling for PyDispersal.

Taichi runs one runtime per process. The first acquisition initialises it on
a GPU arch; later acquisitions reuse it. When a computation reports the
device as lost the runtime is rebooted on the next acquisition.

Taichi silently falls back to its CPU arch when no GPU backend works. That
runtime is still a valid compute target (the GPU engine runs unchanged on
it), but it is only accepted when allow_cpu_arch is set, otherwise the
device reports itself unavailable and callers use the CPU engine.

Note:
	PyDispersal calls ti.init itself. Calling ti.init elsewhere in the same
	process resets the runtime and should be avoided once a device has been
	acquired.
"""

import logging

import taichi as ti

from .. import constants as cte
from ..errors import GPUUnavailableError


logger = logging.getLogger(__name__)

# GPU archs tried by default. ti.gpu also lists opengl and gles, whose
# initialisation crashes the interpreter on hosts without a display
DEFAULT_ARCHS = [ti.cuda, ti.vulkan, ti.metal]

# Process-wide runtime state
_runtime = {"arch": None, "lost": False}


def _arch_name(arch) -> str:
	return getattr(arch, "name", str(arch))


def _current_arch():
	return ti.lang.impl.current_cfg().arch


class ComputeDevice:
	"""
	Handle on the Taichi compute runtime.

	Attributes:
		requested_arch: Arch (or list of archs) passed to ti.init. Default: DEFAULT_ARCHS
		allow_cpu_arch: Accept Taichi's CPU arch. Default: cte.GPU_ALLOW_CPU_ARCH
		arch: Arch actually in use once acquired, None before
		init_kwargs: Extra keyword arguments for ti.init
	"""

	def __init__(self, arch=None, allow_cpu_arch=None, **init_kwargs):
		self.requested_arch = list(DEFAULT_ARCHS) if arch is None else arch
		self.allow_cpu_arch = cte.GPU_ALLOW_CPU_ARCH if allow_cpu_arch is None else allow_cpu_arch
		self.init_kwargs = init_kwargs
		self.arch = None

	@property
	def is_gpu(self) -> bool:
		return self.arch is not None and self.arch in ti.gpu

	@property
	def arch_name(self) -> str:
		return "none" if self.arch is None else _arch_name(self.arch)

	def acquire(self) -> "ComputeDevice":
		"""
		Make sure the Taichi runtime is up and usable.

		Returns:
			ComputeDevice: self, with arch set

		Raises:
			GPUUnavailableError: If ti.init fails, or the runtime is on the CPU
				arch and allow_cpu_arch is False
		"""
		if _runtime["lost"]:
			reboot()

		if _runtime["arch"] is None:
			try:
				ti.init(arch=self.requested_arch, default_fp=ti.f32, **self.init_kwargs)
			except Exception as e:
				raise GPUUnavailableError(f"Taichi initialisation failed: {e}") from e
			_runtime["arch"] = _current_arch()
			logger.info("Taichi runtime initialised on %s", _arch_name(_runtime["arch"]))

		arch = _runtime["arch"]
		if arch not in ti.gpu and not self.allow_cpu_arch:
			raise GPUUnavailableError(f"Taichi runtime is on {_arch_name(arch)}, no GPU arch available")

		self.arch = arch
		return self

	def mark_lost(self, reason):
		"""
		Flag the runtime as unusable after an execution failure.

		The next acquire() reboots Taichi before handing out the device again.
		"""
		logger.warning("Compute device %s lost: %s", self.arch_name, reason)
		_runtime["lost"] = True
		self.arch = None

	def __repr__(self):
		return f"ComputeDevice(arch={self.arch_name}, allow_cpu_arch={self.allow_cpu_arch})"


def reboot():
	"""
	Reset the Taichi runtime.

	Frees every Taichi field of the process. Only called when no computation
	holds buffers.
	"""
	logger.info("Rebooting Taichi runtime")
	ti.reset()
	_runtime["arch"] = None
	_runtime["lost"] = False


def gpu_available(allow_cpu_arch=None) -> bool:
	"""
	Probe for a usable compute device.

	Initialises the Taichi runtime if needed. Never raises.
	"""
	try:
		ComputeDevice(allow_cpu_arch=allow_cpu_arch).acquire()
	except GPUUnavailableError as e:
		logger.info("GPU compute unavailable: %s", e)
		return False
	return True
