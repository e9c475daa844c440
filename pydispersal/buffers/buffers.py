"""
Scoped Taichi device buffers.

Every GPU density computation owns four buffers (drop points, parameters,
output grid, readback grid). They are created with the FieldsBuilder pattern
so that each one sits in its own SNode tree and can be destroyed on its own,
freeing device memory as soon as the computation that owns it ends.

Buffers are never pooled or shared between computations. A BufferSet is the
owning scope: leaving its with-block destroys every buffer it allocated,
whether the block finished, raised, or was abandoned for the CPU fallback.

Module-level counters track how many buffers are alive so that leaks show up
in buffer_stats().
"""

import logging
import threading
from typing import Any, Tuple

import taichi as ti


logger = logging.getLogger(__name__)

# Buffer categories owned by one computation
POINTS = "points"
PARAMS = "params"
OUTPUT = "output"
READBACK = "readback"

CATEGORIES = (POINTS, PARAMS, OUTPUT, READBACK)

_lock = threading.Lock()
_live = 0
_allocated_total = 0
_released_total = 0


def _normalize_shape(shape) -> Tuple[int, ...]:
    if isinstance(shape, int):
        shape = (shape,) if shape > 0 else ()
    elif not isinstance(shape, tuple):
        shape = tuple(shape) if hasattr(shape, '__iter__') else (shape,)
    if not shape or (len(shape) == 1 and shape[0] == 0):
        shape = ()
    return shape


class DeviceBuffer:
    """
    One Taichi field in its own SNode tree.

    Supports 0D (scalar), 1D and 2D fields. The underlying memory is freed by
    release(), which is idempotent.

    Attributes:
        id: Unique buffer identifier
        category: Buffer role (points, params, output, readback)
        field: Underlying Taichi field
        dtype: Field data type
        shape: Field dimensions (empty tuple for 0D scalars)
        released: True once the device memory has been freed
    """

    _next_id = 0

    def __init__(self, category: str, dtype: Any, shape):
        shape = _normalize_shape(shape)
        if len(shape) > 2:
            raise ValueError(f"Unsupported buffer dimensionality: {len(shape)}D. Only 0D, 1D and 2D buffers supported.")
        if any(s <= 0 for s in shape):
            raise ValueError(f"Buffer dimensions must be positive, got {shape}")

        DeviceBuffer._next_id += 1
        self.id = DeviceBuffer._next_id
        self.category = category
        self.dtype = dtype
        self.shape = shape
        self.released = False

        self.fb = ti.FieldsBuilder()
        self.field = ti.field(dtype)
        if len(shape) == 0:
            self.fb.place(self.field)
        elif len(shape) == 1:
            self.fb.dense(ti.i, shape).place(self.field)
        else:
            self.fb.dense(ti.ij, shape).place(self.field)
        self.snodetree = self.fb.finalize()

        global _live, _allocated_total
        with _lock:
            _live += 1
            _allocated_total += 1

    def release(self):
        """Destroy the SNode tree and free the device memory."""
        if self.released:
            return
        self.released = True
        try:
            self.snodetree.destroy()
        finally:
            self.snodetree = None
            self.field = None
            global _live, _released_total
            with _lock:
                _live -= 1
                _released_total += 1

    def to_numpy(self):
        return self.field.to_numpy()

    def from_numpy(self, val):
        self.field.from_numpy(val)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    def __str__(self):
        return f"Device buffer id:{self.id} - {self.category} - released:{self.released} - dtype:{self.dtype} - shape:{self.shape}"


class BufferSet:
    """
    Owning scope for the buffers of one computation.

    Usage:
        with BufferSet() as buffers:
            pts = buffers.allocate(POINTS, ti.f32, (n, 2))
            out = buffers.allocate(OUTPUT, ti.f32, (h, w))
            ...
        # every buffer is released here, also when an exception escaped

    A category holds at most one buffer per set.
    """

    def __init__(self):
        self._buffers = {}

    def allocate(self, category: str, dtype: Any, shape) -> DeviceBuffer:
        """
        Allocate a device buffer owned by this set.

        Raises:
            ValueError: If the category is unknown or already allocated
        """
        if category not in CATEGORIES:
            raise ValueError(f"Unknown buffer category '{category}'. Available: {CATEGORIES}")
        if category in self._buffers:
            raise ValueError(f"Buffer category '{category}' already allocated in this set")
        buffer = DeviceBuffer(category, dtype, shape)
        self._buffers[category] = buffer
        logger.debug("Allocated %s", buffer)
        return buffer

    def __getitem__(self, category: str) -> DeviceBuffer:
        return self._buffers[category]

    def __contains__(self, category: str) -> bool:
        return category in self._buffers

    def __len__(self):
        return len(self._buffers)

    def release_all(self):
        """
        Release every buffer, newest first.

        All buffers are released even if destroying one of them fails; the
        first failure is re-raised afterwards.
        """
        first_error = None
        for category in reversed(list(self._buffers)):
            try:
                self._buffers[category].release()
            except Exception as e:
                logger.error("Failed to release %s buffer: %s", category, e)
                if first_error is None:
                    first_error = e
        self._buffers.clear()
        if first_error is not None:
            raise first_error

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.release_all()
        else:
            # Do not mask the exception being unwound with a release failure
            try:
                self.release_all()
            except Exception as e:
                logger.error("Buffer release failed while unwinding: %s", e)
        return False


def buffer_stats() -> dict:
    """
    Buffer allocation statistics for the process.

    Returns:
        dict: Statistics containing:
            - live: Buffers currently allocated
            - allocated_total: Buffers ever allocated
            - released_total: Buffers ever released
    """
    with _lock:
        return {"live": _live, "allocated_total": _allocated_total, "released_total": _released_total}


def live_buffer_count() -> int:
    return buffer_stats()["live"]
