"""
GPU buffer lifecycle for PyDispersal.

This submodule owns the device memory used by the GPU density engine. Each
computation allocates its own set of Taichi fields and frees them before it
returns, including when it aborts and hands over to the CPU engine. Nothing
is kept between computations.

Core Classes:
- DeviceBuffer: one Taichi field in its own SNode tree, freed by release()
- BufferSet: context manager owning the buffers of one computation

Buffer Categories:
- POINTS: drop point offsets, (n, 2) float32
- PARAMS: packed kernel and grid parameters, 1D float32
- OUTPUT: density grid written by the tile kernel, (H, W) float32
- READBACK: copy of the output grid read back to the host, (H, W) float32

Monitoring:
- buffer_stats: live / allocated / released counters
- live_buffer_count: number of buffers currently alive (0 when idle)

Usage:
    import taichi as ti
    from pydispersal.buffers import BufferSet, POINTS, OUTPUT

    with BufferSet() as buffers:
        pts = buffers.allocate(POINTS, ti.f32, (n, 2))
        pts.from_numpy(offsets)
        out = buffers.allocate(OUTPUT, ti.f32, (h, w))
        some_kernel(pts.field, out.field)
        grid = out.to_numpy()
    # all buffers destroyed here
"""

from .buffers import (
    DeviceBuffer,
    BufferSet,
    buffer_stats,
    live_buffer_count,
    POINTS,
    PARAMS,
    OUTPUT,
    READBACK,
    CATEGORIES,
)

__all__ = [
    "DeviceBuffer",
    "BufferSet",
    "buffer_stats",
    "live_buffer_count",
    "POINTS",
    "PARAMS",
    "OUTPUT",
    "READBACK",
    "CATEGORIES",
]
