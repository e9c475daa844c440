"""
Density engines for PyDispersal.

This submodule computes the dispersal density grid of a set of drop points.
Each grid cell holds the sum, over all drop points, of the dispersal kernel
evaluated at the haversine distance between the cell and the point.

Core Classes:
- DensityMapData: immutable result grid with its bounds and metric scale
- DensityEngine: async engine interface (compute / compute_sync)
- CPUDensityEngine: NumPy reference engine, batched by rows
- GPUDensityEngine: Taichi tile kernel with automatic CPU fallback
- CancellationToken: cooperative cancellation of a running computation

Engine Selection:
- should_use_gpu: GPU only when available, allowed and above 50 points
- select_engine: instantiate the matching engine

Usage:
    import asyncio
    from pydispersal.density import CPUDensityEngine

    engine = CPUDensityEngine()
    result = asyncio.run(engine.compute(points, bounds, dims, params,
                                        on_progress=lambda done, total: print(done, total)))
    print(result.max_density)
"""

from .data import DensityMapData
from .engine import DensityEngine, CancellationToken, ProgressCallback, zero_density_map
from .cpu import CPUDensityEngine
from .gpu import GPUDensityEngine, GPUState
from .selector import should_use_gpu, select_engine

__all__ = [
    "DensityMapData",
    "DensityEngine",
    "CancellationToken",
    "ProgressCallback",
    "zero_density_map",
    "CPUDensityEngine",
    "GPUDensityEngine",
    "GPUState",
    "should_use_gpu",
    "select_engine",
]
