"""
Common interface of the density engines.

A density engine turns drop points into a DensityMapData for a given field
and canvas. Engines are asyncio coroutines: they report progress through a
callback, give the event loop a chance to run between work units, and stop
with ComputationCancelled when their CancellationToken is triggered.

The base class handles what both engines share: coercing the points,
cancellation checks, and the all-zero result for an empty point set or a
field without extent. Subclasses only implement _compute.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from ..errors import ComputationCancelled
from ..geo.canvas import CanvasDimensions, FieldBounds
from ..geo.points import as_point, points_to_array
from ..kernels.params import HeatmapParameters
from .data import DensityMapData


logger = logging.getLogger(__name__)

# on_progress(rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class CancellationToken:
    """
    Thread-safe cancellation flag for a running computation.

    Example:
        token = CancellationToken()
        task = asyncio.create_task(engine.compute(..., cancel_token=token))
        token.cancel()
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise ComputationCancelled("density computation cancelled")


def check_cancelled(cancel_token: Optional[CancellationToken]):
    if cancel_token is not None:
        cancel_token.raise_if_cancelled()


class DensityEngine(ABC):
    """
    Strategy computing a density grid from drop points.

    Implementations: CPUDensityEngine (reference, always available) and
    GPUDensityEngine (Taichi, falls back to the CPU engine).
    """

    name = "base"

    async def compute(self, points, bounds: FieldBounds, dims: CanvasDimensions,
                      params: HeatmapParameters,
                      on_progress: Optional[ProgressCallback] = None,
                      cancel_token: Optional[CancellationToken] = None) -> DensityMapData:
        """
        Compute the density grid of a set of drop points.

        Args:
            points: Drop points (Point or point-like), already filtered
            bounds: Field bounds the grid covers
            dims: Canvas dimensions of the grid
            params: Validated heatmap parameters
            on_progress: Optional callback(rows_done, total_rows)
            cancel_token: Optional CancellationToken

        Returns:
            DensityMapData: A new, read-only grid

        Raises:
            ComputationCancelled: If cancel_token was triggered
            MemoryError: If the grid does not fit in host memory
        """
        check_cancelled(cancel_token)
        pts = [as_point(p) for p in points]

        if not pts or bounds.is_degenerate:
            logger.debug("%s engine: empty input (%d points, degenerate=%s), zero grid",
                         self.name, len(pts), bounds.is_degenerate)
            result = zero_density_map(bounds, dims, params, self.name)
            if on_progress is not None:
                on_progress(dims.canvas_height, dims.canvas_height)
            return result

        return await self._compute(points_to_array(pts), bounds, dims, params, on_progress, cancel_token)

    @abstractmethod
    async def _compute(self, points_array: np.ndarray, bounds: FieldBounds, dims: CanvasDimensions,
                       params: HeatmapParameters, on_progress: Optional[ProgressCallback],
                       cancel_token: Optional[CancellationToken]) -> DensityMapData:
        """Compute the grid for a non-empty (n, 2) [lat, lng] array."""

    def compute_sync(self, points, bounds: FieldBounds, dims: CanvasDimensions,
                     params: HeatmapParameters, on_progress: Optional[ProgressCallback] = None,
                     cancel_token: Optional[CancellationToken] = None) -> DensityMapData:
        """Blocking wrapper around compute() for code without an event loop."""
        return asyncio.run(self.compute(points, bounds, dims, params, on_progress, cancel_token))


def zero_density_map(bounds: FieldBounds, dims: CanvasDimensions,
                     params: Optional[HeatmapParameters], engine: str) -> DensityMapData:
    grid = np.zeros(dims.shape, dtype=np.float32)
    return DensityMapData.from_grid(grid, bounds, dims, params, engine)
