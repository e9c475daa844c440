"""
Density grid produced by the density engines.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..geo.canvas import CanvasDimensions, FieldBounds, meters_to_pixels
from ..kernels.params import HeatmapParameters


@dataclass(frozen=True)
class DensityMapData:
    """
    Result of one density computation.

    The grid is read-only; a new computation produces a new DensityMapData
    instead of modifying an existing one.

    Attributes:
        density_data: float32 array of shape (canvas_height, canvas_width),
            row 0 is the northern edge of the padded field
        max_density: Maximum cell value (0 for an empty grid)
        canvas_width, canvas_height: Grid size in cells
        bounds: FieldBounds the grid covers
        pixels_per_meter: Mean grid cells per meter over both axes
        field_width_meters, field_height_meters: Metric size of the padded field
        parameters: HeatmapParameters used for the computation
        engine: "cpu" or "gpu", the engine that produced the grid
    """

    density_data: np.ndarray
    max_density: float
    canvas_width: int
    canvas_height: int
    bounds: FieldBounds
    pixels_per_meter: float
    field_width_meters: float
    field_height_meters: float
    parameters: Optional[HeatmapParameters] = None
    engine: str = "cpu"

    @classmethod
    def from_grid(cls, grid: np.ndarray, bounds: FieldBounds, dims: CanvasDimensions,
                  parameters: Optional[HeatmapParameters] = None, engine: str = "cpu") -> "DensityMapData":
        """
        Wrap a finished grid, computing its maximum and metric scale.

        The array is converted to float32 and frozen.
        """
        grid = np.ascontiguousarray(grid, dtype=np.float32)
        if grid.shape != dims.shape:
            raise ValueError(f"grid shape {grid.shape} does not match canvas {dims.shape}")
        grid.flags.writeable = False

        scale = meters_to_pixels(bounds, dims)
        max_density = float(grid.max()) if grid.size else 0.0

        return cls(
            density_data=grid,
            max_density=max_density,
            canvas_width=dims.canvas_width,
            canvas_height=dims.canvas_height,
            bounds=bounds,
            pixels_per_meter=scale.pixels_per_meter,
            field_width_meters=scale.field_width_meters,
            field_height_meters=scale.field_height_meters,
            parameters=parameters,
            engine=engine,
        )

    @property
    def dims(self) -> CanvasDimensions:
        # Display size is not part of the result, the canvas stands in for it
        return CanvasDimensions(self.canvas_width, self.canvas_height, self.canvas_width, self.canvas_height)

    @property
    def bounded_min_lat(self) -> float:
        return self.bounds.bounded_min_lat

    @property
    def bounded_max_lat(self) -> float:
        return self.bounds.bounded_max_lat

    @property
    def bounded_min_lng(self) -> float:
        return self.bounds.bounded_min_lng

    @property
    def bounded_max_lng(self) -> float:
        return self.bounds.bounded_max_lng

    @property
    def bounded_lat_range(self) -> float:
        return self.bounds.bounded_lat_range

    @property
    def bounded_lng_range(self) -> float:
        return self.bounds.bounded_lng_range

    def image_bounds(self):
        """
        Geographic corners of the raster for an image overlay.

        Returns:
            tuple: ((south, west), (north, east)) in degrees
        """
        return (
            (self.bounds.bounded_min_lat, self.bounds.bounded_min_lng),
            (self.bounds.bounded_max_lat, self.bounds.bounded_max_lng),
        )
