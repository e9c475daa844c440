"""
Visualization submodule for PyDispersal.

Turns density grids into thermal heatmap rasters for map overlays.

Core Modules:
- thermal: 282-step HSL thermal ramp (blue -> red -> white)
- raster: normalization, RGBA rasters, PNG export and matplotlib plots

Available Functions:
- normalize: scale a grid to [0, 1] by its maximum
- thermal_color: RGBA of one intensity
- hsl_to_rgb: HSL to 8-bit RGB conversion used by the ramp
- apply_thermal_colors: RGBA raster of a normalized grid
- to_rgba: RGBA raster of a DensityMapData
- save_heatmap_png: write the raster to a PNG file
- plot_heatmap: quick-look plot in geographic coordinates

Usage:
    import pydispersal as pd

    result = pd.generate_heatmap_sync(points)
    pd.visu.save_heatmap_png(result, "heatmap.png")
    (south, west), (north, east) = result.image_bounds()
"""

from .thermal import (
    hsl_to_rgb,
    thermal_color,
    apply_thermal_colors,
    THERMAL_LUT,
    TOTAL_STEPS,
)
from .raster import (
    normalize,
    to_rgba,
    save_heatmap_png,
    plot_heatmap,
)

__all__ = [
    "hsl_to_rgb",
    "thermal_color",
    "apply_thermal_colors",
    "THERMAL_LUT",
    "TOTAL_STEPS",
    "normalize",
    "to_rgba",
    "save_heatmap_png",
    "plot_heatmap",
]
