"""
PyDispersal - drop-point dispersal density heatmaps with GPU acceleration.

Computes where biological control agents released by a drone end up. Every
drop point spreads its insects following a radial dispersal kernel; the
package sums the kernels of all drop points over a raster that covers the
field and turns the result into a thermal heatmap. The density computation
runs on the GPU through Taichi when a device is available and falls back to
a NumPy engine otherwise, giving the same grid either way.

Key Features:
- Gaussian, Levy-flight and exponential dispersal kernels with a hard cutoff
- Haversine distances, accurate in single precision on the GPU
- Async engines with progress reporting and cancellation
- Tile-based Taichi kernel with scoped device buffers and CPU fallback
- Point queries: density, insects per square meter, GPS position
- 282-step thermal color ramp and PNG export

Core Components:
- geo: drop points, field bounds, canvas size, GPS <-> grid mapping
- kernels: HeatmapParameters and the dispersal kernel library
- density: CPU and GPU density engines, engine selection
- backend: Taichi device acquisition and loss handling
- buffers: scoped GPU buffers of one computation
- query: density lookups for a pixel or a GPS location
- visu: thermal color ramp, rasters and plots
- constants: geodesy constants, raster defaults and heatmap defaults

Basic Usage:
    import pydispersal as pd

    points = [pd.geo.Point(45.1001, 4.9002), pd.geo.Point(45.1003, 4.9005)]
    params = pd.kernels.HeatmapParameters(sigma=8, max_distance=30)

    result = pd.generate_heatmap_sync(points, params)
    print(result.max_density, result.engine)

    info = pd.query.query_point(100, 80, result)
    pd.visu.save_heatmap_png(result, "heatmap.png")

    # Inside an event loop, with progress and cancellation
    token = pd.density.CancellationToken()
    result = await pd.generate_heatmap(points, params, cancel_token=token,
                                       on_progress=lambda done, total: print(done, total))

Logging:
The package logs through the standard logging module under the
"pydispersal" logger and installs no handlers.
"""

__version__ = "0.1.0"

# Import all submodules in alphabetical order
from . import backend
from . import buffers
from . import constants
from . import density
from . import errors
from . import geo
from . import kernels
from . import query
from . import visu

from .errors import ComputationCancelled, GPUUnavailableError
from .pipeline import generate_heatmap, generate_heatmap_sync

# Export all submodules
__all__ = [
    "backend",
    "buffers",
    "constants",
    "density",
    "errors",
    "geo",
    "kernels",
    "query",
    "visu",
    "ComputationCancelled",
    "GPUUnavailableError",
    "generate_heatmap",
    "generate_heatmap_sync",
]
