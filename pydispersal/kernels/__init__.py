"""
Dispersal kernel library for PyDispersal.

A kernel maps the distance between a raster cell and a drop point to a
coverage weight. Three distribution families are available, each defined
once for NumPy (CPU engine) and once as Taichi functions (GPU engine):

- gaussian:    exp(-d^2 / (2 sigma^2)), 1 at the drop point
- levy-flight: (1 + (d/sigma)^2)^(-alpha/2), heavier tail for alpha < 2
- exponential: exp(-lambda d)

Every kernel returns exactly 0 beyond HeatmapParameters.max_distance.

Both engines receive the kernel configuration through kernel_arguments(),
which packs a HeatmapParameters into (method_id, p0, p1, cutoff).

Usage:
    from pydispersal.kernels import HeatmapParameters, kernel_arguments, evaluate_kernel

    params = HeatmapParameters(distribution_method="levy-flight", levy_alpha=1.5)
    w = evaluate_kernel([0.0, 5.0, 40.0], kernel_arguments(params))

The Taichi functions live in pydispersal.kernels.taichi_kernels and are
imported by the GPU engine only.
"""

from .params import (
    DistributionMethod,
    HeatmapParameters,
    KernelArguments,
    kernel_arguments,
    layer_label,
)
from .numpy_kernels import (
    gaussian,
    levy_flight,
    exponential,
    evaluate_kernel,
)

__all__ = [
    "DistributionMethod",
    "HeatmapParameters",
    "KernelArguments",
    "kernel_arguments",
    "layer_label",
    "gaussian",
    "levy_flight",
    "exponential",
    "evaluate_kernel",
]
