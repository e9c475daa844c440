"""
Dispersal kernels evaluated with NumPy.

Pure, deterministic functions mapping a distance in meters to a coverage
weight. Every function accepts a float or an ndarray of distances and
returns the same kind. Beyond the cutoff the weight is exactly 0.

Kernels:
    gaussian:     w(d) = exp(-d^2 / (2 sigma^2))
    levy_flight:  w(d) = (1 + (d/sigma)^2)^(-alpha/2), w(0) = 1
    exponential:  w(d) = exp(-lambda d)

The Levy-flight form is a simplified heavy-tailed approximation, not a
normalised stable density. It is used as is.

The Taichi versions in taichi_kernels.py implement the same formulas for
the GPU engine.
"""

import numpy as np

from .. import constants as cte


def _cut(d, w, cutoff):
    w = np.where(d <= cutoff, w, 0.0)
    return w if np.ndim(w) else float(w)


def gaussian(d, sigma: float, cutoff: float = np.inf):
    d = np.asarray(d, dtype=np.float64)
    return _cut(d, np.exp(-(d * d) / (2.0 * sigma * sigma)), cutoff)


def levy_flight(d, sigma: float, alpha: float, cutoff: float = np.inf):
    d = np.asarray(d, dtype=np.float64)
    r = d / sigma
    w = np.power(1.0 + r * r, -alpha / 2.0)
    # Defined explicitly at the origin
    w = np.where(d == 0.0, 1.0, w)
    return _cut(d, w, cutoff)


def exponential(d, lam: float, cutoff: float = np.inf):
    d = np.asarray(d, dtype=np.float64)
    return _cut(d, np.exp(-lam * d), cutoff)


def evaluate_kernel(d, args):
    """
    Evaluate the kernel selected by packed KernelArguments.

    Args:
        d: Distance(s) in meters
        args: KernelArguments from kernel_arguments(params)

    Returns:
        Weight(s), 0 beyond args.cutoff
    """
    if args.method_id == cte.GAUSSIAN:
        return gaussian(d, args.p0, args.cutoff)
    if args.method_id == cte.LEVY_FLIGHT:
        return levy_flight(d, args.p0, args.p1, args.cutoff)
    if args.method_id == cte.EXPONENTIAL:
        return exponential(d, args.p0, args.cutoff)
    raise ValueError(f"Unknown distribution method id {args.method_id}")
