"""
Dispersal kernels and haversine distance as Taichi functions.

GPU counterparts of numpy_kernels.py and geo.points.haversine_from_offsets,
callable from any Taichi kernel. The distribution method is a compile-time
template argument: kernel_weight is specialised for one method and the
other branches are removed by ti.static.

All arithmetic is float32. Distances are computed from coordinate offsets
(see geo.points) so float32 keeps sub-meter accuracy.
"""

import taichi as ti

from .. import constants as cte


@ti.func
def haversine_from_offsets(dlat: ti.f32, dlng: ti.f32, lat1: ti.f32, lat2: ti.f32) -> ti.f32:
    """
    Great-circle distance in meters from coordinate differences (degrees).

    Same formula as geo.points.haversine_from_offsets.
    """
    half = 0.5 * cte.DEG_TO_RAD
    s_phi = ti.math.sin(dlat * half)
    s_lam = ti.math.sin(dlng * half)
    a = s_phi * s_phi + ti.math.cos(lat1 * cte.DEG_TO_RAD) * ti.math.cos(lat2 * cte.DEG_TO_RAD) * s_lam * s_lam
    a = ti.math.min(ti.math.max(a, 0.0), 1.0)
    return 2.0 * cte.EARTH_RADIUS * ti.math.atan2(ti.math.sqrt(a), ti.math.sqrt(1.0 - a))


@ti.func
def gaussian(d: ti.f32, sigma: ti.f32) -> ti.f32:
    return ti.math.exp(-(d * d) / (2.0 * sigma * sigma))


@ti.func
def levy_flight(d: ti.f32, sigma: ti.f32, alpha: ti.f32) -> ti.f32:
    w = 1.0
    if d > 0.0:
        r = d / sigma
        w = (1.0 + r * r) ** (-0.5 * alpha)
    return w


@ti.func
def exponential(d: ti.f32, lam: ti.f32) -> ti.f32:
    return ti.math.exp(-lam * d)


@ti.func
def kernel_weight(d: ti.f32, method: ti.template(), p0: ti.f32, p1: ti.f32, cutoff: ti.f32) -> ti.f32:
    """
    Weight of a drop point at distance d, 0 beyond the cutoff.

    Args:
        d: Distance in meters
        method: Distribution method id (compile-time)
        p0, p1, cutoff: Packed KernelArguments values
    """
    w = 0.0
    if d <= cutoff:
        if ti.static(method == cte.GAUSSIAN):
            w = gaussian(d, p0)
        if ti.static(method == cte.LEVY_FLIGHT):
            w = levy_flight(d, p0, p1)
        if ti.static(method == cte.EXPONENTIAL):
            w = exponential(d, p0)
    return w
