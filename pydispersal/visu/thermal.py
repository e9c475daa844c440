"""
Thermal color ramp for density heatmaps.

Intensities in [0, 1] are mapped to RGBA through a 282-step HSL ramp:

    steps 0..232:   hue 232 (blue) -> 0 (red), saturation 100, lightness 50
    steps 233..282: hue 0 (red), lightness 50 -> 100 (white)

with step = floor(intensity * 282). Alpha grows with intensity but never
drops below 25, so faint coverage stays visible. An intensity of exactly 0 is
fully transparent.

thermal_color() is the scalar definition; apply_thermal_colors() produces the
same colors for a whole grid through a lookup table.
"""

import math

import numpy as np


HUE_STEPS = 232
LIGHTNESS_STEPS = 50
TOTAL_STEPS = HUE_STEPS + LIGHTNESS_STEPS
MIN_ALPHA = 25


def _round(x) -> int:
	# Halves round up, also for channel values
	return int(math.floor(x + 0.5))


def _hue_to_rgb(p, q, t):
	if t < 0:
		t += 1
	if t > 1:
		t -= 1
	if t < 1 / 6:
		return p + (q - p) * 6 * t
	if t < 1 / 2:
		return q
	if t < 2 / 3:
		return p + (q - p) * (2 / 3 - t) * 6
	return p


def hsl_to_rgb(h, s, l):
	"""
	Convert an HSL color to 8-bit RGB.

	Args:
		h: Hue in degrees [0, 360]
		s: Saturation in percent [0, 100]
		l: Lightness in percent [0, 100]

	Returns:
		tuple: (r, g, b) integers in [0, 255]
	"""
	h = h / 360.
	s = s / 100.
	l = l / 100.

	if s == 0:
		gray = _round(l * 255)
		return gray, gray, gray

	q = l * (1 + s) if l < 0.5 else l + s - l * s
	p = 2 * l - q

	return (
		_round(_hue_to_rgb(p, q, h + 1 / 3) * 255),
		_round(_hue_to_rgb(p, q, h) * 255),
		_round(_hue_to_rgb(p, q, h - 1 / 3) * 255),
	)


def _step_hsl(step: int):
	if step <= HUE_STEPS:
		return HUE_STEPS - step, 100, 50
	return 0, 100, 50 + (step - HUE_STEPS)


def thermal_color(intensity):
	"""
	RGBA color of a normalized intensity.

	Args:
		intensity: Value in [0, 1], clamped

	Returns:
		tuple: (r, g, b, a) integers in [0, 255]; (0, 0, 0, 0) for intensity 0
	"""
	intensity = max(0., min(1., float(intensity)))
	if intensity == 0:
		return 0, 0, 0, 0

	step = int(math.floor(intensity * TOTAL_STEPS))
	r, g, b = hsl_to_rgb(*_step_hsl(step))
	alpha = _round(max(MIN_ALPHA, intensity * 255))
	return r, g, b, alpha


def _build_lut() -> np.ndarray:
	lut = np.zeros((TOTAL_STEPS + 1, 3), dtype=np.uint8)
	for step in range(TOTAL_STEPS + 1):
		lut[step] = hsl_to_rgb(*_step_hsl(step))
	return lut


THERMAL_LUT = _build_lut()


def apply_thermal_colors(normalized) -> np.ndarray:
	"""
	Color a normalized density grid.

	Args:
		normalized: 2D array of intensities in [0, 1] (values are clamped)

	Returns:
		np.ndarray: uint8 array of shape (H, W, 4), cell-wise equal to
			thermal_color
	"""
	values = np.clip(np.asarray(normalized, dtype=np.float64), 0., 1.)
	if values.ndim != 2:
		raise ValueError(f"expected a 2D grid, got shape {values.shape}")

	steps = np.floor(values * TOTAL_STEPS).astype(np.intp)
	rgba = np.empty(values.shape + (4,), dtype=np.uint8)
	rgba[..., :3] = THERMAL_LUT[steps]
	rgba[..., 3] = np.floor(np.maximum(MIN_ALPHA, values * 255) + 0.5).astype(np.uint8)

	rgba[values == 0] = 0
	return rgba
