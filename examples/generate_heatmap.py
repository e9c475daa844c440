import logging

import numpy as np
import matplotlib.pyplot as plt

import pydispersal as pd


N_ROWS = 12
N_COLS = 9
SPACING = 12.  # meters between drops
LAT0, LNG0 = 44.8378, -0.5792

logging.basicConfig(level=logging.INFO)


# Drone flying a lawnmower pattern, with some GPS jitter
rng = np.random.default_rng(0)
m_per_deg_lng = pd.geo.meters_per_degree_longitude(LAT0)
points = []
for i in range(N_ROWS):
	for j in range(N_COLS):
		dy = i * SPACING + rng.normal(0, 1.5)
		dx = j * SPACING + rng.normal(0, 1.5)
		points.append(pd.geo.Point(LAT0 + dy / pd.constants.METERS_PER_DEGREE, LNG0 + dx / m_per_deg_lng))

# A few unset GPS fixes from the flight log, dropped by the pipeline
points += [pd.geo.Point(0., 0.)] * 3

params = pd.kernels.HeatmapParameters(sigma=8, max_distance=30, insects_per_drop=1000,
	distribution_method="levy-flight", levy_alpha=1.8)

result = pd.generate_heatmap_sync(points, params,
	on_progress=lambda done, total: print(f"\r{done}/{total} rows", end=""))
print()

print(pd.kernels.layer_label(params), "-", result.engine, "engine")
print(f"canvas {result.canvas_width}x{result.canvas_height}, field {result.field_width_meters:.0f}x{result.field_height_meters:.0f} m")
print("max density", result.max_density)

info = pd.query.query_point(result.canvas_width // 2, result.canvas_height // 2, result)
print(f"centre: {info.insects_per_square_meter:.1f} insects/m2 at {info.latitude:.6f}, {info.longitude:.6f}")

pd.visu.save_heatmap_png(result, "heatmap.png")

pd.visu.plot_heatmap(result, points=[p for p in points if p.is_valid])
plt.title(pd.kernels.layer_label(params))
plt.show()
