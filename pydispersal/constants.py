"""
Global constants and default parameters for PyDispersal.

This module centralises the geodesy constants, raster layout defaults, GPU
dispatch settings and research-based heatmap defaults used throughout
PyDispersal. Constants are kept here so that the CPU engine, the Taichi
kernels and the query helpers all agree on the same values.

Constant Categories:
- Geodesy Constants: Earth radius and metres-per-degree conversion
- Raster Constants: padding, display box and resolution multiplier
- Engine Constants: row batching for the CPU engine, tile size and point
  threshold for the GPU engine
- Heatmap Defaults: sigma, cutoff, insects per drop, kernel parameters

Distribution Method Identifiers:
- GAUSSIAN = 0: exp(-d^2 / (2 sigma^2))
- LEVY_FLIGHT = 1: (1 + (d/sigma)^2)^(-alpha/2)
- EXPONENTIAL = 2: exp(-lambda d)

The identifiers are compile-time constants for the Taichi kernels: the
kernel is specialised for one distribution method per compilation.

Usage:
    import pydispersal.constants as cte

    cells = cte.DEFAULT_MAX_WIDTH * cte.DEFAULT_RESOLUTION

    # Let the Taichi pipeline run on Taichi's CPU arch (tests, headless boxes)
    cte.GPU_ALLOW_CPU_ARCH = True
"""

import math


#########################################
###### GEODESY CONSTANTS ################
#########################################

# Mean Earth radius used by the haversine distance (meters)
EARTH_RADIUS = 6371000.0

# Length of one degree of latitude (meters)
# Longitude degrees are scaled by cos(latitude)
METERS_PER_DEGREE = 111320.0

DEG_TO_RAD = math.pi / 180.0


#########################################
###### RASTER CONSTANTS #################
#########################################

# Fraction of the tight bounding box added on each side of the field
DEFAULT_PADDING = 0.1

# Display box the canvas is fitted into (pixels)
DEFAULT_MAX_WIDTH = 750
DEFAULT_MAX_HEIGHT = 600

# Canvas pixels per display pixel
DEFAULT_RESOLUTION = 2


#########################################
###### ENGINE CONSTANTS #################
#########################################

# The CPU engine cuts the grid into roughly this many row batches and yields
# to the event loop after each of them
TARGET_ROW_BATCHES = 100

# Side of the square tile dispatched as one GPU block (cells)
TILE_SIZE = 16

# Minimum number of drop points before the GPU engine is worth its setup cost
GPU_MIN_POINTS = 50

# Accept Taichi's CPU arch as a compute device
# When False, a runtime that fell back to the CPU is reported as unavailable
GPU_ALLOW_CPU_ARCH = False


#########################################
###### DISTRIBUTION METHODS #############
#########################################

GAUSSIAN = 0
LEVY_FLIGHT = 1
EXPONENTIAL = 2


#########################################
###### HEATMAP DEFAULTS #################
#########################################

# Kernel scale (meters), field studies report an 8 m mean dispersal radius
DEFAULT_SIGMA = 8.0

# Hard cutoff (meters), ~98% of the dispersal happens within 27.5 m
DEFAULT_MAX_DISTANCE = 30.0

# Insects released per drop point (standard commercial capsule)
DEFAULT_INSECTS_PER_DROP = 1000.0

# Levy-flight stability exponent, valid range [1, 2]
DEFAULT_LEVY_ALPHA = 1.8

# Exponential decay rate (1/m), 1/8 m for an 8 m effective range
DEFAULT_EXPONENTIAL_LAMBDA = 0.125

# Area of the hover sample region (square meters)
DEFAULT_SAMPLE_AREA = 1.0
