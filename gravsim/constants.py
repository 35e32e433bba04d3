#!/usr/bin/env python3
"""
Shared constants for the gravity simulator (simulation units, not SI).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. The *_MIN/*_MAX pairs are the ranges the
control panel offers; the core clamps only degenerate values.
"""

# Physics defaults
GRAVITY_DEFAULT = 10000.0
GRAVITY_MIN = 5000.0
GRAVITY_MAX = 20000.0

SOFTENING_DEFAULT = 0.01  # added in quadrature to the separation
SOFTENING_MIN = 0.0
SOFTENING_MAX = 0.05

DENSITY_DEFAULT = 0.001  # radius = (mass / density) ** (1/3)
DENSITY_MIN = 0.000125
DENSITY_MAX = 0.005
DENSITY_FLOOR = 1e-9  # smallest density accepted before use

MASS_DEFAULT = 100.0
MASS_FLOOR = 1e-3  # non-positive masses are clamped up to this
MASS_MAX = 600.0

EPSILON = 1e-6  # singularity guard on squared separation

# Stepping
FIXED_DT = 0.01  # seconds of simulation time per physics tick
MAX_TICKS_PER_FRAME = 100  # cap per frame before the backlog is dropped

# Buffers
TRAIL_CAPACITY = 512
TRAIL_DEFAULT = 128  # samples drawn by default
PREDICT_LENGTH = 64  # prediction horizon in ticks

# Store
MAX_BODIES = 4096

# Colors (RGB)
WHITE = (255, 255, 255)
PALETTE = (
    WHITE,
    (242, 96, 151),
    (231, 120, 59),
    (182, 153, 39),
    (94, 179, 81),
    (46, 177, 168),
    (55, 167, 222),
    (142, 141, 246),
)

# Rendering (viewport)
VIEW_WIDTH = 1200
VIEW_HEIGHT = 900
BACKGROUND_COLOR = (0, 0, 0)
GRID_COLOR = (40, 45, 60)
SELECTION_COLOR = (255, 255, 0)
FIELD_GRID_SPACING = 100.0

# Camera zoom bounds and smoothing
ZOOM_MIN = 0.125
ZOOM_MAX = 64.0
CAMERA_SMOOTHING = 12.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
