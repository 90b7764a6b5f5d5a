# config.py
"""
Centralized simulation configuration for Ripple.

This file contains high-level, cross-cutting constants.
Domain-specific constants are in:
- simulation/config.py (backend selection and tuning)
- render/config.py (colors, window size, frame pacing)
"""
from __future__ import annotations

from typing import Tuple

# =============================================================================
# GRID & TIME STEPPING
# =============================================================================
# Grid resolution (rows = GRID_HEIGHT, columns = GRID_WIDTH, row-major)
GRID_WIDTH = 512
GRID_HEIGHT = 512

TIMESTEPS = 2500  # Fixed number of leapfrog steps per run

# =============================================================================
# PHYSICS
# =============================================================================
WAVE_SPEED = 1.0  # Propagation speed (cells per unit time at DX = 1)
DT = 0.1          # Time increment
DX = 1.0          # Spatial increment

# Five-point leapfrog in 2D is stable while (c*dt/dx)^2 <= 1/2
STABILITY_LIMIT = 0.5

# =============================================================================
# INITIAL CONDITION (circular splash + circular island)
# =============================================================================
SEA_FLOOR_ELEVATION = -100.0  # Default elevation: everything starts underwater

SPLASH_HEIGHT = 10.0     # Initial displacement inside the splash
SPLASH_RADIUS_SQ = 4     # Squared radius around the grid centre

ISLAND_ELEVATION = 100.0
ISLAND_CENTER: Tuple[int, int] = (400, 400)  # (row, col)
ISLAND_RADIUS = 50

# =============================================================================
# RUN MESSAGES
# =============================================================================
MESSAGE_LOG_SIZE = 100
