# render/config.py
"""
Configuration constants for the rendering domain.
Includes window layout, colors, font sizes and frame pacing.
"""
from __future__ import annotations

from typing import Tuple

# =============================================================================
# UI LAYOUT & DIMENSIONS
# =============================================================================
WINDOW_MAX_SIZE = 768       # Longest window side in pixels; grid is scaled to fit
STATUS_BAR_HEIGHT = 28
LINE_HEIGHT = 20
FONT_SIZE = 18

# =============================================================================
# FRAME PACING
# =============================================================================
TARGET_FPS = 60
STEPS_PER_FRAME = 5         # Timesteps advanced between frames

# =============================================================================
# COLORS
# =============================================================================
COLOR_BG_DARK = (20, 20, 25)
COLOR_TEXT_WHITE = (230, 230, 230)
COLOR_TEXT_HIGHLIGHT = (220, 200, 120)

# Wave height ramp: trough -> rest -> crest
COLOR_WATER_TROUGH: Tuple[int, int, int] = (10, 40, 110)
COLOR_WATER_REST: Tuple[int, int, int] = (48, 133, 214)
COLOR_WATER_CREST: Tuple[int, int, int] = (235, 245, 255)

# Land shading by elevation
COLOR_LAND_LOW: Tuple[int, int, int] = (150, 125, 96)
COLOR_LAND_HIGH: Tuple[int, int, int] = (204, 174, 120)

# Heights at or beyond this fraction of the colour scale saturate
AMPLITUDE_CLIP = 1.0
