# render/colors.py
"""Color calculations for wave field rendering.

Provides utilities for:
- Wave height to water color ramp (trough / rest / crest)
- Elevation-based land shading
- Whole-grid RGB conversion for pygame surfarray blitting
"""
from __future__ import annotations

from typing import Optional, Tuple, cast

import numpy as np

from render.config import (
    COLOR_WATER_TROUGH,
    COLOR_WATER_REST,
    COLOR_WATER_CREST,
    COLOR_LAND_LOW,
    COLOR_LAND_HIGH,
    AMPLITUDE_CLIP,
)

Color = Tuple[int, int, int]


def blend_colors(color1: Color, color2: Color, weight: float = 0.5) -> Color:
    """Blend two colors with given weight (0 = all color1, 1 = all color2)."""
    return cast(Color, tuple(int(c1 * (1 - weight) + c2 * weight) for c1, c2 in zip(color1, color2)))


def _lerp_rgb(color1: Color, color2: Color, weight: np.ndarray) -> np.ndarray:
    """Per-cell blend; weight has shape (H, W), result (H, W, 3) float."""
    c1 = np.asarray(color1, dtype=np.float32)
    c2 = np.asarray(color2, dtype=np.float32)
    return c1 + (c2 - c1) * weight[..., None]


def field_scale(field: np.ndarray) -> float:
    """Symmetric colour scale for a field: its largest finite |height|."""
    finite = np.abs(field[np.isfinite(field)])
    if finite.size == 0:
        return 1.0
    scale = float(np.max(finite))
    return scale if scale > 0 else 1.0


def field_to_rgb(
    field: np.ndarray,
    elevation: np.ndarray,
    scale: Optional[float] = None,
) -> np.ndarray:
    """Convert a (H, W) wave field to an (H, W, 3) uint8 image.

    Water: negative heights fade to the trough color, positive heights to
    the crest color, zero is the rest color. Non-finite heights render as
    crest. Land: brown shaded by elevation, ignoring the wave field.
    """
    if field.shape != elevation.shape:
        raise ValueError(f"Field shape {field.shape} does not match elevation shape {elevation.shape}")
    if scale is None:
        scale = field_scale(field)

    normalized = np.nan_to_num(field / (scale * AMPLITUDE_CLIP), nan=1.0, posinf=1.0, neginf=-1.0)
    normalized = np.clip(normalized, -1.0, 1.0).astype(np.float32)

    rgb = np.where(
        (normalized >= 0)[..., None],
        _lerp_rgb(COLOR_WATER_REST, COLOR_WATER_CREST, np.maximum(normalized, 0)),
        _lerp_rgb(COLOR_WATER_REST, COLOR_WATER_TROUGH, np.maximum(-normalized, 0)),
    )

    land = elevation > 0
    if np.any(land):
        land_elev = elevation[land]
        low, high = float(np.min(land_elev)), float(np.max(land_elev))
        weight = np.zeros(elevation.shape, dtype=np.float32)
        if high > low:
            weight[land] = (land_elev - low) / (high - low)
        land_rgb = _lerp_rgb(COLOR_LAND_LOW, COLOR_LAND_HIGH, weight)
        rgb[land] = land_rgb[land]

    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
