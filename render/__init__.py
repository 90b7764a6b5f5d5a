"""
Rendering module for the Ripple pygame viewer.

Color mapping is pure NumPy; only primitives touches pygame.
"""
from render.colors import (
    Color,
    blend_colors,
    field_scale,
    field_to_rgb,
)

__all__ = [
    "Color",
    "blend_colors",
    "field_scale",
    "field_to_rgb",
]
