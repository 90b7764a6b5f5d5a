# render/primitives.py
"""Basic drawing primitives shared across render modules."""
from __future__ import annotations

from typing import Tuple, Dict

import numpy as np
import pygame

from render.config import COLOR_TEXT_WHITE

Color = Tuple[int, int, int]

# Text rendering cache to avoid per-frame surface creation for the same text.
# The key is a tuple of (font_id, text, color), and the value is the rendered Surface.
_TEXT_CACHE: Dict[Tuple[int, str, Color], pygame.Surface] = {}


def draw_text(surface, font, text: str, pos: Tuple[int, int], color: Color = COLOR_TEXT_WHITE) -> None:
    """Draw text at the given position, using a cache to avoid re-rendering."""
    cache_key = (id(font), text, color)
    if cache_key not in _TEXT_CACHE:
        _TEXT_CACHE[cache_key] = font.render(text, True, color)
    surface.blit(_TEXT_CACHE[cache_key], pos)


def rgb_to_surface(rgb: np.ndarray, size: Tuple[int, int]) -> pygame.Surface:
    """Turn an (H, W, 3) image into a surface scaled to `size` (width, height).

    surfarray indexes (x, y), so rows and columns are swapped first.
    """
    surface = pygame.surfarray.make_surface(np.ascontiguousarray(rgb.swapaxes(0, 1)))
    if surface.get_size() != size:
        surface = pygame.transform.scale(surface, size)
    return surface
