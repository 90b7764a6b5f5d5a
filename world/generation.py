# world/generation.py
"""
Initial conditions: elevation map and initial displacement per cell.

An initial condition is any callable (row, col) -> (elevation, displacement).
Objects that also provide grids(width, height) are sampled in one
vectorized call instead of cell by cell.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
from scipy.ndimage import gaussian_filter

from config import (
    SEA_FLOOR_ELEVATION,
    SPLASH_HEIGHT,
    SPLASH_RADIUS_SQ,
    ISLAND_ELEVATION,
    ISLAND_CENTER,
    ISLAND_RADIUS,
)

Point = Tuple[int, int]
InitialCondition = Callable[[int, int], Tuple[float, float]]


def sample_cell_function(fn: InitialCondition, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """Evaluate a per-cell initial condition over the whole grid.

    Returns:
        (elevation, displacement) each float32 with shape (height, width)
    """
    elevation = np.empty((height, width), dtype=np.float32)
    displacement = np.empty((height, width), dtype=np.float32)
    for i in range(height):
        for j in range(width):
            elevation[i, j], displacement[i, j] = fn(i, j)
    return elevation, displacement


def sample_initial_condition(ic: InitialCondition, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """Sample an initial condition, preferring its vectorized grids() if present."""
    grids = getattr(ic, "grids", None)
    if grids is not None:
        elevation, displacement = grids(width, height)
        return (np.asarray(elevation, dtype=np.float32),
                np.asarray(displacement, dtype=np.float32))
    return sample_cell_function(ic, width, height)


@dataclass(frozen=True)
class CircularSplash:
    """Circular splash at the grid centre plus an optional circular island.

    Everything outside the island sits at sea_floor (water). The splash is
    placed at (height // 2, width // 2) regardless of the island.
    """
    splash_height: float = SPLASH_HEIGHT
    splash_radius_sq: int = SPLASH_RADIUS_SQ
    island_center: Optional[Point] = ISLAND_CENTER
    island_radius: int = ISLAND_RADIUS
    island_elevation: float = ISLAND_ELEVATION
    sea_floor: float = SEA_FLOOR_ELEVATION
    # Needed by the per-cell form to locate the grid centre
    width: Optional[int] = None
    height: Optional[int] = None

    def __call__(self, i: int, j: int) -> Tuple[float, float]:
        if self.width is None or self.height is None:
            raise ValueError("Per-cell sampling of CircularSplash needs width and height")
        elevation = self.sea_floor
        displacement = 0.0

        ci, cj = self.height // 2, self.width // 2
        if (i - ci) * (i - ci) + (j - cj) * (j - cj) <= self.splash_radius_sq:
            displacement = self.splash_height

        if self.island_center is not None:
            ri, rj = self.island_center
            if (i - ri) * (i - ri) + (j - rj) * (j - rj) <= self.island_radius * self.island_radius:
                elevation = self.island_elevation
        return elevation, displacement

    def grids(self, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
        rows, cols = np.ogrid[:height, :width]

        dist_sq = (rows - height // 2) ** 2 + (cols - width // 2) ** 2
        displacement = np.where(dist_sq <= self.splash_radius_sq, self.splash_height, 0.0).astype(np.float32)

        elevation = np.full((height, width), self.sea_floor, dtype=np.float32)
        if self.island_center is not None:
            ri, rj = self.island_center
            island = (rows - ri) ** 2 + (cols - rj) ** 2 <= self.island_radius ** 2
            elevation[island] = self.island_elevation
        return elevation, displacement


@dataclass(frozen=True)
class PointSplash:
    """Unit-style impulse at a single cell on a flat sea floor."""
    row: int
    col: int
    amplitude: float = 1.0
    sea_floor: float = -1.0

    def __call__(self, i: int, j: int) -> Tuple[float, float]:
        displacement = self.amplitude if (i, j) == (self.row, self.col) else 0.0
        return self.sea_floor, displacement


@dataclass(frozen=True)
class RandomSplash:
    """Seeded random drops, optionally smoothed into gaussian bumps.

    The same seed always gives the same grids. Grid-only: there is no
    per-cell form.
    """
    seed: int = 0
    drops: int = 8
    min_height: float = 0.5
    max_height: float = 2.0
    sigma: float = 0.0
    sea_floor: float = SEA_FLOOR_ELEVATION

    def grids(self, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
        rng = np.random.default_rng(self.seed)
        displacement = np.zeros((height, width), dtype=np.float64)

        rows = rng.integers(0, height, size=self.drops)
        cols = rng.integers(0, width, size=self.drops)
        heights = rng.uniform(self.min_height, self.max_height, size=self.drops)
        # Duplicate positions accumulate
        np.add.at(displacement, (rows, cols), heights)

        if self.sigma > 0:
            displacement = gaussian_filter(displacement, sigma=self.sigma, mode='constant')

        elevation = np.full((height, width), self.sea_floor, dtype=np.float32)
        return elevation, displacement.astype(np.float32)
