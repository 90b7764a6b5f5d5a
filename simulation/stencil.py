# simulation/stencil.py
"""Per-cell leapfrog wave update (five-point Laplacian).

Each cell's next value depends only on the current field, the previous
field and elevation, never on another cell's next value. Cells can
therefore be evaluated in any order or all at once.

Policy, in priority order:
1. Land (elevation > 0): next = current (height frozen on land)
2. Outer boundary row/column: next = 0 (perfect absorber)
3. Interior water: next = 2c - p + k * (up + down + left + right - 4c)

Three implementations share this rule:
- wave_update_cell: single cell on flat arrays (reference)
- apply_stencil_rows: NumPy slices over a band of rows
- wave_update_kernel: Numba kernel, rows distributed with prange
"""
from __future__ import annotations

from typing import Optional

import numpy as np
from numba import njit, prange


def wave_update_cell(
    i: int,
    j: int,
    current: np.ndarray,
    previous: np.ndarray,
    elevation: np.ndarray,
    width: int,
    height: int,
    k: float,
) -> np.float32:
    """Next-field value at (i, j) from flat row-major arrays."""
    idx = i * width + j

    if elevation[idx] > 0:
        return np.float32(current[idx])
    if i == 0 or i == height - 1 or j == 0 or j == width - 1:
        return np.float32(0.0)

    c = np.float32(current[idx])
    lap = (np.float32(current[idx - width]) + np.float32(current[idx + width])
           + np.float32(current[idx - 1]) + np.float32(current[idx + 1])
           - np.float32(4.0) * c)
    return np.float32(np.float32(2.0) * c - np.float32(previous[idx]) + np.float32(k) * lap)


def apply_stencil_rows(
    current: np.ndarray,
    previous: np.ndarray,
    elevation: np.ndarray,
    out: np.ndarray,
    k: np.float32,
    row_start: int = 0,
    row_stop: Optional[int] = None,
) -> None:
    """Fill out[row_start:row_stop] from the other fields (vectorized).

    Rows outside the band are neither written nor required to be ready;
    the band only reads one extra row above and below from current.
    """
    height, width = current.shape
    if row_stop is None:
        row_stop = height
    band = slice(row_start, row_stop)
    k = np.float32(k)

    # Absorbing edge baseline; interior water overwritten below
    out[band] = 0.0

    lo, hi = max(row_start, 1), min(row_stop, height - 1)
    if lo < hi and width > 2:
        c = current[lo:hi, 1:-1]
        lap = (current[lo - 1:hi - 1, 1:-1] + current[lo + 1:hi + 1, 1:-1]
               + current[lo:hi, :-2] + current[lo:hi, 2:]
               - np.float32(4.0) * c)
        out[lo:hi, 1:-1] = np.float32(2.0) * c - previous[lo:hi, 1:-1] + k * lap

    # Land overrides both edge and interior rules
    np.copyto(out[band], current[band], where=elevation[band] > 0)


@njit(parallel=True, cache=True)
def wave_update_kernel(current, previous, elevation, out, k):
    height, width = current.shape
    for i in prange(height):
        for j in range(width):
            if elevation[i, j] > 0.0:
                out[i, j] = current[i, j]
            elif i == 0 or i == height - 1 or j == 0 or j == width - 1:
                out[i, j] = 0.0
            else:
                c = current[i, j]
                lap = (current[i - 1, j] + current[i + 1, j]
                       + current[i, j - 1] + current[i, j + 1]
                       - np.float32(4.0) * c)
                out[i, j] = np.float32(2.0) * c - previous[i, j] + k * lap
