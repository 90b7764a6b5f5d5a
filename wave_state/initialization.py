# wave_state/initialization.py
"""Wave state initialization from parameters and an initial condition."""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from config import STABILITY_LIMIT
from exceptions import ConfigurationError
from wave_state.parameters import WaveParameters
from wave_state.state import WaveState
from world.generation import CircularSplash, InitialCondition, sample_initial_condition

logger = logging.getLogger(__name__)


def build_initial_state(
    params: Optional[WaveParameters] = None,
    initial_condition: Optional[InitialCondition] = None,
) -> WaveState:
    """Create a new wave state, allocating all four fields once.

    previous and current are both seeded with the initial displacement so
    the first step starts from rest; scratch starts zeroed.
    """
    if params is None:
        params = WaveParameters()
    params.validate()

    if initial_condition is None:
        initial_condition = CircularSplash()

    elevation, displacement = sample_initial_condition(initial_condition, params.width, params.height)
    return build_state_from_grids(
        elevation, displacement, params.courant_coefficient,
        allow_unstable=params.allow_unstable,
    )


def build_state_from_grids(
    elevation: np.ndarray,
    displacement: np.ndarray,
    courant_coefficient: float,
    allow_unstable: bool = False,
) -> WaveState:
    """Create a wave state from explicit elevation and displacement grids."""
    k = np.float32(courant_coefficient)
    if not np.isfinite(k) or k < 0:
        raise ConfigurationError(f"Courant coefficient must be finite and non-negative, got {courant_coefficient}")
    if k > STABILITY_LIMIT and not allow_unstable:
        raise ConfigurationError(
            f"Courant coefficient k={float(k):.4g} exceeds the stability limit {STABILITY_LIMIT}"
        )

    elevation = np.asarray(elevation)
    displacement = np.asarray(displacement)
    if elevation.ndim != 2:
        raise ConfigurationError(f"Elevation must be 2D, got shape {elevation.shape}")
    if elevation.shape[0] < 1 or elevation.shape[1] < 1:
        raise ConfigurationError(f"Grid width and height must be positive, got shape {elevation.shape}")
    if displacement.shape != elevation.shape:
        raise ConfigurationError(
            f"Displacement shape {displacement.shape} does not match elevation shape {elevation.shape}"
        )

    elevation_grid = np.array(elevation, dtype=np.float32, order="C")
    elevation_grid.flags.writeable = False

    # Allocate once: these arrays live for the whole run
    previous = np.array(displacement, dtype=np.float32, order="C")
    current = previous.copy()
    scratch = np.zeros_like(previous)

    state = WaveState(
        elevation=elevation_grid,
        buffers=(previous, current, scratch),
        courant_coefficient=k,
    )

    height, width = elevation_grid.shape
    land_cells = int(np.count_nonzero(state.land_mask))
    state.messages.append(
        f"Initialized {width}x{height} grid, k={float(state.courant_coefficient):.4g}, "
        f"{land_cells} land cells"
    )
    logger.debug("Allocated elevation and 3 wave buffers of shape %s", elevation_grid.shape)
    return state
