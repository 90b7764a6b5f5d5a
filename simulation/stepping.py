# simulation/stepping.py
"""Time stepping: dispatch the stencil, then rotate buffer roles.

Each timestep is one full-grid pass into the scratch buffer followed by a
role rotation (scratch -> current -> previous -> scratch). Buffers are never
copied or reallocated; only the indices move.

Any failure aborts the run with a DispatchError naming the stage. Later
timesteps depend on every earlier one, so nothing is retried.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from exceptions import ConfigurationError, DispatchError, RippleError
from simulation.config import LOG_EVERY_STEPS

if TYPE_CHECKING:
    from simulation.dispatch import StencilBackend
    from wave_state import WaveState

logger = logging.getLogger(__name__)

StepCallback = Callable[["WaveState"], None]


def prepare_backend(state: "WaveState", backend: "StencilBackend") -> None:
    """Run the backend's initialization stage for this state."""
    try:
        backend.prepare(state)
    except RippleError:
        raise
    except Exception as exc:
        raise DispatchError("initialization", message=f"{backend!r}: {exc}") from exc
    state.messages.append(f"Backend '{backend.name}' ready")


def step(state: "WaveState", backend: "StencilBackend") -> None:
    """Advance the state by one timestep.

    The backend has returned (every cell written) before roles rotate.
    """
    try:
        backend.dispatch(
            state.current,
            state.previous,
            state.elevation,
            state.scratch,
            state.courant_coefficient,
        )
    except RippleError:
        raise
    except Exception as exc:
        raise DispatchError("dispatch", timestep=state.timestep, message=f"{backend!r}: {exc}") from exc
    state.rotate()


def read_back(state: "WaveState") -> np.ndarray:
    """Copy the current field out as a flat row-major float32 array."""
    try:
        field = state.read_current()
    except Exception as exc:
        raise DispatchError("readback", timestep=state.timestep, message=str(exc)) from exc
    if field.size != state.width * state.height:
        raise DispatchError(
            "readback", timestep=state.timestep,
            message=f"expected {state.width * state.height} values, got {field.size}",
        )
    return field


def run_simulation(
    state: "WaveState",
    timesteps: int,
    backend: "StencilBackend",
    on_step: Optional[StepCallback] = None,
    prepare: bool = True,
) -> np.ndarray:
    """Run a fixed number of timesteps and return the final field (flat).

    Args:
        state: Freshly built (or partially advanced) wave state
        timesteps: Number of steps to run; must be positive
        backend: Stencil backend; not closed here
        on_step: Called with the state after every rotation
        prepare: Run the backend's initialization stage first. Pass False
            when the caller already called prepare_backend for this state

    Returns:
        Flat row-major copy of the current field, width * height values
    """
    if isinstance(timesteps, bool) or not isinstance(timesteps, (int, np.integer)) or timesteps <= 0:
        raise ConfigurationError(f"timesteps must be a positive integer, got {timesteps!r}")

    if prepare:
        prepare_backend(state, backend)

    start_step = state.timestep
    logger.info(
        "Running %d timesteps on %dx%d grid with %s (k=%.4g)",
        timesteps, state.width, state.height, backend.name, float(state.courant_coefficient),
    )
    state.messages.append(f"Running {timesteps} timesteps")

    for t in range(timesteps):
        step(state, backend)
        if on_step is not None:
            on_step(state)
        if (t + 1) % LOG_EVERY_STEPS == 0:
            logger.debug("Completed timestep %d/%d", t + 1, timesteps)

    field = read_back(state)
    state.messages.append(f"Completed {state.timestep - start_step} timesteps")
    logger.info("Finished at timestep %d", state.timestep)
    return field
