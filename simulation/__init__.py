# simulation/__init__.py
"""Simulation modules for Ripple.

- stencil: per-cell leapfrog update (reference, NumPy and Numba forms)
- dispatch: parallel backends that apply the stencil to the whole grid
- stepping: timestep loop with buffer role rotation
- diagnostics: read-only field measurements
"""

from simulation.dispatch import (
    StencilBackend,
    NumpyBackend,
    NumbaBackend,
    ThreadedBackend,
    get_backend,
)
from simulation.stepping import prepare_backend, step, read_back, run_simulation

__all__ = [
    "StencilBackend",
    "NumpyBackend",
    "NumbaBackend",
    "ThreadedBackend",
    "get_backend",
    "prepare_backend",
    "step",
    "read_back",
    "run_simulation",
]
