# simulation/dispatch.py
"""Parallel dispatch of the stencil over the whole grid.

A backend fills `out` for every cell in one call and returns only once the
whole grid is written. That return is the barrier between timesteps: the
orchestrator never rotates buffers or starts the next pass before it.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Type

import numpy as np

from exceptions import ConfigurationError
from simulation.config import (
    BACKEND_NUMPY,
    BACKEND_NUMBA,
    BACKEND_THREADS,
    DEFAULT_WORKERS,
    BANDS_PER_WORKER,
)
from simulation.stencil import apply_stencil_rows, wave_update_kernel

if TYPE_CHECKING:
    from wave_state import WaveState

logger = logging.getLogger(__name__)


class StencilBackend:
    """Executes one whole-grid stencil pass per dispatch() call."""

    name = "base"

    def prepare(self, state: "WaveState") -> None:
        """Acquire resources and compile before the first timestep."""
        pass

    def dispatch(
        self,
        current: np.ndarray,
        previous: np.ndarray,
        elevation: np.ndarray,
        out: np.ndarray,
        k: np.float32,
    ) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release resources. Safe to call more than once."""
        pass

    def __enter__(self) -> "StencilBackend":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NumpyBackend(StencilBackend):
    """Single vectorized pass; NumPy returns only after every cell is written."""

    name = BACKEND_NUMPY

    def dispatch(self, current, previous, elevation, out, k):
        apply_stencil_rows(current, previous, elevation, out, k)


class NumbaBackend(StencilBackend):
    """Compiled parallel kernel; the prange loop joins before returning."""

    name = BACKEND_NUMBA

    def prepare(self, state: "WaveState") -> None:
        # Compile (or load from cache) for the exact array types dispatch()
        # will see; elevation is read-only, which numba types separately.
        # The pass writes a throwaway array so the state is untouched.
        wave_update_kernel(
            state.current,
            state.previous,
            state.elevation,
            np.empty_like(state.scratch),
            np.float32(state.courant_coefficient),
        )
        logger.debug("Numba kernel ready: %s", wave_update_kernel.signatures)

    def dispatch(self, current, previous, elevation, out, k):
        wave_update_kernel(current, previous, elevation, out, np.float32(k))


class ThreadedBackend(StencilBackend):
    """Thread pool over bands of rows.

    Bands write disjoint rows of `out` and only read the other fields, so
    they need no locking. dispatch() waits on every band before returning.
    """

    name = BACKEND_THREADS

    def __init__(self, workers: int = DEFAULT_WORKERS, bands: Optional[int] = None):
        if workers <= 0:
            raise ConfigurationError(f"workers must be positive, got {workers}")
        if bands is not None and bands <= 0:
            raise ConfigurationError(f"bands must be positive, got {bands}")
        self.workers = workers
        self.bands = bands if bands is not None else workers * BANDS_PER_WORKER
        self._executor: Optional[ThreadPoolExecutor] = None
        self._row_bands: List[Tuple[int, int]] = []

    def prepare(self, state: "WaveState") -> None:
        self._row_bands = split_rows(state.height, self.bands)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="stencil")
        logger.debug("Thread pool ready: %d workers, %d bands", self.workers, len(self._row_bands))

    def dispatch(self, current, previous, elevation, out, k):
        if self._executor is None:
            raise RuntimeError("ThreadedBackend.dispatch() called before prepare()")
        row_bands = self._row_bands
        if not row_bands or row_bands[-1][1] != current.shape[0]:
            row_bands = self._row_bands = split_rows(current.shape[0], self.bands)

        futures = [
            self._executor.submit(apply_stencil_rows, current, previous, elevation, out, k, start, stop)
            for start, stop in row_bands
        ]
        wait(futures)
        # Re-raise the first band failure; the pass is incomplete either way
        for future in futures:
            future.result()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __repr__(self) -> str:
        return f"ThreadedBackend(workers={self.workers}, bands={self.bands})"


def split_rows(height: int, bands: int) -> List[Tuple[int, int]]:
    """Split [0, height) into at most `bands` contiguous, non-empty row ranges."""
    bands = max(1, min(bands, height))
    edges = np.linspace(0, height, bands + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


BACKENDS: Dict[str, Type[StencilBackend]] = {
    BACKEND_NUMPY: NumpyBackend,
    BACKEND_NUMBA: NumbaBackend,
    BACKEND_THREADS: ThreadedBackend,
}


def get_backend(name: str, **options) -> StencilBackend:
    """Create a backend by name. Options are passed to its constructor."""
    cls = BACKENDS.get(name)
    if cls is None:
        raise ConfigurationError(f"Unknown backend '{name}'. Choose from: {', '.join(BACKENDS)}")
    try:
        return cls(**options)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid options for backend '{name}': {exc}") from exc
