# wave_state/state.py
"""Core wave simulation state: elevation plus three rotating wave buffers."""
from __future__ import annotations

import collections
from dataclasses import dataclass, field
from typing import Deque, Tuple

import numpy as np

from config import MESSAGE_LOG_SIZE
from exceptions import ConfigurationError

# Slot order inside WaveState.buffers at construction time
PREVIOUS, CURRENT, SCRATCH = 0, 1, 2


@dataclass
class WaveState:
    """Grid state for one simulation run.

    All fields are float32 with shape (height, width), row-major, so
    field.ravel()[row * width + col] is cell (row, col).

    The three wave buffers never move or change size. Only the role indices
    (previous_index, current_index, scratch_index) rotate between steps.
    """
    elevation: np.ndarray
    buffers: Tuple[np.ndarray, np.ndarray, np.ndarray]
    courant_coefficient: np.float32

    previous_index: int = PREVIOUS
    current_index: int = CURRENT
    scratch_index: int = SCRATCH

    # Completed timesteps (number of rotations so far)
    timestep: int = 0

    messages: Deque[str] = field(default_factory=lambda: collections.deque(maxlen=MESSAGE_LOG_SIZE))

    def __post_init__(self) -> None:
        if len(self.buffers) != 3:
            raise ConfigurationError(f"Expected 3 wave buffers, got {len(self.buffers)}")
        if self.elevation.ndim != 2:
            raise ConfigurationError(f"Elevation must be 2D, got shape {self.elevation.shape}")
        if self.elevation.size == 0:
            raise ConfigurationError(f"Grid must have at least one cell, got shape {self.elevation.shape}")

        for buf in self.buffers:
            if buf.shape != self.elevation.shape:
                raise ConfigurationError(
                    f"Buffer shape {buf.shape} does not match elevation shape {self.elevation.shape}"
                )
            if buf.dtype != np.float32 or not buf.flags.c_contiguous:
                raise ConfigurationError("Wave buffers must be C-contiguous float32 arrays")

        # No aliasing: the scratch buffer is written while the others are read
        if len({id(buf) for buf in self.buffers}) != 3 or any(
            np.shares_memory(a, b)
            for a, b in ((self.buffers[0], self.buffers[1]),
                         (self.buffers[0], self.buffers[2]),
                         (self.buffers[1], self.buffers[2]))
        ):
            raise ConfigurationError("Wave buffers must not share memory")

        if sorted((self.previous_index, self.current_index, self.scratch_index)) != [0, 1, 2]:
            raise ConfigurationError("Role indices must be a permutation of (0, 1, 2)")

    @property
    def height(self) -> int:
        return self.elevation.shape[0]

    @property
    def width(self) -> int:
        return self.elevation.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.elevation.shape

    @property
    def previous(self) -> np.ndarray:
        """Oldest field (timestep t - 1)."""
        return self.buffers[self.previous_index]

    @property
    def current(self) -> np.ndarray:
        """Latest completed field (timestep t)."""
        return self.buffers[self.current_index]

    @property
    def scratch(self) -> np.ndarray:
        """Target of the next dispatch (timestep t + 1)."""
        return self.buffers[self.scratch_index]

    @property
    def land_mask(self) -> np.ndarray:
        return self.elevation > 0

    def rotate(self) -> None:
        """Advance roles after a completed dispatch.

        scratch -> current, current -> previous, previous -> scratch.
        """
        self.previous_index, self.current_index, self.scratch_index = (
            self.current_index,
            self.scratch_index,
            self.previous_index,
        )
        self.timestep += 1

    def read_current(self) -> np.ndarray:
        """Flat row-major copy of the current field (width * height values)."""
        return self.current.ravel().copy()
