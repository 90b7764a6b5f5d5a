"""Shared fixtures for the wave simulation tests."""
from __future__ import annotations

import numpy as np
import pytest

from simulation.config import BACKEND_NAMES
from simulation.dispatch import StencilBackend, get_backend
from simulation.stencil import apply_stencil_rows
from wave_state import build_state_from_grids


class RecordingBackend(StencilBackend):
    """NumPy backend that counts calls and can fail on demand."""

    name = "recording"

    def __init__(self, fail_at=None, fail_prepare=False):
        self.fail_at = fail_at
        self.fail_prepare = fail_prepare
        self.prepared = 0
        self.dispatches = 0
        self.closed = False

    def prepare(self, state):
        self.prepared += 1
        if self.fail_prepare:
            raise RuntimeError("device unavailable")

    def dispatch(self, current, previous, elevation, out, k):
        if self.fail_at is not None and self.dispatches == self.fail_at:
            raise MemoryError("out of device memory")
        self.dispatches += 1
        apply_stencil_rows(current, previous, elevation, out, k)

    def close(self):
        self.closed = True


@pytest.fixture(params=BACKEND_NAMES)
def backend(request):
    options = {"workers": 3} if request.param == "threads" else {}
    with get_backend(request.param, **options) as b:
        yield b


@pytest.fixture
def recording_backend():
    return RecordingBackend()


def make_water_state(width, height, k=0.25, splash=None, allow_unstable=False):
    """All-water state; splash maps (row, col) -> initial displacement."""
    elevation = np.full((height, width), -1.0, dtype=np.float32)
    displacement = np.zeros((height, width), dtype=np.float32)
    for (i, j), value in (splash or {}).items():
        displacement[i, j] = value
    return build_state_from_grids(elevation, displacement, k, allow_unstable=allow_unstable)
