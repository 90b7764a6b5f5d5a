# wave_state/__init__.py
"""Wave state management module."""

from wave_state.parameters import WaveParameters, courant_coefficient
from wave_state.state import WaveState
from wave_state.initialization import build_initial_state, build_state_from_grids

__all__ = [
    'WaveParameters',
    'courant_coefficient',
    'WaveState',
    'build_initial_state',
    'build_state_from_grids',
]
