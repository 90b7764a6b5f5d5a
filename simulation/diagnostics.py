# simulation/diagnostics.py
"""Read-only measurements of a wave state (no effect on the run)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

import numpy as np
from scipy.ndimage import binary_dilation

if TYPE_CHECKING:
    from wave_state import WaveState


def max_amplitude(field: np.ndarray) -> float:
    """Largest absolute wave height (inf/nan propagate)."""
    return float(np.max(np.abs(field)))


def wave_energy(state: "WaveState") -> float:
    """Discrete energy proxy over water cells.

    Kinetic part from the time difference (current - previous), potential
    part from forward spatial differences of current, weighted by k.
    """
    water = ~state.land_mask
    current = state.current.astype(np.float64)
    previous = state.previous.astype(np.float64)

    kinetic = np.sum(((current - previous) ** 2)[water])
    grad_rows = np.diff(current, axis=0) ** 2
    grad_cols = np.diff(current, axis=1) ** 2
    potential = float(state.courant_coefficient) * (
        np.sum(grad_rows[water[:-1, :] & water[1:, :]]) +
        np.sum(grad_cols[water[:, :-1] & water[:, 1:]])
    )
    return float(0.5 * (kinetic + potential))


def coastline_mask(elevation: np.ndarray) -> np.ndarray:
    """Water cells that touch land in one of the 4 cardinal directions."""
    land = elevation > 0
    cross = np.array([[0, 1, 0],
                      [1, 1, 1],
                      [0, 1, 0]], dtype=bool)
    return binary_dilation(land, structure=cross) & ~land


@dataclass
class FieldSummary:
    """Snapshot statistics of the current field."""
    timestep: int
    min_height: float
    max_height: float
    max_amplitude: float
    mean_abs: float
    energy: float
    coastline_max: float
    finite: bool

    def as_lines(self) -> List[str]:
        return [
            f"Timestep:           {self.timestep}",
            f"Height range:       {self.min_height:.6g} .. {self.max_height:.6g}",
            f"Max amplitude:      {self.max_amplitude:.6g}",
            f"Mean |height|:      {self.mean_abs:.6g}",
            f"Energy:             {self.energy:.6g}",
            f"Coastline max:      {self.coastline_max:.6g}",
            f"Finite:             {self.finite}",
        ]


def summarize_field(state: "WaveState") -> FieldSummary:
    current = state.current
    coast = coastline_mask(state.elevation)
    coastline_max = float(np.max(np.abs(current[coast]))) if np.any(coast) else 0.0
    return FieldSummary(
        timestep=state.timestep,
        min_height=float(np.min(current)),
        max_height=float(np.max(current)),
        max_amplitude=max_amplitude(current),
        mean_abs=float(np.mean(np.abs(current))),
        energy=wave_energy(state),
        coastline_max=coastline_max,
        finite=bool(np.all(np.isfinite(current))),
    )


@dataclass
class AmplitudeHistory:
    """on_step recorder: max amplitude after every timestep."""
    every: int = 1
    timesteps: List[int] = field(default_factory=list)
    amplitudes: List[float] = field(default_factory=list)

    def __call__(self, state: "WaveState") -> None:
        if state.timestep % self.every == 0:
            self.timesteps.append(state.timestep)
            self.amplitudes.append(max_amplitude(state.current))

    def grew_by(self, factor: float) -> bool:
        """True if the last recorded amplitude exceeds the first by `factor` (or is not finite)."""
        if len(self.amplitudes) < 2:
            return False
        first, last = self.amplitudes[0], self.amplitudes[-1]
        return (not np.isfinite(last)) or last > first * factor
