# wave_state/parameters.py
"""Run parameters and their validation."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from config import (
    GRID_WIDTH,
    GRID_HEIGHT,
    TIMESTEPS,
    WAVE_SPEED,
    DT,
    DX,
    STABILITY_LIMIT,
)
from exceptions import ConfigurationError


def courant_coefficient(wave_speed: float, dt: float, dx: float) -> np.float32:
    """Squared Courant number k = (c * dt / dx)^2 as single precision."""
    return np.float32((wave_speed * wave_speed * dt * dt) / (dx * dx))


@dataclass(frozen=True)
class WaveParameters:
    """Fixed-at-start parameters for a simulation run.

    wave_speed, dt and dx only matter through the combined coefficient k;
    the stencil never sees them individually.
    """
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    timesteps: int = TIMESTEPS
    wave_speed: float = WAVE_SPEED
    dt: float = DT
    dx: float = DX
    allow_unstable: bool = False

    @property
    def shape(self) -> tuple[int, int]:
        return (self.height, self.width)

    @property
    def size(self) -> int:
        return self.width * self.height

    @property
    def courant_coefficient(self) -> np.float32:
        return courant_coefficient(self.wave_speed, self.dt, self.dx)

    def validate(self) -> "WaveParameters":
        """Reject configurations that must never reach a dispatch.

        Returns self so calls can be chained.
        """
        for name in ("width", "height", "timesteps"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")

        if not self.dt > 0:
            raise ConfigurationError(f"dt must be positive, got {self.dt}")
        if not self.dx > 0:
            raise ConfigurationError(f"dx must be positive, got {self.dx}")
        if not self.wave_speed >= 0:
            raise ConfigurationError(f"wave_speed must be non-negative, got {self.wave_speed}")

        k = self.courant_coefficient
        if not np.isfinite(k):
            raise ConfigurationError(f"Courant coefficient is not finite: {k}")
        if k > STABILITY_LIMIT and not self.allow_unstable:
            raise ConfigurationError(
                f"Courant coefficient k={float(k):.4g} exceeds the stability limit "
                f"{STABILITY_LIMIT}; lower dt or wave_speed, raise dx, "
                f"or pass allow_unstable=True"
            )
        return self
