# exceptions.py
"""Exceptions raised by the wave simulation."""
from __future__ import annotations

from typing import Optional

STAGES = ("initialization", "dispatch", "readback")


class RippleError(Exception):
    """Base exception for all simulation errors."""

    pass


class ConfigurationError(RippleError, ValueError):
    """
    Raised when parameters or fields are rejected before any dispatch.

    Covers non-positive grid dimensions or step counts, non-physical
    increments, an unstable Courant coefficient, mismatched field shapes
    and unknown backend names.
    """

    pass


class DispatchError(RippleError):
    """
    Raised when the compute substrate fails during a run.

    The run is invalidated: buffer state is strictly sequential, so there is
    no partial result to recover.
    """

    def __init__(
        self,
        stage: str,
        timestep: Optional[int] = None,
        message: Optional[str] = None,
    ):
        if stage not in STAGES:
            raise ValueError(f"Unknown stage '{stage}'")
        self.stage = stage
        self.timestep = timestep

        if message is None:
            message = "compute backend failed"
        if timestep is None:
            text = f"{stage} failed: {message}"
        else:
            text = f"{stage} failed at timestep {timestep}: {message}"

        super().__init__(text)
