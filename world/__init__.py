"""
World module: elevation maps and initial wave displacement.

Provides:
- Initial condition procedures (from generation.py)
- Sampling helpers that turn them into grids
"""

from world.generation import (
    InitialCondition,
    CircularSplash,
    PointSplash,
    RandomSplash,
    sample_cell_function,
    sample_initial_condition,
)

__all__ = [
    "InitialCondition",
    "CircularSplash",
    "PointSplash",
    "RandomSplash",
    "sample_cell_function",
    "sample_initial_condition",
]
