# simulation/config.py
"""
Configuration constants for the simulation domain.
Includes backend selection and parallel dispatch tuning values.
"""
from __future__ import annotations

# =============================================================================
# BACKENDS
# =============================================================================
BACKEND_NUMPY = "numpy"      # Single vectorized pass over the whole grid
BACKEND_NUMBA = "numba"      # Compiled kernel, rows spread over threads with prange
BACKEND_THREADS = "threads"  # Thread pool over bands of rows, numpy per band

BACKEND_NAMES = (BACKEND_NUMPY, BACKEND_NUMBA, BACKEND_THREADS)
DEFAULT_BACKEND = BACKEND_NUMBA

# =============================================================================
# THREAD POOL DISPATCH
# =============================================================================
DEFAULT_WORKERS = 4          # Threads in the pool
BANDS_PER_WORKER = 2         # Row bands per worker per dispatch (load balancing)

# =============================================================================
# PROGRESS
# =============================================================================
LOG_EVERY_STEPS = 500        # Debug log cadence inside run_simulation
