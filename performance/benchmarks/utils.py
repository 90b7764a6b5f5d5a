"""Timing, statistics and report helpers for the stencil benchmarks."""
from __future__ import annotations

import time
from statistics import mean, median, stdev
from typing import List, NamedTuple, Sequence, Tuple


class Timer:
    """Context manager for timing code blocks."""

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed = time.perf_counter() - self.start


# =============================================================================
# Statistics
# =============================================================================

class StepStats(NamedTuple):
    """Per-step timing summary in seconds."""
    mean: float
    median: float
    stdev: float
    fastest: float
    slowest: float


def step_stats(times: Sequence[float]) -> StepStats:
    if not times:
        return StepStats(0.0, 0.0, 0.0, 0.0, 0.0)
    return StepStats(
        mean(times),
        median(times),
        stdev(times) if len(times) > 1 else 0.0,
        min(times),
        max(times),
    )


def cell_updates_per_second(cells: int, steps: int, seconds: float) -> float:
    """Stencil throughput: cells * steps / seconds (0 if nothing was timed)."""
    if seconds <= 0:
        return 0.0
    return cells * steps / seconds


# =============================================================================
# Formatting
# =============================================================================

def format_duration(seconds: float) -> str:
    """'12.34ms' below one second, '1.23s' otherwise."""
    if seconds < 1.0:
        return f"{seconds * 1000:.2f}ms"
    return f"{seconds:.2f}s"


def format_memory_mb(bytes_: int) -> str:
    """Format memory in megabytes: '123.4 MB'"""
    return f"{bytes_ / (1024 * 1024):.1f} MB"


def format_rate(per_second: float) -> str:
    """Format a throughput with an SI suffix: '12.3 M/s'"""
    for factor, suffix in ((1e9, "G"), (1e6, "M"), (1e3, "k")):
        if per_second >= factor:
            return f"{per_second / factor:.1f} {suffix}/s"
    return f"{per_second:.1f} /s"


# =============================================================================
# Report output
# =============================================================================

def print_section_header(title: str, width: int = 80):
    print("\n" + "=" * width)
    print(title)
    print("=" * width)


def print_metric(label: str, value: str, indent: int = 2):
    """Print '  Label:                   value'"""
    print(f"{' ' * indent}{label:<25} {value}")


def print_table(columns: List[Tuple[str, int]], rows: Sequence[Sequence[str]]):
    """Print a left-aligned table; columns are (title, width) pairs."""
    widths = [width for _, width in columns]
    header = " ".join(f"{title:<{width}}" for title, width in columns)
    print(header)
    print("-" * len(header))
    for row in rows:
        print(" ".join(f"{value:<{width}}" for value, width in zip(row, widths)))
