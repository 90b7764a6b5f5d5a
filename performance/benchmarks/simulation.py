#!/usr/bin/env python3
"""
Performance benchmarking script for the Ripple stencil backends.

Runs the simulation headless to measure per-step dispatch time, throughput
and memory, and optionally profiles hot code paths.

Usage:
    python -m performance.benchmarks.simulation --steps 200
    python -m performance.benchmarks.simulation --compare
"""
from __future__ import annotations

import argparse
import cProfile
import io
import pstats
import time
import tracemalloc
from typing import Dict, List, Optional

from config import GRID_WIDTH, GRID_HEIGHT
from simulation.config import BACKEND_NAMES, DEFAULT_BACKEND
from simulation.dispatch import get_backend
from simulation.stepping import prepare_backend, step, read_back
from wave_state import WaveParameters, build_initial_state
from performance.benchmarks.utils import (
    Timer,
    step_stats,
    cell_updates_per_second,
    format_duration,
    format_memory_mb,
    format_rate,
    print_section_header,
    print_metric,
    print_table,
)


class PerformanceMetrics:
    """Tracks performance metrics for one backend run."""

    def __init__(self, backend: str, width: int, height: int):
        self.backend = backend
        self.width = width
        self.height = height
        self.prepare_time: float = 0.0
        self.step_times: List[float] = []
        self.readback_time: float = 0.0
        self.memory_snapshots: List[int] = []  # Bytes
        self.start_time: float = 0
        self.end_time: float = 0

    def start_benchmark(self):
        """Start timing the benchmark."""
        self.start_time = time.perf_counter()

    def end_benchmark(self):
        """End timing the benchmark."""
        self.end_time = time.perf_counter()

    def record_step_time(self, step_time: float):
        """Record the time for a single dispatch + rotation."""
        self.step_times.append(step_time)

    def record_memory(self):
        """Record current traced memory usage."""
        current, _peak = tracemalloc.get_traced_memory()
        self.memory_snapshots.append(current)

    def get_total_time(self) -> float:
        """Get total benchmark duration."""
        return self.end_time - self.start_time

    def throughput(self) -> float:
        """Cell updates per second over the timed steps."""
        return cell_updates_per_second(self.width * self.height, len(self.step_times), sum(self.step_times))

    def print_report(self):
        """Print a performance report for this run."""
        print_section_header(f"RIPPLE BENCHMARK: {self.backend}  ({self.width}×{self.height} cells)")

        print("\n📊 OVERALL PERFORMANCE")
        print_metric("Total Runtime:", format_duration(self.get_total_time()))
        print_metric("Prepare (compile/pool):", format_duration(self.prepare_time))
        print_metric("Total Steps:", str(len(self.step_times)))
        print_metric("Throughput:", format_rate(self.throughput()) + " cell updates")
        print_metric("Readback:", format_duration(self.readback_time))

        if self.step_times:
            stats = step_stats(self.step_times)
            print("\n⏱️  STEP TIMING")
            print_metric("Mean:", format_duration(stats.mean))
            print_metric("Median:", format_duration(stats.median))
            print_metric("Std Dev:", format_duration(stats.stdev))
            print_metric("Fastest:", format_duration(stats.fastest))
            print_metric("Slowest:", format_duration(stats.slowest))

        if self.memory_snapshots:
            print("\n💾 MEMORY USAGE")
            print_metric("Mean:", format_memory_mb(int(sum(self.memory_snapshots) / len(self.memory_snapshots))))
            print_metric("Peak:", format_memory_mb(max(self.memory_snapshots)))

        print("\n" + "=" * 80)


def run_benchmark(
    backend_name: str = DEFAULT_BACKEND,
    num_steps: int = 200,
    width: int = GRID_WIDTH,
    height: int = GRID_HEIGHT,
    profile_hotspots: bool = False,
    quiet: bool = False,
) -> PerformanceMetrics:
    """
    Run a headless simulation benchmark for one backend.

    Args:
        backend_name: Backend to measure
        num_steps: Number of timesteps to run
        width, height: Grid size
        profile_hotspots: If True, run cProfile to identify hot code paths
        quiet: If True, skip progress and report output

    Returns:
        PerformanceMetrics object with collected data
    """
    params = WaveParameters(width=width, height=height, timesteps=num_steps).validate()
    metrics = PerformanceMetrics(backend_name, width, height)

    if not quiet:
        print(f"\n🚀 Starting benchmark: {backend_name}, {num_steps} steps on {width}×{height} grid...")

    tracemalloc.start()
    state = build_initial_state(params)

    profiler: Optional[cProfile.Profile] = None
    with get_backend(backend_name) as backend:
        with Timer() as t:
            prepare_backend(state, backend)
        metrics.prepare_time = t.elapsed

        metrics.start_benchmark()
        if profile_hotspots:
            profiler = cProfile.Profile()
            profiler.enable()

        for i in range(num_steps):
            with Timer() as t:
                step(state, backend)
            metrics.record_step_time(t.elapsed)

            if i % 50 == 0:
                metrics.record_memory()

        if profiler is not None:
            profiler.disable()

        with Timer() as t:
            read_back(state)
        metrics.readback_time = t.elapsed
        metrics.end_benchmark()

    tracemalloc.stop()

    if not quiet:
        print("  ✅ Benchmark complete!")
        metrics.print_report()

    if profiler is not None and not quiet:
        print("\n🔥 HOT CODE PATHS (Top 20 functions by cumulative time)")
        print("=" * 80)
        s = io.StringIO()
        pstats.Stats(profiler, stream=s).sort_stats('cumulative').print_stats(20)
        for line in s.getvalue().split('\n')[:25]:
            if line.strip():
                print(line)

    return metrics


def compare_backends(num_steps: int = 100, width: int = GRID_WIDTH, height: int = GRID_HEIGHT) -> Dict[str, PerformanceMetrics]:
    """Run every backend on the same grid and print a comparison table."""
    results: Dict[str, PerformanceMetrics] = {}
    for name in BACKEND_NAMES:
        print(f"  Running {name}...")
        results[name] = run_benchmark(name, num_steps, width, height, quiet=True)

    print_section_header(f"BACKEND COMPARISON ({width}×{height}, {num_steps} steps)")
    columns = [("Backend", 10), ("Prepare", 12), ("Mean step", 12), ("Throughput", 16)]
    rows = [
        [
            name,
            format_duration(metrics.prepare_time),
            format_duration(step_stats(metrics.step_times).mean),
            format_rate(metrics.throughput()),
        ]
        for name, metrics in results.items()
    ]
    print_table(columns, rows)
    return results


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Headless stencil benchmark for Ripple")
    parser.add_argument("--backend", choices=BACKEND_NAMES, default=DEFAULT_BACKEND)
    parser.add_argument("--steps", type=int, default=200, help="Number of timesteps (default: 200)")
    parser.add_argument("--width", type=int, default=GRID_WIDTH)
    parser.add_argument("--height", type=int, default=GRID_HEIGHT)
    parser.add_argument("--profile", action="store_true", help="Profile hot code paths with cProfile")
    parser.add_argument("--compare", action="store_true", help="Compare all backends")
    args = parser.parse_args()

    if args.compare:
        compare_backends(args.steps, args.width, args.height)
    else:
        run_benchmark(args.backend, args.steps, args.width, args.height, profile_hotspots=args.profile)
