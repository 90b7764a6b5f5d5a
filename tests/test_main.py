"""Command-line entry point."""
from __future__ import annotations

import numpy as np

from main import build_parser, main

SMALL = ["--width", "24", "--height", "20", "--timesteps", "5", "--backend", "numpy"]


def test_defaults_match_reference_scenario():
    args = build_parser().parse_args([])
    assert (args.width, args.height, args.timesteps) == (512, 512, 2500)
    assert (args.speed, args.dt, args.dx) == (1.0, 0.1, 1.0)
    assert not args.allow_unstable


def test_small_run_reports_timing(capsys):
    assert main(SMALL) == 0

    out = capsys.readouterr().out
    assert "numpy execution time:" in out
    assert "Completed 5 timesteps" in out
    assert "Max amplitude" in out


def test_output_is_saved(tmp_path, capsys):
    target = tmp_path / "field.npy"
    assert main(SMALL + ["--output", str(target)]) == 0

    field = np.load(target)
    assert field.shape == (24 * 20,)
    assert field.dtype == np.float32


def test_threads_backend_uses_worker_option(capsys):
    assert main(["--width", "12", "--height", "12", "--timesteps", "3",
                 "--backend", "threads", "--workers", "2"]) == 0
    assert "threads execution time:" in capsys.readouterr().out


def test_invalid_grid_is_reported(capsys):
    assert main(["--width", "0", "--timesteps", "1", "--backend", "numpy"]) == 1
    captured = capsys.readouterr()
    assert captured.err.startswith("Error:")
    assert "width" in captured.err


def test_unstable_run_needs_flag(capsys):
    unstable = ["--width", "10", "--height", "10", "--timesteps", "2",
                "--backend", "numpy", "--dt", "1.0"]
    assert main(unstable) == 1
    assert "stability" in capsys.readouterr().err

    assert main(unstable + ["--allow-unstable"]) == 0


def test_bad_worker_count_is_reported(capsys):
    assert main(SMALL[:-1] + ["threads", "--workers", "0"]) == 1
    assert "workers" in capsys.readouterr().err


def test_prepare_is_timed_separately(capsys):
    assert main(SMALL) == 0

    out = capsys.readouterr().out
    assert "numpy prepare time:" in out
    assert out.count("Backend 'numpy' ready") == 1
    assert out.index("prepare time") < out.index("execution time")


def test_unwritable_output_is_reported(tmp_path, capsys):
    target = tmp_path / "missing" / "field.npy"
    assert main(SMALL + ["--output", str(target)]) == 1

    captured = capsys.readouterr()
    assert captured.err.startswith("Error:")
    assert not target.exists()
