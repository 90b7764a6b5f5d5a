"""Field measurements used by the CLI report and the benchmark."""
from __future__ import annotations

import numpy as np

from conftest import make_water_state
from simulation.diagnostics import (
    AmplitudeHistory,
    coastline_mask,
    max_amplitude,
    summarize_field,
    wave_energy,
)
from simulation.dispatch import NumpyBackend
from simulation.stepping import run_simulation
from wave_state import build_state_from_grids


def test_max_amplitude_uses_absolute_value():
    assert max_amplitude(np.array([[0.5, -2.0], [1.0, 0.0]], dtype=np.float32)) == 2.0


def test_coastline_is_water_next_to_land():
    elevation = np.full((5, 5), -1.0)
    elevation[2, 2] = 4.0
    coast = coastline_mask(elevation)

    expected = np.zeros((5, 5), dtype=bool)
    expected[1, 2] = expected[3, 2] = expected[2, 1] = expected[2, 3] = True
    np.testing.assert_array_equal(coast, expected)


def test_coastline_empty_without_land():
    assert not np.any(coastline_mask(np.full((4, 4), -3.0)))


def test_energy_is_zero_for_still_water():
    assert wave_energy(make_water_state(6, 6)) == 0.0


def test_energy_positive_after_splash():
    state = make_water_state(8, 8, splash={(4, 4): 1.0})
    run_simulation(state, 2, NumpyBackend())
    assert wave_energy(state) > 0.0


def test_energy_ignores_land():
    elevation = np.full((4, 4), -1.0, dtype=np.float32)
    elevation[1, 1] = 2.0
    displacement = np.zeros((4, 4), dtype=np.float32)
    displacement[1, 1] = 7.0
    state = build_state_from_grids(elevation, displacement, 0.25)
    assert wave_energy(state) == 0.0


def test_summary_reports_current_field():
    elevation = np.full((6, 6), -1.0, dtype=np.float32)
    elevation[3, 3] = 1.0
    displacement = np.zeros((6, 6), dtype=np.float32)
    displacement[3, 2] = -0.5
    displacement[1, 1] = 2.0
    state = build_state_from_grids(elevation, displacement, 0.1)

    summary = summarize_field(state)

    assert summary.timestep == 0
    assert summary.min_height == -0.5
    assert summary.max_height == 2.0
    assert summary.max_amplitude == 2.0
    assert summary.coastline_max == 0.5
    assert summary.finite
    lines = summary.as_lines()
    assert lines[0].startswith("Timestep:")
    assert any("Finite" in line for line in lines)


def test_history_records_every_nth_step():
    state = make_water_state(8, 8, splash={(4, 4): 1.0})
    history = AmplitudeHistory(every=2)
    run_simulation(state, 6, NumpyBackend(), on_step=history)

    assert history.timesteps == [2, 4, 6]
    assert len(history.amplitudes) == 3


def test_history_growth_check():
    history = AmplitudeHistory()
    assert not history.grew_by(2.0)

    history.amplitudes = [1.0, 1.5]
    assert not history.grew_by(2.0)
    history.amplitudes = [1.0, 50.0]
    assert history.grew_by(2.0)
    history.amplitudes = [1.0, float("inf")]
    assert history.grew_by(1e6)
