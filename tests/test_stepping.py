"""Time stepping, buffer rotation and end-to-end runs on every backend."""
from __future__ import annotations

import numpy as np
import pytest

from conftest import RecordingBackend, make_water_state
from exceptions import ConfigurationError, DispatchError
from simulation.diagnostics import AmplitudeHistory
from simulation.stepping import prepare_backend, read_back, run_simulation, step
from wave_state import WaveParameters, build_initial_state, build_state_from_grids
from world.generation import PointSplash, RandomSplash


def edge_mask(height, width):
    edge = np.zeros((height, width), dtype=bool)
    edge[0, :] = edge[-1, :] = edge[:, 0] = edge[:, -1] = True
    return edge


def test_single_impulse_end_to_end(backend):
    state = make_water_state(8, 8, k=0.25, splash={(4, 4): 1.0})
    field = run_simulation(state, 1, backend).reshape(8, 8)

    expected = np.zeros((8, 8), dtype=np.float32)
    for i, j in [(3, 4), (5, 4), (4, 3), (4, 5)]:
        expected[i, j] = 0.25
    np.testing.assert_array_equal(field, expected)


def test_single_impulse_through_parameters(backend):
    # speed 0.5, dt 1, dx 1 -> k = 0.25
    params = WaveParameters(width=8, height=8, timesteps=1, wave_speed=0.5, dt=1.0, dx=1.0)
    state = build_initial_state(params, PointSplash(4, 4))
    field = run_simulation(state, params.timesteps, backend)

    assert field.shape == (64,)
    assert field.dtype == np.float32
    assert field[4 * 8 + 4] == 0.0
    assert field[3 * 8 + 4] == 0.25
    assert field[4 * 8 + 5] == 0.25
    assert np.count_nonzero(field) == 4


def test_land_is_invariant(backend):
    height, width = 16, 16
    rows, cols = np.ogrid[:height, :width]
    land = (rows - 9) ** 2 + (cols - 10) ** 2 <= 9
    elevation = np.where(land, 50.0, -10.0).astype(np.float32)
    displacement = np.where(land, 1.5, 0.0).astype(np.float32)
    displacement[4, 4] = 3.0
    state = build_state_from_grids(elevation, displacement, 0.4)

    seen = []

    def check_land(s):
        np.testing.assert_array_equal(s.current[land], s.previous[land])
        np.testing.assert_array_equal(s.current[land], 1.5)
        seen.append(s.timestep)

    run_simulation(state, 25, backend, on_step=check_land)
    assert seen == list(range(1, 26))


def test_water_boundary_is_zero_after_every_step(backend):
    state = make_water_state(12, 10, k=0.3, splash={(0, 3): 2.0, (5, 5): 1.0, (9, 11): -1.0})
    edge = edge_mask(10, 12)

    def check_edges(s):
        assert np.all(s.current[edge] == 0.0)

    run_simulation(state, 15, backend, on_step=check_edges)


def test_second_step_matches_closed_form(backend):
    state = make_water_state(5, 5, k=0.25, splash={(2, 2): 1.0, (1, 2): 0.5})
    prepare_backend(state, backend)
    step(state, backend)
    c = state.current.astype(np.float64).copy()
    p = state.previous.astype(np.float64).copy()
    step(state, backend)

    for i in range(1, 4):
        for j in range(1, 4):
            expected = 2 * c[i, j] - p[i, j] + 0.25 * (
                c[i - 1, j] + c[i + 1, j] + c[i, j - 1] + c[i, j + 1] - 4 * c[i, j]
            )
            assert state.current[i, j] == pytest.approx(expected, abs=1e-6)


def test_runs_are_bit_identical(backend):
    params = WaveParameters(width=16, height=16, timesteps=10, wave_speed=0.6, dt=1.0, dx=1.0)
    splash = RandomSplash(seed=1234, drops=6)

    first = run_simulation(build_initial_state(params, splash), params.timesteps, backend)
    second = run_simulation(build_initial_state(params, splash), params.timesteps, backend)

    assert first.tobytes() == second.tobytes()


def test_backends_agree():
    from simulation.dispatch import get_backend

    params = WaveParameters(width=33, height=21, timesteps=30, wave_speed=0.6, dt=1.0, dx=1.0)
    splash = RandomSplash(seed=5, drops=10, sigma=1.0)
    results = {}
    for name, options in [("numpy", {}), ("numba", {}), ("threads", {"workers": 4, "bands": 5})]:
        with get_backend(name, **options) as b:
            results[name] = run_simulation(build_initial_state(params, splash), params.timesteps, b)

    np.testing.assert_array_equal(results["threads"], results["numpy"])
    np.testing.assert_allclose(results["numba"], results["numpy"], rtol=1e-5, atol=1e-6)


def test_unstable_coefficient_diverges(backend):
    state = make_water_state(16, 16, k=1.0, splash={(8, 8): 1.0}, allow_unstable=True)
    history = AmplitudeHistory()

    run_simulation(state, 20, backend, on_step=history)

    assert history.grew_by(1e3)


def test_stable_coefficient_stays_bounded(backend):
    state = make_water_state(16, 16, k=0.25, splash={(8, 8): 1.0})
    history = AmplitudeHistory()

    run_simulation(state, 200, backend, on_step=history)

    assert max(history.amplitudes) < 10.0
    assert np.all(np.isfinite(state.current))


def test_rotation_reuses_the_same_three_buffers(recording_backend):
    state = make_water_state(6, 6, splash={(3, 3): 1.0})
    ids = tuple(id(b) for b in state.buffers)
    scratch_before = state.scratch
    current_before = state.current

    step(state, recording_backend)

    assert state.current is scratch_before
    assert state.previous is current_before
    assert tuple(id(b) for b in state.buffers) == ids
    assert state.timestep == 1


def test_rotation_is_a_three_cycle(recording_backend):
    state = make_water_state(6, 6)
    start = (state.previous_index, state.current_index, state.scratch_index)
    seen = {start}
    for _ in range(2):
        step(state, recording_backend)
        seen.add((state.previous_index, state.current_index, state.scratch_index))
    step(state, recording_backend)

    assert len(seen) == 3
    assert (state.previous_index, state.current_index, state.scratch_index) == start


def test_read_back_is_a_flat_copy(recording_backend):
    state = make_water_state(7, 4, splash={(1, 2): 2.0})
    field = run_simulation(state, 3, recording_backend)

    np.testing.assert_array_equal(field, state.current.ravel())
    field[:] = 123.0
    assert not np.any(state.current == 123.0)
    assert read_back(state).shape == (28,)


@pytest.mark.parametrize("timesteps", [0, -3, 2.5, True])
def test_bad_timestep_count_rejected_before_dispatch(timesteps):
    backend = RecordingBackend()
    state = make_water_state(5, 5)

    with pytest.raises(ConfigurationError):
        run_simulation(state, timesteps, backend)
    assert backend.prepared == 0
    assert backend.dispatches == 0


def test_dispatch_failure_names_stage_and_timestep():
    backend = RecordingBackend(fail_at=3)
    state = make_water_state(6, 6, splash={(3, 3): 1.0})

    with pytest.raises(DispatchError) as info:
        run_simulation(state, 10, backend)

    assert info.value.stage == "dispatch"
    assert info.value.timestep == 3
    assert isinstance(info.value.__cause__, MemoryError)
    # The failed pass never rotated
    assert state.timestep == 3


def test_prepare_failure_is_an_initialization_error():
    backend = RecordingBackend(fail_prepare=True)
    state = make_water_state(6, 6)

    with pytest.raises(DispatchError) as info:
        run_simulation(state, 5, backend)

    assert info.value.stage == "initialization"
    assert backend.dispatches == 0


def test_readback_failure_is_reported():
    state = make_water_state(4, 4)

    def broken():
        raise RuntimeError("transfer failed")

    state.read_current = broken
    with pytest.raises(DispatchError) as info:
        read_back(state)
    assert info.value.stage == "readback"


def test_run_records_messages(recording_backend):
    state = make_water_state(6, 6)
    run_simulation(state, 4, recording_backend)

    assert any("Completed 4 timesteps" in m for m in state.messages)
    assert any("Backend 'recording' ready" in m for m in state.messages)


def test_run_can_skip_an_earlier_prepare(recording_backend):
    state = make_water_state(6, 6, splash={(3, 3): 1.0})
    prepare_backend(state, recording_backend)

    run_simulation(state, 3, recording_backend, prepare=False)

    assert recording_backend.prepared == 1
    assert recording_backend.dispatches == 3
    assert sum("ready" in m for m in state.messages) == 1
