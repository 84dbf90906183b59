import numpy as np
import pytest

from cloud_generator.runtime.appearance import AppearanceState
from cloud_generator.weather import Weather


def test_initial_state():
    state = AppearanceState()
    assert state.weather is Weather.CLEAR
    assert state.transition == 0.0
    assert state.direction == 1
    assert not state.cycle_enabled
    assert state.brightness == 100


def test_set_weather_ignores_case_and_requests_resynthesis():
    state = AppearanceState()
    assert state.set_weather("STORMY")
    assert state.weather is Weather.STORMY
    assert state.revision == 1


def test_unrecognized_weather_changes_nothing(synthesizer):
    state = AppearanceState()
    state.set_weather("cloudy")
    before = synthesizer.generate(0, state.weather, state.transition)
    revision = state.revision

    assert not state.set_weather("foggy")

    assert state.weather is Weather.CLOUDY
    assert state.revision == revision
    after = synthesizer.generate(0, state.weather, state.transition)
    assert np.array_equal(before, after)


def test_set_daytime_snaps_immediately():
    state = AppearanceState()
    state.set_daytime(False)
    assert state.transition == 1.0
    assert state.brightness == 40
    state.set_daytime(True)
    assert state.transition == 0.0
    assert state.revision == 2


def test_tick_without_cycle_is_a_no_op():
    state = AppearanceState()
    for _ in range(10):
        assert not state.tick()
    assert state.transition == 0.0
    assert state.revision == 0


def test_cycle_rises_then_flips_direction():
    state = AppearanceState(speed=0.01)
    state.enable_cycle(100)

    previous = state.transition
    for _ in range(50):
        state.tick()
        assert state.transition > previous
        assert state.transition <= 1.0
        previous = state.transition
    assert state.transition == pytest.approx(0.5)
    assert state.direction == 1

    for _ in range(100):
        state.tick()
    assert state.direction == -1
    previous = state.transition
    state.tick()
    assert state.transition < previous
    assert state.transition == pytest.approx(0.49)


def test_transition_never_leaves_unit_interval():
    state = AppearanceState(speed=0.37)
    state.enable_cycle(7)
    for _ in range(1000):
        state.tick()
        assert 0.0 <= state.transition <= 1.0


def test_brightness_interpolates_between_endpoints():
    state = AppearanceState(speed=0.25)
    state.enable_cycle(1000)
    state.tick()
    state.tick()
    assert state.transition == pytest.approx(0.5)
    assert state.brightness == pytest.approx(70.0)


def test_every_cycle_tick_requests_resynthesis():
    state = AppearanceState()
    state.enable_cycle(10)
    for expected in range(1, 6):
        assert state.tick()
        assert state.revision == expected


@pytest.mark.parametrize("period", [0, -5])
def test_cycle_period_must_be_positive(period):
    state = AppearanceState()
    with pytest.raises(ValueError):
        state.enable_cycle(period)
    assert not state.cycle_enabled


@pytest.mark.parametrize("period", [0.5, 0.99])
def test_fractional_period_below_one_tick_is_rejected(period):
    state = AppearanceState()
    with pytest.raises(ValueError):
        state.enable_cycle(period)
    assert not state.cycle_enabled
    state.tick()
    assert state.direction == 1
