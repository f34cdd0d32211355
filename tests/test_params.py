import pytest

from convection import ConfigurationError, ConvectionParams, ConvectionSimulation


def test_defaults_are_valid():
    params = ConvectionParams().validate()
    assert params.size == 64
    assert params.relaxation_iterations == 4


@pytest.mark.parametrize("changes", [
    {"size": 0},
    {"size": -4},
    {"size": True},
    {"heat_radius": 0},
    {"viscosity": -1e-4},
    {"diffusivity": float("nan")},
    {"heat_amplitude": -0.1},
    {"cooling_rate": 100.5},
    {"cooling_rate": -1.0},
    {"time_scale": -1.0},
    {"dt": 0.0},
    {"relaxation_iterations": 0},
    {"cooling_jitter": 1.5},
])
def test_invalid_values_rejected(changes):
    with pytest.raises(ConfigurationError):
        ConvectionParams().replace(**changes)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_unknown_parameter_rejected():
    with pytest.raises(ConfigurationError, match="warp_speed"):
        ConvectionParams().replace(warp_speed=9)


def test_replace_returns_copy():
    base = ConvectionParams()
    changed = base.replace(cooling_rate=42.0)
    assert changed.cooling_rate == 42.0
    assert base.cooling_rate == 0.5


def test_simulation_rejects_bad_construction():
    with pytest.raises(ConfigurationError):
        ConvectionSimulation(ConvectionParams(size=0))
