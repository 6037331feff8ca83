import numpy as np
import pytest

from phasesolar.configuration import SolarConfiguration
from phasesolar.exceptions import ConfigurationError
from phasesolar.generation import (
    get_panel_efficiency,
    low_light_derating,
    get_generation_kwh,
    get_total_generation,
)


def test_panel_efficiency():
    # 410W over 1.92 m2 at 1000 W/m2
    assert get_panel_efficiency(410.0, 1.92) == pytest.approx(410.0 / 1.92 / 1000.0)
    assert get_panel_efficiency(200.0, 1.0) == pytest.approx(0.2)


@pytest.mark.parametrize("irradiance, factor", [
    (0.0, 0.0),
    (0.99, 0.0),
    (1.0, 0.3),      # Lower bound of each band is inclusive
    (24.99, 0.3),
    (25.0, 0.6),
    (49.9, 0.6),
    (50.0, 0.87),
    (99.0, 0.87),
    (100.0, 0.94),
    (199.0, 0.94),
    (200.0, 0.98),
    (399.9, 0.98),
    (400.0, 1.0),
    (1100.0, 1.0),
])
def test_low_light_derating_bands(irradiance, factor):
    assert low_light_derating(irradiance) == pytest.approx(factor)


def test_low_light_derating_vectorized():
    values = np.array([[0.5, 30.0], [150.0, 800.0]])
    np.testing.assert_allclose(low_light_derating(values), [[0.0, 0.6], [0.94, 1.0]])


def test_generation_kwh():
    # 1000 W/m2 * 0.2 * 1.0 * 10 m2 / 1000 = 2 kWh
    assert get_generation_kwh(1000.0, 0.2, 10.0) == pytest.approx(2.0)
    # Derated band: 150 * 0.2 * 0.94 * 10 / 1000
    assert get_generation_kwh(150.0, 0.2, 10.0) == pytest.approx(0.282)
    assert get_generation_kwh(0.5, 0.2, 10.0) == 0.0


def test_total_generation_sums_orientations():
    config = SolarConfiguration(panels={"north_west": 2, "north_east": 1}, panel_rating_w=200.0, panel_area_sqm=1.0)
    nw = np.full((12, 24), 500.0)
    ne = np.full((12, 24), 1000.0)

    generation = get_total_generation(config, {"north_west": nw, "north_east": ne})

    # nw: 500 * 0.2 * 2 m2 / 1000 = 0.2; ne: 1000 * 0.2 * 1 m2 / 1000 = 0.2
    assert generation.shape == (12, 24)
    np.testing.assert_allclose(generation, 0.4)


def test_total_generation_ignores_orientation_without_panels():
    config = SolarConfiguration(panels={"north_west": 1, "north_east": 0}, panel_rating_w=200.0, panel_area_sqm=1.0)
    data = {"north_west": np.full((12, 24), 1000.0), "north_east": np.full((12, 24), 1000.0), "south": np.ones((12, 24))}

    generation = get_total_generation(config, data)
    np.testing.assert_allclose(generation, 0.2)


def test_total_generation_missing_irradiance_raises():
    config = SolarConfiguration(panels={"north_west": 3})
    with pytest.raises(ConfigurationError):
        get_total_generation(config, {})


def test_total_generation_bad_shape_raises():
    config = SolarConfiguration(panels={"north_west": 3})
    with pytest.raises(ValueError):
        get_total_generation(config, {"north_west": np.ones(24)})
