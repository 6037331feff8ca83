import pytest

from phasesolar.battery import Battery


def test_discharge_water_filling_runs_battery_dry():
    """Level 3 over deficits 1/2/4: one round of 1 each empties it, the grid covers the rest."""
    battery = Battery(capacity_kwh=10.0, level_kwh=3.0)

    remaining, supplied = battery.discharge({1: 1.0, 2: 2.0, 3: 4.0})

    assert supplied == pytest.approx(3.0)
    assert battery.level_kwh == 0.0
    assert remaining == pytest.approx({2: 1.0, 3: 3.0})


def test_discharge_meets_all_deficits():
    battery = Battery(capacity_kwh=10.0, level_kwh=10.0)

    remaining, supplied = battery.discharge({1: 1.0, 2: 2.0, 3: 0.0})

    assert remaining == {}
    assert supplied == pytest.approx(3.0)
    assert battery.level_kwh == pytest.approx(7.0)


def test_discharge_splits_evenly_across_phases():
    """Two rounds: 0.5 each to three phases, then the remaining 1.5 split over the two still short."""
    battery = Battery(capacity_kwh=10.0, level_kwh=3.0)

    remaining, supplied = battery.discharge({1: 0.5, 2: 2.0, 3: 2.0})

    assert supplied == pytest.approx(3.0)
    assert battery.level_kwh == 0.0
    assert remaining == pytest.approx({2: 0.75, 3: 0.75})


def test_discharge_empty_battery():
    battery = Battery(capacity_kwh=5.0)
    remaining, supplied = battery.discharge({1: 1.0, 2: 0.0})

    assert supplied == 0.0
    assert remaining == {1: 1.0}


def test_charge_water_filling_fills_battery():
    battery = Battery(capacity_kwh=3.0)

    remaining, stored = battery.charge({1: 1.0, 2: 2.0, 3: 4.0})

    assert stored == pytest.approx(3.0)
    assert battery.level_kwh == 3.0
    assert remaining == pytest.approx({2: 1.0, 3: 3.0})


def test_charge_absorbs_everything_with_headroom():
    battery = Battery(capacity_kwh=10.0, level_kwh=2.0)

    remaining, stored = battery.charge({1: 0.5, 3: 1.5})

    assert remaining == {}
    assert stored == pytest.approx(2.0)
    assert battery.level_kwh == pytest.approx(4.0)


def test_charge_full_battery_exports_everything():
    battery = Battery(capacity_kwh=2.0, level_kwh=2.0)
    remaining, stored = battery.charge({1: 1.0, 2: 0.25})

    assert stored == 0.0
    assert remaining == {1: 1.0, 2: 0.25}


def test_zero_capacity_battery_is_inert():
    battery = Battery(capacity_kwh=0.0)

    assert battery.charge({1: 1.0}) == ({1: 1.0}, 0.0)
    assert battery.discharge({1: 1.0}) == ({1: 1.0}, 0.0)
    assert battery.level_kwh == 0.0


def test_level_stays_in_bounds_with_awkward_fractions():
    battery = Battery(capacity_kwh=1.0, level_kwh=0.1)
    for _ in range(50):
        battery.charge({1: 0.1, 2: 0.2, 3: 1.0 / 3})
        assert 0.0 <= battery.level_kwh <= 1.0
        battery.discharge({1: 0.3, 2: 1.0 / 7, 3: 0.05})
        assert 0.0 <= battery.level_kwh <= 1.0


@pytest.mark.parametrize("capacity, level", [(-1.0, 0.0), (5.0, 6.0), (5.0, -0.1)])
def test_invalid_state_raises(capacity, level):
    with pytest.raises(ValueError):
        Battery(capacity_kwh=capacity, level_kwh=level)
