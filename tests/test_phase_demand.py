import pytest

from phasesolar.configuration import ControlledLoadRouting
from phasesolar.exceptions import ConfigurationError
from phasesolar.measurements import HourlyUsage
from phasesolar.phase_demand import get_phase_demands

USAGE = HourlyUsage(phase1=1.0, phase2=2.0, phase3=3.0, controlled=0.5)


def test_grid_routing_keeps_controlled_load_separate():
    result = get_phase_demands(USAGE, ControlledLoadRouting.GRID)
    assert result.demands == (1.0, 2.0, 3.0)
    assert result.controlled_grid == 0.5


@pytest.mark.parametrize("routing, expected", [
    (ControlledLoadRouting.PHASE_1, (1.5, 2.0, 3.0)),
    (ControlledLoadRouting.PHASE_2, (1.0, 2.5, 3.0)),
    (ControlledLoadRouting.PHASE_3, (1.0, 2.0, 3.5)),
])
def test_controlled_load_merged_into_wired_phase(routing, expected):
    result = get_phase_demands(USAGE, routing)
    assert result.demands == pytest.approx(expected)
    assert result.controlled_grid == 0.0


def test_total_demand_preserved():
    for routing in ControlledLoadRouting:
        result = get_phase_demands(USAGE, routing)
        assert sum(result.demands) + result.controlled_grid == pytest.approx(USAGE.total)


def test_unknown_routing_raises():
    with pytest.raises(ConfigurationError):
        get_phase_demands(USAGE, "phase4")
