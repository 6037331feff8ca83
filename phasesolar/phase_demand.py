from dataclasses import dataclass

from .configuration import ControlledLoadRouting
from .exceptions import ConfigurationError

# Phase that absorbs the controlled load for each routing choice (None = grid only)
_CONTROLLED_PHASE = {
    ControlledLoadRouting.GRID: None,
    ControlledLoadRouting.PHASE_1: 1,
    ControlledLoadRouting.PHASE_2: 2,
    ControlledLoadRouting.PHASE_3: 3,
}


@dataclass
class PhaseDemand:
    demands: tuple          # kWh for phases 1, 2, 3 (contestable by solar / battery)
    controlled_grid: float  # kWh always drawn from the grid


def get_controlled_phase(routing):
    if routing not in _CONTROLLED_PHASE:
        raise ConfigurationError(f"Unexpected controlled load routing: {routing!r}")
    return _CONTROLLED_PHASE[routing]


def get_phase_demands(usage, routing) -> PhaseDemand:
    """
    Maps one hour's metered usage onto the three phases.
    The controlled load either joins the phase it is wired to or stays in a
    grid-only bucket that solar and battery never see.
    """
    controlled_phase = get_controlled_phase(routing)
    demands = [usage.phase1, usage.phase2, usage.phase3]

    if controlled_phase is None:
        return PhaseDemand(demands=tuple(demands), controlled_grid=usage.controlled)

    demands[controlled_phase - 1] += usage.controlled
    return PhaseDemand(demands=tuple(demands), controlled_grid=0.0)
