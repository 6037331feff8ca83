"""
Phase allocation: how one hour's generation reaches each phase.

Each topology is a plain function taking the per-phase demands (phase 1 first)
and the hour's generation, returning one PhaseAllocation per phase in phase
order. get_allocator() picks the function once per configuration so the
per-hour loop does not branch on topology.
"""
import functools
from dataclasses import dataclass

from .configuration import PhaseTopology
from .exceptions import ConfigurationError


@dataclass
class PhaseAllocation:
    phase: int
    generated_kwh: float   # Generation pushed onto this phase
    usage_kwh: float       # Demand on this phase (excluding grid-only controlled load)

    @property
    def deficit(self):
        return max(0.0, self.usage_kwh - self.generated_kwh)

    @property
    def surplus(self):
        return max(0.0, self.generated_kwh - self.usage_kwh)

    @property
    def solar_usage(self):
        return min(self.generated_kwh, self.usage_kwh)


def allocate_single_phase(demands, generation, phase):
    """Single-phase inverter wired to `phase`: the other phases see no generation."""
    if not 1 <= phase <= len(demands):
        raise ConfigurationError(f"Inverter phase {phase} outside 1..{len(demands)}")
    return [
        PhaseAllocation(phase=i + 1, generated_kwh=generation if i + 1 == phase else 0.0, usage_kwh=usage)
        for i, usage in enumerate(demands)
    ]


def allocate_equal(demands, generation):
    """Multi-phase inverter splitting output equally, regardless of demand."""
    share = generation / len(demands)
    return [
        PhaseAllocation(phase=i + 1, generated_kwh=share, usage_kwh=usage)
        for i, usage in enumerate(demands)
    ]


def allocate_balanced(demands, generation):
    """
    Balanced inverter: meet the largest demands first, then push whatever is
    left equally onto every phase (including phases already covered).
    """
    remaining = generation
    # Descending demand; equal demands keep ascending phase order
    order = sorted(range(len(demands)), key=lambda i: (-demands[i], i))

    generated = [0.0] * len(demands)
    for i in order:
        generated[i] = min(demands[i], remaining)
        remaining -= generated[i]

    leftover_share = remaining / len(demands)
    return [
        PhaseAllocation(phase=i + 1, generated_kwh=generated[i] + leftover_share, usage_kwh=usage)
        for i, usage in enumerate(demands)
    ]


_ALLOCATORS = {
    PhaseTopology.SINGLE_PHASE_1: functools.partial(allocate_single_phase, phase=1),
    PhaseTopology.SINGLE_PHASE_2: functools.partial(allocate_single_phase, phase=2),
    PhaseTopology.SINGLE_PHASE_3: functools.partial(allocate_single_phase, phase=3),
    PhaseTopology.EQUAL_DISTRIBUTION: allocate_equal,
    PhaseTopology.BALANCED: allocate_balanced,
}


def get_allocator(topology):
    """Returns fn(demands, generation) -> [PhaseAllocation] for a topology."""
    try:
        return _ALLOCATORS[topology]
    except (KeyError, TypeError):
        raise ConfigurationError(f"Unexpected phase configuration option: {topology!r}") from None
