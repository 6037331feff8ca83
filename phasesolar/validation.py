"""
Per-hour energy accounting checks.

The checks return a ConservationViolation (or None) instead of raising; the
caller decides when a violation becomes a ConservationError.
"""
from dataclasses import dataclass
import math

from .constants import CONSERVATION_REL_TOLERANCE, CONSERVATION_ABS_TOLERANCE

USAGE = "usage"
GENERATION = "generation"
BATTERY_LEVEL = "battery_level"


@dataclass
class ConservationViolation:
    kind: str         # usage | generation | battery_level
    hour: int
    total: float      # Declared total (or capacity for battery_level)
    computed: float   # Sum of components (or level for battery_level)


def is_balanced(total, computed):
    return math.isclose(computed, total,
                        rel_tol=CONSERVATION_REL_TOLERANCE,
                        abs_tol=CONSERVATION_ABS_TOLERANCE)


def check_usage(hour, total_usage, components):
    computed = math.fsum(components)
    if is_balanced(total_usage, computed):
        return None
    return ConservationViolation(kind=USAGE, hour=hour, total=total_usage, computed=computed)


def check_generation(hour, generation, components):
    computed = math.fsum(components)
    if is_balanced(generation, computed):
        return None
    return ConservationViolation(kind=GENERATION, hour=hour, total=generation, computed=computed)


def check_battery_level(hour, level, capacity):
    if 0.0 <= level <= capacity:
        return None
    return ConservationViolation(kind=BATTERY_LEVEL, hour=hour, total=capacity, computed=level)


def check_hour(hour, result, capacity):
    """
    Validates one simulated hour (an HourResult).
    Returns the first violation found, or None.
    """
    usage_components = (
        [result.controlled_grid_usage_kwh]
        + list(result.grid_usage_kwh)
        + list(result.solar_usage_kwh)
        + [result.battery_usage_kwh]
    )
    generation_components = (
        list(result.solar_usage_kwh)
        + list(result.exported_kwh)
        + [result.battery_stored_kwh]
    )

    return (
        check_usage(hour, result.total_usage_kwh, usage_components)
        or check_generation(hour, result.generation_kwh, generation_components)
        or check_battery_level(hour, result.battery_level_kwh, capacity)
    )
