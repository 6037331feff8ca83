import logging
from dataclasses import dataclass

import numpy as np

from .allocation import get_allocator
from .battery import Battery
from .constants import (
    HOURS_PER_DAY,
    MONTHS_PER_YEAR,
    PHASES,
    DEFAULT_WARMUP_PASSES,
    MAX_WARMUP_PASSES,
    WARMUP_TOLERANCE_KWH,
)
from .exceptions import ConservationError
from .generation import get_total_generation
from .measurements import MonthMeasurements, HourlyMeasurementsByMonth
from .phase_demand import get_phase_demands, get_controlled_phase
from .validation import check_hour

_LOGGER = logging.getLogger(__name__)


@dataclass
class HourResult:
    """Flows for one simulated hour. Per-phase tuples are ordered phase 1..3."""
    total_usage_kwh: float
    controlled_grid_usage_kwh: float
    grid_usage_kwh: tuple
    solar_usage_kwh: tuple
    exported_kwh: tuple
    battery_usage_kwh: float
    battery_stored_kwh: float
    generation_kwh: float
    battery_level_kwh: float


def simulate_hour(allocator, routing, battery, usage, generation) -> HourResult:
    """
    Allocates one hour of generation across the phases, then lets the shared
    battery cover deficits and absorb surpluses. Mutates battery.
    """
    phase_demand = get_phase_demands(usage, routing)
    allocations = allocator(phase_demand.demands, generation)

    # Discharge first: the battery state carried into this hour covers this hour's shortfall
    grid_by_phase, supplied = battery.discharge({a.phase: a.deficit for a in allocations})
    exported_by_phase, stored = battery.charge({a.phase: a.surplus for a in allocations})

    return HourResult(
        total_usage_kwh=usage.total,
        controlled_grid_usage_kwh=phase_demand.controlled_grid,
        grid_usage_kwh=tuple(grid_by_phase.get(p, 0.0) for p in PHASES),
        solar_usage_kwh=tuple(a.solar_usage for a in allocations),
        exported_kwh=tuple(exported_by_phase.get(p, 0.0) for p in PHASES),
        battery_usage_kwh=supplied,
        battery_stored_kwh=stored,
        generation_kwh=generation,
        battery_level_kwh=battery.level_kwh,
    )


def _record(m: MonthMeasurements, hour, r: HourResult):
    m.total_usage_kwh[hour] = r.total_usage_kwh
    m.controlled_grid_usage_kwh[hour] = r.controlled_grid_usage_kwh
    m.phase1_grid_usage_kwh[hour], m.phase2_grid_usage_kwh[hour], m.phase3_grid_usage_kwh[hour] = r.grid_usage_kwh
    m.phase1_solar_usage_kwh[hour], m.phase2_solar_usage_kwh[hour], m.phase3_solar_usage_kwh[hour] = r.solar_usage_kwh
    m.phase1_exported_kwh[hour], m.phase2_exported_kwh[hour], m.phase3_exported_kwh[hour] = r.exported_kwh
    m.battery_usage_kwh[hour] = r.battery_usage_kwh
    m.battery_stored_kwh[hour] = r.battery_stored_kwh
    m.generation_kwh[hour] = r.generation_kwh
    m.battery_level_kwh[hour] = r.battery_level_kwh


def run_day(allocator, routing, battery, usage, generation):
    """
    One pass over hours 0..23, carrying battery state forward.

    Returns:
        (measurements, violation): violation is the first ConservationViolation
        found (the pass stops there) or None.
    """
    m = MonthMeasurements.zeros()
    for hour in range(HOURS_PER_DAY):
        r = simulate_hour(allocator, routing, battery, usage.hour(hour), float(generation[hour]))
        violation = check_hour(hour, r, battery.capacity_kwh)
        if violation is not None:
            return m, violation
        _record(m, hour, r)
    return m, None


def simulate_month(config, usage, generation, month_index=0, converge=False, allocator=None):
    """
    Simulates one month's representative day.

    The battery starts empty and the day is run twice; only the second pass is
    kept, so hour 0 sees the charge carried over from hour 23.
    With converge=True the day is repeated until the battery level profile
    stops changing (capped at MAX_WARMUP_PASSES).

    Args:
        config: SolarConfiguration
        usage: MonthUsage (24 values per field)
        generation: 24 values of generated kWh
        month_index: 0-based month, for error context
        converge: iterate the warm-up to a fixed point instead of two passes
        allocator: pre-selected topology function (looked up from config if None)

    Raises:
        ConservationError: an hour's flows do not add up.
        ConfigurationError: unknown topology or controlled load routing.
    """
    if allocator is None:
        allocator = get_allocator(config.phase_topology)
    routing = config.controlled_load
    get_controlled_phase(routing)

    battery = Battery(config.battery_capacity_kwh)
    max_passes = MAX_WARMUP_PASSES if converge else DEFAULT_WARMUP_PASSES

    previous_levels = None
    converged = False
    for pass_index in range(max_passes):
        measurements, violation = run_day(allocator, routing, battery, usage, generation)
        if violation is not None:
            raise ConservationError(month_index, violation)

        if converge and previous_levels is not None:
            change = np.max(np.abs(measurements.battery_level_kwh - previous_levels))
            if change <= WARMUP_TOLERANCE_KWH:
                _LOGGER.debug(f"Month {month_index + 1}: battery profile converged after {pass_index + 1} passes")
                converged = True
                break
        previous_levels = measurements.battery_level_kwh.copy()

    if converge and not converged:
        _LOGGER.warning(
            f"Month {month_index + 1}: battery profile did not converge within {max_passes} passes")

    return measurements


def simulate(config, irradiance_by_orientation, usage_profile, converge=False) -> HourlyMeasurementsByMonth:
    """
    Runs the full year: generation model, then each month's day simulation.

    Args:
        config: SolarConfiguration
        irradiance_by_orientation: orientation -> (12, 24) W/m2
        usage_profile: UsageProfile
        converge: see simulate_month

    Returns:
        HourlyMeasurementsByMonth with (12, 24) arrays.
    """
    generation = get_total_generation(config, irradiance_by_orientation)
    allocator = get_allocator(config.phase_topology)

    _LOGGER.debug(
        f"Simulating {config.total_panels} panels, {config.battery_capacity_kwh} kWh battery, "
        f"topology={config.phase_topology.value}, controlled load={config.controlled_load.value}")

    months = []
    for month_index in range(MONTHS_PER_YEAR):
        months.append(simulate_month(
            config,
            usage_profile.month(month_index),
            generation[month_index],
            month_index=month_index,
            converge=converge,
            allocator=allocator,
        ))

    return HourlyMeasurementsByMonth.from_months(months)
