import numpy as np

from .constants import DAYS_IN_MONTH, PHASES
from .measurements import SUMMABLE_METRICS

_DAYS = np.array(DAYS_IN_MONTH, dtype=float)


def accumulate(values):
    """Running sum along the hour axis: index i holds the sum of hours 0..i."""
    return np.cumsum(np.asarray(values, dtype=float), axis=-1)


def annual_total(monthly_hourly_values):
    """
    Scales each month's representative day by its number of days and sums the year.

    Args:
        monthly_hourly_values: (12, 24) array of kWh per hour
    """
    values = np.asarray(monthly_hourly_values, dtype=float)
    return float(np.sum(values.sum(axis=1) * _DAYS))


def get_cumulative_measurements(result):
    """Cumulative-within-month (12, 24) arrays for every summable metric."""
    return {name: accumulate(getattr(result, name)) for name in SUMMABLE_METRICS}


def get_annual_measurements(result):
    """Annual kWh totals for every summable metric."""
    return {name: annual_total(getattr(result, name)) for name in SUMMABLE_METRICS}


def get_phase_total(values_by_metric, kind):
    """Sums the three per-phase entries of a metric family, e.g. kind='grid_usage'."""
    return sum(values_by_metric[f"phase{p}_{kind}_kwh"] for p in PHASES)
