from dataclasses import dataclass, fields
import numpy as np

from .constants import HOURS_PER_DAY, MONTHS_PER_YEAR


@dataclass
class HourlyUsage:
    """Household demand for one hour (kWh)."""
    phase1: float
    phase2: float
    phase3: float
    controlled: float    # Separately metered water heating load

    @property
    def total(self):
        return self.phase1 + self.phase2 + self.phase3 + self.controlled


@dataclass
class MonthUsage:
    """Representative-day demand for one month. All arrays have 24 values."""
    phase1: np.ndarray
    phase2: np.ndarray
    phase3: np.ndarray
    controlled: np.ndarray

    def hour(self, hour: int) -> HourlyUsage:
        return HourlyUsage(
            phase1=float(self.phase1[hour]),
            phase2=float(self.phase2[hour]),
            phase3=float(self.phase3[hour]),
            controlled=float(self.controlled[hour]),
        )


@dataclass
class UsageProfile:
    """
    Representative-day demand for every month.
    All arrays are shaped (12, 24): month index, hour of day. Values in kWh.
    """
    phase1: np.ndarray
    phase2: np.ndarray
    phase3: np.ndarray
    controlled: np.ndarray

    def __post_init__(self):
        for f in fields(self):
            values = np.asarray(getattr(self, f.name), dtype=float)
            if values.shape != (MONTHS_PER_YEAR, HOURS_PER_DAY):
                raise ValueError(
                    f"Usage '{f.name}' must be shaped ({MONTHS_PER_YEAR}, {HOURS_PER_DAY}), got {values.shape}")
            setattr(self, f.name, values)

    def month(self, month_index: int) -> MonthUsage:
        return MonthUsage(
            phase1=self.phase1[month_index],
            phase2=self.phase2[month_index],
            phase3=self.phase3[month_index],
            controlled=self.controlled[month_index],
        )

    @property
    def total(self):
        return self.phase1 + self.phase2 + self.phase3 + self.controlled


@dataclass
class MonthMeasurements:
    """
    Simulated flows for one month's representative day.
    Every array has 24 values (kWh per hour); battery_level_kwh is the
    state of charge at the end of each hour.
    """
    total_usage_kwh: np.ndarray
    controlled_grid_usage_kwh: np.ndarray
    phase1_grid_usage_kwh: np.ndarray
    phase2_grid_usage_kwh: np.ndarray
    phase3_grid_usage_kwh: np.ndarray
    phase1_solar_usage_kwh: np.ndarray
    phase2_solar_usage_kwh: np.ndarray
    phase3_solar_usage_kwh: np.ndarray
    phase1_exported_kwh: np.ndarray
    phase2_exported_kwh: np.ndarray
    phase3_exported_kwh: np.ndarray
    battery_usage_kwh: np.ndarray
    battery_stored_kwh: np.ndarray
    generation_kwh: np.ndarray
    battery_level_kwh: np.ndarray

    @classmethod
    def zeros(cls):
        return cls(**{f.name: np.zeros(HOURS_PER_DAY) for f in fields(cls)})


@dataclass
class HourlyMeasurementsByMonth:
    """Same metrics as MonthMeasurements, stacked into (12, 24) arrays."""
    total_usage_kwh: np.ndarray
    controlled_grid_usage_kwh: np.ndarray
    phase1_grid_usage_kwh: np.ndarray
    phase2_grid_usage_kwh: np.ndarray
    phase3_grid_usage_kwh: np.ndarray
    phase1_solar_usage_kwh: np.ndarray
    phase2_solar_usage_kwh: np.ndarray
    phase3_solar_usage_kwh: np.ndarray
    phase1_exported_kwh: np.ndarray
    phase2_exported_kwh: np.ndarray
    phase3_exported_kwh: np.ndarray
    battery_usage_kwh: np.ndarray
    battery_stored_kwh: np.ndarray
    generation_kwh: np.ndarray
    battery_level_kwh: np.ndarray

    @classmethod
    def from_months(cls, months):
        return cls(**{
            f.name: np.vstack([getattr(m, f.name) for m in months])
            for f in fields(cls)
        })

    def month(self, month_index: int) -> MonthMeasurements:
        return MonthMeasurements(**{f.name: getattr(self, f.name)[month_index] for f in fields(self)})

    def __len__(self):
        return len(self.total_usage_kwh)


# Flows that can be summed over hours/days. Battery level is a state snapshot.
SUMMABLE_METRICS = tuple(f.name for f in fields(MonthMeasurements) if f.name != "battery_level_kwh")
ALL_METRICS = tuple(f.name for f in fields(MonthMeasurements))
