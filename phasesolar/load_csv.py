import pandas as pd
import numpy as np

from .constants import (
    HOURS_PER_DAY,
    MONTHS_PER_YEAR,
    MONTH_NAMES,
    DEFAULT_PHASE_DISTRIBUTION,
    IRRADIANCE_PERIOD_COLUMN,
    IRRADIANCE_VALUE_COLUMN,
    USAGE_TIME_COLUMN,
    USAGE_UNCONTROLLED_COLUMN,
    USAGE_CONTROLLED_COLUMN,
)
from .measurements import UsageProfile


def _require_columns(df, required_cols, filepath):
    for col in required_cols:
        if col not in df.columns:
            raise ValueError(f"Missing required column in {filepath}: {col}")


def load_irradiance_csv(filepath: str) -> np.ndarray:
    """
    Loads a solar radiation table (one row per month and hour) into a
    (12, 24) array of W/m2.

    Expects CSV columns: 'Month & hour' (e.g. 'Jan 13:00') and 'Hourly W/m2'.
    """
    print(f"Loading irradiance from {filepath}...")
    df = pd.read_csv(filepath)
    _require_columns(df, [IRRADIANCE_PERIOD_COLUMN, IRRADIANCE_VALUE_COLUMN], filepath)

    # 'Jan 13:00' -> month 0, hour 13
    period = df[IRRADIANCE_PERIOD_COLUMN].astype(str).str.strip().str.split(r'\s+', n=1, expand=True)
    month_idx = pd.to_datetime(period[0], format='%b').dt.month.values - 1
    hour_idx = period[1].str.split(':').str[0].astype(int).values

    values = pd.to_numeric(df[IRRADIANCE_VALUE_COLUMN], errors='coerce').values

    result = np.full((MONTHS_PER_YEAR, HOURS_PER_DAY), np.nan)
    result[month_idx, hour_idx] = values

    missing = np.argwhere(np.isnan(result))
    if len(missing) > 0:
        month, hour = missing[0]
        raise ValueError(
            f"Irradiance data in {filepath} is incomplete: {len(missing)} month/hour cells missing "
            f"(first: {MONTH_NAMES[month]} {hour:02d}:00)")

    print(f"Successfully loaded {len(df)} irradiance rows.")
    return result


def _average_day_by_month(df, column):
    """
    Sums readings into hourly buckets per day (hours without readings count as 0),
    then averages each hour across the days of each month.
    Returns a (12, 24) DataFrame indexed by month 1..12 (NaN rows for months without data).
    """
    date = df['time'].dt.normalize().rename('date')
    hour = df['time'].dt.hour.rename('hour')
    hourly = df.groupby([date, hour])[column].sum()
    days = hourly.unstack('hour', fill_value=0.0).reindex(columns=range(HOURS_PER_DAY), fill_value=0.0)
    monthly = days.groupby(pd.DatetimeIndex(days.index).month).mean()
    return monthly.reindex(range(1, MONTHS_PER_YEAR + 1))


def split_by_phase(uncontrolled, phase_distribution=DEFAULT_PHASE_DISTRIBUTION):
    """
    Splits uncontrolled load across three phases using per-hour shares.

    Args:
        uncontrolled: (..., 24) array of kWh
        phase_distribution: 24 rows of (phase 1 share, phase 2 share); phase 3 takes the rest.

    Returns:
        (phase1, phase2, phase3) arrays shaped like uncontrolled.
    """
    shares = np.asarray(phase_distribution, dtype=float)
    if shares.shape != (HOURS_PER_DAY, 2):
        raise ValueError(f"Phase distribution must have {HOURS_PER_DAY} rows of 2 shares, got {shares.shape}")
    if np.any(shares < 0) or np.any(shares.sum(axis=1) > 1.0):
        raise ValueError("Phase distribution shares must be non-negative and sum to at most 1 per hour")

    phase1_share = shares[:, 0]
    phase2_share = shares[:, 1]
    phase3_share = 1.0 - (phase1_share + phase2_share)
    return uncontrolled * phase1_share, uncontrolled * phase2_share, uncontrolled * phase3_share


def load_usage_csv(filepath: str, phase_distribution=DEFAULT_PHASE_DISTRIBUTION) -> UsageProfile:
    """
    Loads timestamped meter readings into representative-day usage per month.

    Expects CSV columns: 'Time stamp', 'Meter 1 Value (kWh)' (uncontrolled load)
    and 'Meter 2 Value (kWh)' (controlled / water heating load). Readings may be
    sub-hourly; blank readings count as zero.
    """
    print(f"Loading usage from {filepath}...")
    df = pd.read_csv(filepath)
    _require_columns(df, [USAGE_TIME_COLUMN, USAGE_UNCONTROLLED_COLUMN, USAGE_CONTROLLED_COLUMN], filepath)

    df['time'] = pd.to_datetime(df[USAGE_TIME_COLUMN])
    df = df.sort_values('time').reset_index(drop=True)
    df['uncontrolled'] = pd.to_numeric(df[USAGE_UNCONTROLLED_COLUMN], errors='coerce').fillna(0.0)
    df['controlled'] = pd.to_numeric(df[USAGE_CONTROLLED_COLUMN], errors='coerce').fillna(0.0)

    uncontrolled = _average_day_by_month(df, 'uncontrolled')
    controlled = _average_day_by_month(df, 'controlled')

    # The simulator needs every month; averaging an empty month is undefined
    missing_months = [MONTH_NAMES[m - 1] for m in uncontrolled.index[uncontrolled.isna().any(axis=1)]]
    if missing_months:
        raise ValueError(f"Usage data in {filepath} has no readings for: {', '.join(missing_months)}")

    phase1, phase2, phase3 = split_by_phase(uncontrolled.values, phase_distribution)

    print(f"Successfully loaded {len(df)} usage rows.")
    return UsageProfile(
        phase1=phase1,
        phase2=phase2,
        phase3=phase3,
        controlled=controlled.values,
    )
