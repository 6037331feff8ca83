"""Pytest configuration."""
import os
import sys

import numpy as np
import pytest

# Add the repo root to sys.path so `import main` and `import phasesolar` work without installing.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Charts must not need a display
os.environ.setdefault("MPLBACKEND", "Agg")

from phasesolar.configuration import SolarConfiguration  # noqa: E402
from phasesolar.measurements import UsageProfile  # noqa: E402

HOURS = np.arange(24)


def daylight_irradiance(peak=900.0):
    """(12, 24) W/m2: half-sine between 6am and 6pm, weaker in winter months."""
    day = np.where((HOURS > 6) & (HOURS < 18), np.sin((HOURS - 6) * np.pi / 12), 0.0)
    seasonal = 0.6 + 0.4 * np.cos(np.arange(12) * 2 * np.pi / 12)
    return np.outer(seasonal, day) * peak


def household_usage():
    """(12, 24) usage profile with morning and evening peaks and a night-time controlled load."""
    base = 0.3 + 0.5 * np.isin(HOURS, [7, 8, 17, 18, 19, 20])
    seasonal = np.linspace(1.2, 0.8, 12)[:, None]
    controlled = np.where(HOURS < 6, 1.5, 0.1)
    return UsageProfile(
        phase1=seasonal * base * 0.5,
        phase2=seasonal * base * 0.3,
        phase3=seasonal * base * 0.2,
        controlled=np.tile(controlled, (12, 1)),
    )


@pytest.fixture
def irradiance():
    return {"north_west": daylight_irradiance()}


@pytest.fixture
def usage():
    return household_usage()


@pytest.fixture
def config():
    return SolarConfiguration(
        panels={"north_west": 14},
        panel_rating_w=410.0,
        panel_area_sqm=1.92,
        battery_capacity_kwh=5.4,
        controlled_load="grid",
        phase_topology="balanced",
    )
