import logging
import numpy as np

from .constants import (
    LOW_LIGHT_BANDS,
    FULL_LIGHT_FACTOR,
    REFERENCE_IRRADIANCE_W_PER_SQM,
    WATTS_PER_KW,
    MONTHS_PER_YEAR,
    HOURS_PER_DAY,
)
from .exceptions import ConfigurationError

_LOGGER = logging.getLogger(__name__)

_BAND_BOUNDS = np.array([bound for bound, _ in LOW_LIGHT_BANDS])
_BAND_FACTORS = np.array([factor for _, factor in LOW_LIGHT_BANDS] + [FULL_LIGHT_FACTOR])


def get_panel_efficiency(panel_rating_w, panel_area_sqm):
    """
    Watts generated per Watt of sunlight supplied over the same area.
    The panel rating is the output at the reference irradiance of 1000 W/m2.
    """
    watts_generated_per_sqm = panel_rating_w / panel_area_sqm
    return watts_generated_per_sqm / REFERENCE_IRRADIANCE_W_PER_SQM


def low_light_derating(irradiance):
    """
    Step function for panel/inverter losses at low light.
    Each band includes its lower bound: 1 W/m2 -> 0.3, 400 W/m2 -> 1.0.
    """
    irradiance = np.asarray(irradiance, dtype=float)
    return _BAND_FACTORS[np.digitize(irradiance, _BAND_BOUNDS, right=False)]


def get_generation_kwh(irradiance, efficiency, panel_area_sqm):
    """Energy generated in one hour (kWh) for a given irradiance (W/m2)."""
    irradiance = np.asarray(irradiance, dtype=float)
    return irradiance * efficiency * low_light_derating(irradiance) * panel_area_sqm / WATTS_PER_KW


def get_total_generation(config, irradiance_by_orientation):
    """
    Sums generation across roof orientations.

    Args:
        config: SolarConfiguration
        irradiance_by_orientation: orientation -> (12, 24) array of W/m2

    Returns:
        (12, 24) array of generated kWh per hour.
    """
    efficiency = get_panel_efficiency(config.panel_rating_w, config.panel_area_sqm)
    generation = np.zeros((MONTHS_PER_YEAR, HOURS_PER_DAY))

    for orientation in irradiance_by_orientation:
        if config.panels.get(orientation, 0) == 0:
            _LOGGER.debug(f"No panels facing '{orientation}'. Ignoring its irradiance data.")

    for orientation, count in config.panels.items():
        if count == 0:
            continue
        if orientation not in irradiance_by_orientation:
            raise ConfigurationError(
                f"{count} panels face '{orientation}' but no irradiance data was provided for it")

        irradiance = np.asarray(irradiance_by_orientation[orientation], dtype=float)
        if irradiance.shape != generation.shape:
            raise ValueError(
                f"Irradiance for '{orientation}' must be shaped {generation.shape}, got {irradiance.shape}")

        panel_area = config.panel_area_sqm * count
        generation += get_generation_kwh(irradiance, efficiency, panel_area)

    return generation
