import logging
from dataclasses import dataclass, asdict

from .aggregate import get_phase_total
from .configuration import read_json_with_comments
from .constants import (
    DEFAULT_GRID_PRICE_PER_KWH,
    DEFAULT_CONTROLLED_PRICE_PER_KWH,
    DEFAULT_FEEDBACK_PRICE_PER_KWH,
    DEFAULT_INSTALLATION_COST,
)
from .exceptions import ConfigurationError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingConfiguration:
    grid_price_per_kwh: float = DEFAULT_GRID_PRICE_PER_KWH
    controlled_price_per_kwh: float = DEFAULT_CONTROLLED_PRICE_PER_KWH
    feedback_price_per_kwh: float = DEFAULT_FEEDBACK_PRICE_PER_KWH
    installation_cost: float = DEFAULT_INSTALLATION_COST

    def to_dict(self):
        return asdict(self)


def load_pricing_configuration(filename) -> PricingConfiguration:
    data = read_json_with_comments(filename)
    try:
        return PricingConfiguration(**{k: float(v) for k, v in data.items() if k != 'description'})
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid pricing configuration in {filename}: {e}") from e


def calculate_cost_summary(annual, pricing: PricingConfiguration, annual_controlled_usage_kwh=0.0):
    """
    Annual cost with and without solar, and the time to recoup installation.

    Args:
        annual: metric -> annual kWh (from get_annual_measurements)
        pricing: PricingConfiguration
        annual_controlled_usage_kwh: controlled load demand for the year,
            priced at the controlled rate in the no-solar baseline.
    """
    annual_usage = annual['total_usage_kwh']
    annual_phase_grid = get_phase_total(annual, 'grid_usage')
    annual_controlled_grid = annual['controlled_grid_usage_kwh']
    annual_solar_usage = get_phase_total(annual, 'solar_usage')
    annual_battery_usage = annual['battery_usage_kwh']
    annual_feedback = get_phase_total(annual, 'exported')

    uncontrolled_usage = annual_usage - annual_controlled_usage_kwh
    cost_without_solar = (uncontrolled_usage * pricing.grid_price_per_kwh
                          + annual_controlled_usage_kwh * pricing.controlled_price_per_kwh)

    grid_cost = (annual_phase_grid * pricing.grid_price_per_kwh
                 + annual_controlled_grid * pricing.controlled_price_per_kwh)
    feedback_earnings = annual_feedback * pricing.feedback_price_per_kwh
    cost_with_solar = grid_cost - feedback_earnings
    saving = cost_without_solar - cost_with_solar

    if saving > 0:
        payback_years = pricing.installation_cost / saving
    else:
        _LOGGER.warning(f"Annual saving is {saving:.2f}; installation cost is never recouped.")
        payback_years = float('inf')

    return {
        'annual_usage_kwh': annual_usage,
        'annual_grid_usage_kwh': annual_phase_grid + annual_controlled_grid,
        'annual_solar_usage_kwh': annual_solar_usage,
        'annual_battery_usage_kwh': annual_battery_usage,
        'annual_feedback_kwh': annual_feedback,
        'annual_grid_cost': grid_cost,
        'annual_feedback_earnings': feedback_earnings,
        'annual_cost_with_solar': cost_with_solar,
        'annual_cost_without_solar': cost_without_solar,
        'annual_saving': saving,
        'payback_years': payback_years,
    }
