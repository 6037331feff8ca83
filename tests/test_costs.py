import math

import pytest

from phasesolar.costs import PricingConfiguration, calculate_cost_summary, load_pricing_configuration
from phasesolar.exceptions import ConfigurationError

PRICING = PricingConfiguration(grid_price_per_kwh=0.30, controlled_price_per_kwh=0.20,
                               feedback_price_per_kwh=0.10, installation_cost=1000.0)


def make_annual(**overrides):
    annual = {
        "total_usage_kwh": 5000.0,
        "controlled_grid_usage_kwh": 1000.0,
        "phase1_grid_usage_kwh": 500.0,
        "phase2_grid_usage_kwh": 300.0,
        "phase3_grid_usage_kwh": 200.0,
        "phase1_solar_usage_kwh": 1000.0,
        "phase2_solar_usage_kwh": 600.0,
        "phase3_solar_usage_kwh": 400.0,
        "phase1_exported_kwh": 800.0,
        "phase2_exported_kwh": 700.0,
        "phase3_exported_kwh": 500.0,
        "battery_usage_kwh": 1000.0,
        "battery_stored_kwh": 1000.0,
        "generation_kwh": 5000.0,
    }
    annual.update(overrides)
    return annual


def test_cost_summary():
    summary = calculate_cost_summary(make_annual(), PRICING, annual_controlled_usage_kwh=1000.0)

    assert summary["annual_grid_usage_kwh"] == pytest.approx(2000.0)
    assert summary["annual_solar_usage_kwh"] == pytest.approx(2000.0)
    assert summary["annual_feedback_kwh"] == pytest.approx(2000.0)
    assert summary["annual_battery_usage_kwh"] == pytest.approx(1000.0)

    # 4000 uncontrolled at 0.30 + 1000 controlled at 0.20
    assert summary["annual_cost_without_solar"] == pytest.approx(1400.0)
    # 1000 phase grid at 0.30 + 1000 controlled grid at 0.20
    assert summary["annual_grid_cost"] == pytest.approx(500.0)
    assert summary["annual_feedback_earnings"] == pytest.approx(200.0)
    assert summary["annual_cost_with_solar"] == pytest.approx(300.0)
    assert summary["annual_saving"] == pytest.approx(1100.0)
    assert summary["payback_years"] == pytest.approx(1000.0 / 1100.0)


def test_no_saving_never_pays_back():
    annual = make_annual(phase1_exported_kwh=0.0, phase2_exported_kwh=0.0, phase3_exported_kwh=0.0,
                         phase1_grid_usage_kwh=4000.0, phase2_grid_usage_kwh=0.0, phase3_grid_usage_kwh=0.0)

    summary = calculate_cost_summary(annual, PRICING, annual_controlled_usage_kwh=1000.0)

    assert summary["annual_saving"] == pytest.approx(0.0)
    assert math.isinf(summary["payback_years"])


def test_load_pricing(tmp_path):
    path = tmp_path / "pricing.json"
    path.write_text('{\n'
                    '  "description": "Evening tariff",\n'
                    '  "grid_price_per_kwh": 0.31, // peak\n'
                    '  "feedback_price_per_kwh": "0.08"\n'
                    '}\n')

    pricing = load_pricing_configuration(str(path))

    assert pricing.grid_price_per_kwh == pytest.approx(0.31)
    assert pricing.feedback_price_per_kwh == pytest.approx(0.08)
    assert pricing.controlled_price_per_kwh == PricingConfiguration().controlled_price_per_kwh


@pytest.mark.parametrize("content", [
    '{"grid_price": 0.3}',
    '{"grid_price_per_kwh": "cheap"}',
])
def test_load_pricing_invalid(tmp_path, content):
    path = tmp_path / "pricing.json"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        load_pricing_configuration(str(path))
