#!/usr/bin/python3

import argparse
import datetime
import json
import logging
import os
import sys

import numpy as np

from phasesolar import load_csv
from phasesolar import results
from phasesolar.aggregate import get_annual_measurements, get_cumulative_measurements, annual_total
from phasesolar.configuration import load_solar_configuration
from phasesolar.costs import PricingConfiguration, load_pricing_configuration, calculate_cost_summary
from phasesolar.exceptions import ConfigurationError, ConservationError
from phasesolar.measurements import ALL_METRICS
from phasesolar.run_model import simulate


def parse_irradiance_args(values):
    """['north_west=nw.csv', ...] -> {'north_west': 'nw.csv', ...}"""
    sources = {}
    for value in values or []:
        name, sep, path = value.partition('=')
        if not sep or not name or not path:
            raise ValueError(f"Expected ORIENTATION=CSV for --irradiance, got '{value}'")
        sources[name.strip()] = path.strip()
    return sources


def export_debug_output(filename, config, pricing, result, cumulative, annual, cost_summary):
    """Export simulation results to JSON for agent/automation use."""

    def to_list(arr):
        return np.asarray(arr, dtype=float).tolist()

    def finite_or_none(x):
        return float(x) if np.isfinite(x) else None

    debug_data = {
        "generated_at": datetime.datetime.now().isoformat(),
        "solar_configuration": config.to_dict(),
        "pricing_configuration": pricing.to_dict(),
        "annual": {k: float(v) for k, v in annual.items()},
        "cost_summary": {k: finite_or_none(v) for k, v in cost_summary.items()},
        "hourly_by_month": {name: to_list(getattr(result, name)) for name in ALL_METRICS},
        "cumulative_by_month": {name: to_list(values) for name, values in cumulative.items()},
    }

    with open(filename, 'w') as f:
        json.dump(debug_data, f, indent=2)
    print(f"Debug output saved to: {filename}")


def run_main(args_list=None):
    parser = argparse.ArgumentParser(
        description="Household Solar / Battery / Grid Phase Simulator",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument("usage_csv", nargs='?', help="Path to metered usage CSV (uncontrolled + controlled meters)")
    parser.add_argument("--irradiance", action="append", metavar="ORIENTATION=CSV",
                        help="Hourly irradiance table for one roof orientation.\n"
                             "Repeat for each orientation named in the solar config.")
    parser.add_argument("--config", default="data/solar.json",
                        help="Path to solar system JSON config (default: data/solar.json)")
    parser.add_argument("--pricing", metavar="PRICING_JSON",
                        help="Path to pricing JSON (default: built-in prices)")
    parser.add_argument("--converge", action="store_true",
                        help="Repeat the day-wrap warm-up until the battery profile stabilizes\n"
                             "instead of the standard two passes.")
    parser.add_argument("--no-plot", action="store_true", help="Skip the charts")
    parser.add_argument("--debug-output", metavar="JSON_FILE",
                        help="Export results to JSON file (for agent/automation use)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    # If no args provided (and not called programmatically with empty list), show help
    if args_list is None and len(sys.argv) == 1:
        parser.print_help()
        print("\nUsage Examples:")
        print("  1. Simulate with one roof orientation:")
        print("     python main.py usage.csv --irradiance north_west=nw.csv --config my_system.json")
        print("\n  2. Two orientations and custom prices:")
        print("     python main.py usage.csv --irradiance north_west=nw.csv --irradiance north_east=ne.csv \\")
        print("         --config my_system.json --pricing prices.json")
        print("\n  3. Export results without charts:")
        print("     python main.py usage.csv --irradiance north_west=nw.csv --debug-output out.json")
        return 1

    args = parser.parse_args(args_list)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.usage_csv:
        print("Error: You must provide a usage CSV file.")
        return 1

    try:
        irradiance_sources = parse_irradiance_args(args.irradiance)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    for path in [args.usage_csv, args.config, args.pricing] + list(irradiance_sources.values()):
        if path and not os.path.exists(path):
            print(f"Error: File '{path}' not found.")
            return 1

    try:
        config = load_solar_configuration(args.config)
        pricing = load_pricing_configuration(args.pricing) if args.pricing else PricingConfiguration()

        # 1. Load Data
        irradiance = {name: load_csv.load_irradiance_csv(path) for name, path in irradiance_sources.items()}
        usage = load_csv.load_usage_csv(args.usage_csv)

        # 2. Simulate
        result = simulate(config, irradiance, usage, converge=args.converge)
    except ConservationError as e:
        print(f"Error: Energy accounting failed in month {e.month + 1}, hour {e.hour} "
              f"({e.kind}): total {e.total}, computed {e.computed}")
        return 2
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        print(f"Error loading data: {e}")
        return 1

    # 3. Aggregate
    cumulative = get_cumulative_measurements(result)
    annual = get_annual_measurements(result)
    cost_summary = calculate_cost_summary(annual, pricing, annual_controlled_usage_kwh=annual_total(usage.controlled))

    results.print_summary(annual, cost_summary)

    if args.debug_output:
        export_debug_output(args.debug_output, config, pricing, result, cumulative, annual, cost_summary)
    elif not args.no_plot:
        results.plot_results(result, cumulative, title_suffix=config.phase_topology.value)

    return 0


if __name__ == "__main__":
    sys.exit(run_main())
