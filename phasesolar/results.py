import sys
import matplotlib
import matplotlib.pyplot as plt
import numpy as np

from .aggregate import get_phase_total
from .constants import MONTH_NAMES, HOURS_PER_DAY

# (title, metric names summed for the chart, y-axis label)
CHART_GROUPS = [
    ("Total Usage", ["total_usage_kwh"], "kWh"),
    ("Grid Usage", ["phase1_grid_usage_kwh", "phase2_grid_usage_kwh", "phase3_grid_usage_kwh",
                    "controlled_grid_usage_kwh"], "kWh"),
    ("Panel Usage", ["phase1_solar_usage_kwh", "phase2_solar_usage_kwh", "phase3_solar_usage_kwh"], "kWh"),
    ("Battery Usage", ["battery_usage_kwh"], "kWh"),
    ("Generated", ["generation_kwh"], "kWh"),
    ("Feedback", ["phase1_exported_kwh", "phase2_exported_kwh", "phase3_exported_kwh"], "kWh"),
]


def print_summary(annual, cost_summary=None):
    print("\n" + "="*40)
    print("ANNUAL ENERGY")
    print("="*40)
    print(f"Usage:                 {annual['total_usage_kwh']:.0f} kWh")
    print(f"Generated:             {annual['generation_kwh']:.0f} kWh")
    print(f"From grid:             {get_phase_total(annual, 'grid_usage') + annual['controlled_grid_usage_kwh']:.0f} kWh")
    print(f"  (controlled):        {annual['controlled_grid_usage_kwh']:.0f} kWh")
    print(f"From panels:           {get_phase_total(annual, 'solar_usage'):.0f} kWh")
    print(f"From battery:          {annual['battery_usage_kwh']:.0f} kWh")
    print(f"Stored to battery:     {annual['battery_stored_kwh']:.0f} kWh")
    print(f"Feedback:              {get_phase_total(annual, 'exported'):.0f} kWh")

    if cost_summary:
        print("-" * 40)
        print(f"Grid cost:             ${cost_summary['annual_grid_cost']:.0f}")
        print(f"Resale earnings:       ${cost_summary['annual_feedback_earnings']:.0f}")
        print(f"Cost with solar:       ${cost_summary['annual_cost_with_solar']:.0f}")
        print(f"Cost without solar:    ${cost_summary['annual_cost_without_solar']:.0f}")
        print(f"Annual saving:         ${cost_summary['annual_saving']:.0f}")
        if np.isfinite(cost_summary['payback_years']):
            print(f"Time to recoup cost:   {cost_summary['payback_years']:.1f} years")
        else:
            print("Time to recoup cost:   never")
    print("="*40)
    sys.stdout.flush()


def _group_values(values_by_metric, metrics):
    return sum(np.asarray(values_by_metric[name]) for name in metrics)


def _plot_months(ax, monthly_values, title, ylabel):
    hours = np.arange(HOURS_PER_DAY)
    colors = matplotlib.colormaps["twilight"](np.linspace(0, 1, len(monthly_values), endpoint=False))
    for month_index, values in enumerate(monthly_values):
        ax.plot(hours, values, label=MONTH_NAMES[month_index], color=colors[month_index], linewidth=1.2)
    ax.set_title(title)
    ax.set_ylabel(ylabel)
    ax.set_xlim(0, HOURS_PER_DAY - 1)
    ax.grid(True)


def plot_results(result, cumulative, title_suffix=""):
    """
    One row per metric group: hourly values on the left, cumulative on the right,
    one line per month. Battery level gets its own hourly-only row.
    """
    hourly = {name: getattr(result, name) for name in cumulative}
    rows = len(CHART_GROUPS) + 1

    fig, axes = plt.subplots(rows, 2, figsize=(14, 3 * rows), sharex=True)

    for row, (title, metrics, unit) in enumerate(CHART_GROUPS):
        _plot_months(axes[row, 0], _group_values(hourly, metrics), title, f"Hourly ({unit})")
        _plot_months(axes[row, 1], _group_values(cumulative, metrics), f"{title} (cumulative)", f"Cumulative ({unit})")

    _plot_months(axes[-1, 0], result.battery_level_kwh, "Battery Storage", "Level (kWh)")
    axes[-1, 1].axis('off')

    for ax in axes[-1]:
        ax.set_xlabel("Hour of day")
    axes[0, 0].legend(loc='upper left', fontsize='small', ncol=2)

    title = "Solar Simulation"
    if title_suffix:
        title += f" - {title_suffix}"
    fig.suptitle(title)

    plt.tight_layout()
    plt.show()
    return fig
