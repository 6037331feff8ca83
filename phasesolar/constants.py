"""
Simulation constants and lookup tables.
These are independent of any input data and are built once at import time.
"""

HOURS_PER_DAY = 24
MONTHS_PER_YEAR = 12
PHASES = (1, 2, 3)

# Calendar (non-leap year; the profiles are month-indexed, not date-indexed)
DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Panel rating is quoted at this irradiance (W/m2)
REFERENCE_IRRADIANCE_W_PER_SQM = 1000.0
WATTS_PER_KW = 1000.0

# Low-light derating: (upper bound W/m2 exclusive, factor). Above the last bound -> 1.0
LOW_LIGHT_BANDS = (
    (1.0, 0.0),
    (25.0, 0.3),
    (50.0, 0.6),
    (100.0, 0.87),
    (200.0, 0.94),
    (400.0, 0.98),
)
FULL_LIGHT_FACTOR = 1.0

# Conservation checks
CONSERVATION_REL_TOLERANCE = 1e-8
CONSERVATION_ABS_TOLERANCE = 1e-12

# Day-wrap warm-up
DEFAULT_WARMUP_PASSES = 2
MAX_WARMUP_PASSES = 20
WARMUP_TOLERANCE_KWH = 1e-9

# Solar System Defaults (14 x 410W panels, 5.4kWh battery)
DEFAULT_PANEL_RATING_W = 410.0
DEFAULT_PANEL_AREA_SQM = 1.92
DEFAULT_BATTERY_CAPACITY_KWH = 5.4

# Pricing Defaults
DEFAULT_GRID_PRICE_PER_KWH = 0.26
DEFAULT_CONTROLLED_PRICE_PER_KWH = 0.18
DEFAULT_FEEDBACK_PRICE_PER_KWH = 0.15
DEFAULT_INSTALLATION_COST = 23000.0

# Share of uncontrolled load on (phase 1, phase 2) by hour of day; phase 3 takes the rest
DEFAULT_PHASE_DISTRIBUTION = (
    (0.125, 0.75),   # 00
    (0.125, 0.75),   # 01
    (0.125, 0.75),   # 02
    (0.125, 0.75),   # 03
    (0.125, 0.75),   # 04
    (0.125, 0.75),   # 05
    (0.125, 0.75),   # 06
    (0.2, 0.5),      # 07
    (0.4, 0.25),     # 08
    (0.25, 0.45),    # 09
    (0.25, 0.45),    # 10
    (0.25, 0.45),    # 11
    (0.25, 0.45),    # 12
    (0.25, 0.45),    # 13
    (0.25, 0.45),    # 14
    (0.25, 0.45),    # 15
    (0.25, 0.45),    # 16
    (0.25, 0.45),    # 17
    (0.25, 0.45),    # 18
    (0.2, 0.5),      # 19
    (0.125, 0.75),   # 20
    (0.125, 0.75),   # 21
    (0.125, 0.75),   # 22
    (0.125, 0.75),   # 23
)

# CSV column names (solar radiation table export and meter export)
IRRADIANCE_PERIOD_COLUMN = "Month & hour"
IRRADIANCE_VALUE_COLUMN = "Hourly W/m2"
USAGE_TIME_COLUMN = "Time stamp"
USAGE_UNCONTROLLED_COLUMN = "Meter 1 Value (kWh)"
USAGE_CONTROLLED_COLUMN = "Meter 2 Value (kWh)"
