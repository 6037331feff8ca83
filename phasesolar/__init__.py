"""Per-phase solar, battery and grid energy allocation for a household."""

__version__ = "0.1.0"
