import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from .constants import (
    DEFAULT_PANEL_RATING_W,
    DEFAULT_PANEL_AREA_SQM,
    DEFAULT_BATTERY_CAPACITY_KWH,
)
from .exceptions import ConfigurationError

_LOGGER = logging.getLogger(__name__)


class ControlledLoadRouting(Enum):
    """Where the controlled (water heating) load is wired."""
    GRID = "grid"
    PHASE_1 = "phase1"
    PHASE_2 = "phase2"
    PHASE_3 = "phase3"


class PhaseTopology(Enum):
    """Inverter / wiring topology deciding how generation reaches each phase."""
    SINGLE_PHASE_1 = "single_phase_1"
    SINGLE_PHASE_2 = "single_phase_2"
    SINGLE_PHASE_3 = "single_phase_3"
    EQUAL_DISTRIBUTION = "equal_distribution"
    BALANCED = "balanced"


def parse_enum(enum_cls, value):
    """Accepts an enum member, its value or its name (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip()
        for member in enum_cls:
            if key.lower() in (member.value, member.name.lower()):
                return member
    raise ConfigurationError(f"Unknown {enum_cls.__name__} value: {value!r}")


@dataclass(frozen=True)
class SolarConfiguration:
    """
    Immutable description of one solar installation.
    panels maps a roof orientation name (e.g. 'north_west') to a panel count.
    """
    panels: dict = field(default_factory=dict)
    panel_rating_w: float = DEFAULT_PANEL_RATING_W
    panel_area_sqm: float = DEFAULT_PANEL_AREA_SQM
    battery_capacity_kwh: float = DEFAULT_BATTERY_CAPACITY_KWH
    controlled_load: ControlledLoadRouting = ControlledLoadRouting.GRID
    phase_topology: PhaseTopology = PhaseTopology.BALANCED

    def __post_init__(self):
        # Frozen: normalize through object.__setattr__
        object.__setattr__(self, 'controlled_load', parse_enum(ControlledLoadRouting, self.controlled_load))
        object.__setattr__(self, 'phase_topology', parse_enum(PhaseTopology, self.phase_topology))

        panels = {}
        for orientation, count in dict(self.panels).items():
            if count < 0:
                raise ConfigurationError(f"Panel count for '{orientation}' cannot be negative: {count}")
            panels[orientation] = int(count)
        object.__setattr__(self, 'panels', MappingProxyType(panels))

        if self.panel_area_sqm <= 0:
            raise ConfigurationError(f"Panel area must be positive: {self.panel_area_sqm}")
        if self.panel_rating_w < 0:
            raise ConfigurationError(f"Panel rating cannot be negative: {self.panel_rating_w}")
        if self.battery_capacity_kwh < 0:
            raise ConfigurationError(f"Battery capacity cannot be negative: {self.battery_capacity_kwh}")

    @property
    def total_panels(self):
        return sum(self.panels.values())

    def to_dict(self):
        return {
            "panels": dict(self.panels),
            "panel_rating_w": self.panel_rating_w,
            "panel_area_sqm": self.panel_area_sqm,
            "battery_capacity_kwh": self.battery_capacity_kwh,
            "controlled_load": self.controlled_load.value,
            "phase_topology": self.phase_topology.value,
        }


def read_json_with_comments(filename):
    with open(filename, 'r') as f:
        # Support C-style // comments to allow user annotations
        content = f.read()
        content = re.sub(r'//.*', '', content)
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {filename}: {e}") from e


def load_solar_configuration(filename) -> SolarConfiguration:
    """
    Loads a solar system description from JSON, e.g.

        {
            "panels": {"north_west": 14, "north_east": 0},
            "panel_rating_w": 410,
            "panel_area_sqm": 1.92,
            "battery_capacity_kwh": 5.4,
            "controlled_load": "grid",          // grid | phase1 | phase2 | phase3
            "phase_topology": "balanced"        // single_phase_1..3 | equal_distribution | balanced
        }
    """
    data = read_json_with_comments(filename)
    if 'panels' not in data:
        raise ConfigurationError(f"Missing required parameter in {filename}: 'panels'")

    known = {"panels", "panel_rating_w", "panel_area_sqm", "battery_capacity_kwh",
             "controlled_load", "phase_topology", "description"}
    for key in data:
        if key not in known:
            _LOGGER.warning("Ignoring unknown solar configuration key '%s' in %s", key, filename)

    config = SolarConfiguration(
        panels=data['panels'],
        panel_rating_w=float(data.get('panel_rating_w', DEFAULT_PANEL_RATING_W)),
        panel_area_sqm=float(data.get('panel_area_sqm', DEFAULT_PANEL_AREA_SQM)),
        battery_capacity_kwh=float(data.get('battery_capacity_kwh', DEFAULT_BATTERY_CAPACITY_KWH)),
        controlled_load=data.get('controlled_load', ControlledLoadRouting.GRID),
        phase_topology=data.get('phase_topology', PhaseTopology.BALANCED),
    )
    _LOGGER.debug("Loaded solar configuration from %s: %s", filename, config)
    return config
