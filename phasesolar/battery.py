"""
Shared battery model.

One state of charge serves every phase. Discharging and charging both use
water-filling: each round gives every outstanding phase the same amount,
capped by the smallest outstanding need, so simultaneous deficits (or
surpluses) are served evenly rather than one phase at a time.
"""
import logging

_LOGGER = logging.getLogger(__name__)


class Battery:
    def __init__(self, capacity_kwh, level_kwh=0.0):
        if capacity_kwh < 0:
            raise ValueError(f"Battery capacity cannot be negative: {capacity_kwh}")
        if not 0.0 <= level_kwh <= capacity_kwh:
            raise ValueError(f"Battery level {level_kwh} outside [0, {capacity_kwh}]")
        self.capacity_kwh = capacity_kwh
        self.level_kwh = level_kwh

    @property
    def headroom_kwh(self):
        return self.capacity_kwh - self.level_kwh

    def discharge(self, deficits):
        """
        Covers per-phase deficits from the battery.

        Args:
            deficits: dict phase -> kWh still needed

        Returns:
            (remaining, supplied_kwh): remaining is phase -> kWh the grid must
            supply (only phases with a positive shortfall), supplied_kwh is the
            total drawn from the battery.
        """
        outstanding = {phase: d for phase, d in deficits.items() if d > 0}
        supplied = 0.0

        while outstanding and self.level_kwh > 0:
            k = len(outstanding)
            min_requirement = min(outstanding.values())
            per_phase_limit = self.level_kwh / k

            if per_phase_limit <= min_requirement:
                # Battery runs out this round
                per_phase = per_phase_limit
                drawn = self.level_kwh
                self.level_kwh = 0.0
            else:
                per_phase = min_requirement
                drawn = per_phase * k
                self.level_kwh = max(0.0, self.level_kwh - drawn)

            supplied += drawn
            outstanding = {
                phase: d - per_phase for phase, d in outstanding.items() if d - per_phase > 0
            }

        return outstanding, supplied

    def charge(self, surpluses):
        """
        Stores per-phase surpluses, bounded by remaining headroom.

        Args:
            surpluses: dict phase -> kWh available

        Returns:
            (remaining, stored_kwh): remaining is phase -> kWh exported to the
            grid, stored_kwh is the total added to the battery.
        """
        outstanding = {phase: s for phase, s in surpluses.items() if s > 0}
        stored = 0.0

        while outstanding and self.level_kwh < self.capacity_kwh:
            k = len(outstanding)
            min_surplus = min(outstanding.values())
            per_phase_limit = self.headroom_kwh / k

            if per_phase_limit <= min_surplus:
                # Battery fills up this round
                per_phase = per_phase_limit
                added = self.headroom_kwh
                self.level_kwh = self.capacity_kwh
            else:
                per_phase = min_surplus
                added = per_phase * k
                self.level_kwh = min(self.capacity_kwh, self.level_kwh + added)

            stored += added
            outstanding = {
                phase: s - per_phase for phase, s in outstanding.items() if s - per_phase > 0
            }

        return outstanding, stored
