"""Time-unit scheduling for fluid turn-based combat.

This module implements the clock that decides whose turn it is. Every unit in
an active slot carries a time-unit (TU) countdown; lower means sooner. There
is no absolute time: each cycle subtracts the smallest living countdown from
every tracked unit, so at least one unit always sits at TU <= 0.

Core Concepts:
- Units enter the clock with ``TU = max(0, base - speed)``
- Acting adds the skill's TU cost to the actor's countdown
- Only living active-slot units are tracked; reserves do not tick
- Ties among ready units go to the higher base speed, one actor per cycle
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from ...game.entities.unit import Unit


StallCallback = Callable[[int, int], None]


def initial_time_units(speed: int, base: int = 1000) -> int:
    """Seed TU for a unit entering an active slot."""
    return max(0, base - speed)


@dataclass(frozen=True)
class TimelineEntry:
    """A snapshot of one unit's place in the upcoming turn order."""

    unit: "Unit"
    time_units: int
    order: int

    @property
    def unit_id(self) -> str:
        return self.unit.unit_id


class Timeline:
    """Manages the TU countdown shared by both active rosters.

    The timeline never owns units. Each call receives the units currently in
    active slots (both sides, player slots first) and mutates their
    ``time_units`` in place.

    Key Features:
    - Vectorized normalization of the countdowns with numpy
    - Deterministic speed tie-break, stable on roster order
    - Bounded re-check when no unit is ready, reported through a callback
    """

    def __init__(self, max_stall_retries: int = 3,
                 on_stall: Optional[StallCallback] = None):
        self.max_stall_retries = max_stall_retries
        self.on_stall = on_stall
        self._elapsed_time: int = 0
        self._cycles: int = 0
        self._stalls: int = 0

    @property
    def current_time(self) -> int:
        """Total TU elapsed through normalization since the battle started."""
        return self._elapsed_time

    @staticmethod
    def _living(units: Sequence[Optional["Unit"]]) -> list["Unit"]:
        return [unit for unit in units if unit is not None and unit.is_alive]

    @staticmethod
    def _time_units(units: Sequence["Unit"]) -> np.ndarray:
        return np.fromiter((unit.time_units for unit in units), dtype=np.int64, count=len(units))

    def normalize(self, units: Sequence[Optional["Unit"]]) -> int:
        """Subtract the smallest living countdown from every living unit.

        Nothing changes when the minimum is already <= 0.

        Returns:
            The number of TU that elapsed (0 if no advancement happened)
        """
        living = self._living(units)
        if not living:
            return 0

        countdowns = self._time_units(living)
        min_tu = int(countdowns.min())
        if min_tu <= 0:
            return 0

        countdowns -= min_tu
        for unit, value in zip(living, countdowns):
            unit.time_units = int(value)

        self._elapsed_time += min_tu
        return min_tu

    def ready_units(self, units: Sequence[Optional["Unit"]]) -> list["Unit"]:
        """Return living units with TU <= 0, fastest first.

        Equal speeds keep the order in which the units were passed in.
        """
        living = self._living(units)
        if not living:
            return []

        countdowns = self._time_units(living)
        speeds = np.fromiter((unit.speed for unit in living), dtype=np.int64, count=len(living))

        ready_idx = np.flatnonzero(countdowns <= 0)
        order = ready_idx[np.argsort(-speeds[ready_idx], kind="stable")]
        return [living[i] for i in order]

    def next_actor(self, units: Sequence[Optional["Unit"]]) -> Optional["Unit"]:
        """Advance the clock and pick the unit that acts this cycle.

        When several units are ready only the fastest is returned; the others
        keep TU <= 0 and are picked on later cycles without further
        advancement.

        Returns:
            The acting unit, or None when no unit became ready after the
            bounded number of re-checks
        """
        max_attempts = self.max_stall_retries + 1
        for attempt in range(1, max_attempts + 1):
            self.normalize(units)
            ready = self.ready_units(units)
            if ready:
                self._cycles += 1
                return ready[0]

            self._stalls += 1
            if self.on_stall is not None:
                self.on_stall(attempt, max_attempts)

        return None

    def get_preview(self, units: Sequence[Optional["Unit"]], count: int) -> list[TimelineEntry]:
        """Get the next ``count`` living units ordered by TU (soonest first)."""
        living = self._living(units)
        if not living or count <= 0:
            return []

        countdowns = self._time_units(living)
        order = np.argsort(countdowns, kind="stable")[:count]
        return [
            TimelineEntry(unit=living[i], time_units=int(countdowns[i]), order=position)
            for position, i in enumerate(order)
        ]

    def get_unit_ids_in_order(self, units: Sequence[Optional["Unit"]], count: int) -> list[str]:
        """Get unit IDs in timeline order for UI display."""
        return [entry.unit_id for entry in self.get_preview(units, count)]

    def reset(self) -> None:
        """Clear elapsed time and statistics."""
        self._elapsed_time = 0
        self._cycles = 0
        self._stalls = 0

    def get_stats(self) -> dict[str, Any]:
        """Get timeline statistics for debugging/monitoring."""
        return {
            "current_time": self._elapsed_time,
            "cycles": self._cycles,
            "stalls": self._stalls,
            "max_stall_retries": self.max_stall_retries,
        }
