"""Roster management: active slots, reserves and substitution.

Each side fields a fixed number of active slots backed by a FIFO reserve
queue. A slot whose unit has died is refilled from the front of the reserve
on the next outcome check; without reserves it simply stays dead and is
ignored by scheduling and targeting.
"""

from collections import deque
from typing import TYPE_CHECKING, Sequence

from ...core.data import SIDE_NAMES, CardRecord, Side
from ...core.engine import Roster, initial_time_units
from ...core.errors import BattleSetupError
from ...core.events import LogMessage, UnitDeployed
from ..entities.unit import Unit

if TYPE_CHECKING:
    from ...core.config import BattleConfig
    from ...core.events import EventManager


class RosterManager:
    """Builds rosters from decks and keeps active slots filled."""

    def __init__(self, config: "BattleConfig", event_manager: "EventManager"):
        self.config = config
        self.event_manager = event_manager
        self.substitutions = 0

    def build_roster(self, side: Side, deck: Sequence[CardRecord]) -> Roster:
        """Split a deck into active slots and reserve, in deck order.

        Every unit starts with full HP and the configured starting MP; active
        units get their TU seeded from speed. Reserve TU is seeded on entry.

        Raises:
            BattleSetupError: If the deck is empty
        """
        if not deck:
            raise BattleSetupError(f"{SIDE_NAMES[side]} deck is empty")

        prefix = side.name.lower()
        units = [
            Unit(card, side, unit_id=f"{prefix}_{index}", current_mp=self.config.starting_mp)
            for index, card in enumerate(deck)
        ]

        slots = self.config.active_slots
        roster = Roster(side=side, active=units[:slots], reserve=deque(units[slots:]))
        for unit in roster.active:
            self.seed_time_units(unit)
        return roster

    def seed_time_units(self, unit: Unit) -> None:
        """Set TU for a unit entering an active slot."""
        unit.time_units = initial_time_units(unit.speed, self.config.initial_tu_base)

    def fill_empty_slots(self, roster: Roster, turn: int = 0) -> list[tuple[int, Unit]]:
        """Replace dead active units with reserves, front of the queue first.

        Dead reserves are dropped on the way to the next living one. MP is
        left as it was set at battle setup. Calling this again without any
        state change in between does nothing.

        Returns:
            (slot, unit) pairs for every substitution made
        """
        deployed: list[tuple[int, Unit]] = []

        for slot, unit in enumerate(roster.active):
            if unit.is_alive or not roster.reserve:
                continue

            replacement = roster.reserve.popleft()
            while not replacement.is_alive and roster.reserve:
                # Reserves that cannot fight are passed over
                replacement = roster.reserve.popleft()
            self.seed_time_units(replacement)
            roster.active[slot] = replacement
            deployed.append((slot, replacement))
            self.substitutions += 1

            self.event_manager.publish(
                UnitDeployed(turn=turn, unit=replacement, slot=slot),
                source="RosterManager",
            )
            self.event_manager.publish(
                LogMessage(
                    turn=turn,
                    message=f"{replacement.name} joined the battle!",
                    category="ROSTER",
                    source="RosterManager",
                ),
                source="RosterManager",
            )

        return deployed

    @staticmethod
    def is_defeated(roster: Roster) -> bool:
        return not roster.has_living_units()
