"""Battle state with per-side rosters.

This module defines :class:`BattleState`, the aggregate the orchestrator owns
for a battle's lifetime: both rosters, the current phase, the turn counter
and the last schedule snapshot. Other components receive references to it
during their calls and never keep copies.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterator, Optional

from ..data import Side

if TYPE_CHECKING:
    from ...game.entities.unit import Unit
    from .timeline import TimelineEntry


class BattlePhase(Enum):
    """Phases of the battle state machine."""

    INITIALIZING = auto()      # Building rosters and seeding TU
    AWAITING_ACTOR = auto()    # Scheduler picks the next unit
    AWAITING_ACTION = auto()   # Waiting on player input for the current unit
    RESOLVING = auto()         # Action pipeline is running
    CHECKING_OUTCOME = auto()  # Win/loss check and reserve substitution
    ENDED = auto()


class BattleOutcome(Enum):
    """Terminal result from the player's point of view."""

    PLAYER_WON = auto()
    PLAYER_LOST = auto()


@dataclass
class Roster:
    """One side's fixed-size active slots and FIFO reserve queue.

    Dead units stay in their active slot until a reserve replaces them, so
    slot positions are stable for rendering.
    """

    side: Side
    active: list["Unit"] = field(default_factory=list)
    reserve: deque["Unit"] = field(default_factory=deque)

    def living_active(self) -> list["Unit"]:
        return [unit for unit in self.active if unit.is_alive]

    def living_reserve(self) -> list["Unit"]:
        return [unit for unit in self.reserve if unit.is_alive]

    def has_living_units(self) -> bool:
        """A side is defeated only when neither slots nor reserve hold a living unit."""
        return any(unit.is_alive for unit in self.active) or any(
            unit.is_alive for unit in self.reserve
        )

    def dead_slots(self) -> list[int]:
        return [slot for slot, unit in enumerate(self.active) if not unit.is_alive]

    def all_units(self) -> Iterator["Unit"]:
        yield from self.active
        yield from self.reserve

    def find_unit(self, unit_id: str) -> Optional["Unit"]:
        for unit in self.all_units():
            if unit.unit_id == unit_id:
                return unit
        return None


@dataclass
class BattleState:
    """Everything the orchestrator owns for one battle."""

    player_roster: Roster = field(default_factory=lambda: Roster(Side.PLAYER))
    enemy_roster: Roster = field(default_factory=lambda: Roster(Side.ENEMY))
    phase: BattlePhase = BattlePhase.INITIALIZING
    outcome: Optional[BattleOutcome] = None

    turn_count: int = 0
    active_unit_id: Optional[str] = None
    timeline_preview: list["TimelineEntry"] = field(default_factory=list)

    def roster_for(self, side: Side) -> Roster:
        return self.player_roster if side is Side.PLAYER else self.enemy_roster

    def opponents_of(self, unit: "Unit") -> Roster:
        return self.roster_for(unit.side.opponent)

    def allies_of(self, unit: "Unit") -> Roster:
        return self.roster_for(unit.side)

    def scheduled_units(self) -> list["Unit"]:
        """Active-slot units of both sides, player slots first."""
        return [*self.player_roster.active, *self.enemy_roster.active]

    def get_active_unit(self) -> Optional["Unit"]:
        if self.active_unit_id is None:
            return None
        return self.find_unit(self.active_unit_id)

    def find_unit(self, unit_id: str) -> Optional["Unit"]:
        return self.player_roster.find_unit(unit_id) or self.enemy_roster.find_unit(unit_id)

    @property
    def is_over(self) -> bool:
        return self.phase is BattlePhase.ENDED
