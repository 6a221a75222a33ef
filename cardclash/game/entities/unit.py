"""Runtime combat state for one card instance.

A ``Unit`` wraps an immutable ``CardRecord`` with the values that change
during a battle: HP, MP, the TU countdown and status effects.

Property Access Patterns:
    unit.current_hp, unit.is_alive, unit.time_units   # mutable combat state
    unit.name, unit.element, unit.speed               # read through to the card
    unit.get_stat("defense")                          # any base stat by name
"""

from typing import Any, Optional

from ...core.data import (
    AttackType,
    CardRecord,
    CardStats,
    Element,
    Side,
    SkillDescriptor,
)


class Unit:
    """A card fighting on one side of a battle."""

    def __init__(self, card: CardRecord, side: Side, unit_id: Optional[str] = None,
                 current_mp: int = 0):
        """Create a unit at full HP.

        Args:
            card: Static record the unit is built from
            side: Roster the unit belongs to
            unit_id: Unique identifier; defaults to the card id
            current_mp: Starting MP
        """
        self.card = card
        self.side = side
        self.unit_id = unit_id or card.card_id
        self.current_hp: int = card.stats.max_hp
        self.current_mp: int = current_mp
        self.time_units: int = 0
        # Hook point for status effects; nothing in the core mutates it yet
        self.status_effects: list[Any] = []

    # ============== Card Properties ==============

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def element(self) -> Element:
        return self.card.element

    @property
    def attack_type(self) -> AttackType:
        return self.card.attack_type

    @property
    def stats(self) -> CardStats:
        return self.card.stats

    @property
    def skills(self) -> tuple[SkillDescriptor, ...]:
        return self.card.skills

    @property
    def max_hp(self) -> int:
        return self.card.stats.max_hp

    @property
    def speed(self) -> int:
        return self.card.stats.speed

    def get_stat(self, stat_name: str) -> int:
        return self.card.stats.get(stat_name)

    # ============== Combat State ==============

    @property
    def is_alive(self) -> bool:
        return self.current_hp > 0

    @property
    def is_player(self) -> bool:
        return self.side is Side.PLAYER

    @property
    def hp_percent(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.current_hp / self.max_hp * 100

    def take_damage(self, amount: int) -> int:
        """Reduce HP, never below zero.

        Returns:
            HP actually lost
        """
        before = self.current_hp
        self.current_hp = max(0, self.current_hp - amount)
        return before - self.current_hp

    def can_afford(self, skill: SkillDescriptor) -> bool:
        """Free or MP-granting skills are always affordable."""
        return skill.cost_mp <= 0 or self.current_mp >= skill.cost_mp

    def affordable_skills(self) -> list[SkillDescriptor]:
        return [skill for skill in self.skills if self.can_afford(skill)]

    def __repr__(self) -> str:
        return (
            f"Unit({self.unit_id!r}, {self.name!r}, side={self.side.name}, "
            f"hp={self.current_hp}/{self.max_hp}, mp={self.current_mp}, tu={self.time_units})"
        )
