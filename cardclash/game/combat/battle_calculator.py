"""
Battle calculation system for damage and elemental modifiers.

This module holds the pure damage math, separate from combat resolution, so
the same numbers can be used for resolution and for forecasts without
touching game state.
"""
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ...core.config import BattleConfig
from ...core.data import ELEMENT_ADVANTAGES, AttackType, Element

if TYPE_CHECKING:
    from ..entities.unit import Unit


@dataclass(frozen=True)
class DamageResult:
    """Outcome of one damage calculation."""
    amount: int
    attack_stat: int
    defense_stat: int
    element_modifier: float

    @property
    def is_advantaged(self) -> bool:
        return self.element_modifier > 1.0


class BattleCalculator:
    """Calculates damage between two units."""

    def __init__(self, config: Optional[BattleConfig] = None):
        self.config = config or BattleConfig()

    def element_modifier(self, attacker: Element, target: Element) -> float:
        """Modifier from the element triangle (Blue > Red > Green > Blue)."""
        if (attacker, target) in ELEMENT_ADVANTAGES:
            return self.config.advantage_modifier
        if (target, attacker) in ELEMENT_ADVANTAGES:
            return self.config.disadvantage_modifier
        return 1.0

    @staticmethod
    def stat_pair(attacker: "Unit", defender: "Unit") -> tuple[int, int]:
        """Attack and defense stats selected by the attacker's attack type."""
        if attacker.attack_type is AttackType.PHYSICAL:
            return attacker.stats.physical_attack, defender.stats.defense
        if attacker.attack_type is AttackType.SPECIAL:
            return attacker.stats.special_attack, defender.stats.special_defense
        raise ValueError(f"Unknown attack type: {attacker.attack_type!r}")

    def calculate_raw_damage(self, attack: int, defense: int, multiplier: float,
                             element_modifier: float = 1.0) -> int:
        """floor(attack * multiplier * modifier * K / (K + defense)), clamped for positive multipliers."""
        if not multiplier or multiplier <= 0:
            return 0

        scale = self.config.defense_scale
        damage = math.floor(attack * multiplier * element_modifier * scale / (scale + defense))
        return max(self.config.minimum_damage, damage)

    def calculate_damage(self, attacker: "Unit", defender: "Unit", multiplier: float) -> DamageResult:
        """Damage ``attacker`` deals to ``defender`` with a skill multiplier."""
        attack, defense = self.stat_pair(attacker, defender)
        modifier = self.element_modifier(attacker.element, defender.element)
        amount = self.calculate_raw_damage(attack, defense, multiplier, modifier)

        return DamageResult(
            amount=amount,
            attack_stat=attack,
            defense_stat=defense,
            element_modifier=modifier,
        )
