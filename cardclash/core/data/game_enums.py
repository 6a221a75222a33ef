"""Centralized battle enums and constants.

This module contains all core enums that are used across multiple modules,
eliminating duplication and providing a single source of truth.
"""

from enum import Enum, auto


class Side(Enum):
    """Which roster a unit fights for."""
    PLAYER = 0
    ENEMY = 1

    @property
    def opponent(self) -> "Side":
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class Element(Enum):
    """Card elements forming the advantage triangle."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    NONE = "none"


class AttackType(Enum):
    """Selects which attack/defense stat pair a skill's damage uses."""
    PHYSICAL = "physical"
    SPECIAL = "special"


class TargetScope(Enum):
    """How many opponents an auto-targeted damage skill hits."""
    SINGLE = "single"
    TWO_RANDOM = "two_random"
    ALL_OPPONENTS = "all_opponents"


class EffectCategory(Enum):
    """Effect classification decided once when skill data is ingested."""
    DAMAGE = auto()
    HEAL = auto()
    BUFF = auto()
    OTHER = auto()

    @property
    def is_self_directed(self) -> bool:
        return self in (EffectCategory.HEAL, EffectCategory.BUFF)


# Ordered pairs (attacker, target) that deal bonus damage
ELEMENT_ADVANTAGES = {
    (Element.BLUE, Element.RED),
    (Element.RED, Element.GREEN),
    (Element.GREEN, Element.BLUE),
}

# Convenience mappings for display
SIDE_NAMES = {
    Side.PLAYER: "Player",
    Side.ENEMY: "Enemy",
}

ELEMENT_NAMES = {
    Element.RED: "Red",
    Element.BLUE: "Blue",
    Element.GREEN: "Green",
    Element.NONE: "None",
}

ATTACK_TYPE_NAMES = {
    AttackType.PHYSICAL: "Physical",
    AttackType.SPECIAL: "Special",
}
