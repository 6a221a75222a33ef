"""Core data structures and definitions.

This package contains fundamental data types and battle definitions:
- data_structures.py: immutable card, stat and skill records
- game_enums.py: centralized enums for sides, elements, attack types and skills
"""

from .data_structures import CardRecord, CardStats, SkillDescriptor, ValidationMixin
from .game_enums import (
    ATTACK_TYPE_NAMES,
    ELEMENT_ADVANTAGES,
    ELEMENT_NAMES,
    SIDE_NAMES,
    AttackType,
    EffectCategory,
    Element,
    Side,
    TargetScope,
)

__all__ = [
    "CardRecord",
    "CardStats",
    "SkillDescriptor",
    "ValidationMixin",
    "AttackType",
    "EffectCategory",
    "Element",
    "Side",
    "TargetScope",
    "ELEMENT_ADVANTAGES",
    "SIDE_NAMES",
    "ELEMENT_NAMES",
    "ATTACK_TYPE_NAMES",
]
