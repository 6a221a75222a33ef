"""Damage math and the action resolution pipeline."""

from .battle_calculator import BattleCalculator, DamageResult
from .combat_resolver import ActionReport, CombatResolver

__all__ = ["ActionReport", "BattleCalculator", "CombatResolver", "DamageResult"]
