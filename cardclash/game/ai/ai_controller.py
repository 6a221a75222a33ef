"""
AI Controller System for Timeline-Based Combat

This module provides the opponent decision policy for units that are not
controlled by a human. Controllers only choose a skill; targets are always
left to the action pipeline's auto-targeting.

Design Principles:
- Only affordable skills are ever chosen (free, MP-granting, or paid for)
- When nothing is affordable the unit waits, which only costs time
- Randomness comes from an injectable ``random.Random`` for reproducibility
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from ...core.engine.actions import ActionChoice, create_wait_action

if TYPE_CHECKING:
    from ...core.engine import BattleState
    from ..entities.unit import Unit


class AIController(ABC):
    """Abstract base class for action decision policies."""

    def __init__(self, wait_tu_cost: int = 50, rng: Optional[random.Random] = None):
        self.wait_tu_cost = wait_tu_cost
        self.rng = rng or random.Random()

    @abstractmethod
    def choose_action(self, unit: Unit, state: Optional[BattleState] = None) -> ActionChoice:
        """Choose the action for this unit given the current situation"""
        pass

    def decide(self, unit: Unit, state: Optional[BattleState] = None) -> ActionChoice:
        """Alias used by the orchestrator."""
        return self.choose_action(unit, state)

    def wait(self, reasoning: str = "") -> ActionChoice:
        return create_wait_action(self.wait_tu_cost, reasoning=reasoning)


class RandomSkillAI(AIController):
    """Picks uniformly at random among the unit's affordable skills."""

    def choose_action(self, unit: Unit, state: Optional[BattleState] = None) -> ActionChoice:
        affordable = unit.affordable_skills()
        if not affordable:
            return self.wait(reasoning=f"{unit.name} cannot afford any skill")

        skill = self.rng.choice(affordable)
        return ActionChoice(
            skill=skill,
            reasoning=f"random pick from {len(affordable)} affordable skill(s)",
        )
