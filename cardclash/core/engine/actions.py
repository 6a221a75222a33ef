"""Action choices for timeline-based combat.

A unit's turn ends in exactly one ``ActionChoice``: a skill plus optional
explicit targets. Player choices arrive through the input callback, enemy
choices come from the opponent decision policy. When nothing is affordable
the policy falls back to the wait pseudo-skill, which only costs time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..data import EffectCategory, SkillDescriptor, TargetScope

if TYPE_CHECKING:
    from ...game.entities.unit import Unit


WAIT_SKILL_NAME = "Wait"


@dataclass(frozen=True)
class ActionChoice:
    """A chosen skill and its explicit targets (empty means auto-target)."""

    skill: SkillDescriptor
    targets: tuple["Unit", ...] = ()
    reasoning: str = ""

    def __post_init__(self):
        if not isinstance(self.targets, tuple):
            object.__setattr__(self, "targets", tuple(self.targets))

    @property
    def is_wait(self) -> bool:
        return self.skill.name == WAIT_SKILL_NAME


@dataclass(frozen=True)
class SkillOption:
    """A skill offered to the player together with its affordability."""

    skill: SkillDescriptor
    affordable: bool = True

    @property
    def cost_label(self) -> str:
        """Cost text as shown on a skill button."""
        cost = self.skill.cost_mp
        mp_text = f"+{-cost} MP" if cost < 0 else f"{cost} MP"
        return f"{mp_text} / {self.skill.cost_tu} TU"


def create_wait_skill(tu_cost: int) -> SkillDescriptor:
    """Build the wait pseudo-skill: no damage, no MP, fixed TU cost."""
    return SkillDescriptor(
        name=WAIT_SKILL_NAME,
        cost_mp=0,
        cost_tu=tu_cost,
        damage_multiplier=0.0,
        target_scope=TargetScope.SINGLE,
        effect_category=EffectCategory.OTHER,
        description="Skip this turn and let time pass.",
    )


def create_wait_action(tu_cost: int, reasoning: str = "") -> ActionChoice:
    """Wrap the wait pseudo-skill in an ActionChoice with no targets."""
    return ActionChoice(skill=create_wait_skill(tu_cost), reasoning=reasoning)
