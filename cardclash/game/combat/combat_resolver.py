"""
Action resolution pipeline for executing skills and applying damage.

This module turns a chosen skill into state changes: it resolves targets,
pays the MP cost, applies damage, and adds the skill's TU cost to the actor.
It is separate from choosing actions (player input / opponent AI) and from
scheduling (the timeline).

A resolution that has started always finishes: malformed data raises
inside the pipeline, is caught here, and turns into a skipped turn with a TU
penalty instead of escaping into the battle loop.
"""
import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence

from ...core.data import EffectCategory, SkillDescriptor, TargetScope
from ...core.errors import SkillResolutionError
from ...core.events import (
    ActionFailed,
    ActionResolved,
    LogMessage,
    SkillAnnounced,
    UnitDamaged,
    UnitDefeated,
)
from .battle_calculator import BattleCalculator

if TYPE_CHECKING:
    from ...core.config import BattleConfig
    from ...core.engine import BattleState
    from ...core.events import EventManager, GameEvent
    from ..entities.unit import Unit


@dataclass
class ActionReport:
    """Result of one pass through the action pipeline."""

    actor: "Unit"
    skill_name: str
    targets: list["Unit"] = field(default_factory=list)
    damage_dealt: dict[str, int] = field(default_factory=dict)
    advantaged: set[str] = field(default_factory=set)
    defeated: list["Unit"] = field(default_factory=list)
    mp_spent: int = 0
    tu_added: int = 0
    missed: bool = False
    failed: bool = False
    error: Optional[str] = None

    @property
    def total_damage(self) -> int:
        return sum(self.damage_dealt.values())


class CombatResolver:
    """Resolves a unit's chosen skill against the battle state."""

    def __init__(
        self,
        config: "BattleConfig",
        event_manager: "EventManager",
        calculator: Optional[BattleCalculator] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.event_manager = event_manager
        self.calculator = calculator or BattleCalculator(config)
        self.rng = rng or random.Random()

    def resolve(
        self,
        actor: "Unit",
        skill: SkillDescriptor,
        state: "BattleState",
        explicit_targets: Optional[Sequence["Unit"]] = None,
    ) -> ActionReport:
        """Run the pipeline for ``actor`` using ``skill``.

        Args:
            actor: The acting unit
            skill: The chosen skill
            state: Battle state, used for auto-targeting
            explicit_targets: Targets picked by the caller; empty means auto

        Returns:
            ActionReport describing what happened
        """
        turn = state.turn_count
        report = ActionReport(actor=actor, skill_name=str(getattr(skill, "name", "?")))

        try:
            self.validate_skill(skill)
            self._run_pipeline(actor, skill, state, explicit_targets, report)
        except Exception as e:
            self._recover(actor, report, e, turn)

        self.event_manager.publish(ActionResolved(turn=turn, report=report), source="CombatResolver")
        return report

    def skip_turn(self, actor: "Unit", error: Exception, state: "BattleState") -> ActionReport:
        """Fail the actor's turn before any skill was chosen."""
        turn = state.turn_count
        report = ActionReport(actor=actor, skill_name="?")
        self._recover(actor, report, error, turn)
        self.event_manager.publish(ActionResolved(turn=turn, report=report), source="CombatResolver")
        return report

    def validate_skill(self, skill: SkillDescriptor) -> None:
        """Reject descriptors the pipeline cannot interpret.

        Raises:
            SkillResolutionError: If a required field is missing or invalid
        """
        name = str(getattr(skill, "name", "?"))
        if not isinstance(skill, SkillDescriptor):
            raise SkillResolutionError(name, f"expected SkillDescriptor, got {type(skill).__name__}")

        missing = skill.missing_fields(list(SkillDescriptor.REQUIRED_FIELDS))
        if missing:
            raise SkillResolutionError(name, f"missing {', '.join(missing)}")
        if not isinstance(skill.cost_mp, int) or not isinstance(skill.cost_tu, int):
            raise SkillResolutionError(name, "costs must be integers")
        if skill.cost_tu < 0:
            raise SkillResolutionError(name, f"negative TU cost {skill.cost_tu}")
        if not isinstance(skill.damage_multiplier, (int, float)) \
                or not math.isfinite(skill.damage_multiplier) or skill.damage_multiplier < 0:
            raise SkillResolutionError(name, f"invalid multiplier {skill.damage_multiplier!r}")
        if not isinstance(skill.target_scope, TargetScope):
            raise SkillResolutionError(name, f"invalid target scope {skill.target_scope!r}")
        if not isinstance(skill.effect_category, EffectCategory):
            raise SkillResolutionError(name, f"invalid effect category {skill.effect_category!r}")

    def _run_pipeline(self, actor, skill, state, explicit_targets, report) -> None:
        turn = state.turn_count

        # 1. Targets
        targets = self.resolve_targets(actor, skill, state, explicit_targets)
        report.targets = list(targets)
        if not targets:
            report.missed = True
            self._emit_log("Miss! (No targets)", turn)
        else:
            self._emit_log(f"Targeting: {', '.join(t.name for t in targets)}", turn, "DEBUG")

        # 2. Cost, debited unconditionally (callers only offer affordable skills)
        actor.current_mp -= skill.cost_mp
        report.mp_spent = skill.cost_mp

        self._emit_log(f"{actor.name} uses {skill.name}!", turn)
        self._publish_immediate(SkillAnnounced(turn=turn, unit=actor, skill_name=skill.name))

        # 3. Effects
        for target in targets:
            if not target.is_alive:
                continue
            self._apply_effect(actor, target, skill, report, turn)

        # 4. Time cost
        actor.time_units += skill.cost_tu
        report.tu_added = skill.cost_tu

    def resolve_targets(
        self,
        actor: "Unit",
        skill: SkillDescriptor,
        state: "BattleState",
        explicit_targets: Optional[Sequence["Unit"]] = None,
    ) -> list["Unit"]:
        """Explicit targets win; otherwise auto-target by effect category."""
        if explicit_targets:
            return list(explicit_targets)

        category = skill.effect_category
        if category.is_self_directed:
            return [actor]

        opponents = state.opponents_of(actor).living_active()
        if not opponents:
            return []

        if category is EffectCategory.DAMAGE:
            if skill.target_scope is TargetScope.ALL_OPPONENTS:
                return opponents
            if skill.target_scope is TargetScope.TWO_RANDOM:
                return self.rng.sample(opponents, min(2, len(opponents)))

        return [self.rng.choice(opponents)]

    def _apply_effect(self, actor, target, skill, report, turn) -> None:
        if skill.effect_category.is_self_directed:
            # Heal/Buff magnitudes are not defined; the skill only spends its costs
            self._emit_log(
                f"{skill.name} has no defined {skill.effect_category.name.lower()} amount",
                turn, "DEBUG",
            )
            return

        if not skill.is_damaging:
            return

        result = self.calculator.calculate_damage(actor, target, skill.damage_multiplier)
        target.take_damage(result.amount)
        report.damage_dealt[target.unit_id] = report.damage_dealt.get(target.unit_id, 0) + result.amount
        if result.is_advantaged:
            report.advantaged.add(target.unit_id)

        self._publish_immediate(
            UnitDamaged(turn=turn, target=target, amount=result.amount,
                        is_advantaged=result.is_advantaged)
        )

        if not target.is_alive:
            report.defeated.append(target)
            self._emit_log(f"{target.name} is defeated!", turn)
            self.event_manager.publish(UnitDefeated(turn=turn, unit=target), source="CombatResolver")

    def _recover(self, actor: "Unit", report: ActionReport, error: Exception, turn: int) -> None:
        """Skip the actor's turn with a TU penalty and report the failure."""
        penalty = self.config.failure_tu_penalty
        actor.time_units += penalty

        report.failed = True
        report.error = str(error)
        report.tu_added += penalty

        self.event_manager.publish(
            ActionFailed(turn=turn, unit=actor, skill_name=report.skill_name,
                         reason=str(error), tu_penalty=penalty),
            source="CombatResolver",
        )
        self._emit_log(
            f"{actor.name}'s action failed ({error}); turn skipped (+{penalty} TU)",
            turn, "BATTLE", "WARNING",
        )

    def _publish_immediate(self, event: "GameEvent") -> None:
        # Deliver everything queued so far first to keep presentation order
        self.event_manager.process_events()
        self.event_manager.publish_immediate(event, source="CombatResolver")

    def _emit_log(self, message: str, turn: int, category: str = "BATTLE", level: str = "INFO") -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                turn=turn,
                message=message,
                category=category,
                level=level,
                source="CombatResolver",
            ),
            source="CombatResolver",
        )
