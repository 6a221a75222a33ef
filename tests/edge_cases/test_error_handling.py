"""
Edge case and error handling tests.

Tests malformed skill data, scheduler stalls, failing presentation
subscribers and other boundary conditions of the battle loop.
"""
import random
from unittest.mock import Mock

import pytest

from cardclash.core.config import BattleConfig
from cardclash.core.data import Side, SkillDescriptor
from cardclash.core.engine import ActionChoice, BattleOutcome, BattlePhase
from cardclash.core.errors import SkillResolutionError
from cardclash.core.events import EventType
from cardclash.game import Battle
from cardclash.game.ai import AIController
from cardclash.game.combat import CombatResolver
from tests.test_utils import CardBuilder, ScriptedAI


class BrokenSkillAI(AIController):
    """Policy that submits a skill missing its target scope."""

    def choose_action(self, unit, state=None):
        return ActionChoice(skill=SkillDescriptor("Glitch", cost_tu=100, damage_multiplier=1.0,
                                                  target_scope=None))


class TestMalformedSkills:
    """Test recovery from skills the pipeline cannot interpret."""

    @pytest.fixture
    def resolver(self, config, event_manager):
        return CombatResolver(config, event_manager, rng=random.Random(0))

    @pytest.mark.parametrize("skill", [
        SkillDescriptor("No Scope", target_scope=None),
        SkillDescriptor("No Category", effect_category=None),
        SkillDescriptor("Bad Multiplier", damage_multiplier=float("nan")),
        SkillDescriptor("Negative Time", cost_tu=-10),
        SkillDescriptor("Float Cost", cost_mp=1.5),
    ])
    def test_validation_rejects(self, resolver, skill):
        """Test that malformed descriptors fail validation."""
        with pytest.raises(SkillResolutionError):
            resolver.validate_skill(skill)

    def test_failure_skips_turn_with_penalty(self, resolver, battle_state, event_manager):
        """Test that a failed resolution adds the TU penalty and nothing else."""
        failed = Mock()
        event_manager.subscribe(EventType.ACTION_FAILED, failed)
        actor = battle_state.player_roster.active[0]
        actor.current_mp = 3

        report = resolver.resolve(actor, SkillDescriptor("Glitch", cost_mp=2, target_scope=None), battle_state)
        event_manager.process_events()

        assert report.failed
        assert "target_scope" in report.error
        assert actor.time_units == 100
        assert actor.current_mp == 3
        assert all(u.current_hp == u.max_hp for u in battle_state.enemy_roster.active)
        assert failed.call_args[0][0].tu_penalty == 100

    def test_non_descriptor_skill(self, resolver, battle_state):
        """Test that arbitrary objects are rejected without raising."""
        actor = battle_state.player_roster.active[0]

        report = resolver.resolve(actor, object(), battle_state)

        assert report.failed
        assert actor.time_units == 100

    def test_battle_continues_after_failure(self, event_manager):
        """Test that the battle loop survives a failing enemy skill."""
        failed = Mock()
        event_manager.subscribe(EventType.ACTION_FAILED, failed)
        battle = Battle(BattleConfig(), event_manager, opponent_policy=BrokenSkillAI(),
                        player_policy=ScriptedAI())

        phase = battle.start(
            [CardBuilder.card("Hero", hp=1000, speed=50)],
            [CardBuilder.card("Glitcher", hp=300, speed=150)],
        )

        assert phase is BattlePhase.ENDED
        assert battle.state.player_roster.active[0].current_hp == 1000
        assert failed.call_count >= 1

    def test_unreadable_cost_skips_enemy_turn(self, event_manager):
        """Test that a skill cost the policy cannot compare fails only that turn."""
        failed = Mock()
        event_manager.subscribe(EventType.ACTION_FAILED, failed)
        broken = SkillDescriptor("Broken", cost_mp=None, cost_tu=100, damage_multiplier=1.0)
        battle = Battle(BattleConfig(), event_manager, player_policy=ScriptedAI(), rng=random.Random(0))

        phase = battle.start(
            [CardBuilder.card("Hero", hp=1000, speed=50)],
            [CardBuilder.card("Glitcher", hp=300, speed=150, skills=[broken])],
        )

        assert phase is BattlePhase.ENDED
        assert battle.outcome is BattleOutcome.PLAYER_WON
        assert battle.state.player_roster.active[0].current_hp == 1000
        assert failed.call_count >= 1
        event = failed.call_args[0][0]
        assert event.unit.name == "Glitcher"
        assert event.tu_penalty == BattleConfig().failure_tu_penalty

    def test_unreadable_cost_skips_player_prompt(self, event_manager):
        """Test that a player unit whose options cannot be built loses the turn."""
        requested = Mock()
        event_manager.subscribe(EventType.PLAYER_ACTION_REQUESTED, requested)
        broken = SkillDescriptor("Broken", cost_mp=None, cost_tu=100, damage_multiplier=1.0)
        battle = Battle(BattleConfig(), event_manager, opponent_policy=ScriptedAI())

        phase = battle.start(
            [CardBuilder.card("Hero", speed=150, skills=[broken])],
            [CardBuilder.card("Slime")],
        )

        assert phase is BattlePhase.ENDED
        assert battle.outcome is BattleOutcome.PLAYER_LOST
        requested.assert_not_called()
        assert battle.pending_unit is None


class TestSchedulerStall:
    """Test the bounded stall handling."""

    def test_stall_pauses_without_ending(self, event_manager):
        """Test that no ready unit pauses the battle and reports each check."""
        stalls = Mock()
        errors = []
        event_manager.subscribe(EventType.SCHEDULER_STALLED, stalls)
        event_manager.subscribe(
            EventType.LOG_MESSAGE,
            lambda e: errors.append(e.message) if e.level == "ERROR" else None,
        )
        battle = Battle(BattleConfig(active_slots=1, max_stall_retries=2), event_manager,
                        opponent_policy=ScriptedAI(), player_policy=ScriptedAI())
        battle.start(
            [CardBuilder.card("Hero"), CardBuilder.card("Squire")],
            [CardBuilder.card("Slime"), CardBuilder.card("Ooze")],
            max_steps=0,
        )

        # Only reserves are alive, and reserves enter at outcome checks
        battle.state.player_roster.active[0].current_hp = 0
        battle.state.enemy_roster.active[0].current_hp = 0
        phase = battle.run()

        assert phase is BattlePhase.AWAITING_ACTOR
        assert battle.outcome is None
        assert stalls.call_count == 3
        assert [call[0][0].attempt for call in stalls.call_args_list] == [1, 2, 3]
        assert len(errors) == 1


class TestPresentationFailures:
    """Test that presentation problems never break the battle."""

    def test_failing_damage_subscriber(self, event_manager):
        """Test that a crashing animation handler does not stop resolution."""
        event_manager.subscribe(EventType.UNIT_DAMAGED, Mock(side_effect=RuntimeError("render failed")))
        battle = Battle(BattleConfig(), event_manager, opponent_policy=ScriptedAI(),
                        player_policy=ScriptedAI())

        phase = battle.start(
            [CardBuilder.card("Hero", attack=1000, speed=200)],
            [CardBuilder.card("Slime")],
        )

        assert phase is BattlePhase.ENDED
        assert event_manager.get_statistics()["subscriber_errors"] == 1


class TestBoundaries:
    """Test boundary values."""

    def test_zero_time_skill_acts_again(self, event_manager):
        """Test that a unit using a zero-TU skill stays ready."""
        free_skill = CardBuilder.skill("Jab", cost_tu=0, multiplier=1.0)
        battle = Battle(BattleConfig(), event_manager, opponent_policy=ScriptedAI(),
                        player_policy=ScriptedAI())

        phase = battle.start(
            [CardBuilder.card("Hero", hp=1000, speed=200, skills=[free_skill])],
            [CardBuilder.card("Slime", hp=300)],
        )

        assert phase is BattlePhase.ENDED
        assert battle.state.turn_count == 4

    def test_huge_defense_still_deals_minimum(self, event_manager):
        """Test the minimum damage clamp inside a full battle."""
        battle = Battle(BattleConfig(), event_manager, opponent_policy=ScriptedAI(),
                        player_policy=ScriptedAI())

        battle.start(
            [CardBuilder.card("Hero", attack=1, speed=200)],
            [CardBuilder.card("Wall", hp=3, defense=10 ** 9, attack=0)],
        )

        assert battle.state.enemy_roster.active[0].current_hp == 0

    def test_side_lookup_of_reserve_unit(self, config, event_manager):
        """Test that reserve units are found by id."""
        battle = Battle(config, event_manager, opponent_policy=ScriptedAI(), player_policy=ScriptedAI())
        deck = CardBuilder.deck("Card", 5, hp=1000)
        battle.start(deck, CardBuilder.deck("Foe", 1, hp=1000), max_steps=0)

        reserve = battle.state.find_unit("player_4")
        assert reserve is not None
        assert reserve.side is Side.PLAYER
