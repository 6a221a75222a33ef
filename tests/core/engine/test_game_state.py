"""
Unit tests for rosters and the battle state aggregate.
"""
from collections import deque

from cardclash.core.data import Side
from cardclash.core.engine import BattlePhase, BattleState, Roster
from tests.test_utils import CardBuilder


class TestRoster:
    """Test roster queries."""

    def test_living_units_include_reserve(self):
        """Test that a side with only a living reserve is not defeated."""
        dead = CardBuilder.unit("Dead")
        dead.current_hp = 0
        reserve = CardBuilder.unit("Reserve")
        roster = Roster(Side.PLAYER, active=[dead], reserve=deque([reserve]))

        assert roster.living_active() == []
        assert roster.living_reserve() == [reserve]
        assert roster.has_living_units()
        assert roster.dead_slots() == [0]

    def test_defeated_when_everything_is_dead(self):
        """Test that a roster with no living unit anywhere is defeated."""
        dead = CardBuilder.unit("Dead")
        dead.current_hp = 0

        assert not Roster(Side.ENEMY, active=[dead]).has_living_units()
        assert not Roster(Side.ENEMY).has_living_units()

    def test_find_unit_searches_reserve(self):
        """Test lookup by id across slots and reserve."""
        active = CardBuilder.unit("Active", unit_id="a")
        benched = CardBuilder.unit("Benched", unit_id="b")
        roster = Roster(Side.PLAYER, active=[active], reserve=deque([benched]))

        assert roster.find_unit("b") is benched
        assert roster.find_unit("missing") is None
        assert list(roster.all_units()) == [active, benched]


class TestBattleState:
    """Test the battle state aggregate."""

    def test_initial_state(self):
        """Test a fresh battle state."""
        state = BattleState()

        assert state.phase is BattlePhase.INITIALIZING
        assert state.outcome is None
        assert state.turn_count == 0
        assert not state.is_over

    def test_opponents_and_allies(self, battle_state):
        """Test side lookups relative to a unit."""
        hero = battle_state.player_roster.active[0]

        assert battle_state.opponents_of(hero) is battle_state.enemy_roster
        assert battle_state.allies_of(hero) is battle_state.player_roster

    def test_scheduled_units_player_first(self, battle_state):
        """Test that scheduling order lists player slots before enemy slots."""
        ids = [unit.unit_id for unit in battle_state.scheduled_units()]

        assert ids == ["player_0", "player_1", "enemy_0", "enemy_1"]

    def test_active_unit_lookup(self, battle_state):
        """Test resolving the active unit id."""
        assert battle_state.get_active_unit() is None

        battle_state.active_unit_id = "enemy_1"
        assert battle_state.get_active_unit() is battle_state.enemy_roster.active[1]
