"""
Basic test fixtures for the card clash test suite.

Provides shared fixtures for the scheduler, action pipeline and battle
orchestrator tests.
"""

import os
import random
import sys

import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from cardclash.core.config import BattleConfig
from cardclash.core.data import Side
from cardclash.core.engine import BattleState, Roster, Timeline
from cardclash.core.events import EventManager
from tests.test_utils import CardBuilder


@pytest.fixture
def config():
    """Default battle configuration."""
    return BattleConfig()


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture
def rng():
    """Seeded random source for deterministic targeting."""
    return random.Random(1234)


@pytest.fixture
def timeline():
    """Create a fresh timeline for testing."""
    return Timeline()


@pytest.fixture
def player_unit():
    return CardBuilder.unit("Hero", Side.PLAYER, unit_id="player_0")


@pytest.fixture
def enemy_unit():
    return CardBuilder.unit("Slime", Side.ENEMY, unit_id="enemy_0")


@pytest.fixture
def battle_state():
    """Battle state with two living units per side."""
    state = BattleState()
    state.player_roster = Roster(
        Side.PLAYER,
        active=[CardBuilder.unit(f"Hero {i}", Side.PLAYER, unit_id=f"player_{i}") for i in range(2)],
    )
    state.enemy_roster = Roster(
        Side.ENEMY,
        active=[CardBuilder.unit(f"Slime {i}", Side.ENEMY, unit_id=f"enemy_{i}") for i in range(2)],
    )
    return state
