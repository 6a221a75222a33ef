"""Core battle engine components.

This package contains the fundamental engine systems:
- timeline.py: TU countdown scheduling and turn-order preview
- actions.py: action choices and the wait pseudo-skill
- game_state.py: rosters, phases and the battle state aggregate
"""

from .actions import WAIT_SKILL_NAME, ActionChoice, SkillOption, create_wait_action, create_wait_skill
from .game_state import BattleOutcome, BattlePhase, BattleState, Roster
from .timeline import Timeline, TimelineEntry, initial_time_units

__all__ = [
    "Timeline",
    "TimelineEntry",
    "initial_time_units",
    "ActionChoice",
    "SkillOption",
    "WAIT_SKILL_NAME",
    "create_wait_action",
    "create_wait_skill",
    "BattleOutcome",
    "BattlePhase",
    "BattleState",
    "Roster",
]
