"""Event-driven battle events.

This module defines all battle events that the presentation layer and the
log manager can subscribe to. Events replace direct calls from the engine
into rendering code: the engine publishes, collaborators listen.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events include the battle turn counter at publication time
- Events use rich objects (Unit, SkillDescriptor) instead of primitive fields
- Events use proper enums instead of magic strings
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from ...game.entities.unit import Unit
    from ...game.combat.combat_resolver import ActionReport
    from ..engine.actions import ActionChoice, SkillOption
    from ..engine.game_state import BattlePhase
    from ..engine.timeline import TimelineEntry


class EventType(Enum):
    """Types of battle events that collaborators can subscribe to."""
    # Battle lifecycle
    BATTLE_STARTED = auto()
    BATTLE_PHASE_CHANGED = auto()
    BATTLE_ENDED = auto()

    # Roster and timeline
    ROSTER_UPDATED = auto()
    TIMELINE_UPDATED = auto()
    UNIT_DEPLOYED = auto()
    SCHEDULER_STALLED = auto()

    # Turn flow
    UNIT_TURN_STARTED = auto()
    PLAYER_ACTION_REQUESTED = auto()

    # Action resolution
    SKILL_ANNOUNCED = auto()
    UNIT_DAMAGED = auto()
    UNIT_DEFEATED = auto()
    ACTION_RESOLVED = auto()
    ACTION_FAILED = auto()

    # Logging
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all battle events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class BattleStarted(GameEvent):
    """Event emitted once both rosters are deployed."""
    player_count: int
    enemy_count: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.BATTLE_STARTED)


@dataclass(frozen=True)
class BattlePhaseChanged(GameEvent):
    """Event emitted when the orchestrator moves between phases."""
    old_phase: "BattlePhase"
    new_phase: "BattlePhase"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_PHASE_CHANGED)


@dataclass(frozen=True)
class BattleEnded(GameEvent):
    """Event emitted exactly once when one side has no living units left."""
    player_won: bool

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_ENDED)


@dataclass(frozen=True)
class RosterUpdated(GameEvent):
    """Request to render both active rosters, dead slots included."""
    players: tuple["Unit", ...]
    enemies: tuple["Unit", ...]

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROSTER_UPDATED)


@dataclass(frozen=True)
class TimelineUpdated(GameEvent):
    """Request to render the upcoming turn order (first N living units)."""
    entries: tuple["TimelineEntry", ...]

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.TIMELINE_UPDATED)


@dataclass(frozen=True)
class UnitDeployed(GameEvent):
    """Event emitted when a reserve unit takes over a dead active slot."""
    unit: "Unit"
    slot: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_DEPLOYED)


@dataclass(frozen=True)
class SchedulerStalled(GameEvent):
    """Event emitted when no unit is ready after TU normalization."""
    attempt: int
    max_attempts: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SCHEDULER_STALLED)


@dataclass(frozen=True)
class UnitTurnStarted(GameEvent):
    """Request to highlight the unit that acts next."""
    unit: "Unit"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_TURN_STARTED)


@dataclass(frozen=True)
class PlayerActionRequested(GameEvent):
    """Request for a player unit's action.

    The battle stays suspended until ``callback`` is invoked with an
    ``ActionChoice``.
    """
    unit: "Unit"
    options: tuple["SkillOption", ...]
    callback: Callable[["ActionChoice"], Any]

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.PLAYER_ACTION_REQUESTED)


@dataclass(frozen=True)
class SkillAnnounced(GameEvent):
    """Skill-name banner. Published immediately; returning acknowledges it."""
    unit: "Unit"
    skill_name: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SKILL_ANNOUNCED)


@dataclass(frozen=True)
class UnitDamaged(GameEvent):
    """Damage number. Published immediately; returning acknowledges it."""
    target: "Unit"
    amount: int
    is_advantaged: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_DAMAGED)


@dataclass(frozen=True)
class UnitDefeated(GameEvent):
    """Event emitted when a unit's HP reaches zero."""
    unit: "Unit"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_DEFEATED)


@dataclass(frozen=True)
class ActionResolved(GameEvent):
    """Event emitted after the action pipeline finishes, failed or not."""
    report: "ActionReport"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ACTION_RESOLVED)


@dataclass(frozen=True)
class ActionFailed(GameEvent):
    """Warning emitted when a resolution fails and the actor's turn is skipped."""
    unit: "Unit"
    skill_name: str
    reason: str
    tu_penalty: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ACTION_FAILED)


@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event for centralized logging."""
    message: str
    category: str = "BATTLE"
    level: str = "INFO"
    source: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event for debug-only diagnostics."""
    message: str
    source: str = "unknown"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)
