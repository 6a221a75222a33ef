"""Battle events and the event bus that delivers them."""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    ActionFailed,
    ActionResolved,
    BattleEnded,
    BattlePhaseChanged,
    BattleStarted,
    DebugMessage,
    EventType,
    GameEvent,
    LogMessage,
    PlayerActionRequested,
    RosterUpdated,
    SchedulerStalled,
    SkillAnnounced,
    TimelineUpdated,
    UnitDamaged,
    UnitDefeated,
    UnitDeployed,
    UnitTurnStarted,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "EventType",
    "GameEvent",
    "ActionFailed",
    "ActionResolved",
    "BattleEnded",
    "BattlePhaseChanged",
    "BattleStarted",
    "DebugMessage",
    "LogMessage",
    "PlayerActionRequested",
    "RosterUpdated",
    "SchedulerStalled",
    "SkillAnnounced",
    "TimelineUpdated",
    "UnitDamaged",
    "UnitDefeated",
    "UnitDeployed",
    "UnitTurnStarted",
]
