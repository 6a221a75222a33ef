"""Plain console presentation for battles.

The presenter only listens to events. It prints rosters, battle log lines,
damage numbers and the final result, and answers ``PlayerActionRequested``
by prompting for a skill number. Immediate events (skill banners and damage
numbers) are acknowledged by returning from the handler.
"""

from typing import Callable, Optional

from ..core.data import ELEMENT_NAMES
from ..core.engine import ActionChoice
from ..core.events import (
    BattleEnded,
    EventManager,
    EventType,
    LogMessage,
    PlayerActionRequested,
    RosterUpdated,
    SkillAnnounced,
    UnitDamaged,
)

# Categories shown as they happen; the rest stays in the log manager
SHOWN_CATEGORIES = {"BATTLE", "ROSTER", "SYSTEM"}


class ConsolePresenter:
    """Prints battle events and reads player choices from stdin."""

    def __init__(
        self,
        event_manager: EventManager,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        width: int = 60,
    ):
        self.event_manager = event_manager
        self.input_func = input_func
        self.output = output
        self.width = width
        self._subscribe()

    def _subscribe(self) -> None:
        handlers = {
            EventType.ROSTER_UPDATED: self._on_roster_updated,
            EventType.LOG_MESSAGE: self._on_log_message,
            EventType.SKILL_ANNOUNCED: self._on_skill_announced,
            EventType.UNIT_DAMAGED: self._on_unit_damaged,
            EventType.PLAYER_ACTION_REQUESTED: self._on_action_requested,
            EventType.BATTLE_ENDED: self._on_battle_ended,
        }
        for event_type, handler in handlers.items():
            self.event_manager.subscribe(event_type, handler, subscriber_name=f"ConsolePresenter.{handler.__name__}")

    # ============== Rendering ==============

    @staticmethod
    def format_unit(unit) -> str:
        if unit is None:
            return "(empty)"
        element = ELEMENT_NAMES.get(unit.element, "?")
        status = "" if unit.is_alive else " [DOWN]"
        return (
            f"{unit.name} <{element}> HP {unit.current_hp}/{unit.max_hp} "
            f"MP {unit.current_mp} TU {unit.time_units}{status}"
        )

    def _on_roster_updated(self, event: RosterUpdated) -> None:
        self.output("=" * self.width)
        self.output("ENEMIES")
        for slot, unit in enumerate(event.enemies):
            self.output(f"  {slot + 1}. {self.format_unit(unit)}")
        self.output("PLAYERS")
        for slot, unit in enumerate(event.players):
            self.output(f"  {slot + 1}. {self.format_unit(unit)}")
        self.output("=" * self.width)

    def _on_log_message(self, event: LogMessage) -> None:
        if event.level.upper() == "DEBUG":
            return
        if event.category.upper() in SHOWN_CATEGORIES or event.level.upper() in ("WARNING", "ERROR"):
            self.output(f"> {event.message}")

    def _on_skill_announced(self, event: SkillAnnounced) -> None:
        self.output(f"*** {event.skill_name} ***")

    def _on_unit_damaged(self, event: UnitDamaged) -> None:
        suffix = " (advantage!)" if event.is_advantaged else ""
        self.output(f"    {event.target.name} takes {event.amount} damage{suffix}")

    def _on_battle_ended(self, event: BattleEnded) -> None:
        self.output("")
        self.output("VICTORY!" if event.player_won else "DEFEAT...")

    # ============== Input ==============

    def _on_action_requested(self, event: PlayerActionRequested) -> None:
        choice = self.prompt_choice(event)
        if choice is not None:
            event.callback(choice)

    def prompt_choice(self, event: PlayerActionRequested) -> Optional[ActionChoice]:
        """Ask for a skill number until an affordable one is entered.

        Returns None when input ends, leaving the battle suspended.
        """
        unit = event.unit
        self.output(f"{unit.name}'s turn (MP {unit.current_mp})")
        for number, option in enumerate(event.options, start=1):
            marker = "" if option.affordable else " (not enough MP)"
            self.output(f"  {number}. {option.skill.name} [{option.cost_label}]{marker}")

        while True:
            try:
                raw = self.input_func("Choose a skill: ")
            except EOFError:
                return None

            try:
                index = int(raw.strip()) - 1
            except ValueError:
                self.output("Enter a skill number.")
                continue

            if not 0 <= index < len(event.options):
                self.output("No such skill.")
                continue

            option = event.options[index]
            if not option.affordable:
                self.output("Not enough MP.")
                continue

            return ActionChoice(skill=option.skill, reasoning="player choice")
