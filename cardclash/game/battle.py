"""Battle orchestration: the turn cycle and win/loss evaluation.

The ``Battle`` owns the battle state for its whole lifetime and drives the
phase machine::

    INITIALIZING -> AWAITING_ACTOR -> AWAITING_ACTION -> RESOLVING
                 -> CHECKING_OUTCOME -> AWAITING_ACTOR | ENDED

Player units suspend the cycle in AWAITING_ACTION until the presentation
layer calls the callback it received with ``PlayerActionRequested``. Enemy
units (and player units in auto battles) are decided by a policy and
resolved straight away. Everything runs on one thread; the only waits are
for player input and for immediate events whose subscribers return once
their visuals are done.
"""

import random
from typing import Optional, Sequence

from ..core.config import BattleConfig
from ..core.data import SIDE_NAMES, CardRecord, Side
from ..core.engine import (
    ActionChoice,
    BattleOutcome,
    BattlePhase,
    BattleState,
    SkillOption,
    Timeline,
    create_wait_skill,
)
from ..core.errors import BattleSetupError, InvalidPhaseError
from ..core.events import (
    BattleEnded,
    BattlePhaseChanged,
    BattleStarted,
    EventManager,
    LogMessage,
    PlayerActionRequested,
    RosterUpdated,
    SchedulerStalled,
    TimelineUpdated,
    UnitTurnStarted,
)
from .ai import AIController, RandomSkillAI
from .combat import ActionReport, CombatResolver
from .entities.unit import Unit
from .managers import RosterManager


class Battle:
    """Runs one battle between a player deck and an enemy deck."""

    def __init__(
        self,
        config: Optional[BattleConfig] = None,
        event_manager: Optional[EventManager] = None,
        opponent_policy: Optional[AIController] = None,
        player_policy: Optional[AIController] = None,
        rng: Optional[random.Random] = None,
    ):
        """Wire the scheduler, roster manager, pipeline and policies together.

        Args:
            config: Tuning values; defaults to ``BattleConfig()``
            event_manager: Bus for presentation and log events
            opponent_policy: Decides enemy actions (default: RandomSkillAI)
            player_policy: Decides player actions for auto battles; when None
                player units wait for ``submit_action``
            rng: Shared random source for targeting and the default policy
        """
        self.config = config or BattleConfig()
        self.event_manager = event_manager or EventManager()
        self.rng = rng or random.Random()

        self.state = BattleState()
        self.timeline = Timeline(self.config.max_stall_retries, on_stall=self._handle_stall)
        self.roster_manager = RosterManager(self.config, self.event_manager)
        self.resolver = CombatResolver(self.config, self.event_manager, rng=self.rng)
        self.opponent_policy = opponent_policy or RandomSkillAI(self.config.wait_tu_cost, rng=self.rng)
        self.player_policy = player_policy

        self.last_report: Optional[ActionReport] = None
        self._pending_unit: Optional[Unit] = None
        self._running = False

    # ============== Properties ==============

    @property
    def phase(self) -> BattlePhase:
        return self.state.phase

    @property
    def outcome(self) -> Optional[BattleOutcome]:
        return self.state.outcome

    @property
    def pending_unit(self) -> Optional[Unit]:
        """The player unit whose action is awaited, if any."""
        return self._pending_unit

    # ============== Lifecycle ==============

    def start(self, player_deck: Sequence[CardRecord], enemy_deck: Sequence[CardRecord],
              max_steps: Optional[int] = None) -> BattlePhase:
        """Deploy both decks and run until input is needed or the battle ends.

        ``max_steps`` is passed on to ``run``.

        Raises:
            InvalidPhaseError: If the battle was already started
            BattleSetupError: If a deck is empty or has no living card
        """
        if self.phase is not BattlePhase.INITIALIZING:
            raise InvalidPhaseError("start a battle", self.phase)

        player_roster = self.roster_manager.build_roster(Side.PLAYER, player_deck)
        enemy_roster = self.roster_manager.build_roster(Side.ENEMY, enemy_deck)
        for roster in (player_roster, enemy_roster):
            if not roster.has_living_units():
                raise BattleSetupError(f"{SIDE_NAMES[roster.side]} deck has no living card")

        self.state.player_roster = player_roster
        self.state.enemy_roster = enemy_roster

        self.event_manager.publish(
            BattleStarted(turn=0, player_count=len(player_deck), enemy_count=len(enemy_deck)),
            source="Battle",
        )
        self._emit_log(f"Battle started: {len(player_deck)} vs {len(enemy_deck)} cards", "SYSTEM")
        for roster in (player_roster, enemy_roster):
            # Cards deployed dead give their slot to the reserve straight away
            self.roster_manager.fill_empty_slots(roster)
        self._publish_roster()
        self._publish_timeline()

        self._set_phase(BattlePhase.AWAITING_ACTOR)
        return self.run(max_steps)

    def run(self, max_steps: Optional[int] = None) -> BattlePhase:
        """Advance scheduler cycles until the battle cannot continue on its own.

        Stops when the battle ends, a player action is awaited, the scheduler
        stalls, or ``max_steps`` cycles have run. Stopping never ends the
        battle; call ``run`` again to continue.
        """
        if self._running:
            # Re-entered from a synchronous input callback; the outer loop continues
            return self.phase

        self._running = True
        try:
            steps = 0
            while True:
                # Subscribers may answer a PlayerActionRequested right here
                self.event_manager.process_events()
                if self.phase is not BattlePhase.AWAITING_ACTOR:
                    break
                if max_steps is not None and steps >= max_steps:
                    break
                steps += 1
                if not self._advance_schedule():
                    self.event_manager.process_events()
                    break

            if self.phase is BattlePhase.ENDED:
                # A synchronous answer ends the battle with its last events still queued
                self.event_manager.process_events()
        finally:
            self._running = False

        return self.phase

    def step(self) -> BattlePhase:
        """Run a single scheduler cycle."""
        return self.run(max_steps=1)

    def submit_action(self, choice: ActionChoice) -> BattlePhase:
        """Resolve the awaited player action and continue the battle.

        This is the callback handed out with ``PlayerActionRequested``.

        Raises:
            InvalidPhaseError: If no player action is awaited
        """
        if self.phase is not BattlePhase.AWAITING_ACTION or self._pending_unit is None:
            raise InvalidPhaseError("submit an action", self.phase)

        actor = self._pending_unit
        self._pending_unit = None
        self._emit_log(f"{actor.name} chose {choice.skill.name}", "INPUT")

        self._resolve(actor, choice)
        return self.run()

    # ============== Turn Cycle ==============

    def _advance_schedule(self) -> bool:
        """AWAITING_ACTOR: pick the next unit and start its action.

        Returns:
            False if the scheduler stalled and no unit could act
        """
        actor = self.timeline.next_actor(self.state.scheduled_units())
        self._publish_timeline()

        if actor is None:
            self._emit_log(
                f"No unit became ready after {self.config.max_stall_retries + 1} checks",
                "TIMELINE", "ERROR",
            )
            return False

        # Negative countdowns are consumed when the unit acts
        actor.time_units = max(0, actor.time_units)
        self.state.active_unit_id = actor.unit_id
        self.event_manager.publish(UnitTurnStarted(turn=self.state.turn_count, unit=actor), source="Battle")

        try:
            if actor.is_player and self.player_policy is None:
                self._request_player_action(actor)
                return True

            policy = self.player_policy if actor.is_player else self.opponent_policy
            choice = policy.decide(actor, self.state)
            self._emit_log(f"{actor.name} decided on {choice.skill.name}: {choice.reasoning}", "AI")
        except Exception as e:
            # Unreadable skill data fails the turn the same way the pipeline does
            self._skip_turn(actor, e)
            return True

        self._resolve(actor, choice)
        return True

    def _request_player_action(self, actor: Unit) -> None:
        """AWAITING_ACTION: offer the unit's skills and suspend."""
        options = tuple(self.action_options(actor))
        self._pending_unit = actor
        self._set_phase(BattlePhase.AWAITING_ACTION)
        self.event_manager.publish(
            PlayerActionRequested(
                turn=self.state.turn_count,
                unit=actor,
                options=options,
                callback=self.submit_action,
            ),
            source="Battle",
        )

    def action_options(self, unit: Unit) -> list[SkillOption]:
        """Skills to present for a unit; waiting is offered when nothing is affordable."""
        options = [SkillOption(skill, unit.can_afford(skill)) for skill in unit.skills]
        if not any(option.affordable for option in options):
            options.append(SkillOption(create_wait_skill(self.config.wait_tu_cost), True))
        return options

    def _resolve(self, actor: Unit, choice: ActionChoice) -> None:
        """RESOLVING: run the pipeline, then check the outcome."""
        self._set_phase(BattlePhase.RESOLVING)
        self.last_report = self.resolver.resolve(actor, choice.skill, self.state, choice.targets)
        self.state.turn_count += 1
        self._check_outcome()

    def _skip_turn(self, actor: Unit, error: Exception) -> None:
        """RESOLVING: fail the turn with a TU penalty, then check the outcome."""
        self._set_phase(BattlePhase.RESOLVING)
        self.last_report = self.resolver.skip_turn(actor, error, self.state)
        self.state.turn_count += 1
        self._check_outcome()

    def _check_outcome(self) -> None:
        """CHECKING_OUTCOME: end the battle or refill dead slots."""
        self._set_phase(BattlePhase.CHECKING_OUTCOME)

        outcome = self.evaluate_outcome()
        if outcome is not None:
            self._end(outcome)
            return

        for roster in (self.state.player_roster, self.state.enemy_roster):
            self.roster_manager.fill_empty_slots(roster, turn=self.state.turn_count)

        self.state.active_unit_id = None
        self._publish_roster()
        self._publish_timeline()
        self._set_phase(BattlePhase.AWAITING_ACTOR)

    def evaluate_outcome(self) -> Optional[BattleOutcome]:
        """Win/loss check; the player side is checked first, so mutual defeat is a loss."""
        if not self.state.player_roster.has_living_units():
            return BattleOutcome.PLAYER_LOST
        if not self.state.enemy_roster.has_living_units():
            return BattleOutcome.PLAYER_WON
        return None

    def _end(self, outcome: BattleOutcome) -> None:
        if self.state.outcome is not None:
            return

        self.state.outcome = outcome
        self.state.active_unit_id = None
        self._set_phase(BattlePhase.ENDED)

        player_won = outcome is BattleOutcome.PLAYER_WON
        self.event_manager.publish(BattleEnded(turn=self.state.turn_count, player_won=player_won), source="Battle")
        self._emit_log("VICTORY" if player_won else "DEFEAT", "SYSTEM")

    # ============== Notifications ==============

    def _set_phase(self, new_phase: BattlePhase) -> None:
        old_phase = self.state.phase
        if old_phase is new_phase:
            return
        self.state.phase = new_phase
        self.event_manager.publish(
            BattlePhaseChanged(turn=self.state.turn_count, old_phase=old_phase, new_phase=new_phase),
            source="Battle",
        )

    def _handle_stall(self, attempt: int, max_attempts: int) -> None:
        self.event_manager.publish(
            SchedulerStalled(turn=self.state.turn_count, attempt=attempt, max_attempts=max_attempts),
            source="Battle",
        )
        self._emit_log(f"No ready unit after normalization (check {attempt}/{max_attempts})",
                       "TIMELINE", "WARNING")

    def _publish_roster(self) -> None:
        self.event_manager.publish(
            RosterUpdated(
                turn=self.state.turn_count,
                players=tuple(self.state.player_roster.active),
                enemies=tuple(self.state.enemy_roster.active),
            ),
            source="Battle",
        )

    def _publish_timeline(self) -> None:
        preview = self.timeline.get_preview(self.state.scheduled_units(), self.config.schedule_preview_count)
        self.state.timeline_preview = preview
        self.event_manager.publish(
            TimelineUpdated(turn=self.state.turn_count, entries=tuple(preview)),
            source="Battle",
        )

    def _emit_log(self, message: str, category: str = "BATTLE", level: str = "INFO") -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                turn=self.state.turn_count,
                message=message,
                category=category,
                level=level,
                source="Battle",
            ),
            source="Battle",
        )
