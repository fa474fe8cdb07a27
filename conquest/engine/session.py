"""
Match driver.
Holds the current state of one match and runs the automated steps between
human inputs: pending catastrophes, resting turns and AI turns, each after
an optional pacing delay during which human input is refused.
"""

import logging
import random
import threading
import time
from typing import Callable

from conquest import config
from conquest.engine.actions import Action, end_turn, resolve_catastrophe
from conquest.engine.ai import choose_action
from conquest.engine.definitions import MapDefinition
from conquest.engine.events import ACTION_REJECTED, GameEvent, action_rejected
from conquest.engine.reducer import apply_action
from conquest.engine.state import GameState
from conquest.engine.utils import initialize_game_state

logger = logging.getLogger(__name__)

# Upper bound on automated steps per run_automation call
MAX_AUTOMATED_STEPS = 500


class GameSession:
    """
    One match: state, topology, random source and pacing.

    Readers may use `state` at any time; it is swapped as a whole after every
    step. Writers (submit, run_automation) are serialized by a lock.
    """

    def __init__(
        self,
        state: GameState,
        map_def: MapDefinition,
        rng: random.Random | None = None,
        ai_delay: float | None = None,
        ai_setup_delay: float | None = None,
        catastrophe_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._state = state
        self.map_def = map_def
        self.rng = rng if rng is not None else random.Random()
        # Omitted delays follow conquest.config at construction time
        self.ai_delay = config.AI_DELAY if ai_delay is None else ai_delay
        self.ai_setup_delay = config.AI_SETUP_DELAY if ai_setup_delay is None else ai_setup_delay
        self.catastrophe_delay = (
            config.CATASTROPHE_DELAY if catastrophe_delay is None else catastrophe_delay
        )
        self._sleep = sleep
        self._lock = threading.RLock()

    @classmethod
    def new_game(
        cls,
        map_def: MapDefinition,
        vs_ai: bool = True,
        catastrophe_interval: int = config.DEFAULT_CATASTROPHE_INTERVAL,
        seed: int | None = None,
        **kwargs,
    ) -> "GameSession":
        """Start a fresh match; seed makes every roll and AI choice reproducible."""
        state = initialize_game_state(map_def, vs_ai, catastrophe_interval)
        return cls(state, map_def, rng=random.Random(seed), **kwargs)

    @property
    def state(self) -> GameState:
        return self._state

    def _set_processing(self, value: bool) -> None:
        updated = self._state.copy()
        updated.is_processing = value
        self._state = updated

    def _reject(self, action: Action, reason: str) -> list[GameEvent]:
        rejected = self._state.copy()
        rejected.add_log(reason, "error")
        self._state = rejected
        return [action_rejected(action.type, action.player, reason)]

    def submit(self, action: Action, automate: bool = True) -> list[GameEvent]:
        """
        Apply a human intent, then (by default) run the automated steps it unlocks.
        Refused while an automated action is in flight or when the acting
        player is AI-controlled.
        """
        if self._state.is_processing:
            # The automation thread owns the state right now; report without writing to it.
            logger.info("Refused %s from player %s while processing", action.type, action.player)
            return [action_rejected(action.type, action.player, "Please wait...")]
        with self._lock:
            player = self._state.get_player(action.player) if action.player is not None else None
            if player is not None and player.is_ai:
                return self._reject(action, f"{player.name} is controlled by the computer")
            self._state, events = apply_action(self._state, action, self.map_def, self.rng)
            if automate:
                events.extend(self.run_automation())
            return events

    def next_automated_action(self) -> tuple[Action | None, float]:
        """The step the engine takes on its own next, and the delay before it."""
        state = self._state
        if state.winner is not None:
            return None, 0.0
        if state.pending_catastrophe is not None:
            return resolve_catastrophe(), self.catastrophe_delay
        player = state.current_player
        if player.is_ai:
            delay = self.ai_setup_delay if state.in_setup else self.ai_delay
            return choose_action(state, self.map_def, self.rng), delay
        if not state.in_setup and (player.rest > 0 or not player.is_alive):
            return end_turn(player.id), 0.0
        return None, 0.0

    def run_automation(self, max_steps: int = MAX_AUTOMATED_STEPS) -> list[GameEvent]:
        """
        Run automated steps until a human must act or the match is over.
        Bounded by max_steps.
        """
        events: list[GameEvent] = []
        with self._lock:
            for _ in range(max_steps):
                action, delay = self.next_automated_action()
                if action is None:
                    break
                if delay > 0:
                    self._set_processing(True)
                    self._sleep(delay)
                new_state, step_events = apply_action(self._state, action, self.map_def, self.rng)
                new_state.is_processing = False
                self._state = new_state
                events.extend(step_events)
                if any(e.type == ACTION_REJECTED for e in step_events):
                    logger.warning("Automated %s was rejected; stopping automation", action.type)
                    break
            else:
                logger.warning("Automation stopped after %s steps", max_steps)
        return events
