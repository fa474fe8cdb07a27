"""
Main game reducer.
Applies actions to state, enforcing rules and producing new state.
Returns (new_state, events) where events describe what happened.
A rejected action leaves the state untouched apart from an error log entry.
"""

import logging
import random

from conquest.engine import ACTION_REST, RELOCATE_REST
from conquest.engine.actions import Action, ActionRejected
from conquest.engine.catastrophe import catastrophe_round_reached, run_catastrophe
from conquest.engine.combat import resolve_combat
from conquest.engine.definitions import MapDefinition
from conquest.engine.events import (
    GameEvent,
    action_rejected,
    catastrophe_announced,
    combat_resolved,
    node_selected,
    player_rested,
    territory_neutralized,
)
from conquest.engine.movement import (
    claim_capital,
    fuse_units,
    is_enemy_territory,
    move_unit,
    recruit_at_capital,
    relocate_capital,
    validate_advance,
)
from conquest.engine.state import GameState, PlayerState
from conquest.engine.turns import end_turn, is_resting
from conquest.engine.victory import evaluate_victory

logger = logging.getLogger(__name__)


# Phase rules: which action types are allowed in which phases
PHASE_ALLOWED_ACTIONS = {
    "setup": ["place_capital"],
    "main": [
        "select_node",
        "move_unit",
        "attack",
        "recruit",
        "fuse",
        "relocate_capital",
        "end_turn",
    ],
}

# Actions that need the player to be rested (rest counter 0) and alive
TURN_COST_ACTIONS = ["move_unit", "attack", "recruit", "fuse", "relocate_capital"]


def current_phase(state: GameState) -> str:
    return "setup" if state.in_setup else "main"


def _validate_action_for_phase(action: Action, state: GameState) -> None:
    """
    Validate that an action is allowed in the current phase for the active player.

    Setup: only place_capital.
    Main: costly actions need an alive, rested player; select_node and
    end_turn are always allowed.
    """
    phase = current_phase(state)
    allowed_actions = PHASE_ALLOWED_ACTIONS.get(phase, [])

    if action.type not in allowed_actions:
        if phase == "setup":
            raise ActionRejected("Establish your capital first: pick an unowned node.")
        raise ActionRejected(
            f"Action '{action.type}' is not allowed in phase '{phase}'. "
            f"Allowed actions: {', '.join(allowed_actions)}"
        )

    if action.type in TURN_COST_ACTIONS:
        player = state.current_player
        if not player.is_alive:
            raise ActionRejected(f"{player.name} has been eliminated and can only pass")
        if is_resting(player):
            raise ActionRejected(f"{player.name} is resting ({player.rest} turn(s) left)")


def apply_action(
    state: GameState,
    action: Action,
    map_def: MapDefinition,
    rng: random.Random | None = None,
) -> tuple[GameState, list[GameEvent]]:
    """
    Apply a single action to the current state, returning new state and events.

    Validates:
    - Game is not over
    - No catastrophe is waiting to be rolled (only resolve_catastrophe then)
    - Action player matches the active player (system actions excepted)
    - Action is valid for the current phase and the player's rest counter

    Args:
        state: Current game state (never mutated)
        action: Action to apply
        map_def: Map topology
        rng: Random source for dice, catastrophe targeting; a fresh one if omitted

    Returns:
        Tuple of (new_state, events) where events describe what happened.
        Rule violations come back as an error log entry plus an
        action_rejected event instead of an exception.
    """
    if rng is None:
        rng = random.Random()
    try:
        return _dispatch(state, action, map_def, rng)
    except ActionRejected as e:
        logger.info("Rejected %s from player %s: %s", action.type, action.player, e)
        rejected = state.copy()
        rejected.add_log(str(e), "error")
        return rejected, [action_rejected(action.type, action.player, str(e))]


def _dispatch(
    state: GameState,
    action: Action,
    map_def: MapDefinition,
    rng: random.Random,
) -> tuple[GameState, list[GameEvent]]:
    # Check if game is already won
    if state.winner is not None:
        raise ActionRejected("Game is over.")

    if action.type == "resolve_catastrophe":
        return _handle_resolve_catastrophe(state.copy(), action, rng)

    if state.pending_catastrophe is not None:
        raise ActionRejected("A catastrophe is about to strike. Please wait.")

    # Validate player
    if action.player != state.current_player.id:
        raise ActionRejected(
            f"Not your turn: player {action.player} acted, "
            f"current player is {state.current_player.id}"
        )

    # Validate action is allowed in current phase and rest state
    _validate_action_for_phase(action, state)

    new_state = state.copy()
    player = new_state.current_player

    if action.type == "place_capital":
        events = claim_capital(new_state, player.id, action.payload.get("territory_id"))
        events.extend(_finish_turn(new_state, player, cost=0))

    elif action.type == "select_node":
        events = _handle_select_node(new_state, action)

    elif action.type == "move_unit":
        events = _handle_move_unit(new_state, action, map_def, rng)
        events.extend(_finish_turn(new_state, player, cost=ACTION_REST))

    elif action.type == "attack":
        events = _handle_attack(new_state, action, map_def, rng)
        events.extend(_finish_turn(new_state, player, cost=ACTION_REST))

    elif action.type == "recruit":
        events = recruit_at_capital(new_state, player.id)
        events.extend(_finish_turn(new_state, player, cost=ACTION_REST))

    elif action.type == "fuse":
        territory_id = action.payload.get("territory_id") or new_state.selected_node
        events = fuse_units(new_state, player.id, territory_id, action.payload.get("recipe"))
        events.extend(_finish_turn(new_state, player, cost=ACTION_REST))

    elif action.type == "relocate_capital":
        territory_id = action.payload.get("territory_id") or new_state.selected_node
        events = relocate_capital(new_state, player.id, territory_id)
        events.extend(_finish_turn(new_state, player, cost=RELOCATE_REST))

    elif action.type == "end_turn":
        events = _handle_pass(new_state, player)
        events.extend(_finish_turn(new_state, player, cost=None))

    else:
        raise ActionRejected(f"Unknown action type: {action.type}")

    return new_state, events


def _finish_turn(state: GameState, player: PlayerState, cost: int | None) -> list[GameEvent]:
    """
    Charge the action's rest cost, evaluate victory, then hand the turn on.
    Schedules a catastrophe when the round counter lands on a catastrophe round.
    cost=None leaves the rest counter alone (passing).
    """
    events: list[GameEvent] = []
    if cost:
        player.rest = cost

    events.extend(evaluate_victory(state))

    old_round = state.round_count
    _, turn_events = end_turn(state)
    events.extend(turn_events)

    if state.winner is None:
        catastrophe_round = catastrophe_round_reached(
            old_round, state.round_count, state.catastrophe_interval
        )
        if catastrophe_round is not None:
            state.pending_catastrophe = catastrophe_round
            events.append(catastrophe_announced(catastrophe_round))
            logger.info("Catastrophe scheduled for round %s", catastrophe_round)
    return events


def _handle_select_node(state: GameState, action: Action) -> list[GameEvent]:
    """Toggle the UI selection pointer. Selecting the selected node clears it."""
    territory_id = action.payload.get("territory_id")
    if territory_id is not None and territory_id not in state.territories:
        raise ActionRejected(f"Invalid territory: {territory_id}")
    if territory_id == state.selected_node:
        territory_id = None
    state.selected_node = territory_id
    return [node_selected(action.player, territory_id)]


def _handle_pass(state: GameState, player: PlayerState) -> list[GameEvent]:
    if is_resting(player):
        state.add_log(f"{player.name} is resting ({player.rest}).")
        return [player_rested(player.id, player.rest)]
    state.add_log(f"{player.name} passed.")
    return []


def _handle_move_unit(
    state: GameState,
    action: Action,
    map_def: MapDefinition,
    rng: random.Random,
) -> list[GameEvent]:
    """Move one unit; a move into an enemy-held node resolves as an attack."""
    from_id = action.payload.get("from")
    to_id = action.payload.get("to")
    destination = state.territories.get(to_id)
    if destination is not None and is_enemy_territory(destination, action.player):
        return _handle_attack(state, action, map_def, rng)
    return move_unit(state, map_def, action.player, from_id, to_id, action.payload.get("tier"))


def _handle_attack(
    state: GameState,
    action: Action,
    map_def: MapDefinition,
    rng: random.Random,
) -> list[GameEvent]:
    """
    Resolve an attack from an owned node into an adjacent enemy node.
    Validates:
    - Source owned by the attacker with positive power
    - Destination adjacent and held by an opponent
    """
    from_id = action.payload.get("from")
    to_id = action.payload.get("to")
    source, destination = validate_advance(state, map_def, action.player, from_id, to_id)
    if not is_enemy_territory(destination, action.player):
        raise ActionRejected(f"{to_id} is not held by an enemy")

    try:
        result = resolve_combat(
            source.troops, destination.troops, rng, action.payload.get("dice_rolls")
        )
    except ValueError as e:
        raise ActionRejected(str(e))

    attacker = state.get_player(action.player)
    defender = state.get_player(destination.owner)
    attacker_name = attacker.name if attacker else str(action.player)
    defender_name = defender.name if defender else str(destination.owner)
    events: list[GameEvent] = []

    strike = result.strike
    state.add_log(
        f"Combat at {to_id}: {strike.attacker_roll} (Att) vs {strike.defender_roll} (Def)",
        "combat",
    )
    if strike.damage:
        state.add_log(f"Hit! Defender took {strike.damage} damage.", "combat")
    else:
        state.add_log("Blocked by defender.", "combat")
    events.append(combat_resolved(
        to_id, attacker_name, defender_name,
        strike.attacker_roll, strike.defender_roll, strike.damage, False,
    ))

    if result.counter is not None:
        counter = result.counter
        if counter.damage:
            state.add_log(f"Counter-hit! Attacker took {counter.damage} damage.", "combat")
        events.append(combat_resolved(
            to_id, attacker_name, defender_name,
            counter.attacker_roll, counter.defender_roll, counter.damage, True,
        ))

    old_owner = destination.owner
    destination.troops = result.defender
    destination.normalize()
    source.troops = result.attacker
    source.normalize()

    if result.defender_neutralized:
        state.add_log("Defender neutralized!")
        events.append(territory_neutralized(to_id, old_owner))
    return events


def _handle_resolve_catastrophe(
    state: GameState,
    action: Action,
    rng: random.Random,
) -> tuple[GameState, list[GameEvent]]:
    """Roll the pending catastrophe, then re-check capitals."""
    if state.pending_catastrophe is None:
        raise ActionRejected("No catastrophe pending")
    events = run_catastrophe(state, rng, action.payload.get("rolls"))
    state.pending_catastrophe = None
    state.is_processing = False
    events.extend(evaluate_victory(state))
    return state, events


def replay_from_actions(
    initial_state: GameState,
    actions: list[Action],
    map_def: MapDefinition,
    seed: int | None = None,
) -> GameState:
    """
    Replay a list of actions from an initial state with a seeded random source.
    The same seed and actions always produce the same final state.
    """
    rng = random.Random(seed)
    state = initial_state
    for action in actions:
        state, _ = apply_action(state, action, map_def, rng)
    return state
